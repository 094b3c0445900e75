from dataclasses import dataclass
from typing import Any, Iterable, Optional

from .domain import GameResult, RoundOutcome, SpecialRound


@dataclass(frozen=True)
class Score:
    wins: int = 0
    losses: int = 0
    ties: int = 0

    @property
    def text(self) -> str:
        return f"{self.wins}-{self.losses}-{self.ties}"

    def to_dict(self) -> dict:
        return {
            "wins": self.wins,
            "losses": self.losses,
            "ties": self.ties,
            "text": self.text,
        }


class ScoreCalculator:
    """
    Derives a win/loss/tie record from a tournament's rounds.

    Each round is classified on its own:
    - BYE and NO_SHOW count as a win
    - ID (intentional draw) counts as a tie
    - otherwise game wins are compared against game losses; a round with
      no reported game results is not counted at all
    """

    AUTOMATIC_WINS = (SpecialRound.BYE.value, SpecialRound.NO_SHOW.value)
    AUTOMATIC_TIES = (SpecialRound.ID.value,)

    def classify_round(self, round_data: Any) -> Optional[RoundOutcome]:
        """
        Classify a single round.

        Returns:
            RoundOutcome, or None when the round has nothing reported yet
        """
        if not isinstance(round_data, dict):
            return None

        special = round_data.get("special")
        if special in self.AUTOMATIC_WINS:
            return RoundOutcome.WIN
        if special in self.AUTOMATIC_TIES:
            return RoundOutcome.TIE

        games = round_data.get("games")
        if not isinstance(games, list):
            return None

        results = [
            g.get("result") for g in games
            if isinstance(g, dict) and g.get("result") is not None
        ]
        if not results:
            return None

        game_wins = results.count(GameResult.WIN.value)
        game_losses = results.count(GameResult.LOSS.value)

        if game_wins > game_losses:
            return RoundOutcome.WIN
        if game_losses > game_wins:
            return RoundOutcome.LOSS
        return RoundOutcome.TIE

    def calculate(self, rounds: Iterable[Any]) -> Score:
        """Fold every round into a Score. Malformed input scores as empty."""
        if not isinstance(rounds, (list, tuple)):
            return Score()

        wins = losses = ties = 0
        for round_data in rounds:
            outcome = self.classify_round(round_data)
            if outcome == RoundOutcome.WIN:
                wins += 1
            elif outcome == RoundOutcome.LOSS:
                losses += 1
            elif outcome == RoundOutcome.TIE:
                ties += 1

        return Score(wins=wins, losses=losses, ties=ties)
