from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping

from .domain import FieldUpdate, GAME_NUMBERS, SPECIAL_VALUES
from .errors import ValidationError
from .normalizers import (
    ABSENT,
    normalize_result,
    normalize_special,
    normalize_turn,
    to_int_or_null,
)


def blank_game(number: int) -> dict:
    return {"game": number, "result": None, "turn": None}


def blank_games() -> List[dict]:
    return [blank_game(n) for n in GAME_NUMBERS]


def blank_opponent_deck() -> dict:
    return {"p1": None, "p2": None}


def new_round(round_number: int) -> dict:
    """A freshly added round: nothing reported, normally played."""
    return {
        "round_number": round_number,
        "opponent_deck": blank_opponent_deck(),
        "games": blank_games(),
        "special": None,
    }


def next_round_number(rounds: Any) -> int:
    """max(existing round_number) + 1, ignoring unparseable numbers."""
    highest = 0
    if isinstance(rounds, list):
        for round_data in rounds:
            if not isinstance(round_data, dict):
                continue
            number = to_int_or_null(round_data.get("round_number"))
            if number is not None:
                highest = max(highest, number)
    return highest + 1


def find_round_index(rounds: List[dict], round_number: int) -> int:
    """Index of the round with this number, or -1."""
    for idx, round_data in enumerate(rounds):
        if not isinstance(round_data, dict):
            continue
        if to_int_or_null(round_data.get("round_number")) == round_number:
            return idx
    return -1


def normalize_games(games: Any) -> List[dict]:
    """
    Exactly three game slots ordered 1..3, built from whatever is stored.
    Slots missing from the input are filled with blank games.
    """
    by_number: Dict[int, dict] = {}
    if isinstance(games, list):
        for game in games:
            if not isinstance(game, dict):
                continue
            number = to_int_or_null(game.get("game"))
            if number in GAME_NUMBERS and number not in by_number:
                by_number[number] = {
                    "game": number,
                    "result": game.get("result"),
                    "turn": game.get("turn"),
                }
    return [by_number.get(n) or blank_game(n) for n in GAME_NUMBERS]


def sanitize_round(round_data: Mapping) -> dict:
    """Copy of a round with defaults filled and special rounds blanked."""
    sanitized = dict(round_data)

    deck = round_data.get("opponent_deck")
    if isinstance(deck, dict):
        sanitized["opponent_deck"] = {"p1": deck.get("p1"), "p2": deck.get("p2")}
    else:
        sanitized["opponent_deck"] = blank_opponent_deck()

    sanitized.setdefault("special", None)

    if sanitized["special"] in SPECIAL_VALUES:
        sanitized["games"] = blank_games()
    else:
        sanitized["games"] = normalize_games(round_data.get("games"))

    return sanitized


def sanitize_rounds(rounds: Any) -> List[dict]:
    """
    Normalize a round collection before it is written.
    Never mutates the caller's rounds; entries that are not mappings are dropped.
    """
    if not isinstance(rounds, list):
        return []
    return [sanitize_round(r) for r in rounds if isinstance(r, dict)]


@dataclass
class RoundPatch:
    """
    Partial update of one round, parsed from request parameters.

    Opponent deck facets are lenient integers: present means overwrite,
    unparseable values clear the facet. Every other field goes through the
    strict normalizers, and a single invalid one rejects the whole patch.
    """
    op_p1: FieldUpdate = field(default_factory=FieldUpdate.unset)
    op_p2: FieldUpdate = field(default_factory=FieldUpdate.unset)
    special: FieldUpdate = field(default_factory=FieldUpdate.unset)
    results: Dict[int, FieldUpdate] = field(default_factory=dict)
    turns: Dict[int, FieldUpdate] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Mapping) -> "RoundPatch":
        patch = cls()

        for key in ("op_p1", "op_p2"):
            raw = params.get(key, ABSENT)
            if raw is not ABSENT:
                setattr(patch, key, FieldUpdate.of(to_int_or_null(raw)))

        patch.special = normalize_special(params.get("special", ABSENT))
        if patch.special.is_invalid:
            raise ValidationError("Invalid special value")

        for n in GAME_NUMBERS:
            result = normalize_result(params.get(f"g{n}", ABSENT))
            if result.is_invalid:
                raise ValidationError(f"Invalid g{n} value")
            patch.results[n] = result

        for n in GAME_NUMBERS:
            turn = normalize_turn(params.get(f"g{n}_turn", ABSENT))
            if turn.is_invalid:
                raise ValidationError(f"Invalid g{n}_turn value")
            patch.turns[n] = turn

        return patch

    def apply(self, round_data: Mapping) -> dict:
        """Return a patched copy of the round. Fields not sent are kept."""
        updated = dict(round_data)

        deck = round_data.get("opponent_deck")
        deck = dict(deck) if isinstance(deck, dict) else blank_opponent_deck()
        if self.op_p1.is_set:
            deck["p1"] = self.op_p1.resolve()
        if self.op_p2.is_set:
            deck["p2"] = self.op_p2.resolve()
        updated["opponent_deck"] = deck

        if self.special.is_set:
            updated["special"] = self.special.resolve()

        games = normalize_games(round_data.get("games"))
        for game in games:
            n = game["game"]
            result = self.results.get(n)
            if result is not None and result.is_set:
                game["result"] = result.resolve()
            turn = self.turns.get(n)
            if turn is not None and turn.is_set:
                game["turn"] = turn.resolve()
        updated["games"] = games

        return updated
