"""
Unit tests for ScoreCalculator.
Tests: classify_round, calculate, Score text formatting
"""
import pytest
from tournament_core.domain import RoundOutcome
from tournament_core.rounds import new_round
from tournament_core.score_calculator import Score, ScoreCalculator


def played_round(*results, number=1):
    """Round with the given game results, padded to three games."""
    padded = list(results) + [None] * (3 - len(results))
    return {
        'round_number': number,
        'opponent_deck': {'p1': None, 'p2': None},
        'games': [{'game': i + 1, 'result': r, 'turn': None} for i, r in enumerate(padded)],
        'special': None,
    }


@pytest.fixture
def calc():
    return ScoreCalculator()


class TestScore:
    """Tests for the Score value."""

    def test_text_format(self):
        assert Score(wins=3, losses=1, ties=2).text == '3-1-2'

    def test_to_dict(self):
        assert Score(1, 2, 0).to_dict() == {'wins': 1, 'losses': 2, 'ties': 0, 'text': '1-2-0'}

    def test_empty(self):
        assert Score().to_dict() == {'wins': 0, 'losses': 0, 'ties': 0, 'text': '0-0-0'}


class TestClassifyRound:
    """Tests for per-round classification."""

    def test_two_zero_is_win(self, calc):
        assert calc.classify_round(played_round('W', 'W')) == RoundOutcome.WIN

    def test_one_two_is_loss(self, calc):
        assert calc.classify_round(played_round('W', 'L', 'L')) == RoundOutcome.LOSS

    def test_one_one_with_unreported_third_is_tie(self, calc):
        assert calc.classify_round(played_round('W', 'L', None)) == RoundOutcome.TIE

    def test_game_ties_do_not_break_balance(self, calc):
        assert calc.classify_round(played_round('T', 'W')) == RoundOutcome.WIN
        assert calc.classify_round(played_round('T', 'T', 'T')) == RoundOutcome.TIE

    def test_nothing_reported_is_not_counted(self, calc):
        assert calc.classify_round(new_round(1)) is None

    @pytest.mark.parametrize('special', ['BYE', 'NO_SHOW'])
    def test_bye_and_no_show_are_wins(self, calc, special):
        round_data = played_round('L', 'L')
        round_data['special'] = special
        assert calc.classify_round(round_data) == RoundOutcome.WIN

    def test_intentional_draw_is_tie(self, calc):
        round_data = played_round('W', 'W')
        round_data['special'] = 'ID'
        assert calc.classify_round(round_data) == RoundOutcome.TIE

    def test_malformed_round_is_ignored(self, calc):
        assert calc.classify_round('not a round') is None
        assert calc.classify_round({'round_number': 1, 'games': 'oops'}) is None


class TestCalculate:
    """Tests for folding rounds into a score."""

    def test_special_rounds(self, calc):
        rounds = [{'special': 'BYE'}, {'special': 'NO_SHOW'}, {'special': 'ID'}]
        assert calc.calculate(rounds).to_dict() == {
            'wins': 2, 'losses': 0, 'ties': 1, 'text': '2-0-1'
        }

    def test_mixed_rounds(self, calc, sample_rounds):
        score = calc.calculate(sample_rounds)
        assert (score.wins, score.losses, score.ties) == (2, 1, 0)

    def test_unreported_rounds_do_not_count(self, calc):
        rounds = [played_round('W', 'W', number=1), new_round(2)]
        score = calc.calculate(rounds)
        assert score.wins + score.losses + score.ties == 1

    def test_tally_never_exceeds_round_count(self, calc, sample_rounds):
        rounds = sample_rounds + [new_round(4), played_round('W', 'L', number=5)]
        score = calc.calculate(rounds)
        assert score.wins + score.losses + score.ties <= len(rounds)

    def test_tally_equals_round_count_when_all_reported(self, calc, sample_rounds):
        score = calc.calculate(sample_rounds)
        assert score.wins + score.losses + score.ties == len(sample_rounds)

    def test_order_independent(self, calc, sample_rounds):
        assert calc.calculate(sample_rounds) == calc.calculate(list(reversed(sample_rounds)))

    @pytest.mark.parametrize('rounds', [None, {}, 'rounds', 42])
    def test_malformed_collection_is_empty(self, calc, rounds):
        assert calc.calculate(rounds) == Score()

