import logging
from typing import List, Mapping, Optional

from sqlalchemy.exc import SQLAlchemyError

from .models import db, Tournament
from tournament_core.domain import FinalResult
from tournament_core.errors import NotFoundError, PersistenceError, ValidationError
from tournament_core.normalizers import ABSENT, normalize_final_result, to_round_number
from tournament_core.rounds import (
    RoundPatch,
    find_round_index,
    new_round,
    next_round_number,
    sanitize_rounds,
)
from tournament_core.score_calculator import ScoreCalculator

logger = logging.getLogger(__name__)

REQUIRED_FIELDS = ['tournament_name', 'tournament_date']

META_FIELDS = [
    'tournament_name',
    'tournament_date',
    'format',
    'tournament_type',
    'result',
]


class TournamentRepository:
    """
    Read/write access to tournament records, always scoped by customer.

    - Every lookup filters by both tournament id and customer id; a record
      owned by someone else is reported exactly like a missing one
    - Rounds are sanitized and the score recomputed on every round write
    - Input is validated before the database is touched
    """

    def __init__(self, score_calculator: ScoreCalculator = None):
        self.score_calculator = score_calculator or ScoreCalculator()

    # ==================== Reads ====================

    def list_tournaments(self, customer_id: str) -> List[Tournament]:
        """All tournaments of a customer, newest tournament date first."""
        try:
            return (
                Tournament.query
                .filter_by(customer_id=customer_id)
                .order_by(Tournament.tournament_date.desc())
                .all()
            )
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to list tournaments for customer {customer_id}: {e}")
            raise PersistenceError("Database error", details=str(e))

    def get_tournament(self, customer_id: str, tournament_id: Optional[str]) -> Tournament:
        """Get a tournament owned by the customer or raise NotFoundError."""
        if not tournament_id:
            raise ValidationError("Missing tournament id")

        try:
            tournament = Tournament.query.filter_by(
                id=str(tournament_id),
                customer_id=customer_id
            ).first()
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to load tournament {tournament_id}: {e}")
            raise PersistenceError("Database error", details=str(e))

        if tournament is None:
            raise NotFoundError("Tournament not found")
        return tournament

    # ==================== Tournament meta ====================

    def create_tournament(self, customer_id: str, fields: Mapping) -> Tournament:
        """Create a tournament with no rounds and an empty score."""
        missing = [name for name in REQUIRED_FIELDS if not fields.get(name)]
        if missing:
            raise ValidationError(
                "Missing required fields",
                fields_required=list(REQUIRED_FIELDS)
            )

        result = FinalResult.UNTOPPED.value
        if fields.get('result'):
            result = self._validate_final_result(fields.get('result'))

        tournament = Tournament(
            customer_id=customer_id,
            tournament_name=fields['tournament_name'],
            tournament_date=fields['tournament_date'],
            format=fields.get('format') or None,
            tournament_type=fields.get('tournament_type') or None,
            result=result,
            rounds=[],
            score=self.score_calculator.calculate([]).to_dict()
        )

        try:
            db.session.add(tournament)
            db.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"Failed to insert tournament for customer {customer_id}: {e}")
            raise PersistenceError("Database insert failed", details=str(e))

        logger.info(f"Created tournament {tournament.id} for customer {customer_id}")
        return tournament

    def update_tournament(self, customer_id: str, tournament_id: Optional[str], fields: Mapping) -> Tournament:
        """Set allow-listed meta fields. Rounds and score are never touched here."""
        if not tournament_id:
            raise ValidationError("Missing id")

        updates = {}
        for key in META_FIELDS:
            value = fields.get(key, ABSENT)
            if value is not ABSENT:
                updates[key] = value

        if not updates:
            raise ValidationError("No fields to update")

        for key in REQUIRED_FIELDS:
            if key in updates and not updates[key]:
                raise ValidationError(f"{key} cannot be empty")

        if 'result' in updates:
            updates['result'] = self._validate_final_result(updates['result'])

        tournament = self.get_tournament(customer_id, tournament_id)
        for key, value in updates.items():
            setattr(tournament, key, value)

        self._commit("Update failed", tournament_id)
        return tournament

    def set_final_result(self, customer_id: str, tournament_id: Optional[str], result) -> Tournament:
        """Record the final placement (or dropped/untopped)."""
        if not tournament_id:
            raise ValidationError("Missing tournament id")

        value = self._validate_final_result(result)

        tournament = self.get_tournament(customer_id, tournament_id)
        tournament.result = value
        self._commit("Failed to save result", tournament_id)

        logger.info(f"Set final result {value} on tournament {tournament_id} for customer {customer_id}")
        return tournament

    # ==================== Rounds ====================

    def add_round(self, customer_id: str, tournament_id: Optional[str]) -> Tournament:
        """Append a blank round numbered max(existing) + 1."""
        tournament = self.get_tournament(customer_id, tournament_id)

        rounds = list(tournament.rounds) if isinstance(tournament.rounds, list) else []
        number = next_round_number(rounds)
        rounds.append(new_round(number))

        self._save_rounds(tournament, rounds)
        logger.info(f"Added round {number} to tournament {tournament.id} for customer {customer_id}")
        return tournament

    def update_round(
        self,
        customer_id: str,
        tournament_id: Optional[str],
        round_number,
        params: Mapping
    ) -> Tournament:
        """
        Apply a partial update to one round.

        The whole patch is validated first; any invalid field rejects the
        update without reading or writing the tournament.
        """
        if not tournament_id:
            raise ValidationError("Missing tournament id")

        number = to_round_number(round_number)
        if number is None:
            raise ValidationError("Missing or invalid round_number")

        patch = RoundPatch.from_params(params)

        tournament = self.get_tournament(customer_id, tournament_id)
        rounds = list(tournament.rounds) if isinstance(tournament.rounds, list) else []

        idx = find_round_index(rounds, number)
        if idx == -1:
            raise NotFoundError("Round not found")

        rounds[idx] = patch.apply(rounds[idx])

        self._save_rounds(tournament, rounds)
        logger.info(f"Updated round {number} of tournament {tournament.id} for customer {customer_id}")
        return tournament

    # ==================== Helpers ====================

    def _save_rounds(self, tournament: Tournament, rounds: list):
        """Sanitize rounds and overwrite the derived score in one write."""
        sanitized = sanitize_rounds(rounds)
        tournament.rounds = sanitized
        tournament.score = self.score_calculator.calculate(sanitized).to_dict()
        self._commit("Failed to save rounds", tournament.id)

    def _commit(self, failure_message: str, tournament_id):
        try:
            db.session.commit()
        except SQLAlchemyError as e:
            self._rollback()
            logger.error(f"{failure_message} for tournament {tournament_id}: {e}")
            raise PersistenceError(failure_message, details=str(e))

    def _rollback(self):
        try:
            db.session.rollback()
        except SQLAlchemyError as e:
            logger.error(f"Rollback failed: {e}")

    @staticmethod
    def _validate_final_result(value) -> str:
        update = normalize_final_result(value)
        if update.resolve() is None:
            raise ValidationError(
                "Invalid result value",
                allowed_results=[r.value for r in FinalResult]
            )
        return update.resolve()
