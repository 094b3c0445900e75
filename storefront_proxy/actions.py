from enum import Enum
from typing import Callable, Dict, Mapping, Optional

from .tournament_repository import TournamentRepository
from tournament_core.errors import ProxyError, UnknownActionError


class Action(str, Enum):
    LIST_TOURNAMENTS = "list_tournaments"
    CREATE_TOURNAMENT = "create_tournament"
    GET_TOURNAMENT = "get_tournament"
    UPDATE_TOURNAMENT = "update_tournament"
    ADD_ROUND = "add_round"
    UPDATE_ROUND = "update_round"
    SET_FINAL_RESULT = "set_final_result"

    @classmethod
    def parse(cls, name: Optional[str]) -> "Action":
        try:
            return cls(name)
        except ValueError:
            raise UnknownActionError(name, allowed_actions())


Handler = Callable[[TournamentRepository, str, Mapping], dict]


def allowed_actions() -> list:
    return [a.value for a in Action]


# ==================== Handlers ====================

def list_tournaments(repo: TournamentRepository, customer_id: str, params: Mapping) -> dict:
    tournaments = repo.list_tournaments(customer_id)
    return {'ok': True, 'tournaments': [t.to_dict() for t in tournaments]}


def create_tournament(repo: TournamentRepository, customer_id: str, params: Mapping) -> dict:
    tournament = repo.create_tournament(customer_id, params)
    return {'ok': True, 'tournament': tournament.to_dict()}


def get_tournament(repo: TournamentRepository, customer_id: str, params: Mapping) -> dict:
    tournament = repo.get_tournament(customer_id, params.get('id'))
    return {'ok': True, 'tournament': tournament.to_dict()}


def update_tournament(repo: TournamentRepository, customer_id: str, params: Mapping) -> dict:
    tournament = repo.update_tournament(customer_id, params.get('id'), params)
    return {'ok': True, 'tournament': tournament.to_dict()}


def add_round(repo: TournamentRepository, customer_id: str, params: Mapping) -> dict:
    tournament = repo.add_round(customer_id, params.get('id'))
    return {'ok': True, 'tournament': tournament.to_dict()}


def update_round(repo: TournamentRepository, customer_id: str, params: Mapping) -> dict:
    tournament = repo.update_round(
        customer_id,
        params.get('id'),
        params.get('round_number'),
        params
    )
    return {'ok': True, 'tournament': tournament.to_dict()}


def set_final_result(repo: TournamentRepository, customer_id: str, params: Mapping) -> dict:
    tournament = repo.set_final_result(customer_id, params.get('id'), params.get('result'))
    return {'ok': True, 'tournament': tournament.to_dict()}


ACTION_HANDLERS: Dict[Action, Handler] = {
    Action.LIST_TOURNAMENTS: list_tournaments,
    Action.CREATE_TOURNAMENT: create_tournament,
    Action.GET_TOURNAMENT: get_tournament,
    Action.UPDATE_TOURNAMENT: update_tournament,
    Action.ADD_ROUND: add_round,
    Action.UPDATE_ROUND: update_round,
    Action.SET_FINAL_RESULT: set_final_result,
}

_unhandled = set(Action) - set(ACTION_HANDLERS)
if _unhandled:
    raise RuntimeError(f"Actions without a handler: {sorted(a.value for a in _unhandled)}")


def dispatch(repo: TournamentRepository, customer_id: str, action_name: Optional[str], params: Mapping) -> dict:
    """
    Run the handler for an action and return the response body.
    Domain failures come back as ``{ok: false, ...}`` dicts.
    """
    try:
        action = Action.parse(action_name)
        return ACTION_HANDLERS[action](repo, customer_id, params)
    except ProxyError as e:
        return e.to_dict()
