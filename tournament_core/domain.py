from enum import Enum
from typing import Any, Optional
from dataclasses import dataclass


class GameResult(str, Enum):
    WIN = "W"
    LOSS = "L"
    TIE = "T"


class Turn(str, Enum):
    FIRST = "FIRST"
    SECOND = "SECOND"


class SpecialRound(str, Enum):
    ID = "ID"
    NO_SHOW = "NO_SHOW"
    BYE = "BYE"


class FinalResult(str, Enum):
    WINNER = "WINNER"
    FINALIST = "FINALIST"
    TOP_4 = "TOP_4"
    TOP_8 = "TOP_8"
    TOP_16 = "TOP_16"
    TOP_32 = "TOP_32"
    TOP_64 = "TOP_64"
    DROPPED = "DROPPED"
    UNTOPPED = "UNTOPPED"


class RoundOutcome(str, Enum):
    WIN = "win"
    LOSS = "loss"
    TIE = "tie"


class UpdateKind(str, Enum):
    UNSET = "unset"
    CLEAR = "clear"
    VALUE = "value"
    INVALID = "invalid"


GAME_NUMBERS = (1, 2, 3)

SPECIAL_VALUES = frozenset(s.value for s in SpecialRound)


@dataclass(frozen=True)
class FieldUpdate:
    """
    Result of normalizing one optional request field.

    UNSET   - the field was not sent, leave it untouched
    CLEAR   - the field was sent empty, store null
    VALUE   - the field was sent with a valid value
    INVALID - the field was sent with garbage, reject the whole update
    """
    kind: UpdateKind
    value: Any = None
    raw: Any = None

    @classmethod
    def unset(cls) -> "FieldUpdate":
        return cls(UpdateKind.UNSET)

    @classmethod
    def clear(cls) -> "FieldUpdate":
        return cls(UpdateKind.CLEAR)

    @classmethod
    def of(cls, value: Any) -> "FieldUpdate":
        return cls(UpdateKind.VALUE, value=value)

    @classmethod
    def invalid(cls, raw: Any) -> "FieldUpdate":
        return cls(UpdateKind.INVALID, raw=raw)

    @property
    def is_set(self) -> bool:
        return self.kind in (UpdateKind.CLEAR, UpdateKind.VALUE)

    @property
    def is_invalid(self) -> bool:
        return self.kind == UpdateKind.INVALID

    def resolve(self) -> Optional[Any]:
        """Value to store for a set field (None when cleared)."""
        if self.kind == UpdateKind.VALUE:
            return self.value
        return None
