import math
from enum import Enum
from typing import Any, Optional, Type

from .domain import FieldUpdate, GameResult, Turn, SpecialRound, FinalResult


class _Absent:
    """Marker for a request field that was not sent at all."""

    def __repr__(self):
        return "ABSENT"

    def __bool__(self):
        return False


ABSENT = _Absent()

# Values a caller can send to explicitly clear a field.
CLEAR_TOKENS = ("", "null")


def to_int_or_null(value: Any) -> Optional[int]:
    """
    Lenient integer parse: empty, absent or non-numeric input becomes None.
    Decimal input is truncated toward zero.
    """
    if value is ABSENT or value is None or value == "":
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number):
        return None
    return int(number)


def to_round_number(value: Any) -> Optional[int]:
    """Strict round number parse: only a positive whole number is accepted."""
    if value is ABSENT or value is None or value == "" or isinstance(value, bool):
        return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    if not math.isfinite(number) or not number.is_integer() or number <= 0:
        return None
    return int(number)


def _normalize_enum(value: Any, enum_cls: Type[Enum]) -> FieldUpdate:
    if value is ABSENT:
        return FieldUpdate.unset()
    if value is None or value in CLEAR_TOKENS:
        return FieldUpdate.clear()

    candidate = str(value).upper()
    for member in enum_cls:
        if member.value == candidate:
            return FieldUpdate.of(member.value)
    return FieldUpdate.invalid(value)


def normalize_result(value: Any) -> FieldUpdate:
    """Normalize a per-game result to W / L / T."""
    return _normalize_enum(value, GameResult)


def normalize_turn(value: Any) -> FieldUpdate:
    """Normalize a turn order to FIRST / SECOND."""
    return _normalize_enum(value, Turn)


def normalize_special(value: Any) -> FieldUpdate:
    """Normalize a special round disposition to ID / NO_SHOW / BYE."""
    return _normalize_enum(value, SpecialRound)


def normalize_final_result(value: Any) -> FieldUpdate:
    return _normalize_enum(value, FinalResult)
