"""Value-shape predicates shared by the analyzers.

Differences carry arbitrary Python values.  These helpers answer the handful
of questions every analyzer asks about them: is a side absent, is a value
numeric, temporal, textual or boolean, and how should it be rendered in a
description.

``bool`` subclasses ``int``; it is never numeric here.
"""

from __future__ import annotations

from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import Any

from diff_patterns.models import Difference
from diff_patterns.paths.segments import has_index

__all__ = [
    "as_number",
    "is_boolean",
    "is_likely_reordered",
    "is_missing",
    "is_numeric",
    "is_temporal",
    "is_text",
    "parse_number",
    "truncate_value",
    "value_text",
]

_TRUNCATE_AT = 30
_PREFIX_LEN = 5


def is_missing(diff: Difference) -> bool:
    """True if the property is absent on exactly one side."""
    return (diff.old_value is None) != (diff.new_value is None)


def is_numeric(value: Any) -> bool:
    return isinstance(value, (int, float, Decimal)) and not isinstance(value, bool)


def is_temporal(value: Any) -> bool:
    return isinstance(value, (datetime, date, time))


def is_text(value: Any) -> bool:
    return isinstance(value, str)


def is_boolean(value: Any) -> bool:
    return isinstance(value, bool)


def as_number(value: Any) -> float | None:
    """Numeric value of *value* as a float, or None if it is not numeric."""
    if not is_numeric(value):
        return None
    return float(value)


def parse_number(text: str) -> float | None:
    """Parse *text* as a number, or return None.

    Accepts everything ``Decimal`` accepts except NaN and infinities.
    """
    try:
        number = Decimal(text.strip())
    except (InvalidOperation, ValueError):
        return None
    if not number.is_finite():
        return None
    return float(number)


def value_text(value: Any) -> str:
    """Render *value* for tallies and descriptions; absent values read ``"null"``."""
    if value is None:
        return "null"
    return str(value)


def truncate_value(value: Any) -> str:
    """Render *value* and shorten it to at most 30 characters.

    Absent values and empty strings both read ``"null"``.
    """
    text = value_text(value)
    if not text:
        return "null"
    if len(text) > _TRUNCATE_AT:
        return text[: _TRUNCATE_AT - 3] + "..."
    return text


def is_likely_reordered(diff: Difference, tolerance: float = 10.0) -> bool:
    """Best-effort guess that an indexed difference is an element shifted by reordering.

    Requires an indexed path with both values present and of the same type.
    Two strings qualify when either contains the first five characters of the
    other; two numbers qualify when they lie within *tolerance* of each other.
    """
    old, new = diff.old_value, diff.new_value
    if not has_index(diff.property_path) or old is None or new is None:
        return False
    if type(old) is not type(new):
        return False

    if is_text(old):
        if not old or not new:
            return False
        return new[:_PREFIX_LEN] in old or old[:_PREFIX_LEN] in new

    old_number, new_number = as_number(old), as_number(new)
    if old_number is not None and new_number is not None:
        return abs(old_number - new_number) <= tolerance
    return False
