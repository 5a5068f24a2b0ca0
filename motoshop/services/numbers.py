"""Decimal parsing, rounding, and the JSON wire conversion."""

from __future__ import annotations

from collections.abc import Mapping
from decimal import Decimal, InvalidOperation
from typing import Any

ZERO = Decimal("0.00")
Q2 = Decimal("0.01")


def q2(value: Decimal) -> Decimal:
    return value.quantize(Q2)


def parse_decimal(value: object) -> Decimal:
    """Parse a numeric field, treating missing or malformed values as zero."""

    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        return value if value.is_finite() else ZERO
    try:
        parsed = Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        return ZERO
    return parsed if parsed.is_finite() else ZERO


def safe_percentage(part: int, whole: int) -> Decimal | int:
    """``part / whole * 100`` with two decimals, or the integer ``0`` for an empty whole."""

    if whole == 0:
        return 0
    return q2(Decimal(part) * 100 / Decimal(whole))


def to_wire(value: Any) -> Any:
    """Convert a report payload into JSON-ready values.

    Decimals become two-decimal strings; mappings, lists, and tuples are
    converted recursively; everything else passes through.
    """

    if isinstance(value, Decimal):
        return str(q2(value))
    if isinstance(value, Mapping):
        return {str(key): to_wire(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_wire(item) for item in value]
    return value
