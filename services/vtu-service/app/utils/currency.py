"""
Naira/kobo conversion for Paystack amount fields
"""

from decimal import Decimal, ROUND_HALF_UP, InvalidOperation
from typing import Union

from .errors import ValidationError

Number = Union[int, float, str, Decimal]

MINOR_UNITS_PER_MAJOR = 100


def to_minor_units(amount: Number) -> int:
    """Convert a major-unit amount (naira) to minor units (kobo), rounded half up"""
    try:
        value = Decimal(str(amount))
    except (InvalidOperation, ValueError) as e:
        raise ValidationError(f"Invalid amount: {amount!r}") from e

    if not value.is_finite():
        raise ValidationError(f"Invalid amount: {amount!r}")

    return int((value * MINOR_UNITS_PER_MAJOR).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def to_major_units(amount: Number) -> float:
    """Convert a minor-unit amount (kobo) back to naira"""
    return float(Decimal(str(amount)) / MINOR_UNITS_PER_MAJOR)
