"""Argument validation shared by the store and the submission flows."""

from __future__ import annotations

from decimal import Decimal, InvalidOperation
from typing import Any

from site_ledger.errors import InvalidArgumentError
from site_ledger.models import PaymentMethod, WorkerCategory


def to_amount(value: Any, field: str, *, positive: bool = False) -> Decimal:
    """Coerce a monetary value to Decimal.

    Rejects booleans, blanks, NaN/Infinity and negatives; with
    ``positive=True`` zero is rejected as well.
    """
    if value is None or isinstance(value, bool):
        raise InvalidArgumentError(field, "must be a number")
    if isinstance(value, str) and not value.strip():
        raise InvalidArgumentError(field, "must be a number")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        raise InvalidArgumentError(field, f"{value!r} is not numeric")
    if not amount.is_finite():
        raise InvalidArgumentError(field, "must be a finite number")
    if amount < 0:
        raise InvalidArgumentError(field, "must not be negative")
    if positive and amount == 0:
        raise InvalidArgumentError(field, "must be greater than zero")
    return amount


def require_text(value: Any, field: str) -> str:
    """Return a stripped, non-empty string."""
    if value is None or not str(value).strip():
        raise InvalidArgumentError(field, "is required")
    return str(value).strip()


def to_category(value: Any) -> WorkerCategory:
    try:
        return WorkerCategory.parse(value)
    except ValueError:
        raise InvalidArgumentError(
            "category", f"{value!r} is not one of karigar, mazdoor"
        )


def to_method(value: Any) -> PaymentMethod:
    if value is None:
        return PaymentMethod.CASH
    try:
        return PaymentMethod(str(value).strip().lower())
    except ValueError:
        raise InvalidArgumentError("method", f"{value!r} is not one of cash, upi, bank")


def to_age(value: Any) -> int | None:
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        age = int(str(value).strip())
    except ValueError:
        raise InvalidArgumentError("age", f"{value!r} is not a whole number")
    if age < 0:
        raise InvalidArgumentError("age", "must not be negative")
    return age
