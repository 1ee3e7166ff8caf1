"""Enumerations shared by the models and the reports."""

from __future__ import annotations

from enum import Enum


class WorkerCategory(str, Enum):
    """Worker pay-role classification (display grouping only)."""

    KARIGAR = "karigar"
    MAZDOOR = "mazdoor"

    @classmethod
    def parse(cls, value: str | WorkerCategory) -> WorkerCategory:
        """Parse a category, accepting the older ``majdur`` spelling."""
        if isinstance(value, cls):
            return value
        normalized = str(value).strip().lower()
        if normalized == "majdur":
            return cls.MAZDOOR
        return cls(normalized)


class PaymentMethod(str, Enum):
    """How a payment was handed over."""

    CASH = "cash"
    UPI = "upi"
    BANK = "bank"
