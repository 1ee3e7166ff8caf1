"""Material stock: purchased quantity against recorded usage."""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from decimal import Decimal
from typing import Any
from uuid import UUID

from site_ledger.calculators.types import ZERO

# Stock below this share of the purchased quantity is flagged as low.
LOW_STOCK_RATIO = Decimal("0.2")


@dataclass(frozen=True)
class MaterialStock:
    """Remaining stock and vendor balance for one material."""

    material_id: UUID
    name: str
    unit: str
    quantity: Decimal
    used: Decimal
    remaining: Decimal
    remaining_payment: Decimal

    @property
    def is_low(self) -> bool:
        return self.remaining < self.quantity * LOW_STOCK_RATIO


def quantity_used(material_id: UUID, usages: Iterable[Any]) -> Decimal:
    return sum(
        (Decimal(u.quantity_used) for u in usages if u.material_id == material_id),
        ZERO,
    )


def remaining_stock(material: Any, usages: Iterable[Any]) -> Decimal:
    """Purchased quantity minus everything used, never below zero."""
    left = Decimal(material.quantity) - quantity_used(material.material_id, usages)
    return max(ZERO, left)


def summarize_stock(materials: Sequence[Any], usages: Sequence[Any]) -> list[MaterialStock]:
    """One ``MaterialStock`` per material, in the order given."""
    return [
        MaterialStock(
            material_id=m.material_id,
            name=m.name,
            unit=m.unit,
            quantity=Decimal(m.quantity),
            used=quantity_used(m.material_id, usages),
            remaining=remaining_stock(m, usages),
            remaining_payment=Decimal(m.remaining_payment),
        )
        for m in materials
    ]
