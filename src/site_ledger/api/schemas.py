"""Pydantic schemas for API request/response models."""

from datetime import datetime
from decimal import Decimal
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

# Amounts arrive as typed by the user; the store does the strict checks.
AmountIn = Decimal | str


# ============================================================================
# Sites
# ============================================================================


class SiteCreate(BaseModel):
    """Schema for creating a site."""

    name: str
    location: str = ""
    site_code: str | None = None
    generate_code: bool = False
    is_running: bool = True
    site_type: str = ""
    start_date: str = ""
    end_date: str = ""
    owner_name: str = ""
    contact: str = ""


class SiteStatusUpdate(BaseModel):
    is_running: bool


class SiteResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    site_id: UUID
    name: str
    location: str
    site_code: str | None = None
    is_running: bool
    site_type: str
    start_date: str
    end_date: str
    owner_name: str
    contact: str
    created_at: datetime


# ============================================================================
# Workers
# ============================================================================


class WorkerCreate(BaseModel):
    """Schema for registering a worker on a site."""

    name: str
    category: str
    age: int | None = None
    contact: str = ""
    village: str = ""
    photo_uri: str | None = None
    joining_date: str | None = None


class WorkerUpdate(BaseModel):
    """Partial worker update; only fields that are sent change."""

    name: str | None = None
    category: str | None = None
    age: int | None = None
    contact: str | None = None
    village: str | None = None
    photo_uri: str | None = None


class WorkerResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    worker_id: UUID
    site_id: UUID
    name: str
    category: str
    age: int | None = None
    contact: str
    village: str
    photo_uri: str | None = None
    joining_date: str
    created_at: datetime


# ============================================================================
# Records
# ============================================================================


class HajariDraftIn(BaseModel):
    """One row of the bulk attendance screen."""

    worker_id: UUID
    amount: AmountIn = ""
    overtime: AmountIn = ""


class HajariSubmission(BaseModel):
    """Bulk attendance submission.

    ``selected_worker_ids`` omitted means every row is selected.
    """

    entries: list[HajariDraftIn]
    selected_worker_ids: list[UUID] | None = None
    date: str | None = None
    time: str | None = None


class HajariResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    hajari_record_id: UUID
    site_id: UUID
    worker_id: UUID
    worker_name: str
    worker_category: str
    amount: Decimal
    overtime: Decimal
    date: str
    time: str


class ExpenseIn(BaseModel):
    amount: AmountIn
    description: str = ""
    worker_id: UUID | None = None
    date: str | None = None
    time: str | None = None


class ExpenseSubmission(BaseModel):
    entries: list[ExpenseIn] = Field(min_length=1)


class ExpenseResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    expense_id: UUID
    site_id: UUID
    worker_id: UUID | None = None
    worker_name: str | None = None
    worker_category: str | None = None
    amount: Decimal
    description: str
    date: str
    time: str


class PaymentCreate(BaseModel):
    worker_id: UUID
    amount: AmountIn
    method: str | None = None
    date: str | None = None
    time: str | None = None


class PaymentResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    payment_id: UUID
    site_id: UUID
    worker_id: UUID
    worker_name: str
    worker_category: str
    amount: Decimal
    method: str
    date: str
    time: str


class MaterialCreate(BaseModel):
    """Material purchase; cost defaults to quantity times rate_per_unit."""

    name: str
    quantity: AmountIn
    cost: AmountIn | None = None
    rate_per_unit: AmountIn | None = None
    amount_paid: AmountIn = Decimal("0")
    unit: str = ""
    date: str | None = None
    vendor_name: str = ""
    vendor_phone: str = ""


class MaterialResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    material_id: UUID
    site_id: UUID
    name: str
    quantity: Decimal
    unit: str
    cost: Decimal
    rate_per_unit: Decimal
    amount_paid: Decimal
    remaining_payment: Decimal
    date: str
    vendor_name: str
    vendor_phone: str


class MaterialUsageCreate(BaseModel):
    quantity_used: AmountIn
    note: str = ""
    date: str | None = None
    time: str | None = None


class MaterialUsageResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    usage_id: UUID
    material_id: UUID
    site_id: UUID
    quantity_used: Decimal
    note: str
    date: str
    time: str


# ============================================================================
# Ledger
# ============================================================================


class LedgerTotalsResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    total_hajari: Decimal
    total_expense: Decimal
    total_paid: Decimal
    remaining: Decimal


class WorkerSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    worker_id: UUID
    worker_name: str
    worker_category: str
    totals: LedgerTotalsResponse
    last_payment_date: str | None = None
    is_active: bool


class SiteSummaryResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    totals: LedgerTotalsResponse
    worker_count: int
    hajari_count: int
    expense_count: int
    payment_count: int


class MaterialStockResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    material_id: UUID
    name: str
    unit: str
    quantity: Decimal
    used: Decimal
    remaining: Decimal
    remaining_payment: Decimal
    is_low: bool


class PreviewTotalRequest(BaseModel):
    """Running total for the attendance screen before submitting."""

    entries: list[HajariDraftIn]
    selected_worker_ids: list[UUID] = []


class PreviewTotalResponse(BaseModel):
    total: Decimal


# ============================================================================
# Error schemas
# ============================================================================


class ErrorResponse(BaseModel):
    """Schema for error response."""

    detail: str
    code: str | None = None
    context: dict[str, Any] | None = None
