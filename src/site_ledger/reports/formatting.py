"""Display formatting for report cells and file names."""

from __future__ import annotations

from datetime import datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Any

TWOPLACES = Decimal("0.01")
THREEPLACES = Decimal("0.001")

# Fixed English month abbreviations; file names must not depend on locale.
MONTHS = ("Jan", "Feb", "Mar", "Apr", "May", "Jun",
          "Jul", "Aug", "Sep", "Oct", "Nov", "Dec")


def group_indian(digits: str) -> str:
    """Insert Indian-style separators: last three digits, then pairs.

    >>> group_indian("1234567")
    '12,34,567'
    """
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join([*groups, tail])


def format_amount(value: Any) -> str:
    """Rupee amount with Indian grouping.

    Paise are shown (two places) only when non-zero: ``3500`` becomes
    ``3,500`` and ``1250.5`` becomes ``1,250.50``.
    """
    amount = Decimal(value).quantize(TWOPLACES, rounding=ROUND_HALF_UP)
    sign = "-" if amount < 0 else ""
    whole, _, frac = f"{abs(amount):.2f}".partition(".")
    text = group_indian(whole)
    if frac != "00":
        text = f"{text}.{frac}"
    return sign + text


def format_quantity(value: Any) -> str:
    """Quantity with Indian grouping and no trailing zeros."""
    quantity = Decimal(value).quantize(THREEPLACES, rounding=ROUND_HALF_UP)
    sign = "-" if quantity < 0 else ""
    whole, _, frac = f"{abs(quantity):.3f}".partition(".")
    frac = frac.rstrip("0")
    text = group_indian(whole)
    if frac:
        text = f"{text}.{frac}"
    return sign + text


def file_date(moment: datetime) -> str:
    """Compact date for file names, e.g. ``5Mar2025``."""
    return f"{moment.day}{MONTHS[moment.month - 1]}{moment.year}"


def format_timestamp(moment: datetime) -> str:
    """Human readable generation time, e.g. ``05 Mar 2025, 14:30``."""
    return f"{moment.day:02d} {MONTHS[moment.month - 1]} {moment.year}, {moment:%H:%M}"


def safe_site_name(site_name: str, fallback: str = "Site") -> str:
    """Site name usable as a file name component."""
    name = (site_name or "").strip()
    for separator in ("/", "\\"):
        name = name.replace(separator, "_")
    return name or fallback


def report_filename(site_name: str, kind_title: str, moment: datetime, extension: str) -> str:
    """``{siteName}_{Kind}_Report_{DMonYYYY}.{ext}``."""
    return f"{safe_site_name(site_name)}_{kind_title}_Report_{file_date(moment)}.{extension}"
