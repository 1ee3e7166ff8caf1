"""Human-facing report labels in the supported languages.

Labels only ever reach headers, titles and placeholders. No logic branches
on them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Labels:
    """Label set for one language."""

    language: str
    site: str
    generated_on: str
    total: str
    no_data: str

    workers_title: str
    materials_title: str
    budget_title: str
    payments_title: str

    name: str
    category: str
    village: str
    contact: str
    quantity: str
    unit: str
    cost: str
    date: str
    time: str
    total_hajari: str
    total_expense: str
    total_paid: str
    remaining: str
    worker_name: str
    amount: str
    method: str

    @classmethod
    def for_language(cls, language: str | None) -> Labels:
        """Label set for ``language``; unknown codes fall back to English."""
        code = (language or "en").strip().lower()
        labels = LABELS.get(code)
        if labels is None:
            logger.warning("No report labels for language %r, using English", language)
            return ENGLISH
        return labels


ENGLISH = Labels(
    language="en",
    site="Site",
    generated_on="Generated on",
    total="Total",
    no_data="No data available for this report.",
    workers_title="Workers Report",
    materials_title="Materials Report",
    budget_title="Budget Report",
    payments_title="Payment History",
    name="Name",
    category="Category",
    village="Village",
    contact="Contact",
    quantity="Quantity",
    unit="Unit",
    cost="Cost",
    date="Date",
    time="Time",
    total_hajari="Total Hajari",
    total_expense="Total Expense",
    total_paid="Total Paid",
    remaining="Remaining",
    worker_name="Worker Name",
    amount="Amount",
    method="Method",
)

HINDI = Labels(
    language="hi",
    site="साइट",
    generated_on="तैयार किया गया",
    total="कुल",
    no_data="इस रिपोर्ट के लिए कोई डेटा उपलब्ध नहीं है।",
    workers_title="मजदूर रिपोर्ट",
    materials_title="सामग्री रिपोर्ट",
    budget_title="बजट रिपोर्ट",
    payments_title="भुगतान इतिहास",
    name="नाम",
    category="श्रेणी",
    village="गाँव",
    contact="संपर्क",
    quantity="मात्रा",
    unit="इकाई",
    cost="लागत",
    date="तारीख",
    time="समय",
    total_hajari="कुल हाजरी",
    total_expense="कुल खर्च",
    total_paid="कुल भुगतान",
    remaining="बाकी",
    worker_name="मजदूर का नाम",
    amount="राशि",
    method="तरीका",
)

LABELS: dict[str, Labels] = {
    ENGLISH.language: ENGLISH,
    HINDI.language: HINDI,
}
