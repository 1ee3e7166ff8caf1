"""Site ledger: labour, expense, payment and material tracking for construction sites."""

__version__ = "0.1.0"
