"""Local HTTP API for the site ledger."""

from site_ledger.api.app import create_app

__all__ = ["create_app"]
