"""Outbound collaborators: where reports go and who hears about submissions."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Protocol

logger = logging.getLogger(__name__)


class ExportSink(Protocol):
    """Receives finished report payloads."""

    def deliver(self, filename: str, payload: bytes, media_type: str) -> str:
        """Store or share a payload; returns where it went."""
        ...


class Notifier(Protocol):
    """Receives short user-facing notifications."""

    def notify(self, title: str, body: str) -> None:
        ...


class DirectoryExportSink:
    """Write report payloads into a local directory."""

    def __init__(self, directory: str | Path):
        self.directory = Path(directory)

    def deliver(self, filename: str, payload: bytes, media_type: str) -> str:
        self.directory.mkdir(parents=True, exist_ok=True)
        # Only the final component; a report name never escapes the directory.
        path = self.directory / Path(filename).name
        path.write_bytes(payload)
        logger.info("Exported %s (%s, %d bytes)", path, media_type, len(payload))
        return str(path)


class LoggingNotifier:
    """Notifier that writes to the application log."""

    def notify(self, title: str, body: str) -> None:
        logger.info("Notification: %s | %s", title, body)
