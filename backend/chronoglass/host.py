"""Raw document access for the embedding desktop shell.

These operations bypass the session lifecycle rules entirely: content is
written as given and callers are responsible for keeping at most one session
(and one sub-activity within it) open.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .schemas import AppData
from .store import InvalidDocumentError, SessionStore, validate_document

logger = logging.getLogger(__name__)

EMPTY_DOCUMENT = "{}"


class HostBridge:
    def __init__(self, store: SessionStore) -> None:
        self.store = store

    def load_data(self) -> str:
        content = self.store.read_text()
        return EMPTY_DOCUMENT if content is None else content

    def save_data(self, content: str) -> None:
        with self.store.lock:
            self.store.write_text(content)
        self.store.notifier.notify()

    def reset_data(self) -> None:
        with self.store.lock:
            self.store.remove()
        self.store.notifier.notify()

    def import_data(self, content: str) -> AppData:
        """Validate an exported document and make it the current data set."""
        try:
            payload = json.loads(content)
        except json.JSONDecodeError as exc:
            raise InvalidDocumentError(f"Invalid JSON: {exc}") from exc
        if not isinstance(payload, dict) or not isinstance(payload.get("sessions"), list):
            raise InvalidDocumentError("Import requires a 'sessions' list")
        if payload.get("settings") is None:
            payload.pop("settings", None)
        data = validate_document(payload)
        with self.store.lock:
            self.store.save(data)
        return data

    def import_file(self, path: Path) -> bool:
        """Copy a document file over the backing store, as done for a file passed at startup."""
        source = Path(path)
        if not source.is_file():
            logger.warning("Startup import skipped, %s is not a file", source)
            return False
        try:
            content = source.read_text(encoding="utf-8")
            self.save_data(content)
        except (OSError, UnicodeDecodeError) as exc:
            logger.error("Startup import from %s failed: %s", source, exc)
            return False
        logger.info("Imported data set from %s", source)
        return True
