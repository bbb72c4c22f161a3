from __future__ import annotations

import json
import logging
import os
import stat
import tempfile
from contextlib import contextmanager
from pathlib import Path
from threading import RLock
from typing import Any, Generator, Optional

from pydantic import ValidationError

from .schemas import AppData
from .state import ChangeNotifier

logger = logging.getLogger(__name__)

# read once at import; os.umask can only be queried by setting it
_UMASK = os.umask(0)
os.umask(_UMASK)


class StoreWriteError(OSError):
    """Persisting the data set failed; the previous file content is untouched."""


class InvalidDocumentError(ValueError):
    """Content is not a usable data set document."""


def validate_document(payload: Any) -> AppData:
    if not isinstance(payload, dict):
        raise InvalidDocumentError("Document must be a JSON object")
    try:
        return AppData.model_validate(payload)
    except ValidationError as exc:
        raise InvalidDocumentError(str(exc)) from exc


def parse_document(raw: str) -> AppData:
    try:
        payload = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise InvalidDocumentError(f"Invalid JSON: {exc}") from exc
    return validate_document(payload)


class SessionStore:
    """JSON file backed storage for the complete data set.

    Every call reads the file fresh; there is no cache between requests.
    Read-modify-write sequences must run under ``lock`` (see ``transaction``)
    so that concurrent writers in this process never lose each other's updates.
    """

    def __init__(self, path: Path, notifier: Optional[ChangeNotifier] = None) -> None:
        self.path = Path(path)
        self.notifier = notifier or ChangeNotifier()
        self.lock = RLock()

    # ------------------------------------------------------------------
    # Reading
    # ------------------------------------------------------------------
    def read_text(self) -> Optional[str]:
        try:
            return self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None

    def recover_default(self, reason: str) -> AppData:
        """Recovery policy for unusable files: serve an empty data set instead of failing."""
        logger.warning("Using default data set instead of %s: %s", self.path, reason)
        return AppData()

    def load(self) -> AppData:
        try:
            raw = self.read_text()
        except (OSError, UnicodeDecodeError) as exc:
            return self.recover_default(f"unreadable file ({exc})")
        if raw is None:
            return AppData()
        try:
            return parse_document(raw)
        except InvalidDocumentError as exc:
            return self.recover_default(str(exc))

    # ------------------------------------------------------------------
    # Writing
    # ------------------------------------------------------------------
    def _file_mode(self) -> int:
        try:
            return stat.S_IMODE(os.stat(self.path).st_mode)
        except FileNotFoundError:
            return 0o666 & ~_UMASK

    def write_text(self, content: str) -> None:
        """Atomically replace the file content (temp file + rename)."""
        try:
            payload = content.encode("utf-8")
        except UnicodeEncodeError as exc:
            logger.error("Refusing to write %s: %s", self.path, exc)
            raise StoreWriteError(f"Cannot encode content for {self.path}: {exc}") from exc
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_fd, tmp_path = tempfile.mkstemp(dir=self.path.parent, prefix=".data-", suffix=".tmp")
        except OSError as exc:
            logger.error("Cannot prepare %s for writing: %s", self.path, exc)
            raise StoreWriteError(f"Cannot write {self.path}: {exc}") from exc
        try:
            with os.fdopen(tmp_fd, "wb") as handle:
                handle.write(payload)
            # mkstemp creates 0600; keep the permissions the data file already had
            os.chmod(tmp_path, self._file_mode())
            os.replace(tmp_path, self.path)
        except BaseException as exc:
            if os.path.exists(tmp_path):
                os.unlink(tmp_path)
            logger.error("Writing %s failed: %s", self.path, exc)
            if isinstance(exc, OSError):
                raise StoreWriteError(f"Cannot write {self.path}: {exc}") from exc
            raise

    def save(self, data: AppData) -> None:
        content = json.dumps(data.to_document(), indent=2)
        self.write_text(content)
        self.notifier.notify()

    def remove(self) -> bool:
        try:
            self.path.unlink()
        except FileNotFoundError:
            return False
        except OSError as exc:
            logger.error("Removing %s failed: %s", self.path, exc)
            raise StoreWriteError(f"Cannot remove {self.path}: {exc}") from exc
        return True

    @contextmanager
    def transaction(self) -> Generator[AppData, None, None]:
        """Load the data set under the write lock and persist it when the block exits cleanly."""
        with self.lock:
            data = self.load()
            yield data
            self.save(data)
