"""
Repository layer abstracting waitlist storage (memory, JSON file, remote document).
"""

from __future__ import annotations

import json
import logging
import os
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Dict, Optional

from app.core.config import settings
from app.core.exceptions import PersistenceUnavailable, UnexpectedBackendError
from app.models import WaitlistTable, table_from_document, table_to_document

logger = logging.getLogger(__name__)


class WaitlistRepo(ABC):
    """Loads and saves the whole waitlist table."""

    name = "abstract"

    @abstractmethod
    async def load(self) -> WaitlistTable:
        """Return the current table. Never raises on backend trouble."""

    @abstractmethod
    async def save(self, table: WaitlistTable) -> None:
        """Replace the persisted table. Raises PersistenceUnavailable on failure."""

    async def load_for_update(self) -> WaitlistTable:
        """Return the table a mutation will be based on.

        Unlike ``load`` this raises PersistenceUnavailable when the current
        table cannot be read, so a mutation never overwrites data it did not see.
        """
        return await self.load()

    async def close(self) -> None:
        return None


# -------- In-memory repository --------

class InMemoryWaitlistRepo(WaitlistRepo):
    name = "memory"

    def __init__(self, document: Optional[Dict[str, Any]] = None) -> None:
        self._document: Dict[str, Any] = document or {}

    async def load(self) -> WaitlistTable:
        # rebuilt from the stored document so callers never share entries
        return table_from_document(self._document)

    async def save(self, table: WaitlistTable) -> None:
        self._document = table_to_document(table)


# -------- JSON file repository --------

class FileWaitlistRepo(WaitlistRepo):
    name = "file"

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self.path.parent.mkdir(parents=True, exist_ok=True)

    def _read(self) -> WaitlistTable:
        if not self.path.exists():
            return {}
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                raw = f.read()
        except UnicodeDecodeError as e:
            raise UnexpectedBackendError(f"{self.path} is not valid UTF-8: {e}") from e
        except OSError as e:
            raise PersistenceUnavailable(f"Could not read {self.path}: {e}") from e
        if not raw.strip():
            return {}
        try:
            document = json.loads(raw)
        except ValueError as e:
            raise UnexpectedBackendError(f"{self.path} is not valid JSON: {e}") from e
        return table_from_document(document)

    async def load(self) -> WaitlistTable:
        try:
            return self._read()
        except PersistenceUnavailable as e:
            logger.warning(f"Waitlist file unreadable, serving empty table: {e}")
            return {}

    async def load_for_update(self) -> WaitlistTable:
        return self._read()

    async def save(self, table: WaitlistTable) -> None:
        document = table_to_document(table)
        tmp_path = self.path.with_name(self.path.name + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(document, f, indent=2)
            os.replace(tmp_path, self.path)
        except OSError as e:
            logger.error(f"Failed to write waitlist file {self.path}: {e}")
            raise PersistenceUnavailable(f"Could not write {self.path}") from e


# -------- Factory --------

def create_waitlist_repo(backend: str | None = None) -> WaitlistRepo:
    """Build the repository selected by configuration."""
    from app.services.remote_store import FirestoreWaitlistRepo, JsonBinWaitlistRepo

    selected = (backend or settings.WAITLIST_BACKEND).strip().lower()
    if selected == "memory":
        return InMemoryWaitlistRepo()
    if selected == "file":
        return FileWaitlistRepo(settings.WAITLIST_FILE_PATH)
    if selected == "jsonbin":
        return JsonBinWaitlistRepo(
            api_key=settings.JSONBIN_API_KEY,
            bin_id=settings.JSONBIN_BIN_ID,
            base_url=settings.JSONBIN_BASE_URL,
            timeout=settings.JSONBIN_TIMEOUT,
            cache_seconds=settings.WAITLIST_CACHE_SECONDS,
            min_interval=settings.WAITLIST_MIN_REQUEST_INTERVAL,
        )
    if selected == "firestore":
        from app.services.firebase_client import get_firestore_client

        return FirestoreWaitlistRepo(
            client=get_firestore_client(),
            collection=settings.FIRESTORE_COLLECTION,
            document=settings.FIRESTORE_DOCUMENT,
            cache_seconds=settings.WAITLIST_CACHE_SECONDS,
            min_interval=settings.WAITLIST_MIN_REQUEST_INTERVAL,
        )
    raise ValueError(f"unsupported waitlist backend: {selected}")
