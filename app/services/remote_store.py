"""
Remote document stores for the waitlist table (JSONBin, Firestore).

Remote backends are rate limited and occasionally unavailable, so reads go
through a short-lived cache and every request respects a minimum spacing:

* a read inside the freshness window is served from cache;
* a read issued too soon after the previous request gets the cached copy
  (or an empty table) instead of hitting the network;
* a write issued too soon waits for the spacing to elapse, it is never dropped;
* read failures fall back to cache-or-empty, write failures raise
  PersistenceUnavailable and leave the cache untouched.
"""

from __future__ import annotations

import asyncio
import logging
import time
from abc import abstractmethod
from datetime import datetime, timezone
from typing import Any, Awaitable, Callable, Dict, Optional

import httpx
from google.api_core import exceptions as google_exceptions
from google.auth import exceptions as google_auth_exceptions

from app.core.exceptions import PersistenceUnavailable, UnexpectedBackendError
from app.models import WaitlistTable, table_from_document, table_to_document
from app.services.repositories import WaitlistRepo

logger = logging.getLogger(__name__)


class DocumentNotFound(Exception):
    """The remote document does not exist yet."""


class RateLimited(PersistenceUnavailable):
    code = "RATE_LIMITED"


class RemoteDocumentRepo(WaitlistRepo):
    """Caching and request spacing shared by the remote backends."""

    def __init__(
        self,
        cache_seconds: float = 5.0,
        min_interval: float = 1.0,
        clock: Callable[[], float] = time.monotonic,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ) -> None:
        self.cache_seconds = cache_seconds
        self.min_interval = min_interval
        self._clock = clock
        self._sleep = sleep
        self._cached_document: Optional[Dict[str, Any]] = None
        self._cached_at: Optional[float] = None
        self._last_request: Optional[float] = None
        self._request_lock = asyncio.Lock()

    @property
    @abstractmethod
    def configured(self) -> bool:
        """Whether credentials and document location are present."""

    @abstractmethod
    async def _fetch(self) -> Any:
        """Return the raw stored document.

        Raises DocumentNotFound, RateLimited, PersistenceUnavailable or
        UnexpectedBackendError.
        """

    @abstractmethod
    async def _push(self, document: Dict[str, Any]) -> None:
        """Replace the stored document. Raises like ``_fetch``."""

    # -- cache and spacing --

    def _cache_is_fresh(self) -> bool:
        return self._cached_at is not None and self._clock() - self._cached_at < self.cache_seconds

    def _cached_or_empty(self) -> WaitlistTable:
        if self._cached_document is None:
            return {}
        return table_from_document(self._cached_document)

    def _remember(self, document: Dict[str, Any]) -> None:
        self._cached_document = document
        self._cached_at = self._clock()

    def _too_soon(self) -> bool:
        return self._last_request is not None and self._clock() - self._last_request < self.min_interval

    async def _wait_for_slot(self) -> None:
        while self._last_request is not None:
            remaining = self.min_interval - (self._clock() - self._last_request)
            if remaining <= 0:
                break
            logger.debug(f"Delaying {self.name} request by {remaining:.3f}s")
            await self._sleep(remaining)
        self._last_request = self._clock()

    # -- WaitlistRepo --

    async def load(self) -> WaitlistTable:
        if not self.configured:
            return {}
        if self._cache_is_fresh():
            return self._cached_or_empty()
        if self._too_soon() or self._request_lock.locked():
            return self._cached_or_empty()

        self._last_request = self._clock()
        try:
            raw = await self._fetch()
            table = table_from_document(raw)
        except DocumentNotFound:
            logger.info(f"{self.name} waitlist document not found, starting empty")
            return {}
        except PersistenceUnavailable as e:
            logger.warning(f"{self.name} read failed ({e.code}), serving cached waitlist: {e}")
            return self._cached_or_empty()
        except Exception:
            logger.exception(f"Unexpected {self.name} read failure, serving cached waitlist")
            return self._cached_or_empty()

        self._remember(table_to_document(table))
        return table

    async def load_for_update(self) -> WaitlistTable:
        if not self.configured:
            raise PersistenceUnavailable(f"{self.name} waitlist store is not configured")
        if self._cache_is_fresh():
            return self._cached_or_empty()

        async with self._request_lock:
            await self._wait_for_slot()
            try:
                raw = await self._fetch()
            except DocumentNotFound:
                return {}
            except PersistenceUnavailable as e:
                logger.error(f"{self.name} read before update failed: {e}")
                raise
            table = table_from_document(raw)

        self._remember(table_to_document(table))
        return table

    async def save(self, table: WaitlistTable) -> None:
        if not self.configured:
            raise PersistenceUnavailable(f"{self.name} waitlist store is not configured")

        document = table_to_document(table)
        async with self._request_lock:
            await self._wait_for_slot()
            try:
                await self._push(document)
            except DocumentNotFound as e:
                logger.error(f"{self.name} waitlist document missing on write")
                raise PersistenceUnavailable(f"{self.name} waitlist document does not exist") from e
            except PersistenceUnavailable as e:
                logger.error(f"{self.name} write failed ({e.code}): {e}")
                raise

        self._remember(document)


# -------- JSONBin --------

class JsonBinWaitlistRepo(RemoteDocumentRepo):
    """Waitlist table stored as a single JSONBin bin."""

    name = "jsonbin"

    def __init__(
        self,
        api_key: str | None,
        bin_id: str | None,
        base_url: str = "https://api.jsonbin.io/v3",
        timeout: float = 10.0,
        client: httpx.AsyncClient | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(**kwargs)
        self.api_key = api_key
        self.bin_id = bin_id
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(base_url=base_url, timeout=timeout)

    @property
    def configured(self) -> bool:
        return bool(self.api_key and self.bin_id)

    @property
    def _path(self) -> str:
        return f"/b/{self.bin_id}"

    def _check(self, response: httpx.Response) -> None:
        if response.status_code == 404:
            raise DocumentNotFound(self.bin_id)
        if response.status_code == 429:
            raise RateLimited("Rate limited - please try again in a moment")
        if not response.is_success:
            raise PersistenceUnavailable(f"JSONBin API error: {response.status_code}")

    async def _fetch(self) -> Any:
        try:
            response = await self._client.get(self._path, headers={"X-Master-Key": self.api_key})
        except httpx.HTTPError as e:
            raise PersistenceUnavailable(f"JSONBin request failed: {e}") from e
        self._check(response)

        try:
            payload = response.json()
        except ValueError as e:
            raise UnexpectedBackendError("JSONBin returned a non-JSON body") from e
        if not isinstance(payload, dict):
            raise UnexpectedBackendError("JSONBin response is not an object")
        return payload.get("record") or {}

    async def _push(self, document: Dict[str, Any]) -> None:
        try:
            response = await self._client.put(
                self._path,
                json=document,
                headers={"X-Master-Key": self.api_key},
            )
        except httpx.HTTPError as e:
            raise PersistenceUnavailable(f"JSONBin request failed: {e}") from e
        self._check(response)

    async def close(self) -> None:
        if self._owns_client:
            await self._client.aclose()


# -------- Firestore --------

class FirestoreWaitlistRepo(RemoteDocumentRepo):
    """Waitlist table stored in one Firestore document under the ``events`` field.

    The firebase-admin client is blocking, so calls run in a worker thread.
    """

    name = "firestore"

    def __init__(self, client, collection: str = "waitlists", document: str = "default", **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._client = client
        self.collection = collection
        self.document = document

    @property
    def configured(self) -> bool:
        return self._client is not None

    def _doc_ref(self):
        return self._client.collection(self.collection).document(self.document)

    async def _call(self, fn, *args, **kwargs):
        try:
            return await asyncio.to_thread(fn, *args, **kwargs)
        except google_exceptions.NotFound as e:
            raise DocumentNotFound(self.document) from e
        except (google_exceptions.TooManyRequests, google_exceptions.ResourceExhausted) as e:
            raise RateLimited("Firestore quota exceeded - please try again in a moment") from e
        except google_exceptions.GoogleAPIError as e:
            raise PersistenceUnavailable(f"Firestore request failed: {e}") from e
        except google_auth_exceptions.GoogleAuthError as e:
            raise PersistenceUnavailable(f"Firestore credentials rejected: {e}") from e

    async def _fetch(self) -> Any:
        snapshot = await self._call(self._doc_ref().get)
        if not snapshot.exists:
            raise DocumentNotFound(self.document)
        return (snapshot.to_dict() or {}).get("events") or {}

    async def _push(self, document: Dict[str, Any]) -> None:
        await self._call(
            self._doc_ref().set,
            {"events": document, "updated_at": datetime.now(timezone.utc).isoformat()},
        )
