"""
Remote-first data accessor with transparent fallback to the local mirror.

Every operation makes exactly one attempt against the remote API. If that
attempt fails for any reason the same operation is carried out against the
MirrorStore instead, synthesizing the identifiers and timestamps the server
would have produced. Callers never see the failure: the fallback branch
always looks like success.

Usage:
    async with DataApi.from_settings() as api:
        plans = await api.get("/plans", [])
        booking = await api.create("/bookings", payload)
        await api.update(f"/bookings/{booking['id']}", {"status": "Approved"})
"""

import threading
import time
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Optional

import httpx

from kingplay.api.remote import RemoteClient, RemoteUnavailableError
from kingplay.config import AppConfig, settings
from kingplay.logging_context import get_request_logger, new_request_id, set_request_id
from kingplay.store.defaults import get_default
from kingplay.store.mirror import JsonFileStorage, MirrorStore
from kingplay.utils import split_resource_path, utc_now_iso

logger = get_request_logger(__name__)

SETTINGS_PATH = "/settings"


class DataSource(str, Enum):
    """Where a value returned by DataApi.fetch came from."""

    REMOTE = "remote"
    MIRROR = "mirror"
    DEFAULT = "default"
    FALLBACK = "fallback"


@dataclass(frozen=True)
class FetchResult:
    """A read result tagged with its provenance."""

    value: Any
    source: DataSource

    @property
    def is_live(self) -> bool:
        return self.source == DataSource.REMOTE


class MonotonicIdGenerator:
    """
    Millisecond-timestamp identifiers, strictly increasing per process.

    Two calls inside the same millisecond get consecutive values rather
    than the same one. Nothing is guaranteed across processes or devices.
    """

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._last = 0
        self._lock = threading.Lock()

    def __call__(self) -> int:
        with self._lock:
            candidate = int(self._clock() * 1000)
            if candidate <= self._last:
                candidate = self._last + 1
            self._last = candidate
            return candidate


class DataApi:
    """Remote-first get/create/update/delete over RemoteClient and MirrorStore."""

    def __init__(
        self,
        remote: RemoteClient,
        mirror: MirrorStore,
        cache_reads: bool = True,
        id_generator: Optional[Callable[[], Any]] = None,
        clock: Callable[[], str] = utc_now_iso,
    ) -> None:
        self.remote = remote
        self.mirror = mirror
        self.cache_reads = cache_reads
        self._next_id = id_generator or MonotonicIdGenerator()
        self._now = clock

    @classmethod
    def from_settings(
        cls,
        config: AppConfig = settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "DataApi":
        """Build an accessor from configuration, persisting the mirror on disk."""
        remote = RemoteClient(
            config.api.base_url,
            timeout=config.api.timeout_seconds,
            transport=transport,
        )
        mirror = MirrorStore(JsonFileStorage(config.mirror.path), key_prefix=config.mirror.key_prefix)
        return cls(remote, mirror, cache_reads=config.mirror.cache_reads)

    # --- Reads ---

    async def fetch(self, path: str, fallback: Any = None) -> FetchResult:
        """Read ``path`` and report which source answered.

        Precedence: remote, then mirrored value, then registered default,
        then ``fallback``. Never raises.
        """
        set_request_id(new_request_id())
        try:
            value = await self.remote.get(path)
        except RemoteUnavailableError as exc:
            logger.warning("[Offline Mode] Fetch failed for %s. Serving local data. (%s)", path, exc)
        else:
            if self.cache_reads:
                try:
                    self.mirror.save(path, value)
                except OSError as cache_exc:
                    logger.warning("Could not cache %s in mirror: %s", path, cache_exc)
            return FetchResult(value, DataSource.REMOTE)

        stored = self.mirror.load(path)
        if stored is not None:
            return FetchResult(stored, DataSource.MIRROR)
        default = get_default(path)
        if default is not None:
            return FetchResult(default, DataSource.DEFAULT)
        return FetchResult(fallback, DataSource.FALLBACK)

    async def get(self, path: str, fallback: Any = None) -> Any:
        """Read ``path``; see fetch() for the fallback order."""
        result = await self.fetch(path, fallback)
        return result.value

    # --- Writes ---

    async def create(self, path: str, payload: dict[str, Any]) -> Any:
        """Create a record, or prepend a synthesized one to the mirror when offline."""
        set_request_id(new_request_id())
        try:
            return await self.remote.post(path, payload)
        except RemoteUnavailableError as exc:
            logger.warning("[Offline Mode] Saving %s to local storage. (%s)", path, exc)

        current = self.mirror.get(path)
        if current is None:
            current = []
        if not isinstance(current, list):
            logger.warning("Mirror value for %s is not a collection; create not applied", path)
            return payload

        record = {"id": self._next_id(), **payload, "created_at": self._now()}
        self.mirror.save(path, [record, *current])
        logger.info("Created %s record %s locally", path, record["id"])
        return record

    async def update(self, path: str, patch: dict[str, Any]) -> Any:
        """Update ``/collection/id`` or the settings singleton.

        Offline, exactly ``/settings`` is replaced wholesale; collection
        elements get ``patch`` shallow-merged into the element with the
        matching id.
        """
        set_request_id(new_request_id())
        try:
            return await self.remote.put(path, patch)
        except RemoteUnavailableError as exc:
            logger.warning("[Offline Mode] Updating %s in local storage. (%s)", path, exc)

        if path == SETTINGS_PATH:
            self.mirror.save(SETTINGS_PATH, patch)
            return {"message": "Settings saved locally"}

        base, record_id = split_resource_path(path)
        items = self.mirror.get(base)
        if isinstance(items, list) and record_id is not None:
            updated = [
                {**item, **patch} if _same_id(item, record_id) else item
                for item in items
            ]
            self.mirror.save(base, updated)
        else:
            logger.warning("No local collection to update for %s", path)
        return {"message": "Updated locally"}

    async def delete(self, path: str) -> Any:
        """Delete ``/collection/id``, filtering it out of the mirror when offline."""
        set_request_id(new_request_id())
        try:
            return await self.remote.delete(path)
        except RemoteUnavailableError as exc:
            logger.warning("[Offline Mode] Deleting %s from local storage. (%s)", path, exc)

        base, record_id = split_resource_path(path)
        items = self.mirror.get(base)
        if isinstance(items, list) and record_id is not None:
            remaining = [item for item in items if not _same_id(item, record_id)]
            self.mirror.save(base, remaining)
        else:
            logger.warning("No local collection to delete from for %s", path)
        return {"message": "Deleted locally"}

    # --- Lifecycle ---

    async def check_health(self) -> bool:
        """True if the remote server root is reachable."""
        return await self.remote.ping()

    async def aclose(self) -> None:
        await self.remote.aclose()

    async def __aenter__(self) -> "DataApi":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.aclose()


def _same_id(item: Any, record_id: str) -> bool:
    """Identifiers compare as strings: 7 and "7" are the same record."""
    return isinstance(item, dict) and str(item.get("id")) == str(record_id)
