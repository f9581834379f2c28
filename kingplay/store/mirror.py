"""
Local mirror of the remote tables, keyed by endpoint path.

The mirror stores one JSON value per logical path under a flat key
(``/bookings`` -> ``kpb_local_bookings``). It doubles as the cache of
last-known server data and as the only source of truth while the remote
is down. Writes are unconditional overwrites: last write wins.

Usage:
    mirror = MirrorStore(JsonFileStorage(".kpb_mirror.json"))
    plans = mirror.get("/plans")     # stored value, else seed default, else None
    mirror.save("/plans", plans)
"""

import json
from pathlib import Path
from typing import Any, Optional, Protocol

from kingplay.logging_context import get_request_logger
from kingplay.store.defaults import get_default

logger = get_request_logger(__name__)

DEFAULT_KEY_PREFIX = "kpb_local_"


class StorageBackend(Protocol):
    """String-to-string persistent storage, shaped like browser localStorage."""

    def get_item(self, key: str) -> Optional[str]: ...

    def set_item(self, key: str, value: str) -> None: ...

    def remove_item(self, key: str) -> None: ...


class MemoryStorage:
    """In-process storage. Used by tests and short-lived sessions."""

    def __init__(self, initial: Optional[dict[str, str]] = None) -> None:
        self._items: dict[str, str] = dict(initial or {})

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value

    def remove_item(self, key: str) -> None:
        self._items.pop(key, None)

    def keys(self) -> list[str]:
        return list(self._items.keys())


class JsonFileStorage:
    """
    Storage persisted as a single JSON document on disk.

    The document maps storage keys to serialized JSON strings, the same
    shape localStorage keeps. The whole file is rewritten on every write.
    """

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)
        self._items: dict[str, str] = self._load()

    def _load(self) -> dict[str, str]:
        if not self.path.exists():
            return {}
        try:
            data = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Mirror file %s unreadable, starting empty: %s", self.path, exc)
            return {}
        if not isinstance(data, dict):
            logger.warning("Mirror file %s is not a JSON object, starting empty", self.path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            json.dumps(self._items, ensure_ascii=False, indent=2) + "\n", encoding="utf-8"
        )

    def get_item(self, key: str) -> Optional[str]:
        return self._items.get(key)

    def set_item(self, key: str, value: str) -> None:
        self._items[key] = value
        self._flush()

    def remove_item(self, key: str) -> None:
        if self._items.pop(key, None) is not None:
            self._flush()

    def keys(self) -> list[str]:
        return list(self._items.keys())


def mirror_key(path: str, prefix: str = DEFAULT_KEY_PREFIX) -> str:
    """Flatten an endpoint path into a storage key.

    Examples:
        >>> mirror_key("/bookings")
        'kpb_local_bookings'
        >>> mirror_key("/bookings/7")
        'kpb_local_bookings_7'
    """
    return prefix + path.removeprefix("/").replace("/", "_")


class MirrorStore:
    """Path-keyed JSON mirror over an injected storage backend."""

    def __init__(self, storage: StorageBackend, key_prefix: str = DEFAULT_KEY_PREFIX) -> None:
        self.storage = storage
        self.key_prefix = key_prefix

    def key_for(self, path: str) -> str:
        return mirror_key(path, self.key_prefix)

    def load(self, path: str) -> Optional[Any]:
        """Return only what was saved for ``path``, ignoring seed defaults.

        Stored text that does not decode as JSON counts as absent.
        """
        raw = self.storage.get_item(self.key_for(path))
        if not raw:
            return None
        try:
            return json.loads(raw)
        except json.JSONDecodeError:
            logger.warning("Discarding corrupt mirror entry for %s", path)
            return None

    def get(self, path: str) -> Optional[Any]:
        """Stored value for ``path``, else its registered default, else None."""
        stored = self.load(path)
        if stored is not None:
            return stored
        return get_default(path)

    def save(self, path: str, value: Any) -> None:
        self.storage.set_item(self.key_for(path), json.dumps(value, ensure_ascii=False))
        logger.debug("Mirror saved %s", path)

    def clear(self, path: str) -> None:
        """Drop the stored value so the seed default applies again."""
        self.storage.remove_item(self.key_for(path))
        logger.debug("Mirror cleared %s", path)
