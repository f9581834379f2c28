from kingplay.store.defaults import DEFAULTS, get_default, has_default
from kingplay.store.mirror import (
    JsonFileStorage,
    MemoryStorage,
    MirrorStore,
    StorageBackend,
    mirror_key,
)

__all__ = [
    "MirrorStore",
    "StorageBackend",
    "MemoryStorage",
    "JsonFileStorage",
    "mirror_key",
    "DEFAULTS",
    "get_default",
    "has_default",
]
