from kingplay.api.accessor import DataApi, DataSource, FetchResult, MonotonicIdGenerator
from kingplay.api.remote import RemoteClient, RemoteUnavailableError

__all__ = [
    "DataApi",
    "DataSource",
    "FetchResult",
    "MonotonicIdGenerator",
    "RemoteClient",
    "RemoteUnavailableError",
]
