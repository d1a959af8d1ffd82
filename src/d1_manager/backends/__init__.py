"""Query executors, connection mode resolution and result normalization."""
from d1_manager.backends.interfaces import QueryExecutor
from d1_manager.backends.local import LocalDatabase, LocalExecutor
from d1_manager.backends.remote import D1ApiClient, RemoteExecutor
from d1_manager.backends.resolver import ConnectionModeResolver, ModeResolution
from d1_manager.backends.normalizer import normalize
from d1_manager.backends.models import (
    BackendResult,
    CanonicalQueryResult,
    ConnectionDescriptor,
    LocalConnection,
    RemoteConnection,
    RequestCredentials,
)

__all__ = [
    "QueryExecutor",
    "LocalDatabase",
    "LocalExecutor",
    "D1ApiClient",
    "RemoteExecutor",
    "ConnectionModeResolver",
    "ModeResolution",
    "normalize",
    "BackendResult",
    "CanonicalQueryResult",
    "ConnectionDescriptor",
    "LocalConnection",
    "RemoteConnection",
    "RequestCredentials",
]
