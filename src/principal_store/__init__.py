"""principal_store — namespaced key-value persistence for per-principal state.

Every principal owns one record and any number of independent data
entries nested under it.  Writes merge, reads of anything never written
fail loudly, and backend failures are never mistaken for "not found".
"""

from principal_store.exceptions import (
    BackendError,
    DataKeyNotFoundError,
    PrincipalNotFoundError,
    PrincipalStoreError,
)
from principal_store.paths import DocumentPath, Layout
from principal_store.store import BoundStore, NamespacedStore

__all__ = [
    "BackendError",
    "BoundStore",
    "DataKeyNotFoundError",
    "DocumentPath",
    "Layout",
    "NamespacedStore",
    "PrincipalNotFoundError",
    "PrincipalStoreError",
]
