"""Document backends for principal state persistence.

``FirestoreBackend`` needs the optional ``firestore`` extra and is imported
from :mod:`principal_store.backends.firestore` directly.
"""

from principal_store.backends.base import DocumentBackend, Snapshot, merge_documents
from principal_store.backends.memory import InMemoryBackend
from principal_store.backends.sqlite import SQLiteBackend

__all__ = ["DocumentBackend", "InMemoryBackend", "SQLiteBackend", "Snapshot", "merge_documents"]
