"""InMemoryBackend — zero-config, dict-backed documents for development and testing."""

from __future__ import annotations

import copy
from typing import Any

from principal_store.backends.base import DocumentBackend, Snapshot, merge_documents
from principal_store.paths import DocumentPath


class InMemoryBackend(DocumentBackend):
    """In-memory backend keyed by full document path.  Data is lost on process exit.

    Documents are deep-copied on the way in and out so callers never share
    mutable state with the backend.
    """

    def __init__(self) -> None:
        self._docs: dict[DocumentPath, dict[str, Any]] = {}

    async def get(self, path: DocumentPath) -> Snapshot:
        doc = self._docs.get(path)
        if doc is None:
            return Snapshot.missing()
        return Snapshot(exists=True, value=copy.deepcopy(doc))

    async def set(self, path: DocumentPath, value: dict[str, Any], *, merge: bool = False) -> None:
        current = self._docs.get(path)
        if merge and current is not None:
            self._docs[path] = merge_documents(current, value)
        else:
            self._docs[path] = copy.deepcopy(value)

    async def delete(self, path: DocumentPath, *, recursive: bool = False) -> bool:
        removed = self._docs.pop(path, None) is not None
        if recursive:
            descendants = [p for p in self._docs if path.is_ancestor_of(p)]
            for p in descendants:
                del self._docs[p]
            removed = removed or bool(descendants)
        return removed

    async def update_field_delete(self, path: DocumentPath, field_name: str) -> bool:
        doc = self._docs.get(path)
        if doc is None or field_name not in doc:
            return False
        del doc[field_name]
        return True

    def __len__(self) -> int:
        return len(self._docs)
