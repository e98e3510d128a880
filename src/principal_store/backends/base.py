"""DocumentBackend protocol — the four primitives the store is built on."""

from __future__ import annotations

import copy
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from principal_store.paths import DocumentPath


@dataclass(frozen=True)
class Snapshot:
    """Result of a point lookup.

    Attributes:
        exists: ``True`` if a document is stored at the path.
        value:  The document contents (empty when ``exists`` is ``False``).
    """

    exists: bool
    value: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def missing() -> Snapshot:
        return Snapshot(exists=False)


def merge_documents(base: dict[str, Any], update: dict[str, Any]) -> dict[str, Any]:
    """Return *base* with *update* merged in, field by field.

    Fields absent from *update* survive.  Fields present replace the stored
    value, except when both sides are mappings, in which case they merge
    recursively.  Neither argument is mutated.
    """
    merged = copy.deepcopy(base)
    for key, value in update.items():
        current = merged.get(key)
        if isinstance(current, dict) and isinstance(value, dict):
            merged[key] = merge_documents(current, value)
        else:
            merged[key] = copy.deepcopy(value)
    return merged


class DocumentBackend(ABC):
    """Abstract base for all document backends.

    A backend stores ``dict[str, Any]`` documents at hierarchical paths
    (see :class:`~principal_store.paths.DocumentPath`).  It knows nothing
    about principals or entries; the store owns that mapping.

    Backends raise their native exceptions.  Translation into
    :class:`~principal_store.exceptions.BackendError` happens in the store.
    """

    @abstractmethod
    async def get(self, path: DocumentPath) -> Snapshot:
        """Point lookup."""
        ...

    @abstractmethod
    async def set(self, path: DocumentPath, value: dict[str, Any], *, merge: bool = False) -> None:
        """Create or overwrite a document, optionally merging with the stored one."""
        ...

    @abstractmethod
    async def delete(self, path: DocumentPath, *, recursive: bool = False) -> bool:
        """Delete a document (and with *recursive* every descendant).

        Returns ``True`` if anything was removed.
        """
        ...

    @abstractmethod
    async def update_field_delete(self, path: DocumentPath, field_name: str) -> bool:
        """Remove one top-level field from a document.

        Returns ``True`` if the field existed.  A missing document is left
        missing and reported as ``False``.
        """
        ...

    async def close(self) -> None:  # noqa: B027
        """Release any resources held by the backend."""
