"""FirestoreBackend — Cloud Firestore documents via the async client."""

from __future__ import annotations

from typing import Any

try:
    from google.cloud import firestore
except ImportError as exc:
    raise ImportError(
        "FirestoreBackend requires the 'google-cloud-firestore' package. "
        "Install it with: pip install principal-store[firestore]"
    ) from exc

from principal_store.backends.base import DocumentBackend, Snapshot
from principal_store.paths import DocumentPath


class FirestoreBackend(DocumentBackend):
    """Backend over a ``google.cloud.firestore.AsyncClient``.

    Paths map one-to-one onto Firestore document paths, so
    ``principals/u1/data/score`` is the ``score`` document in the ``data``
    sub-collection of ``principals/u1``.  Merge writes use Firestore's own
    ``merge=True``, which merges nested maps field by field.

    Parameters:
        client:   An existing ``AsyncClient``.  Created from *project* and
                  *database* (and ambient credentials) when omitted.
        project:  GCP project id.
        database: Firestore database id (``"(default)"`` when omitted).
    """

    def __init__(
        self,
        client: firestore.AsyncClient | None = None,
        *,
        project: str | None = None,
        database: str | None = None,
    ) -> None:
        if client is None:
            client = firestore.AsyncClient(project=project, database=database)
        self._client = client

    @property
    def client(self) -> firestore.AsyncClient:
        return self._client

    def _ref(self, path: DocumentPath) -> Any:
        return self._client.document(str(path))

    async def get(self, path: DocumentPath) -> Snapshot:
        snap = await self._ref(path).get()
        if not snap.exists:
            return Snapshot.missing()
        return Snapshot(exists=True, value=snap.to_dict() or {})

    async def set(self, path: DocumentPath, value: dict[str, Any], *, merge: bool = False) -> None:
        await self._ref(path).set(value, merge=merge)

    async def delete(self, path: DocumentPath, *, recursive: bool = False) -> bool:
        ref = self._ref(path)
        snap = await ref.get()
        if not recursive:
            if not snap.exists:
                return False
            await ref.delete()
            return True
        # recursive_delete always counts the document itself, present or not
        deleted = await self._client.recursive_delete(ref)
        return snap.exists or deleted > 1

    async def update_field_delete(self, path: DocumentPath, field_name: str) -> bool:
        ref = self._ref(path)
        snap = await ref.get()
        if not snap.exists or field_name not in (snap.to_dict() or {}):
            return False
        await ref.update(
            {self._client.field_path(field_name): firestore.DELETE_FIELD},
            option=self._client.write_option(last_update_time=snap.update_time),
        )
        return True
