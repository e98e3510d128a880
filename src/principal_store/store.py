"""NamespacedStore — per-principal records and data entries over a document backend."""

from __future__ import annotations

import asyncio
import copy
import logging
from collections.abc import AsyncIterator, Awaitable
from contextlib import asynccontextmanager
from typing import TYPE_CHECKING, Any, TypeVar

from principal_store.backends.memory import InMemoryBackend
from principal_store.exceptions import BackendError, DataKeyNotFoundError, PrincipalNotFoundError
from principal_store.paths import DocumentPath, Layout, validate_segment

if TYPE_CHECKING:
    from principal_store.backends.base import DocumentBackend
    from principal_store.sanitizers import Sanitizer

log = logging.getLogger(__name__)

T = TypeVar("T")

# Entry documents wrap the value so scalars and lists can be stored too.
_ENTRY_FIELD = "value"


class NamespacedStore:
    """Key-value facade namespaced by principal.

    Each principal owns one *record* (a mapping stored at
    ``principals/{principal}``) and any number of *data entries*, each an
    independent document at ``principals/{principal}/data/{key}``.

    All writes merge: fields missing from the payload keep their stored
    value, fields present replace it, and nested mappings merge
    recursively.  Reads of anything never written raise the matching
    not-found error rather than returning an empty value.  Every other
    failure of the backend surfaces as :class:`BackendError`.

    The principal is an explicit argument of every operation; use
    :meth:`bind` for a view that supplies it.

    Parameters:
        backend:         Document backend.  Defaults to :class:`InMemoryBackend`.
        sanitizer:       Optional callable applied to a copy of every
                         mapping payload before it is written.
        root_collection: Collection holding principal records.
        data_collection: Sub-collection holding data entries.
    """

    def __init__(
        self,
        backend: DocumentBackend | None = None,
        *,
        sanitizer: Sanitizer | None = None,
        root_collection: str = "principals",
        data_collection: str = "data",
    ) -> None:
        self._backend: DocumentBackend = backend if backend is not None else InMemoryBackend()
        self._sanitizer = sanitizer
        self._layout = Layout(root_collection, data_collection)
        self._pending: set[asyncio.Task[Any]] = set()

    @property
    def backend(self) -> DocumentBackend:
        return self._backend

    @property
    def layout(self) -> Layout:
        return self._layout

    def bind(self, principal: str) -> BoundStore:
        """Return a view of this store bound to *principal*.  No I/O."""
        return BoundStore(self, principal)

    # ── records ──────────────────────────────────────────────

    async def save_record(self, principal: str, value: dict[str, Any]) -> None:
        """Merge *value* into the principal's record, creating it if needed."""
        if not isinstance(value, dict):
            raise TypeError(f"record must be a dict, got {type(value).__name__}")
        path = self._layout.record(principal)
        payload = self._sanitize(value)
        async with self._backend_call("save_record", path):
            await self._backend.set(path, payload, merge=True)

    save_object = save_record

    async def load_record(self, principal: str) -> dict[str, Any]:
        """Return the principal's record.

        Raises:
            PrincipalNotFoundError: if no record was ever written.
        """
        path = self._layout.record(principal)
        async with self._backend_call("load_record", path):
            snap = await self._backend.get(path)
        if not snap.exists:
            log.debug("no record at %s", path)
            raise PrincipalNotFoundError(principal)
        return snap.value

    async def delete_record(self, principal: str) -> None:
        """Delete the principal's record together with all of its data entries.

        Raises:
            PrincipalNotFoundError: if neither a record nor any entry existed.
        """
        path = self._layout.record(principal)
        async with self._backend_call("delete_record", path):
            removed = await self._backend.delete(path, recursive=True)
        if not removed:
            raise PrincipalNotFoundError(principal)

    async def delete_record_field(self, principal: str, field_name: str) -> None:
        """Remove one top-level field from the record, leaving the rest intact.

        Raises:
            PrincipalNotFoundError: if the principal has no record.
            DataKeyNotFoundError: if the record has no such field.
        """
        path = self._layout.record(principal)
        async with self._backend_call("delete_record_field", path):
            snap = await self._backend.get(path)
            if not snap.exists:
                raise PrincipalNotFoundError(principal)
            removed = await self._backend.update_field_delete(path, field_name)
        if not removed:
            raise DataKeyNotFoundError(principal, field_name)

    # ── data entries ─────────────────────────────────────────

    async def save_entry(self, principal: str, key: str, value: Any) -> None:
        """Write one data entry.  Mapping values merge with the stored mapping."""
        path = self._layout.entry(principal, key)
        if isinstance(value, dict):
            value = self._sanitize(value)
        async with self._backend_call("save_entry", path):
            await self._backend.set(path, {_ENTRY_FIELD: value}, merge=True)

    async def load_entry(self, principal: str, key: str) -> Any:
        """Return the value of one data entry.

        Raises:
            DataKeyNotFoundError: if the entry was never written (or was deleted).
        """
        path = self._layout.entry(principal, key)
        async with self._backend_call("load_entry", path):
            snap = await self._backend.get(path)
        if not snap.exists or _ENTRY_FIELD not in snap.value:
            log.debug("no entry at %s", path)
            raise DataKeyNotFoundError(principal, key)
        return snap.value[_ENTRY_FIELD]

    async def delete_entry(self, principal: str, key: str) -> None:
        """Delete one data entry without touching the record or sibling entries.

        Raises:
            DataKeyNotFoundError: if the entry does not exist.
        """
        path = self._layout.entry(principal, key)
        async with self._backend_call("delete_entry", path):
            removed = await self._backend.delete(path)
        if not removed:
            raise DataKeyNotFoundError(principal, key)

    # ── fire-and-forget ──────────────────────────────────────

    def submit(self, operation: Awaitable[T]) -> asyncio.Task[T]:
        """Schedule *operation* without waiting for it.

        Failures are logged when they happen and held until :meth:`drain`,
        which is the channel for observing them: a failed task stays pending
        even if the caller also awaits it.  Must be called from a running
        event loop.
        """
        task = asyncio.ensure_future(operation)
        self._pending.add(task)
        task.add_done_callback(self._on_submitted_done)
        return task

    def _on_submitted_done(self, task: asyncio.Task[Any]) -> None:
        if task.cancelled():
            self._pending.discard(task)
            return
        exc = task.exception()
        if exc is None:
            self._pending.discard(task)
        else:
            log.error("submitted operation failed: %s", exc)

    @property
    def pending(self) -> int:
        """Number of submitted operations not yet drained."""
        return len(self._pending)

    async def drain(self) -> None:
        """Wait for every submitted operation; re-raise the first failure."""
        tasks = list(self._pending)
        self._pending.difference_update(tasks)
        results = await asyncio.gather(*tasks, return_exceptions=True)
        for result in results:
            if isinstance(result, BaseException) and not isinstance(result, asyncio.CancelledError):
                raise result

    # ── lifecycle ────────────────────────────────────────────

    async def close(self) -> None:
        await self._backend.close()

    async def __aenter__(self) -> NamespacedStore:
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        await self.close()

    # ── helpers ──────────────────────────────────────────────

    def _sanitize(self, value: dict[str, Any]) -> dict[str, Any]:
        if self._sanitizer is None:
            return value
        return self._sanitizer(copy.deepcopy(value))

    @asynccontextmanager
    async def _backend_call(self, operation: str, path: DocumentPath) -> AsyncIterator[None]:
        log.debug("%s %s", operation, path)
        try:
            yield
        except (PrincipalNotFoundError, DataKeyNotFoundError):
            raise
        except Exception as exc:
            log.warning("%s failed on %s: %s", operation, path, exc)
            raise BackendError(operation, str(path), exc) from exc


class BoundStore:
    """A :class:`NamespacedStore` view with the principal filled in.

    Immutable: :meth:`rebind` returns a new view, so concurrent sessions
    sharing one store never see each other's principal.
    """

    def __init__(self, store: NamespacedStore, principal: str) -> None:
        self._store = store
        self._principal = validate_segment(principal, "principal")

    @property
    def principal(self) -> str:
        return self._principal

    @property
    def store(self) -> NamespacedStore:
        return self._store

    def rebind(self, principal: str) -> BoundStore:
        return BoundStore(self._store, principal)

    async def save_record(self, value: dict[str, Any]) -> None:
        await self._store.save_record(self._principal, value)

    save_object = save_record

    async def load_record(self) -> dict[str, Any]:
        return await self._store.load_record(self._principal)

    async def delete_record(self) -> None:
        await self._store.delete_record(self._principal)

    async def delete_record_field(self, field_name: str) -> None:
        await self._store.delete_record_field(self._principal, field_name)

    async def save_entry(self, key: str, value: Any) -> None:
        await self._store.save_entry(self._principal, key, value)

    async def load_entry(self, key: str) -> Any:
        return await self._store.load_entry(self._principal, key)

    async def delete_entry(self, key: str) -> None:
        await self._store.delete_entry(self._principal, key)

    def submit(self, operation: Awaitable[T]) -> asyncio.Task[T]:
        return self._store.submit(operation)

    @property
    def pending(self) -> int:
        return self._store.pending

    async def drain(self) -> None:
        await self._store.drain()

    def __repr__(self) -> str:
        return f"BoundStore(principal={self._principal!r})"
