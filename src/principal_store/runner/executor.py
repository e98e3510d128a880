# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Executor for running store operations from runner input.

Orchestrates the full execution flow:
1. Create backend from configuration
2. Build NamespacedStore over it
3. Run each operation in order
4. Return structured results
"""

from __future__ import annotations

import logging
from typing import Any

from principal_store import NamespacedStore, PrincipalStoreError
from principal_store.backends import DocumentBackend

from .factory import BackendFactory, BackendFactoryError
from .schema import OperationResultSchema, OperationSchema, RunnerInput, RunnerOutput

log = logging.getLogger(__name__)


class ExecutionError(Exception):
    """Raised when an operation request is malformed."""

    pass


class Executor:
    """Executes store operations.

    Responsibilities:
    - Create backend from configuration
    - Run each operation against a NamespacedStore
    - Translate results and store errors to output schema

    Pass a backend to the constructor to override backend creation.

    Example:
        executor = Executor()
        output = await executor.execute(input_data)

        # For testing with a shared backend:
        executor = Executor(backend=InMemoryBackend())
    """

    def __init__(self, backend: DocumentBackend | None = None) -> None:
        """Initialize executor with optional injected backend.

        Args:
            backend: Optional backend to use instead of creating from config.
                     Useful for testing.
        """
        self._injected_backend = backend

    async def execute(self, input_data: RunnerInput) -> RunnerOutput:
        """Execute every operation in the input.

        Args:
            input_data: Complete runner input

        Returns:
            RunnerOutput with per-operation results

        Note:
            This method catches all exceptions and returns them as
            RunnerOutput errors, ensuring valid JSON is always returned.
        """
        try:
            return await self._execute_internal(input_data)
        except BackendFactoryError as e:
            return RunnerOutput(success=False, error=str(e), error_type="BackendFactoryError")
        except Exception as e:
            log.exception("runner failed")
            return RunnerOutput(success=False, error=str(e), error_type=type(e).__name__)

    async def _execute_internal(self, input_data: RunnerInput) -> RunnerOutput:
        """Internal execution logic.

        Separated from execute() to allow exception propagation
        for testing while execute() catches all errors.
        """
        owns_backend = self._injected_backend is None
        backend = (
            BackendFactory.create(input_data.backend) if owns_backend else self._injected_backend
        )

        store = NamespacedStore(
            backend,
            root_collection=input_data.backend.root_collection,
            data_collection=input_data.backend.data_collection,
        )
        try:
            results = [await self._run_operation(store, op) for op in input_data.operations]
        finally:
            if owns_backend:
                await store.close()

        return RunnerOutput(success=all(r.success for r in results), results=results)

    async def _run_operation(
        self, store: NamespacedStore, op: OperationSchema
    ) -> OperationResultSchema:
        """Run one operation, converting store and request errors to a result."""
        try:
            result = await self._dispatch(store, op)
        except PrincipalStoreError as e:
            return OperationResultSchema(
                success=False,
                error=str(e),
                error_type=type(e).__name__,
                code=e.code,
            )
        except (ExecutionError, ValueError, TypeError) as e:
            return OperationResultSchema(
                success=False,
                error=str(e),
                error_type=type(e).__name__,
            )
        return OperationResultSchema(success=True, result=result)

    async def _dispatch(self, store: NamespacedStore, op: OperationSchema) -> Any:
        bound = store.bind(op.principal)

        if op.operation == "save_record":
            await bound.save_record(op.value)
        elif op.operation == "load_record":
            return await bound.load_record()
        elif op.operation == "delete_record":
            await bound.delete_record()
        elif op.operation == "delete_record_field":
            await bound.delete_record_field(self._require(op.field, "field", op))
        elif op.operation == "save_entry":
            await bound.save_entry(self._require(op.key, "key", op), op.value)
        elif op.operation == "load_entry":
            return await bound.load_entry(self._require(op.key, "key", op))
        elif op.operation == "delete_entry":
            await bound.delete_entry(self._require(op.key, "key", op))
        return None

    def _require(self, value: str | None, name: str, op: OperationSchema) -> str:
        if value is None:
            raise ExecutionError(f"Operation '{op.operation}' requires '{name}'")
        return value
