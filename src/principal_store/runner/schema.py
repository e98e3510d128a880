# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Data transfer objects for runner input/output.

These Pydantic models define the JSON contract of
``python -m principal_store.runner``.
"""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field

OperationName = Literal[
    "save_record",
    "load_record",
    "delete_record",
    "delete_record_field",
    "save_entry",
    "load_entry",
    "delete_entry",
]


class BackendConfigSchema(BaseModel):
    """Backend configuration.

    Attributes:
        type: Backend type ("memory", "sqlite" or "firestore")
        path: Path to SQLite database file (for sqlite type)
        project: GCP project id (for firestore type)
        database: Firestore database id (for firestore type)
        root_collection: Collection holding principal records
        data_collection: Sub-collection holding data entries
    """

    type: str = "memory"
    path: str = ""
    project: str | None = None
    database: str | None = None
    root_collection: str = "principals"
    data_collection: str = "data"


class OperationSchema(BaseModel):
    """One store operation.

    Attributes:
        operation: Store method to call
        principal: Principal the operation is namespaced under
        key: Entry key (entry operations)
        field: Record field (delete_record_field)
        value: Payload (save operations)
    """

    operation: OperationName
    principal: str
    key: str | None = None
    field: str | None = None
    value: Any = None


class RunnerInput(BaseModel):
    """Complete input read from stdin.

    Operations run in order against a single backend, so a "memory"
    backend keeps state between them for the duration of one run.

    Attributes:
        backend: Backend configuration
        operations: Operations to execute
    """

    backend: BackendConfigSchema = Field(default_factory=BackendConfigSchema)
    operations: list[OperationSchema] = Field(default_factory=list)


class OperationResultSchema(BaseModel):
    """Outcome of one operation.

    Attributes:
        success: Whether the operation completed
        result: Loaded value (load operations)
        error: Error message (on failure)
        error_type: Error class name (on failure)
        code: Store error code, e.g. "ERR_PRINCIPAL_NOT_FOUND" (on failure)
    """

    success: bool
    result: Any = None
    error: str = ""
    error_type: str = ""
    code: str = ""


class RunnerOutput(BaseModel):
    """Complete output written to stdout.

    The runner always outputs valid JSON matching this schema,
    even on errors.

    Attributes:
        success: Whether every operation completed successfully
        results: Per-operation outcomes, in input order
        error: Error message (when the run itself failed)
        error_type: Error class name (when the run itself failed)
    """

    success: bool
    results: list[OperationResultSchema] = Field(default_factory=list)
    error: str = ""
    error_type: str = ""
