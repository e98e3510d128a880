# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Runner submodule for executing store operations from JSON.

Usage:
    python -m principal_store.runner < input.json > output.json

Exports:
    Executor: Runs a batch of operations against one backend
    BackendFactory: Creates backends from configuration
    RunnerInput: Input schema
    RunnerOutput: Output schema
"""

from .executor import ExecutionError, Executor
from .factory import BackendFactory, BackendFactoryError
from .schema import (
    BackendConfigSchema,
    OperationResultSchema,
    OperationSchema,
    RunnerInput,
    RunnerOutput,
)

__all__ = [
    "BackendConfigSchema",
    "BackendFactory",
    "BackendFactoryError",
    "ExecutionError",
    "Executor",
    "OperationResultSchema",
    "OperationSchema",
    "RunnerInput",
    "RunnerOutput",
]
