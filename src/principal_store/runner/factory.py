# Copyright (c) 2024 OpenMined
# SPDX-License-Identifier: Apache-2.0
"""Backend factory for creating document backends from configuration.

Uses the Registry pattern to map type strings to backend builders,
allowing extensibility without modifying factory code.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import ClassVar

from principal_store.backends import DocumentBackend, InMemoryBackend, SQLiteBackend

from .schema import BackendConfigSchema

BackendBuilder = Callable[[BackendConfigSchema], DocumentBackend]


class BackendFactoryError(Exception):
    """Raised when backend creation fails."""

    pass


def _memory(config: BackendConfigSchema) -> DocumentBackend:
    return InMemoryBackend()


def _sqlite(config: BackendConfigSchema) -> DocumentBackend:
    if not config.path:
        raise BackendFactoryError("SQLite backend requires 'path' configuration")
    return SQLiteBackend(config.path)


def _firestore(config: BackendConfigSchema) -> DocumentBackend:
    # Optional dependency, imported only when requested
    try:
        from principal_store.backends.firestore import FirestoreBackend
    except ImportError as e:
        raise BackendFactoryError(str(e)) from e
    return FirestoreBackend(project=config.project, database=config.database)


class BackendFactory:
    """Creates backends from configuration.

    Backend types are registered at class level and can be extended via
    the `register` class method.

    Example:
        backend = BackendFactory.create(BackendConfigSchema(type="sqlite", path="state.db"))
    """

    # Class-level registry mapping type strings to backend builders
    _registry: ClassVar[dict[str, BackendBuilder]] = {
        "memory": _memory,
        "sqlite": _sqlite,
        "firestore": _firestore,
    }

    @classmethod
    def register(cls, type_name: str, builder: BackendBuilder) -> None:
        """Register a custom backend type.

        Args:
            type_name: Type string to use in configuration
            builder: Callable returning a backend for a config

        Example:
            BackendFactory.register("redis", lambda cfg: MyRedisBackend(cfg.path))
        """
        cls._registry[type_name] = builder

    @classmethod
    def registered_types(cls) -> list[str]:
        """Return list of registered backend type names."""
        return list(cls._registry.keys())

    @classmethod
    def create(cls, config: BackendConfigSchema) -> DocumentBackend:
        """Create a backend from configuration.

        Raises:
            BackendFactoryError: If the type is unknown or the backend
                cannot be built
        """
        builder = cls._registry.get(config.type)
        if builder is None:
            raise BackendFactoryError(
                f"Unknown backend type '{config.type}'. Available: {cls.registered_types()}"
            )
        return builder(config)
