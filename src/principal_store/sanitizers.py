"""Payload sanitizers applied before writes.

A sanitizer is any ``Callable[[dict[str, Any]], dict[str, Any]]``.  The
store hands it a private deep copy of the payload, so sanitizers may mutate
their argument in place and return it.

Example:
    store = NamespacedStore(
        backend,
        sanitizer=chain(
            drop_fields("context.prev.0.response"),
            drop_empty("data"),
        ),
    )
"""

from __future__ import annotations

from collections.abc import Callable
from typing import Any

Sanitizer = Callable[[dict[str, Any]], dict[str, Any]]


def _remove(node: Any, parts: list[str]) -> None:
    head, rest = parts[0], parts[1:]
    if isinstance(node, dict):
        if head not in node:
            return
        if rest:
            _remove(node[head], rest)
        else:
            del node[head]
    elif isinstance(node, list) and head.isdigit():
        index = int(head)
        if index >= len(node):
            return
        if rest:
            _remove(node[index], rest)
        else:
            del node[index]


def drop_fields(*paths: str) -> Sanitizer:
    """Remove the fields at the given dotted paths, if present.

    Segments that are all digits index into lists, so
    ``"context.prev.0.response"`` drops ``response`` from the first element
    of ``context["prev"]``.  Missing intermediate nodes are ignored.
    """
    split = [p.split(".") for p in paths]

    def sanitize(payload: dict[str, Any]) -> dict[str, Any]:
        for parts in split:
            _remove(payload, parts)
        return payload

    return sanitize


def drop_empty(*keys: str) -> Sanitizer:
    """Remove the given top-level keys when their value is an empty container."""

    def sanitize(payload: dict[str, Any]) -> dict[str, Any]:
        for key in keys:
            value = payload.get(key)
            if isinstance(value, (dict, list)) and not value:
                del payload[key]
        return payload

    return sanitize


def chain(*sanitizers: Sanitizer) -> Sanitizer:
    """Compose sanitizers, applied left to right."""

    def sanitize(payload: dict[str, Any]) -> dict[str, Any]:
        for s in sanitizers:
            payload = s(payload)
        return payload

    return sanitize
