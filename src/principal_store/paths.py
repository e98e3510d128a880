"""DocumentPath — addressing of records and data entries in the backend."""

from __future__ import annotations

from dataclasses import dataclass

SEPARATOR = "/"


def validate_segment(value: str, what: str = "key") -> str:
    """Return *value* if it is usable as a single path segment.

    Raises:
        ValueError: on empty strings, non-strings, or strings containing ``/``.
    """
    if not isinstance(value, str) or not value:
        raise ValueError(f"{what} must be a non-empty string, got {value!r}")
    if SEPARATOR in value:
        raise ValueError(f"{what} must not contain '{SEPARATOR}': {value!r}")
    return value


@dataclass(frozen=True)
class DocumentPath:
    """Immutable, slash-separated document address.

    Segments alternate collection / document id, as in most document
    databases: ``principals/u1`` is a document, ``principals/u1/data``
    a collection under it and ``principals/u1/data/score`` a document in
    that collection.
    """

    segments: tuple[str, ...]

    @classmethod
    def parse(cls, path: str) -> DocumentPath:
        segments = tuple(path.strip(SEPARATOR).split(SEPARATOR))
        for segment in segments:
            validate_segment(segment, "path segment")
        return cls(segments)

    def child(self, *segments: str) -> DocumentPath:
        for segment in segments:
            validate_segment(segment, "path segment")
        return DocumentPath(self.segments + segments)

    @property
    def id(self) -> str:
        return self.segments[-1]

    @property
    def parent(self) -> DocumentPath | None:
        if len(self.segments) <= 1:
            return None
        return DocumentPath(self.segments[:-1])

    def is_ancestor_of(self, other: DocumentPath) -> bool:
        n = len(self.segments)
        return len(other.segments) > n and other.segments[:n] == self.segments

    def __str__(self) -> str:
        return SEPARATOR.join(self.segments)


@dataclass(frozen=True)
class Layout:
    """Maps principals and entry keys onto document paths.

    Attributes:
        root_collection: Collection holding one document per principal.
        data_collection: Sub-collection (under the principal document)
                         holding one document per data entry.
    """

    root_collection: str = "principals"
    data_collection: str = "data"

    def __post_init__(self) -> None:
        validate_segment(self.root_collection, "root_collection")
        validate_segment(self.data_collection, "data_collection")

    def record(self, principal: str) -> DocumentPath:
        return DocumentPath((self.root_collection, validate_segment(principal, "principal")))

    def entry(self, principal: str, key: str) -> DocumentPath:
        return self.record(principal).child(self.data_collection, validate_segment(key, "entry key"))
