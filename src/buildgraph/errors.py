"""Fatal error taxonomy for build-graph ingestion."""

from __future__ import annotations


class GopathError(RuntimeError):
    """Base error for conditions that abort a projection run."""


class MalformedGraphError(GopathError, ValueError):
    """Raised when the build graph violates a structural invariant."""


class MalformedLabelError(MalformedGraphError):
    """Raised when a label lacks the ``//`` or ``:`` separator."""

    def __init__(self, text: str, missing: str) -> None:
        msg = f"Malformed label {text!r}: missing {missing!r} separator."
        super().__init__(msg)
        self.text = text
        self.missing = missing


class MissingProtoSourcesError(MalformedGraphError):
    """Raised when a go_proto_library references an unknown proto_library."""

    def __init__(self, target: str, proto: str) -> None:
        msg = f"Invalid go_proto_library {target!r}: missing src {proto!r}."
        super().__init__(msg)
        self.target = target
        self.proto = proto


class InvalidImportPathError(MalformedGraphError):
    """Raised when an import path would place files outside ``<gopath>/src``."""

    def __init__(self, target: str, import_path: str) -> None:
        msg = (
            f"Invalid import path {import_path!r} for {target!r}: "
            "must be relative and free of '..' segments."
        )
        super().__init__(msg)
        self.target = target
        self.import_path = import_path


class QueryError(GopathError):
    """Base error for build-graph query failures."""


class QueryDecodeError(QueryError):
    """Raised when query output cannot be decoded as a QueryResult."""


__all__ = [
    "GopathError",
    "InvalidImportPathError",
    "MalformedGraphError",
    "MalformedLabelError",
    "MissingProtoSourcesError",
    "QueryDecodeError",
    "QueryError",
]
