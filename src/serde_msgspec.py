"""Shared msgspec policy and helpers."""

from __future__ import annotations

import re

import msgspec


class StructBaseStrict(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=True,
):
    """Base struct for strict contracts."""


class StructBaseHotPath(
    msgspec.Struct,
    frozen=True,
    kw_only=True,
    omit_defaults=True,
    repr_omit_defaults=True,
    forbid_unknown_fields=False,
    gc=False,
    cache_hash=True,
):
    """Base struct for high-volume, immutable records."""


_VALIDATION_RE = re.compile(r"^(?P<summary>.*?)(?:\s+-\s+at\s+`(?P<path>[^`]+)`)?$")


def validation_error_payload(exc: msgspec.ValidationError) -> dict[str, str]:
    """Normalize a msgspec ValidationError for diagnostics.

    Parameters
    ----------
    exc
        ValidationError raised by msgspec decoding/conversion.

    Returns
    -------
    dict[str, str]
        Normalized error payload containing type, summary, and optional path.
    """
    message = str(exc).strip()
    match = _VALIDATION_RE.match(message)
    payload: dict[str, str] = {"type": exc.__class__.__name__}
    if match:
        summary = (match.group("summary") or "").strip()
        if summary:
            payload["summary"] = summary
        path = match.group("path")
        if path:
            payload["path"] = path
        return payload
    payload["summary"] = message
    return payload


def to_builtins(obj: object) -> object:
    """Convert a struct into JSON-compatible builtins with deterministic keys.

    Returns
    -------
    object
        Builtin representation of ``obj``.
    """
    return msgspec.to_builtins(obj, str_keys=True, order="deterministic")


__all__ = [
    "StructBaseHotPath",
    "StructBaseStrict",
    "to_builtins",
    "validation_error_payload",
]
