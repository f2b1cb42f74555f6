"""Canonical JSON encoding for baseline files.

The encoder sorts mapping keys itself instead of relying on dict iteration
order, so two logically equal values always produce the same bytes.
"""
from __future__ import annotations

import hashlib
import json
import math
from collections.abc import Mapping
from typing import Any

from ._core_base import SerializationError

_SHORT_ESCAPES = {
    "\\": "\\\\",
    '"': '\\"',
    "\n": "\\n",
    "\r": "\\r",
    "\t": "\\t",
    "\b": "\\b",
    "\f": "\\f",
}


def _escape_string(value: str) -> str:
    out: list[str] = ['"']
    for ch in value:
        escaped = _SHORT_ESCAPES.get(ch)
        if escaped is not None:
            out.append(escaped)
        elif ord(ch) < 0x20:
            out.append(f"\\u{ord(ch):04x}")
        else:
            out.append(ch)
    out.append('"')
    return "".join(out)


def _format_number(value: int | float) -> str:
    if isinstance(value, int):
        return str(int(value))
    if not math.isfinite(value):
        raise SerializationError(f"Unsupported JSON number: {value!r}")
    return repr(value)


def _write(value: Any, out: list[str]) -> None:
    # bool is a subclass of int; it must be matched first.
    if value is None:
        out.append("null")
    elif isinstance(value, bool):
        out.append("true" if value else "false")
    elif isinstance(value, (int, float)):
        out.append(_format_number(value))
    elif isinstance(value, str):
        out.append(_escape_string(value))
    elif isinstance(value, Mapping):
        for key in value:
            if not isinstance(key, str):
                raise SerializationError(f"Unsupported JSON object key: {key!r} ({type(key).__name__})")
        out.append("{")
        for index, key in enumerate(sorted(value)):
            if index:
                out.append(",")
            out.append(_escape_string(key))
            out.append(":")
            _write(value[key], out)
        out.append("}")
    elif isinstance(value, (list, tuple)):
        out.append("[")
        for index, item in enumerate(value):
            if index:
                out.append(",")
            _write(item, out)
        out.append("]")
    else:
        raise SerializationError(f"Unsupported JSON value: {type(value).__name__}")


def encode(value: Any) -> bytes:
    out: list[str] = []
    _write(value, out)
    try:
        return "".join(out).encode("utf-8")
    except UnicodeEncodeError as exc:
        raise SerializationError(f"String is not encodable as UTF-8: {exc}") from exc


def decode(data: bytes | str) -> Any:
    if isinstance(data, bytes):
        data = data.decode("utf-8")
    return json.loads(data)


def stable_hash(value: Any) -> str:
    return hashlib.sha256(encode(value)).hexdigest()
