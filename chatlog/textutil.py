"""Small helpers for strings and integers."""

from __future__ import annotations

import re
from typing import Any

_INT_RE = re.compile(r"[+-]?[0-9]+")
_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1


def is_normal_string(data: bytes | bytearray | memoryview | str) -> bool:
    """Return True if data is valid UTF-8 made only of printable characters."""
    if isinstance(data, str):
        text = data
    else:
        try:
            text = bytes(data).decode("utf-8")
        except UnicodeDecodeError:
            return False
    return text.isprintable()


def must_any_to_int(value: Any) -> int:
    """Convert a value to an integer via its textual form, or return 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, float):
        if not (value.is_integer() and abs(value) < 1e21):
            return 0
        text = str(int(value))
    else:
        text = str(value)
    if not _INT_RE.fullmatch(text):
        return 0
    number = int(text)
    if not _INT64_MIN <= number <= _INT64_MAX:
        return 0
    return number


def is_numeric(text: str) -> bool:
    """Return True if text is non-empty and every character is a decimal digit."""
    return bool(text) and text.isdecimal()


def split_int64_to_two_int32(value: int) -> tuple[int, int]:
    """Split a 64-bit integer into its low 32 bits and its (signed) high part."""
    value = ((value + 2**63) % 2**64) - 2**63
    return value & 0xFFFFFFFF, value >> 32


def str_to_list(text: str, sep: str) -> list[str]:
    """Split text on sep, trimming items and dropping empty and repeated ones."""
    if not text:
        return []
    pieces = list(text) if sep == "" else text.split(sep)
    seen: set[str] = set()
    result: list[str] = []
    for piece in pieces:
        item = piece.strip()
        if not item or item in seen:
            continue
        seen.add(item)
        result.append(item)
    return result