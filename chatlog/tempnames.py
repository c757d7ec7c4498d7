"""Naming rules for cached temporary file copies.

A cached copy is named ``instanceID_+baseName_+ext_+pathHash_+dataHash.ext``;
the base name may itself contain the ``_+`` separator.
"""

from __future__ import annotations

import os
from dataclasses import dataclass

SEPARATOR = "_+"
DEFAULT_EXT = "bin"
DEFAULT_BASE_NAME = "file"
PATH_HASH_HEX_LEN = 12
DATA_HASH_HEX_LEN = 16
MAX_BASE_NAME_LEN = 100

_SEPARATORS = tuple(sep for sep in (os.sep, os.altsep) if sep)


@dataclass(frozen=True)
class TempName:
    """The parts encoded in the name of a cached temporary copy."""

    instance_id: str
    base_name: str
    ext: str
    path_hash: str
    data_hash: str


def _is_sep(char: str) -> bool:
    return char in _SEPARATORS


def _raw_ext(path: str) -> str:
    """Return the suffix from the last dot of the final element, dot included."""
    for index in range(len(path) - 1, -1, -1):
        char = path[index]
        if _is_sep(char):
            break
        if char == ".":
            return path[index:]
    return ""


def _base(path: str) -> str:
    """Return the last element of path, ignoring trailing separators."""
    if not path:
        return "."
    stripped = path
    while stripped and _is_sep(stripped[-1]):
        stripped = stripped[:-1]
    if not stripped:
        return os.sep
    cut = max(stripped.rfind(sep) for sep in _SEPARATORS)
    return stripped[cut + 1:]


def extract_file_extension(path: str) -> str:
    """Return the extension of path without its dot, or ``bin`` when there is none."""
    ext = _raw_ext(path)[1:]
    return ext or DEFAULT_EXT


def parse_hash_components(combined: str) -> tuple[str, str]:
    """Split ``pathHash_dataHash`` into its two parts; the data hash may be empty."""
    parts = combined.split("_")
    if len(parts) >= 2:
        return parts[0], parts[1]
    return parts[0], ""


def declared_ext_from_name(file_name: str) -> str | None:
    """Return the extension declared inside a temp file name, or None if it has none."""
    parts = file_name.split(SEPARATOR)
    if len(parts) < 5:
        return None
    return parts[-3]


def extract_base_name(path: str) -> str:
    """Return the file name of path without its extension, or ``file`` when empty."""
    file_name = _base(path)
    ext = _raw_ext(file_name)
    base = file_name
    if ext and len(file_name) > len(ext):
        base = file_name[: -len(ext)]
    if not base or base == ext:
        return DEFAULT_BASE_NAME
    return base


def clean_process_name(name: str) -> str:
    """Replace every character other than ASCII letters, digits, '-' and '_' with '_'."""
    return "".join(
        char if (char.isascii() and char.isalnum()) or char in "-_" else "_"
        for char in name
    )


def cache_key(instance_id: str, base_name: str, ext: str, path_hash: str, data_hash: str) -> str:
    """Return the key under which one version of a file is indexed."""
    return "_".join((instance_id, base_name, ext, path_hash, data_hash))


def version_key(instance_id: str, base_name: str, ext: str, path_hash: str) -> str:
    """Return the key shared by all versions of the same original file."""
    return "_".join((instance_id, base_name, ext, path_hash))


def temp_file_name(instance_id: str, original_path: str, path_hash: str, data_hash: str) -> str:
    """Build the temp file name for a copy of original_path.

    The base name and both hashes are cut to their maximum lengths.
    """
    file_ext = _raw_ext(_base(original_path))
    base = extract_base_name(original_path)[:MAX_BASE_NAME_LEN]
    clean_ext = file_ext[1:] or DEFAULT_EXT
    return SEPARATOR.join(
        (
            instance_id,
            base,
            clean_ext,
            path_hash[:PATH_HASH_HEX_LEN],
            data_hash[:DATA_HASH_HEX_LEN] + file_ext,
        )
    )


def parse_temp_name(file_name: str, instance_id: str) -> TempName | None:
    """Parse a temp file name belonging to instance_id.

    Returns None when the name does not follow the convention, belongs to
    another instance, or its real extension differs from the declared one
    (as with ``.db-wal`` next to ``.db``).
    """
    parts = file_name.split(SEPARATOR)
    if len(parts) < 5 or parts[0] != instance_id:
        return None
    ext = parts[-3]
    path_hash = parts[-2]
    data_hash = parts[-1].split(".", 1)[0]
    base = SEPARATOR.join(parts[1:-3])
    if ext != extract_file_extension(file_name):
        return None
    return TempName(instance_id, base, ext, path_hash, data_hash)