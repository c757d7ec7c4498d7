"""File-system helpers: searching, sizing and preparing directories."""

from __future__ import annotations

import logging
import os
import re
import sys
from collections.abc import Iterator

log = logging.getLogger(__name__)

_SI_UNIT = 1000
_SI_PREFIXES = "kMGTPE"


def _walk_sorted(root: str, relative: str, recursive: bool) -> Iterator[tuple[str, str]]:
    """Yield (relative path, name) of files below root in lexical order."""
    current = os.path.join(root, relative) if relative else root
    with os.scandir(current) as scan:
        entries = sorted(scan, key=lambda e: e.name)
    for entry in entries:
        rel = os.path.join(relative, entry.name) if relative else entry.name
        if entry.is_dir(follow_symlinks=False):
            if recursive:
                yield from _walk_sorted(root, rel, recursive)
            continue
        yield rel, entry.name


def find_files_with_patterns(directory: str, pattern: str, recursive: bool) -> list[str]:
    """Return paths of files in directory whose names match the regex pattern.

    Raises ValueError for an invalid pattern, OSError when the directory
    cannot be read and NotADirectoryError when it is not a directory.
    """
    try:
        regex = re.compile(pattern)
    except re.error as exc:
        raise ValueError(f"invalid regex '{pattern}': {exc}") from exc

    if not os.path.isdir(directory):
        os.stat(directory)
        raise NotADirectoryError(f"'{directory}' is not a directory")

    return [
        os.path.normpath(os.path.join(directory, rel))
        for rel, name in _walk_sorted(directory, "", recursive)
        if regex.search(name)
    ]


def default_work_dir(account: str) -> str:
    """Return the default working directory, per account when one is given."""
    if sys.platform == "win32":
        parts = [os.environ.get("USERPROFILE", ""), "Documents", "chatlog"]
    elif sys.platform == "darwin":
        parts = [os.environ.get("HOME", ""), "Documents", "chatlog"]
    else:
        parts = [os.environ.get("HOME", ""), "chatlog"]
    if account:
        parts.append(account)
    return os.path.normpath(os.path.join(*parts))


def get_dir_size(directory: str) -> str:
    """Return the total size of everything under directory, in SI units."""
    total = 0
    try:
        total += os.lstat(directory).st_size
    except OSError:
        return byte_count_si(0)
    if os.path.isdir(directory) and not os.path.islink(directory):
        for current, dirs, files in os.walk(directory):
            for name in dirs + files:
                try:
                    total += os.lstat(os.path.join(current, name)).st_size
                except OSError:
                    continue
    return byte_count_si(total)


def byte_count_si(size: int) -> str:
    """Format a byte count with decimal (SI) prefixes, e.g. ``1.5 kB``."""
    if size < _SI_UNIT:
        return f"{size} B"
    div, exp = _SI_UNIT, 0
    n = size // _SI_UNIT
    while n >= _SI_UNIT:
        div *= _SI_UNIT
        exp += 1
        n //= _SI_UNIT
    return f"{size / div:.1f} {_SI_PREFIXES[exp]}B"


def prepare_dir(path: str) -> None:
    """Make sure path exists as a directory, creating it when missing."""
    try:
        is_dir = os.path.isdir(path)
        os.stat(path)
    except FileNotFoundError:
        os.makedirs(path, mode=0o755, exist_ok=True)
        return
    if not is_dir:
        log.debug("%s is not a directory", path)
        raise NotADirectoryError(f"{path} is not a directory")