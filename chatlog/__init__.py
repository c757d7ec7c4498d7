"""Utilities for chat archives: time parsing, decompression, wxgf pictures, XXH64 and file helpers."""

__version__ = "0.1.0"

__all__ = [
    "appver",
    "compress",
    "osutil",
    "tempnames",
    "textutil",
    "timeparse",
    "timerange",
    "wxgf",
    "xxhash64",
]