"""Decompression of raw LZ4 blocks and zstd frames."""

from __future__ import annotations

import io

import lz4.block
import zstandard

# Assumed upper bound of the LZ4 compression ratio when sizing the output.
_LZ4_MAX_RATIO = 4


def lz4_decompress(data: bytes) -> bytes:
    """Decompress a raw LZ4 block whose output is at most four times its size.

    Raises ValueError for corrupt input or output that does not fit.
    """
    if not data:
        return b""
    try:
        return lz4.block.decompress(bytes(data), uncompressed_size=len(data) * _LZ4_MAX_RATIO)
    except lz4.block.LZ4BlockError as exc:
        raise ValueError(f"lz4: {exc}") from exc


def zstd_decompress(data: bytes) -> bytes:
    """Decompress one or more concatenated zstd frames.

    Raises ValueError for input that is not valid zstd data.
    """
    if not data:
        return b""
    decompressor = zstandard.ZstdDecompressor()
    try:
        with decompressor.stream_reader(io.BytesIO(bytes(data)), read_across_frames=True) as reader:
            return reader.read()
    except zstandard.ZstdError as exc:
        raise ValueError(f"zstd: {exc}") from exc