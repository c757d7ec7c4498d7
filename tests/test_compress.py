import random

import lz4.block
import pytest
import zstandard

from chatlog.compress import lz4_decompress, zstd_decompress


def sample(size, seed=1):
    return random.Random(seed).randbytes(size)


def test_lz4_round_trip():
    data = sample(500) + b"x" * 200
    packed = lz4.block.compress(data, store_size=False)
    assert lz4_decompress(packed) == data


def test_lz4_empty():
    assert lz4_decompress(b"") == b""


def test_lz4_output_too_large_for_buffer():
    packed = lz4.block.compress(b"a" * 10000, store_size=False)
    with pytest.raises(ValueError):
        lz4_decompress(packed)


def test_lz4_corrupt_input():
    with pytest.raises(ValueError):
        lz4_decompress(b"\xff\xff\xff\xff\xff")


def test_zstd_round_trip():
    data = sample(4000, seed=2) + b"chat" * 100
    packed = zstandard.ZstdCompressor().compress(data)
    assert zstd_decompress(packed) == data


def test_zstd_stream_without_content_size():
    data = sample(3000, seed=3)
    compressor = zstandard.ZstdCompressor().compressobj()
    packed = compressor.compress(data) + compressor.flush()
    assert zstd_decompress(packed) == data


def test_zstd_concatenated_frames():
    first, second = sample(100, seed=4), sample(200, seed=5)
    compressor = zstandard.ZstdCompressor()
    packed = compressor.compress(first) + compressor.compress(second)
    assert zstd_decompress(packed) == first + second


def test_zstd_empty():
    assert zstd_decompress(b"") == b""


def test_zstd_garbage_raises():
    with pytest.raises(ValueError):
        zstd_decompress(b"definitely not zstd data")