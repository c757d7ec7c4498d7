import struct

import pytest

from chatlog.wxgf import (
    ENV_FFMPEG_PATH,
    Partition,
    Partitions,
    convert_to_jpg,
    find_data_partition,
    is_ffmpeg_available,
    wxam_to_pic,
)

MISSING_FFMPEG = "/nonexistent/dir/ffmpeg-missing"


def _part(payload):
    return struct.pack(">I", len(payload)) + payload


def _single():
    payload = b"\x00\x00\x00\x01" + b"\x40\x01" + b"ab" * 10
    return b"wxgf" + bytes([12]) + b"\x00" * 3 + _part(payload), payload


def _anime():
    p1 = b"\x00\x00\x00\x01" + b"\x40" * 10
    p2 = b"\x00\x00\x00\x01" + b"\x42" * 10
    data = b"wxgf" + bytes([8]) + b"\x00" * 3 + _part(p1) + _part(p2) + b"\xee" * 40
    return data, p1, p2


def test_single_partition_found():
    data, payload = _single()
    found = find_data_partition(data)
    assert len(found.partitions) == 1
    part = found.partitions[0]
    assert data[part.offset:part.offset + part.size] == payload
    assert part.ratio == pytest.approx(len(payload) / len(data))
    assert found.max_index == 0
    assert found.like_anime() is False


def test_three_byte_start_code_fallback():
    payload = b"\x00\x00\x01" + b"\x26" + b"xy" * 5
    data = b"wxgf" + bytes([12]) + b"\x00" * 3 + _part(payload)
    found = find_data_partition(data)
    assert [(p.offset, p.size) for p in found.partitions] == [(12, len(payload))]


def test_two_small_partitions_look_like_anime():
    data, p1, p2 = _anime()
    found = find_data_partition(data)
    chunks = [data[p.offset:p.offset + p.size] for p in found.partitions]
    assert chunks == [p1, p2]
    assert found.max_ratio < 0.6
    assert found.like_anime() is True


def test_header_length_beyond_data_is_rejected():
    with pytest.raises(ValueError):
        find_data_partition(b"wxgf" + bytes([200]) + b"\x00" * 10)


def test_no_partition_is_rejected():
    with pytest.raises(ValueError, match="no partition"):
        find_data_partition(b"wxgf" + bytes([5]) + b"\xaa" * 30)


def test_like_anime_requires_several_partitions():
    single = Partitions([Partition(0, 1, 0.1)], 0.1, 0)
    assert single.like_anime() is False
    many = Partitions([Partition(0, 1, 0.1), Partition(5, 1, 0.1)], 0.1, 0)
    assert many.like_anime() is True
    big = Partitions([Partition(0, 1, 0.7), Partition(5, 1, 0.1)], 0.7, 0)
    assert big.like_anime() is False


def test_wxam_rejects_wrong_header():
    with pytest.raises(ValueError, match="invalid wxgf"):
        wxam_to_pic(b"abcd" + b"\x00" * 20)


def test_wxam_rejects_short_data():
    with pytest.raises(ValueError):
        wxam_to_pic(b"wxgf\x05")


def test_missing_ffmpeg_is_not_available(monkeypatch):
    monkeypatch.setenv(ENV_FFMPEG_PATH, MISSING_FFMPEG)
    assert is_ffmpeg_available() is False


def test_convert_with_missing_ffmpeg_fails(monkeypatch):
    monkeypatch.setenv(ENV_FFMPEG_PATH, MISSING_FFMPEG)
    with pytest.raises(RuntimeError, match="ffmpeg failed"):
        convert_to_jpg(b"\x00\x00\x00\x01abc")


def test_wxam_with_missing_ffmpeg_fails(monkeypatch):
    monkeypatch.setenv(ENV_FFMPEG_PATH, MISSING_FFMPEG)
    data, _ = _single()
    with pytest.raises(RuntimeError):
        wxam_to_pic(data)
    anime, _, _ = _anime()
    with pytest.raises(RuntimeError):
        wxam_to_pic(anime)