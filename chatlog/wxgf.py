"""Extraction of picture data from wxgf containers."""

from __future__ import annotations

import functools
import os
import struct
import subprocess
import tempfile
from collections.abc import Sequence
from dataclasses import dataclass, field

ENV_FFMPEG_PATH = "FFMPEG_PATH"
DEFAULT_FFMPEG = "ffmpeg"
MIN_RATIO = 0.6
WXGF_HEADER = b"wxgf"
JPG_EXT = "jpg"
GIF_EXT = "gif"

_START_CODES = (b"\x00\x00\x00\x01", b"\x00\x00\x01")
_GIF_FILTER = "[0:v][1:v]alphamerge,split[s0][s1];[s0]palettegen[p];[s1][p]paletteuse"


@dataclass(frozen=True)
class Partition:
    """A length-prefixed stream found inside a wxgf container."""

    offset: int
    size: int
    ratio: float


@dataclass
class Partitions:
    """All streams of a container and the position of the largest one."""

    partitions: list[Partition] = field(default_factory=list)
    max_ratio: float = 0.0
    max_index: int = 0

    def like_anime(self) -> bool:
        """Tell whether the container looks like an animation rather than a still."""
        return len(self.partitions) > 1 and self.max_ratio < MIN_RATIO


def find_data_partition(data: bytes) -> Partitions:
    """Locate the length-prefixed streams of a wxgf container.

    Raises ValueError when the header is malformed or no stream is found.
    """
    data = bytes(data)
    if len(data) < 5:
        raise ValueError("invalid wxgf")
    header_len = data[4]
    if header_len >= len(data):
        raise ValueError("invalid wxgf")

    for pattern in _START_CODES:
        found = Partitions()
        offset = 0
        while header_len + offset <= len(data):
            position = data.find(pattern, header_len + offset)
            if position == -1:
                break
            index = position - (header_len + offset)
            if position < 4:
                offset += index + 1
                continue
            (length,) = struct.unpack_from(">I", data, position - 4)
            if length <= 0 or position + length > len(data):
                offset += index + 1
                continue
            partition = Partition(position, length, length / len(data))
            found.partitions.append(partition)
            if partition.ratio > found.max_ratio:
                found.max_ratio = partition.ratio
                found.max_index = len(found.partitions) - 1
            offset += index + length
        if found.partitions:
            return found

    raise ValueError("no partition found")


def _ffmpeg_path() -> str:
    return os.environ.get(ENV_FFMPEG_PATH) or DEFAULT_FFMPEG


def _probe(path: str) -> bool:
    try:
        completed = subprocess.run(
            [path, "-version"],
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=False,
        )
    except OSError:
        return False
    return completed.returncode == 0


@functools.lru_cache(maxsize=None)
def _probe_cached(path: str) -> bool:
    return _probe(path)


def is_ffmpeg_available() -> bool:
    """Tell whether the configured ffmpeg executable runs."""
    return _probe(_ffmpeg_path())


def _ffmpeg_mode() -> bool:
    if os.environ.get(ENV_FFMPEG_PATH):
        return True
    return _probe_cached(_ffmpeg_path())


def _run_ffmpeg(args: Sequence[str], stdin: bytes | None = None) -> bytes:
    try:
        completed = subprocess.run(
            [_ffmpeg_path(), *args],
            input=stdin,
            stdout=subprocess.PIPE,
            stderr=subprocess.PIPE,
            check=False,
        )
    except OSError as exc:
        raise RuntimeError(f"ffmpeg failed: {exc}") from exc
    if completed.returncode != 0:
        raise RuntimeError(f"ffmpeg failed: exit status {completed.returncode}")
    if not completed.stdout:
        raise RuntimeError("ffmpeg output is empty")
    return completed.stdout


def convert_to_jpg(data: bytes) -> bytes:
    """Decode the first frame of a video stream into JPEG with ffmpeg."""
    return _run_ffmpeg(
        ["-i", "-", "-vframes", "1", "-c:v", "mjpeg", "-q:v", "4", "-f", "image2", "-"],
        stdin=bytes(data),
    )


def _write_temp_file(frames: Sequence[bytes]) -> str:
    handle, path = tempfile.mkstemp(prefix="anime-")
    try:
        with os.fdopen(handle, "wb") as stream:
            for frame in frames:
                stream.write(frame)
    except OSError:
        os.remove(path)
        raise
    return path


def convert_anime_to_gif(anime_frames: Sequence[bytes], mask_frames: Sequence[bytes]) -> bytes:
    """Merge colour frames with their alpha masks into a GIF with ffmpeg."""
    anime_path = _write_temp_file(anime_frames)
    try:
        mask_path = _write_temp_file(mask_frames)
        try:
            return _run_ffmpeg(
                ["-i", anime_path, "-i", mask_path, "-filter_complex", _GIF_FILTER, "-f", "gif", "-"]
            )
        finally:
            os.remove(mask_path)
    finally:
        os.remove(anime_path)


def wxam_to_pic(data: bytes) -> tuple[bytes, str]:
    """Turn a wxgf container into picture bytes and their file extension.

    Raises ValueError for malformed input and RuntimeError when ffmpeg is
    not available or fails.
    """
    data = bytes(data)
    if len(data) < 15 or data[:4] != WXGF_HEADER:
        raise ValueError("invalid wxgf")

    found = find_data_partition(data)
    if not _ffmpeg_mode():
        raise RuntimeError("ffmpeg is required to convert wxgf images")

    if found.like_anime():
        chunks = [data[p.offset:p.offset + p.size] for p in found.partitions]
        mask_frames = chunks[0::2]
        anime_frames = chunks[1::2]
        return convert_anime_to_gif(anime_frames, mask_frames), GIF_EXT

    largest = found.partitions[found.max_index]
    return convert_to_jpg(data[largest.offset:largest.offset + largest.size]), JPG_EXT