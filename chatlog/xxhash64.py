"""The 64-bit xxHash (XXH64) in pure Python."""

from __future__ import annotations

import struct

_MASK = 0xFFFFFFFFFFFFFFFF
_P1 = 11400714785074694791
_P2 = 14029467366897019727
_P3 = 1609587929392839161
_P4 = 9650029242287828579
_P5 = 2870177450012600261

_STRIPE = 32
_STRIPE_WORDS = struct.Struct("<4Q")
_WORD = struct.Struct("<Q")
_HALF = struct.Struct("<I")


def _rotl(value: int, bits: int) -> int:
    return ((value << bits) | (value >> (64 - bits))) & _MASK


def _round(acc: int, lane: int) -> int:
    acc = (acc + lane * _P2) & _MASK
    acc = _rotl(acc, 31)
    return (acc * _P1) & _MASK


def _merge(acc: int, lane: int) -> int:
    acc ^= _round(0, lane)
    return (acc * _P1 + _P4) & _MASK


class XXH64:
    """Incremental XXH64 hasher."""

    def __init__(self, seed: int = 0) -> None:
        self._seed = seed & _MASK
        self._v1 = (self._seed + _P1 + _P2) & _MASK
        self._v2 = (self._seed + _P2) & _MASK
        self._v3 = self._seed
        self._v4 = (self._seed - _P1) & _MASK
        self._total = 0
        self._pending = b""

    def update(self, data: bytes | bytearray | memoryview) -> None:
        """Feed more bytes to the hash."""
        if isinstance(data, str):
            raise TypeError("XXH64 hashes bytes, not str")
        chunk = bytes(data)
        self._total += len(chunk)
        buffer = self._pending + chunk
        full = len(buffer) - len(buffer) % _STRIPE
        v1, v2, v3, v4 = self._v1, self._v2, self._v3, self._v4
        for offset in range(0, full, _STRIPE):
            a, b, c, d = _STRIPE_WORDS.unpack_from(buffer, offset)
            v1 = _round(v1, a)
            v2 = _round(v2, b)
            v3 = _round(v3, c)
            v4 = _round(v4, d)
        self._v1, self._v2, self._v3, self._v4 = v1, v2, v3, v4
        self._pending = buffer[full:]

    def intdigest(self) -> int:
        """Return the hash of everything fed so far as an unsigned integer."""
        if self._total >= _STRIPE:
            h = (
                _rotl(self._v1, 1)
                + _rotl(self._v2, 7)
                + _rotl(self._v3, 12)
                + _rotl(self._v4, 18)
            ) & _MASK
            for lane in (self._v1, self._v2, self._v3, self._v4):
                h = _merge(h, lane)
        else:
            h = (self._seed + _P5) & _MASK
        h = (h + self._total) & _MASK

        tail = self._pending
        pos = 0
        while pos + 8 <= len(tail):
            (word,) = _WORD.unpack_from(tail, pos)
            h ^= _round(0, word)
            h = (_rotl(h, 27) * _P1 + _P4) & _MASK
            pos += 8
        if pos + 4 <= len(tail):
            (half,) = _HALF.unpack_from(tail, pos)
            h ^= (half * _P1) & _MASK
            h = (_rotl(h, 23) * _P2 + _P3) & _MASK
            pos += 4
        for byte in tail[pos:]:
            h ^= (byte * _P5) & _MASK
            h = (_rotl(h, 11) * _P1) & _MASK

        h ^= h >> 33
        h = (h * _P2) & _MASK
        h ^= h >> 29
        h = (h * _P3) & _MASK
        h ^= h >> 32
        return h

    def hexdigest(self) -> str:
        """Return the hash in lower-case hex, without leading zeros."""
        return f"{self.intdigest():x}"


def xxh64(data: bytes | bytearray | memoryview) -> XXH64:
    """Return a hasher already fed with data."""
    hasher = XXH64()
    hasher.update(data)
    return hasher