import pytest

from chatlog.xxhash64 import XXH64, xxh64


def test_empty_input_known_value():
    assert xxh64(b"").intdigest() == 0xEF46DB3751D8E999


def test_abc_known_value():
    assert xxh64(b"abc").intdigest() == 0x44BC2CF5AD770999


@pytest.mark.parametrize("length", [0, 1, 3, 4, 7, 8, 15, 31, 32, 33, 63, 64, 65, 100, 257])
@pytest.mark.parametrize("chunk", [1, 5, 13, 32])
def test_incremental_matches_one_shot(length, chunk):
    data = bytes((i * 31 + 7) % 256 for i in range(length))
    hasher = XXH64()
    for start in range(0, length, chunk):
        hasher.update(data[start:start + chunk])
    assert hasher.intdigest() == xxh64(data).intdigest()


def test_hexdigest_is_unpadded_hex_of_int():
    for data in (b"", b"abc", b"x" * 40, bytes(range(100))):
        hasher = xxh64(data)
        assert hasher.hexdigest() == format(hasher.intdigest(), "x")
        assert int(hasher.hexdigest(), 16) == hasher.intdigest()


def test_digest_fits_in_64_bits():
    for size in range(0, 80):
        assert 0 <= xxh64(b"\xff" * size).intdigest() < 2**64


def test_digest_does_not_consume_state():
    hasher = XXH64()
    hasher.update(b"hello ")
    first = hasher.intdigest()
    assert hasher.intdigest() == first
    hasher.update(b"world")
    assert hasher.intdigest() == xxh64(b"hello world").intdigest()


def test_different_inputs_differ():
    assert xxh64(b"/tmp/a.db").intdigest() != xxh64(b"/tmp/b.db").intdigest()


def test_seed_changes_result():
    seeded = XXH64(seed=1)
    seeded.update(b"abc")
    assert seeded.intdigest() != xxh64(b"abc").intdigest()


def test_accepts_bytearray_and_memoryview():
    expected = xxh64(b"some data here").intdigest()
    assert xxh64(bytearray(b"some data here")).intdigest() == expected
    assert xxh64(memoryview(b"some data here")).intdigest() == expected


def test_str_is_rejected():
    with pytest.raises(TypeError):
        xxh64("text")