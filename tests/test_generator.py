import pytest

from uberwolf.wolfx.generator import fnv1, generate_decrypt_blob, generate_static_blob


def test_fnv1_empty_is_offset_basis():
    assert fnv1(b"") == 0x811C9DC5


def test_fnv1_known_value():
    assert fnv1(b"a") == 0xE40C292C


def test_fnv1_string_matches_bytes():
    assert fnv1("testkey") == fnv1(b"testkey")
    assert fnv1([0x74, 0x65, 0x73, 0x74]) == fnv1(b"test")


def test_fnv1_fits_32_bits():
    assert 0 <= fnv1(bytes(range(256)) * 4) <= 0xFFFFFFFF


def test_static_blob_shape():
    blob = generate_static_blob(b"testkey")
    assert len(blob) == 64
    assert 0 not in blob


def test_static_blob_empty_key_has_no_zero():
    blob = generate_static_blob()
    assert len(blob) == 64
    assert 0 not in blob
    assert blob == generate_static_blob(b"")


def test_static_blob_deterministic_and_key_sensitive():
    assert generate_static_blob("testkey") == generate_static_blob(b"testkey")
    assert generate_static_blob(b"testkey") != generate_static_blob(b"testkez")


@pytest.mark.parametrize("length", [1, 63, 64, 65, 130])
def test_static_blob_long_keys(length):
    blob = generate_static_blob(bytes((i * 7) & 0xFF for i in range(length)))
    assert len(blob) == 64
    assert 0 not in blob


def test_decrypt_blob_first_byte_from_lcg_increment():
    blob = generate_decrypt_blob(0, bytes(64), 0)
    assert len(blob) == 256
    assert blob[0] == 0x5F


def test_decrypt_blob_static_bytes_fold_by_xor():
    cancelling = bytes([0x5A] * 64)
    assert generate_decrypt_blob(1234, cancelling, 0) == generate_decrypt_blob(1234, bytes(64), 0)


def test_decrypt_blob_depends_on_seed():
    static = generate_static_blob(b"testkey")
    assert generate_decrypt_blob(1, static, 100) != generate_decrypt_blob(2, static, 100)
    assert generate_decrypt_blob(1, static, 100) == generate_decrypt_blob(1, static, 5000)