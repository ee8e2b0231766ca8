import random

import pytest

from uberwolf.datadecrypt import (
    NotProtectedError,
    WolfFileType,
    decrypt_data_v2,
    decrypt_data_v33,
    decrypt_data_v35,
    decrypt_pro_v3p1,
    init_crypt_v33,
    rng_decrypt_v33,
)
from uberwolf.rng import MT19937, CryptData, gen_mt_seed


def _random_bytes(size, seed=7):
    return random.Random(seed).randbytes(size)


def _protected(size, seed=11):
    data = bytearray(_random_bytes(size, seed))
    data[1] = 0x50
    data[5] = 0x57
    return data


def test_decrypt_data_v2_round_trip():
    original = _random_bytes(300)
    data = bytearray(original)
    decrypt_data_v2(data, [12, 34, 56])
    decrypt_data_v2(data, [12, 34, 56])
    assert bytes(data) == original


def test_decrypt_data_v2_changes_only_low_bits():
    original = _random_bytes(100)
    data = bytearray(original)
    decrypt_data_v2(data, [99])
    assert all((a ^ b) < 8 for a, b in zip(data, original))


def test_decrypt_data_v2_rejects_too_many_seeds():
    with pytest.raises(ValueError):
        decrypt_data_v2(bytearray(10), [1, 2, 3, 4])


def test_rng_decrypt_v33_keeps_header_and_round_trips():
    original = _random_bytes(400)
    data = bytearray(original)
    rng_decrypt_v33(data, 1234)
    assert bytes(data[:10]) == original[:10]
    mt = MT19937(1234)
    table = [mt.next() for _ in range(128)]
    assert data[10] ^ original[10] == table[10] & 0xFF
    assert data[300] ^ original[300] == table[300 % 128] & 0xFF
    rng_decrypt_v33(data, 1234)
    assert bytes(data) == original


def test_init_crypt_v33_derives_seeds():
    cd = CryptData(game_dat_bytes=bytearray(_random_bytes(100)))
    init_crypt_v33(cd, (0, 8, 6))
    assert cd.data_size == 80
    assert cd.key_bytes == list(cd.game_dat_bytes[11:15])
    assert cd.seed1 == cd.seed2 == cd.key_bytes[1] ^ cd.key_bytes[2]
    assert cd.seed_bytes[1] == cd.key_bytes[1] ^ cd.key_bytes[2]


def test_init_crypt_v33_caps_data_size():
    cd = CryptData(game_dat_bytes=bytearray(_random_bytes(1000)))
    init_crypt_v33(cd, (0, 3, 9))
    assert cd.data_size == 326


def test_init_crypt_v33_rejects_short_data():
    with pytest.raises(ValueError):
        init_crypt_v33(CryptData(game_dat_bytes=bytearray(15)), (0, 8, 6))


def test_decrypt_data_v33_layout():
    original = _random_bytes(400)
    cd = decrypt_data_v33(original, (0, 8, 6))
    assert len(cd.game_dat_bytes) == 400
    assert bytes(cd.game_dat_bytes[:10]) == original[:10]

    outer = bytearray(original)
    rng_decrypt_v33(outer, gen_mt_seed([original[0], original[8], original[6]]))
    assert bytes(cd.game_dat_bytes[:20]) == bytes(outer[:20])
    assert bytes(cd.game_dat_bytes[346:]) == bytes(outer[346:])
    assert bytes(cd.game_dat_bytes[20:346]) != bytes(outer[20:346])


def test_decrypt_pro_v3p1_round_trip():
    original = _random_bytes(256, seed=3)
    data = bytearray(original)
    decrypt_pro_v3p1(data, (0, 3, 9))
    assert bytes(data[:10]) == original[:10]
    assert bytes(data) != original
    decrypt_pro_v3p1(data, (0, 3, 9))
    assert bytes(data) == original


def test_decrypt_data_v35_replaces_header():
    buffer = _protected(300)
    decrypt_data_v35(buffer, WolfFileType.DATABASE)
    assert len(buffer) == 300 - 143 + 10
    assert bytes(buffer[:10]) == bytes(
        [0x00, 0x57, 0x00, 0x00, 0x4F, 0x4C, 0x55, 0x46, 0x4D, 0x00]
    )


def test_decrypt_data_v35_game_dat_header():
    buffer = _protected(250)
    decrypt_data_v35(buffer, WolfFileType.GAME_DAT)
    assert bytes(buffer[:10]) == bytes(
        [0x00, 0x57, 0x00, 0x00, 0x4F, 0x4C, 0x00, 0x46, 0x4D, 0x55]
    )
    assert len(buffer) == 250 - 143 + 10


def test_decrypt_data_v35_is_deterministic():
    first = _protected(280)
    second = _protected(280)
    decrypt_data_v35(first, WolfFileType.COMMON_EVENT)
    decrypt_data_v35(second, WolfFileType.COMMON_EVENT)
    assert first == second


def test_decrypt_data_v35_rejects_small_buffer():
    with pytest.raises(ValueError):
        decrypt_data_v35(_protected(100), WolfFileType.DATABASE)


def test_decrypt_data_v35_rejects_unprotected():
    buffer = _protected(300)
    buffer[1] = 0x00
    with pytest.raises(NotProtectedError):
        decrypt_data_v35(buffer, WolfFileType.DATABASE)


def test_decrypt_data_v35_rejects_unsupported_type():
    with pytest.raises(ValueError):
        decrypt_data_v35(_protected(300), WolfFileType.PROJECT)