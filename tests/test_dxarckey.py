import random

import pytest

from uberwolf.dxarckey import calc_key, decrypt_game_dat, init_crypt
from uberwolf.rng import CryptData


def _game_dat(size=200, seed=5, key_len=10):
    data = bytearray(random.Random(seed).randbytes(size))
    data[7] = 0
    data[19] = key_len
    return bytes(data)


def test_init_crypt_sizes_and_seeds():
    data = _game_dat(131)
    cd = CryptData(game_dat_bytes=bytearray(data))
    init_crypt(cd)
    assert cd.data_size == 100
    assert all(0 <= b <= 0xFF for b in cd.key_bytes + cd.seed_bytes)
    assert bytes(cd.game_dat_bytes) == data


def test_init_crypt_depends_on_header():
    data = bytearray(_game_dat(131))
    first = CryptData(game_dat_bytes=bytearray(data))
    init_crypt(first)
    data[3] ^= 0xFF
    second = CryptData(game_dat_bytes=bytearray(data))
    init_crypt(second)
    assert first.key_bytes == second.key_bytes
    assert first.seed_bytes[0] != second.seed_bytes[0]
    assert first.seed_bytes[1:] == second.seed_bytes[1:]


def test_init_crypt_rejects_short_data():
    with pytest.raises(ValueError):
        init_crypt(CryptData(game_dat_bytes=bytearray(20)))


def test_decrypt_game_dat_layout():
    data = _game_dat(200)
    cd = decrypt_game_dat(data)
    assert cd.data_size == 169
    assert bytes(cd.game_dat_bytes[:30]) == data[:30]
    assert cd.game_dat_bytes[-1] == data[-1]
    assert bytes(cd.game_dat_bytes[30:-1]) != data[30:-1]


def test_decrypt_game_dat_round_trip():
    data = _game_dat(160, seed=9)
    once = bytes(decrypt_game_dat(data).game_dat_bytes)
    assert once != data
    twice = bytes(decrypt_game_dat(once).game_dat_bytes)
    assert twice == data


def test_calc_key_structure():
    data = _game_dat(200, key_len=10)
    cd = decrypt_game_dat(data)
    key = calc_key(data)
    assert len(key) == 10 + 1 + 4
    assert key[10] == 0
    assert list(key[11:]) == cd.key_bytes
    body = set(cd.game_dat_bytes[30:])
    assert all(b in body for b in key[:10])


def test_calc_key_empty_key_length():
    data = _game_dat(150, key_len=0)
    key = calc_key(data)
    assert key[0] == 0
    assert len(key) == 5