"""Recovery of the DX archive key stored in a Game.dat file."""

from __future__ import annotations

from math import gcd
from typing import Sequence

from .aes import aes_ctr_xcrypt, make_round_key
from .keycrypt import aes_key_gen
from .rng import CryptData, RngData

_M32 = 0xFFFFFFFF

HEADER_SIZE = 31
_AES_DATA_OFFSET = 30


def init_crypt(cd: CryptData) -> None:
    """Derive key bytes and seeds from the size and header of the file."""
    gd = bytearray(cd.game_dat_bytes)
    if len(gd) < HEADER_SIZE:
        raise ValueError(f"data must hold at least {HEADER_SIZE} bytes")
    cd.game_dat_bytes = gd

    size = len(gd) - HEADER_SIZE
    cd.data_size = size

    size_div = size // 3
    val1 = (size_div + 71 + (size_div >> 31)) & _M32
    val2 = size ^ 0x70
    val3 = size % 1200 + 152
    val4 = (size + 2 * size + 85) & _M32

    cd.key_bytes = [
        (val4 ^ val1) & 0xFF,
        (val3 + val2) & 0xFF,
        (val2 - val4) & 0xFF,
        (val2 * val4) & 0xFF,
    ]
    cd.seed_bytes = [
        (val1 + gd[3]) & 0xFF,
        (val3 + gd[7]) & 0xFF,
        (val2 + gd[5]) & 0xFF,
        (val4 + gd[6]) & 0xFF,
    ]
    cd.seed1 = val1
    cd.seed2 = val3


def decrypt_game_dat(data: Sequence[int]) -> CryptData:
    """Decrypt the body of a Game.dat; the input is left untouched."""
    cd = CryptData(game_dat_bytes=bytearray(data))
    rd = RngData()
    init_crypt(cd)

    aes_key, aes_iv = aes_key_gen(cd, rd)
    round_key = make_round_key(aes_key, aes_iv)
    aes_ctr_xcrypt(cd.game_dat_bytes, round_key, _AES_DATA_OFFSET, cd.data_size)
    return cd


def calc_key(data: Sequence[int]) -> bytes:
    """Return the archive key: key bytes, a zero byte, then four salt bytes."""
    cd = decrypt_game_dat(data)
    gd = cd.game_dat_bytes
    size = cd.data_size
    if size <= 0:
        raise ValueError("data holds no encrypted body")

    k = gd[4] + ((gd[3] * gd[6]) & 0x3FF)
    while gcd(size, k) > 1:
        k += 1

    key_len = gd[19]
    key = bytearray(gd[(i * k) % size + _AES_DATA_OFFSET + gd[7]] for i in range(key_len))
    key.append(0)
    key.extend(cd.key_bytes)
    return bytes(key)