"""Recovery of the protection key stored in a 3.3 Game.dat file."""

from __future__ import annotations

from typing import Optional, Sequence

from .aes import aes_ctr_xcrypt, make_round_key
from .datadecrypt import GAME_DAT_SEED_INDICES, init_crypt_v33
from .keycrypt import aes_key_gen
from .rng import CryptData, RngData

ENCRYPTED_KEY_SIZE = 128
MIN_KEY_LEN = 4
_KEY_OFFSET = 0xF
_AES_DATA_OFFSET = 20


def validate_key(key: Sequence[int], tar_key: Sequence[int]) -> bool:
    """Tell whether ``key`` spread over 128 bytes gives ``tar_key``."""
    if not key:
        return False
    n = len(key)
    if n > ENCRYPTED_KEY_SIZE:
        raise ValueError("Key is too long")
    if len(tar_key) != ENCRYPTED_KEY_SIZE:
        raise ValueError(f"target key must hold {ENCRYPTED_KEY_SIZE} bytes")

    spread = bytes((i // n + key[i % n]) & 0xFF for i in range(ENCRYPTED_KEY_SIZE))
    return spread == bytes(tar_key)


def find_key(enc_key: Sequence[int]) -> Optional[bytes]:
    """Return the shortest prefix of ``enc_key`` that spreads to it, or None."""
    enc = bytes(enc_key)
    for length in range(MIN_KEY_LEN, ENCRYPTED_KEY_SIZE):
        candidate = enc[:length]
        if validate_key(candidate, enc):
            return candidate
    return None


def calc_prot_key(game_dat_bytes: Sequence[int]) -> Optional[bytes]:
    """Decrypt a Game.dat and extract its protection key, or None if absent."""
    if len(game_dat_bytes) < _KEY_OFFSET + ENCRYPTED_KEY_SIZE:
        raise ValueError(
            f"data must hold at least {_KEY_OFFSET + ENCRYPTED_KEY_SIZE} bytes"
        )

    cd = CryptData(game_dat_bytes=bytearray(game_dat_bytes))
    rd = RngData()
    init_crypt_v33(cd, GAME_DAT_SEED_INDICES)

    aes_key, aes_iv = aes_key_gen(cd, rd)
    aes_ctr_xcrypt(
        cd.game_dat_bytes, make_round_key(aes_key, aes_iv), _AES_DATA_OFFSET, cd.data_size
    )

    rd.reset()
    cd.seed_bytes = list(cd.key_bytes)
    aes_key, aes_iv = aes_key_gen(cd, rd)

    encrypted = bytearray(cd.game_dat_bytes[_KEY_OFFSET : _KEY_OFFSET + ENCRYPTED_KEY_SIZE])
    aes_ctr_xcrypt(encrypted, make_round_key(aes_key, aes_iv), 0, ENCRYPTED_KEY_SIZE)

    return find_key(encrypted)