"""Decryption of protected Wolf RPG data files (Game.dat, databases, ...)."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, auto
from typing import Dict, MutableSequence, Sequence

from .aes import IV_SIZE, KEY_SIZE, aes_ctr_xcrypt, make_round_key
from .keycrypt import aes_key_gen, xorshift32
from .rng import MT19937, CryptData, MsvcRandom, RngData, gen_mt_seed
from .sha512 import calc_dyn_salt, hash_hex, salt_password

_M32 = 0xFFFFFFFF

_DECRYPT_INTERVALS = (1, 2, 5)
_NUM_RNDS = 128
_V33_AES_DATA_OFFSET = 20
_V33_MAX_DATA_SIZE = 326

_KEY_START_OFFSET = 12
_IV_START_OFFSET = 73
_AES_DATA_OFFSET = 20
PRO_SPECIAL_SIZE = 143  # 15 byte header + 128 byte hash

GAME_DAT_SEED_INDICES = (0, 8, 6)
DEFAULT_SEED_INDICES = (0, 3, 9)


class NotProtectedError(ValueError):
    """Raised when a file does not carry the expected protection header."""


class WolfFileType(Enum):
    """Kinds of Wolf RPG data files."""

    NONE = auto()
    GAME_DAT = auto()
    COMMON_EVENT = auto()
    DATABASE = auto()
    TILESET_DATA = auto()
    PROJECT = auto()
    MAP = auto()


@dataclass(frozen=True)
class ProMagic:
    """Static salt and replacement header for one protected file type."""

    static_salt: str
    magic_bytes: bytes


PRO_MAGIC: Dict[WolfFileType, ProMagic] = {
    WolfFileType.GAME_DAT: ProMagic(
        "basicD1", bytes((0x00, 0x57, 0x00, 0x00, 0x4F, 0x4C, 0x00, 0x46, 0x4D, 0x55))
    ),
    WolfFileType.COMMON_EVENT: ProMagic(
        "Commo2", bytes((0x00, 0x57, 0x00, 0x00, 0x4F, 0x4C, 0x55, 0x46, 0x43, 0x00))
    ),
    WolfFileType.DATABASE: ProMagic(
        "DBase4", bytes((0x00, 0x57, 0x00, 0x00, 0x4F, 0x4C, 0x55, 0x46, 0x4D, 0x00))
    ),
    WolfFileType.TILESET_DATA: ProMagic(
        "TilesetA", bytes((0x00, 0x57, 0x00, 0x00, 0x4F, 0x4C, 0x55, 0x46, 0x4D, 0x00))
    ),
    WolfFileType.NONE: ProMagic("", b""),
}


def _to_i32(value: int) -> int:
    value &= _M32
    return value - (1 << 32) if value & 0x80000000 else value


def _c_mod(value: int, divisor: int) -> int:
    remainder = abs(value) % divisor
    return -remainder if value < 0 else remainder


def decrypt_data_v2(data: MutableSequence[int], seeds: Sequence[int]) -> None:
    """Undo the 2.x stride cipher in place, one pass per seed."""
    if len(seeds) > len(_DECRYPT_INTERVALS):
        raise ValueError(f"at most {len(_DECRYPT_INTERVALS)} seeds are supported")
    for seed, interval in zip(seeds, _DECRYPT_INTERVALS):
        rng = MsvcRandom(seed)
        for j in range(0, len(data), interval):
            data[j] ^= (rng.rand() >> 12) & 0xFF


def rng_decrypt_v33(data: MutableSequence[int], seed: int) -> None:
    """XOR everything from byte 10 on with a Mersenne Twister table."""
    mt = MT19937(seed)
    rnds = [mt.next() & 0xFF for _ in range(_NUM_RNDS)]
    for i in range(0xA, len(data)):
        data[i] ^= rnds[i % _NUM_RNDS]


def init_crypt_v33(cd: CryptData, seed_indices: Sequence[int]) -> None:
    """Strip the outer layer of ``cd.game_dat_bytes`` and derive the seeds."""
    gd = bytearray(cd.game_dat_bytes)
    if len(gd) < _V33_AES_DATA_OFFSET:
        raise ValueError(f"data must hold at least {_V33_AES_DATA_OFFSET} bytes")
    cd.game_dat_bytes = gd
    cd.data_size = min(len(gd) - _V33_AES_DATA_OFFSET, _V33_MAX_DATA_SIZE)

    rng_decrypt_v33(gd, gen_mt_seed([gd[idx] for idx in seed_indices]))

    k = list(gd[0xB:0xF])
    cd.key_bytes = k
    cd.seed_bytes = [
        (gd[7] + 3 * k[0]) & 0xFF,
        k[1] ^ k[2],
        k[3] ^ gd[7],
        (k[2] + gd[7] - k[0]) & 0xFF,
    ]

    seed = k[1] ^ k[2]
    cd.seed1 = seed
    cd.seed2 = seed


def decrypt_data_v33(data: Sequence[int], seed_indices: Sequence[int]) -> CryptData:
    """Decrypt a 3.3 data file; the input is left untouched."""
    cd = CryptData(game_dat_bytes=bytearray(data))
    rd = RngData()
    init_crypt_v33(cd, seed_indices)

    aes_key, aes_iv = aes_key_gen(cd, rd)
    round_key = make_round_key(aes_key, aes_iv)
    aes_ctr_xcrypt(cd.game_dat_bytes, round_key, _V33_AES_DATA_OFFSET, cd.data_size)
    return cd


def decrypt_pro_v3p1(data: MutableSequence[int], seed_idx: Sequence[int]) -> None:
    """Undo the xorshift layer of the 3.5 protection in place."""
    seed = (0xB << 24) | (data[seed_idx[0]] << 16) | (data[seed_idx[1]] << 8) | data[seed_idx[2]]
    rn = _to_i32(xorshift32(seed))

    for i in range(0xA, len(data)):
        shifted = _to_i32(rn << 0xF)
        v1 = _to_i32(((shifted ^ rn) >> 0x15) ^ shifted ^ rn)
        rn = _to_i32(_to_i32(v1 << 0x9) ^ v1)
        data[i] ^= _c_mod(rn, 0xF9) & 0xFF


def decrypt_data_v35(buffer: bytearray, dat_type: WolfFileType) -> None:
    """Decrypt a 3.5 protected file in place and restore its plain header."""
    if len(buffer) < PRO_SPECIAL_SIZE:
        raise ValueError("Buffer is empty or too small")
    if buffer[1] != 0x50 or buffer[5] < 0x57:
        raise NotProtectedError("File is not protected or not a ProV3 file")
    if dat_type not in PRO_MAGIC:
        raise ValueError(f"unsupported file type: {dat_type}")

    seed_idx = GAME_DAT_SEED_INDICES if dat_type is WolfFileType.GAME_DAT else DEFAULT_SEED_INDICES
    decrypt_pro_v3p1(buffer, seed_idx)

    rng = MsvcRandom(buffer[12])
    aes_size = len(buffer) - _AES_DATA_OFFSET
    if aes_size >= rng.rand() % 126 + 200:
        aes_size = min(aes_size, rng.rand() % 126 + 200)

    pro_magic = PRO_MAGIC[dat_type]
    salted = salt_password(b"", calc_dyn_salt(buffer), pro_magic.static_salt)
    hash_string = hash_hex(salted).encode("ascii")

    aes_key = hash_string[_KEY_START_OFFSET : _KEY_START_OFFSET + KEY_SIZE]
    aes_iv = hash_string[_IV_START_OFFSET : _IV_START_OFFSET + IV_SIZE]
    round_key = make_round_key(aes_key, aes_iv)

    aes_ctr_xcrypt(buffer, round_key, _AES_DATA_OFFSET, aes_size)

    buffer[:PRO_SPECIAL_SIZE] = pro_magic.magic_bytes