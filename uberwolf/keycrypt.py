"""Key derivation and XOR ciphers for Wolf RPG archives and data files."""

from __future__ import annotations

import struct
from typing import MutableSequence, Optional, Sequence, Tuple, Union

from .aes import IV_SIZE, KEY_SIZE
from .rng import (
    CryptData,
    MsvcRandom,
    RngData,
    a_lot_of_rng_stuff,
    is_v35,
    run_rng_chain,
)

_M32 = 0xFFFFFFFF
KEY_LEN = 768
_ADDRESS_BLOCK_SIZE = 40


def _rotr8(value: int, shift: int) -> int:
    value &= 0xFF
    return ((value >> shift) | (value << (8 - shift))) & 0xFF


def wolf_crypt(
    key: Sequence[int],
    data: MutableSequence[int],
    start: int,
    end: int,
    crypt_version: int,
) -> None:
    """XOR ``data[start:end]`` in place with the table keystream."""
    if end <= start:
        return
    if start < 0 or end > len(data):
        raise ValueError("range lies outside the data")

    v1 = start % 256
    v2 = start // 256 % 256

    if is_v35(crypt_version):
        if len(key) < 256:
            raise ValueError("key must hold at least 256 bytes")
        modded = [(key[i % 256] ^ (7 * i)) & 0xFF for i in range(512)]
        for pos in range(start, end):
            data[pos] ^= modded[v1] ^ modded[v2 + 256]
            v1 += 1
            if v1 == 256:
                v1 = 0
                v2 = (v2 + 1) % 256
    else:
        if len(key) < KEY_LEN:
            raise ValueError(f"key must hold at least {KEY_LEN} bytes")
        v3 = start // 0x10000 % 256
        for pos in range(start, end):
            data[pos] ^= key[v1] ^ key[v2 + 256] ^ key[v3 + 512]
            v1 += 1
            if v1 == 256:
                v1 = 0
                v2 += 1
                if v2 == 256:
                    v2 = 0
                    v3 = (v3 + 1) % 256


def calc_salt(text: Union[str, bytes]) -> bytes:
    """Spread a string over a 128-byte salt."""
    raw = text.encode("utf-8") if isinstance(text, str) else bytes(text)
    if not raw:
        raise ValueError("salt text must not be empty")
    n = len(raw)
    return bytes(((i // n) + raw[i % n]) & 0xFF for i in range(128))


def xorshift32(state: int) -> int:
    """Return the state following ``state`` in the 11/19/7 xorshift."""
    state &= _M32
    state ^= (state << 0xB) & _M32
    state ^= state >> 0x13
    state ^= (state << 0x7) & _M32
    return state


def init_wolf_crypt(
    crypt_version: int,
    pw: Sequence[int],
    key2: Optional[Sequence[int]] = None,
    data: Optional[MutableSequence[int]] = None,
    start: int = -1,
    end: int = -1,
    other: bool = False,
    key_string: Optional[Union[str, bytes]] = None,
) -> bytearray:
    """Build the 768-byte key table from a 15-byte password.

    With ``other`` set the table is further salted and ``data[start:end]``
    is decrypted in place with it.
    """
    if len(pw) < 15:
        raise ValueError("password must hold at least 15 bytes")
    if key2 is not None and len(key2) < 3:
        raise ValueError("second key must hold at least 3 bytes")

    pw = [b & 0xFF for b in pw]
    s0, s1, s2 = pw[2], pw[5], pw[12]
    s3 = 0

    if not other:
        for i in range(pw[11] // 3):
            s3 = (i ^ _rotr8(s3 ^ pw[i % 15], 3)) & 0xFF
    else:
        for i in range(pw[8] // 4):
            s3 = (i ^ _rotr8(s3 ^ pw[i % 15], 2)) & 0xFF

    rng = MsvcRandom((s0 * s1 + s2 + s3) & _M32)

    fac = [0, 0, 0]
    fac[s3 % 3] = rng.rand() % 256
    if not other and is_v35(crypt_version):
        fac[1] = rng.rand() % 0xFB

    key = bytearray(KEY_LEN)
    for i in range(256):
        rn = rng.rand() & 0xFFFF
        key[i] = (fac[0] ^ rng.rand()) & 0xFF
        key[i + 256] = (fac[1] ^ (rn >> 8)) & 0xFF
        key[i + 512] = (fac[2] ^ rn) & 0xFF

    if key2 is not None:
        for j in range(128):
            rn = rng.rand() & 0xFFFF
            key[j] ^= (s3 ^ key2[2] ^ (rn >> 8)) & 0xFF
            key[j + 256] ^= (s3 ^ key2[0] ^ rn) & 0xFF

    if other:
        if crypt_version == 0x15E:
            salt = calc_salt("958")
        elif key_string is None:
            raise ValueError("a key string is required for this crypt version")
        else:
            salt = calc_salt(key_string)

        mod_factor = 7
        if is_v35(crypt_version):
            s3 = (s3 + 0x22) & 0xFF
            mod_factor = 16

        legacy = crypt_version < 0x154 or 0x3E8 < crypt_version < 0x3FC
        modern = crypt_version >= 0x3FC

        for i in range(3):
            t = s3
            for j in range(256):
                skip = False
                cur_s = salt[j & 0x7F]
                cur_s2 = salt[(j + i) % 0x80]
                cur_k = key[i * 256 + j]
                s_xk = cur_s ^ cur_k
                rnd = ((cur_s2 | (cur_s << 8)) % mod_factor) & 0xFF
                new_k = s_xk

                if rnd == 1:
                    if cur_s2 % 0xB == 0:
                        new_k = cur_k
                elif rnd == 2:
                    if cur_s % 0x1D == 0:
                        new_k = ~s_xk & 0xFF
                elif rnd == 3:
                    if (rnd + j) % 0x25 == 0:
                        new_k = cur_s2 ^ s_xk
                elif rnd == 4:
                    if (cur_s + cur_s2) % 97 == 0:
                        new_k = (cur_s + s_xk) & 0xFF
                elif rnd == 5:
                    if (j * rnd) % 0x7B == 0:
                        new_k = (s_xk ^ t) & 0xFF
                elif rnd == 6:
                    if cur_s == 0xFF and cur_s2 == 0:
                        new_k = 0
                        skip = True
                elif rnd == 7:
                    if not legacy and ((rnd + j) % 0x33 == 0 or modern):
                        new_k ^= cur_s
                elif rnd == 8:
                    if not legacy and (cur_s % 0x1D == 0 or modern):
                        new_k ^= cur_s

                if (j + i) % (cur_s % 5 + 1) == 0:
                    new_k = (new_k ^ t) & 0xFF
                elif skip:
                    new_k = ~s_xk & 0xFF

                key[i * 256 + j] = new_k
                t += i

        if data is not None:
            wolf_crypt(key, data, start, end, crypt_version)
        elif end > start:
            raise ValueError("no data given to decrypt")

    return key


def _xor_u16(data: bytearray, word: int, value: int) -> None:
    offset = word * 2
    (current,) = struct.unpack_from("<H", data, offset)
    struct.pack_into("<H", data, offset, current ^ (value & 0xFFFF))


def _xor_u32(data: bytearray, offset: int, value: int) -> None:
    (current,) = struct.unpack_from("<I", data, offset)
    struct.pack_into("<I", data, offset, current ^ (value & _M32))


def crypt_addresses(data: bytearray, key: Sequence[int], crypt_version: int) -> None:
    """XOR the address fields (bytes 8 to 40) of an archive header in place."""
    if len(data) < _ADDRESS_BLOCK_SIZE:
        raise ValueError(f"data must hold at least {_ADDRESS_BLOCK_SIZE} bytes")

    if is_v35(crypt_version):
        rng = MsvcRandom((0xC + (key[9] & 0xFF) * (key[10] & 0xFF) + (key[3] & 0xFF)) & _M32)
        for base in (4, 8):
            for j in range(3, -1, -1):
                _xor_u16(data, base + j, rng.rand())

        r0 = rng.rand() << 17
        r1 = rng.rand() << 31
        v0 = (r0 & _M32) | (r1 & _M32) | rng.rand()
        v1 = (r0 >> 32) | (r1 >> 32)
        _xor_u32(data, 24, v0)
        _xor_u32(data, 28, v1)

        for j in range(3, -1, -1):
            _xor_u16(data, 16 + j, rng.rand())
    else:
        rng = MsvcRandom(((key[0] & 0xFF) + (key[7] & 0xFF) * (key[12] & 0xFF)) & _M32)
        for base in (4, 8, 12, 16):
            for j in range(3, -1, -1):
                _xor_u16(data, base + j, rng.rand())


def aes_key_gen(cd: CryptData, rd: RngData) -> Tuple[bytes, bytes]:
    """Derive an AES key and IV from the seed bytes of ``cd``."""
    seeds = [b & 0xFF for b in cd.seed_bytes]
    run_rng_chain(rd, seeds[0], seeds[1])

    length = RngData.DATA_VEC_LEN
    crypt_data = [0] * length
    for i in range(length):
        a_lot_of_rng_stuff(rd, i + seeds[3], seeds[2] - i, i, crypt_data)

    rng = MsvcRandom(seeds[1] ^ seeds[2])
    indexes = list(range(length))
    for i in range(length):
        target = rng.rand() % length
        indexes[i], indexes[target] = indexes[target], indexes[i]

    shuffled = bytes(crypt_data[idx] & 0xFF for idx in indexes)
    return shuffled[:KEY_SIZE], shuffled[KEY_SIZE : KEY_SIZE + IV_SIZE]