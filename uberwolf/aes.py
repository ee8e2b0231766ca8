"""AES-128 in CTR mode with the Wolf RPG variant of the key schedule."""

from __future__ import annotations

from typing import Optional, Sequence

from .rng import is_v35

SBOX = (
    0x63, 0x7C, 0x77, 0x7B, 0xF2, 0x6B, 0x6F, 0xC5, 0x30, 0x01, 0x67, 0x2B, 0xFE, 0xD7, 0xAB, 0x76,
    0xCA, 0x82, 0xC9, 0x7D, 0xFA, 0x59, 0x47, 0xF0, 0xAD, 0xD4, 0xA2, 0xAF, 0x9C, 0xA4, 0x72, 0xC0,
    0xB7, 0xFD, 0x93, 0x26, 0x36, 0x3F, 0xF7, 0xCC, 0x34, 0xA5, 0xE5, 0xF1, 0x71, 0xD8, 0x31, 0x15,
    0x04, 0xC7, 0x23, 0xC3, 0x18, 0x96, 0x05, 0x9A, 0x07, 0x12, 0x80, 0xE2, 0xEB, 0x27, 0xB2, 0x75,
    0x09, 0x83, 0x2C, 0x1A, 0x1B, 0x6E, 0x5A, 0xA0, 0x52, 0x3B, 0xD6, 0xB3, 0x29, 0xE3, 0x2F, 0x84,
    0x53, 0xD1, 0x00, 0xED, 0x20, 0xFC, 0xB1, 0x5B, 0x6A, 0xCB, 0xBE, 0x39, 0x4A, 0x4C, 0x58, 0xCF,
    0xD0, 0xEF, 0xAA, 0xFB, 0x43, 0x4D, 0x33, 0x85, 0x45, 0xF9, 0x02, 0x7F, 0x50, 0x3C, 0x9F, 0xA8,
    0x51, 0xA3, 0x40, 0x8F, 0x92, 0x9D, 0x38, 0xF5, 0xBC, 0xB6, 0xDA, 0x21, 0x10, 0xFF, 0xF3, 0xD2,
    0xCD, 0x0C, 0x13, 0xEC, 0x5F, 0x97, 0x44, 0x17, 0xC4, 0xA7, 0x7E, 0x3D, 0x64, 0x5D, 0x19, 0x73,
    0x60, 0x81, 0x4F, 0xDC, 0x22, 0x2A, 0x90, 0x88, 0x46, 0xEE, 0xB8, 0x14, 0xDE, 0x5E, 0x0B, 0xDB,
    0xE0, 0x32, 0x3A, 0x0A, 0x49, 0x06, 0x24, 0x5C, 0xC2, 0xD3, 0xAC, 0x62, 0x91, 0x95, 0xE4, 0x79,
    0xE7, 0xC8, 0x37, 0x6D, 0x8D, 0xD5, 0x4E, 0xA9, 0x6C, 0x56, 0xF4, 0xEA, 0x65, 0x7A, 0xAE, 0x08,
    0xBA, 0x78, 0x25, 0x2E, 0x1C, 0xA6, 0xB4, 0xC6, 0xE8, 0xDD, 0x74, 0x1F, 0x4B, 0xBD, 0x8B, 0x8A,
    0x70, 0x3E, 0xB5, 0x66, 0x48, 0x03, 0xF6, 0x0E, 0x61, 0x35, 0x57, 0xB9, 0x86, 0xC1, 0x1D, 0x9E,
    0xE1, 0xF8, 0x98, 0x11, 0x69, 0xD9, 0x8E, 0x94, 0x9B, 0x1E, 0x87, 0xE9, 0xCE, 0x55, 0x28, 0xDF,
    0x8C, 0xA1, 0x89, 0x0D, 0xBF, 0xE6, 0x42, 0x68, 0x41, 0x99, 0x2D, 0x0F, 0xB0, 0x54, 0xBB, 0x16,
)

RCON = (0x8D, 0x01, 0x02, 0x04, 0x08, 0x10, 0x20, 0x40, 0x80, 0x1B, 0x36)

NK = 4
NB = 4
NR = 10

KEY_EXP_SIZE = 176
KEY_SIZE = 16
IV_SIZE = 16
BLOCK_LEN = 16
ROUND_KEY_SIZE = KEY_EXP_SIZE + IV_SIZE
PW_SIZE = 15

_COUNTER_MASK = (1 << (8 * BLOCK_LEN)) - 1


def _rotr8(value: int, shift: int) -> int:
    return ((value >> shift) | (value << (8 - shift))) & 0xFF


def key_expansion(key: bytes) -> bytes:
    """Expand a 16-byte key into the 176-byte schedule (Wolf variant)."""
    if len(key) != KEY_SIZE:
        raise ValueError(f"key must be {KEY_SIZE} bytes, got {len(key)}")

    schedule = bytearray(KEY_EXP_SIZE)
    schedule[:KEY_SIZE] = key

    for i in range(NK, NB * (NR + 1)):
        temp = schedule[(i - 1) * 4 : i * 4]
        if i % NK == 0:
            b0, b1, b2, b3 = temp[1], temp[2], temp[3], temp[0]
            temp = bytearray(
                (
                    SBOX[b0] ^ RCON[i // NK],
                    SBOX[b1] >> 4,
                    ~SBOX[b2] & 0xFF,
                    _rotr8(SBOX[b3], 7),
                )
            )
        base = (i - NK) * 4
        schedule[i * 4 : i * 4 + 4] = bytes(
            a ^ b for a, b in zip(schedule[base : base + 4], temp)
        )

    return bytes(schedule)


def make_round_key(key: bytes, iv: bytes) -> bytes:
    """Return the expanded key followed by the 16-byte IV."""
    if len(iv) != IV_SIZE:
        raise ValueError(f"iv must be {IV_SIZE} bytes, got {len(iv)}")
    return key_expansion(key) + bytes(iv)


def init_aes128(
    pwd: Sequence[int], pro_key: Optional[Sequence[int]], crypt_version: int
) -> bytes:
    """Derive a round key (schedule plus IV) from a password and a pro key."""
    if len(pwd) < PW_SIZE:
        raise ValueError(f"password must hold at least {PW_SIZE} bytes")
    pk = [0, 0, 0, 0] if pro_key is None else list(pro_key)
    if len(pk) < 4:
        raise ValueError("pro key must hold at least 4 bytes")

    key = bytearray(KEY_SIZE)
    iv = bytearray(IV_SIZE)

    if is_v35(crypt_version):
        for i in range(PW_SIZE):
            elem = pk[i % 4]
            idx_key = ((i * (elem % 5 + 7)) ^ (3 * pwd[i])) % PW_SIZE
            idx_iv = ((i * ((pk[(i + 1) % 4] % 7) + 0xB)) ^ (5 * pwd[(i + 3) % 15])) % PW_SIZE

            key[i] ^= (((i ^ elem) + (pwd[idx_key] << (i % 3))) % 0xFB) & 0xFF
            iv[i] ^= (((pwd[idx_iv] >> (i % 2)) + ((i * i) ^ pk[(i + 2) % 4])) % 0xF6) & 0xFF

            key[PW_SIZE] ^= (7 * (pwd[i] + ((i + 1) ^ elem)) % 0xFD) & 0xFF
            diff = (pwd[i] - ((i * 2) ^ pk[(i + 2) % 4])) & 0xFFFF
            iv[PW_SIZE] ^= (11 * diff) % 0x100
    elif crypt_version == 0x3F2:
        for i in range(PW_SIZE):
            key[i] ^= ((pwd[(i * 7) % 0xF] + pk[i & 3]) * i * i) & 0xFF
            iv[i] ^= ((pwd[(i * 11) % 0xF] + pk[(i + 2) % 4]) - i * i) & 0xFF

            key[PW_SIZE] ^= ((i * 3) + pwd[i] + pk[i & 3]) & 0xFF
            iv[PW_SIZE] ^= ((i * 5) + pwd[i] + pk[(i + 2) % 4]) & 0xFF
    else:
        for i in range(PW_SIZE):
            key[i] ^= (pwd[(i * 7) % 0xF] + i * i) & 0xFF
            iv[i] ^= (pwd[(i * 11) % 0xF] - i * i) & 0xFF

            key[PW_SIZE] ^= (pwd[i] + i * 3) & 0xFF
            iv[PW_SIZE] ^= (pwd[i] + i * 5) & 0xFF

    key[0] ^= pk[0] & 0xFF
    iv[10] ^= pk[0] & 0xFF
    key[4] ^= pk[1] & 0xFF
    iv[1] ^= pk[1] & 0xFF
    key[8] ^= pk[2] & 0xFF
    iv[4] ^= pk[2] & 0xFF
    key[12] ^= pk[3] & 0xFF
    iv[7] ^= pk[3] & 0xFF

    return make_round_key(bytes(key), bytes(iv))


def _add_round_key(state: bytearray, round_key: bytes, rnd: int) -> None:
    offset = rnd * KEY_SIZE
    for i, k in enumerate(round_key[offset : offset + KEY_SIZE]):
        state[i] ^= k


def _sub_bytes(state: bytearray) -> None:
    state[:] = bytes(SBOX[b] for b in state)


def _shift_rows(state: bytearray) -> None:
    old = bytes(state)
    for col in range(4):
        for row in range(4):
            state[col * 4 + row] = old[((col + row) % 4) * 4 + row]


def _xtime(x: int) -> int:
    return ((x << 1) ^ (((x >> 7) & 1) * 0x1B)) & 0xFF


def _mix_columns(state: bytearray) -> None:
    for c in range(0, BLOCK_LEN, 4):
        a0, a1, a2, a3 = state[c : c + 4]
        tmp = a0 ^ a1 ^ a2 ^ a3
        state[c] = a0 ^ tmp ^ _xtime(a0 ^ a1)
        state[c + 1] = a1 ^ tmp ^ _xtime(a1 ^ a2)
        state[c + 2] = a2 ^ tmp ^ _xtime(a2 ^ a3)
        state[c + 3] = a3 ^ tmp ^ _xtime(a3 ^ a0)


def cipher(state: bytes, round_key: bytes) -> bytes:
    """Encrypt one 16-byte block with an expanded key."""
    if len(state) != BLOCK_LEN:
        raise ValueError(f"block must be {BLOCK_LEN} bytes")
    if len(round_key) < KEY_EXP_SIZE:
        raise ValueError(f"round key must hold at least {KEY_EXP_SIZE} bytes")

    block = bytearray(state)
    _add_round_key(block, round_key, 0)
    for rnd in range(1, NR):
        _sub_bytes(block)
        _shift_rows(block)
        _mix_columns(block)
        _add_round_key(block, round_key, rnd)
    _sub_bytes(block)
    _shift_rows(block)
    _add_round_key(block, round_key, NR)
    return bytes(block)


def aes_ctr_xcrypt(
    data: bytearray, round_key: bytes, start: int = 0, size: Optional[int] = None
) -> None:
    """XOR ``data[start:start+size]`` in place with the CTR keystream.

    The counter starts at the IV stored after the key schedule; ``round_key``
    itself is left unchanged.
    """
    if size is None:
        size = len(data) - start
    if start < 0 or size < 0 or start + size > len(data):
        raise ValueError("range lies outside the data")
    if len(round_key) < ROUND_KEY_SIZE:
        raise ValueError(f"round key must hold {ROUND_KEY_SIZE} bytes")

    counter = int.from_bytes(round_key[KEY_EXP_SIZE:ROUND_KEY_SIZE], "big")
    for offset in range(0, size, BLOCK_LEN):
        keystream = cipher(counter.to_bytes(BLOCK_LEN, "big"), round_key)
        counter = (counter + 1) & _COUNTER_MASK
        begin = start + offset
        end = start + min(offset + BLOCK_LEN, size)
        data[begin:end] = bytes(a ^ b for a, b in zip(data[begin:end], keystream))