"""SHA-512 variant with the Wolf RPG initial values and round changes."""

from __future__ import annotations

import struct
from typing import Iterable, List, Sequence, Union

_M64 = 0xFFFFFFFFFFFFFFFF

SEQUENCE_LEN = 16
WORKING_VAR_LEN = 8
MESSAGE_SCHEDULE_LEN = 80
MESSAGE_BLOCK_SIZE = 1024
CHAR_LEN_BITS = 8
OUTPUT_LEN = 8
WORD_LEN = 8

_ROUND_XOR = 0x123456789ABCDEF0

H_PRIME = (
    0x123456789ABCDEF0, 0xFEDCBA9876543210, 0x0F1E2D3C4B5A6978, 0x89ABCDEF01234567,
    0x13579BDF02468ACE, 0xF0E1D2C3B4A59687, 0x5A6B7C8D9E0F1A2B, 0x1A2B3C4D5E6F7890,
)

K = (
    0x428A2F98D728AE22, 0x7137449123EF65CD, 0xB5C0FBCFEC4D3B2F, 0xE9B5DBA58189DBBC, 0x3956C25BF348B538,
    0x59F111F1B605D019, 0x923F82A4AF194F9B, 0xAB1C5ED5DA6D8118, 0xD807AA98A3030242, 0x12835B0145706FBE,
    0x243185BE4EE4B28C, 0x550C7DC3D5FFB4E2, 0x72BE5D74F27B896F, 0x80DEB1FE3B1696B1, 0x9BDC06A725C71235,
    0xC19BF174CF692694, 0xE49B69C19EF14AD2, 0xEFBE4786384F25E3, 0x0FC19DC68B8CD5B5, 0x240CA1CC77AC9C65,
    0x2DE92C6F592B0275, 0x4A7484AA6EA6E483, 0x5CB0A9DCBD41FBD4, 0x76F988DA831153B5, 0x983E5152EE66DFAB,
    0xA831C66D2DB43210, 0xB00327C898FB213F, 0xBF597FC7BEEF0EE4, 0xC6E00BF33DA88FC2, 0xD5A79147930AA725,
    0x06CA6351E003826F, 0x142929670A0E6E70, 0x27B70A8546D22FFC, 0x2E1B21385C26C926, 0x4D2C6DFC5AC42AED,
    0x53380D139D95B3DF, 0x650A73548BAF63DE, 0x766A0ABB3C77B2A8, 0x81C2C92E47EDAEE6, 0x92722C851482353B,
    0xA2BFE8A14CF10364, 0xA81A664BBC423001, 0xC24B8B70D0F89791, 0xC76C51A30654BE30, 0xD192E819D6EF5218,
    0xD69906245565A910, 0xF40E35855771202A, 0x106AA07032BBD1B8, 0x19A4C116B8D2D0C8, 0x1E376C085141AB53,
    0x2748774CDF8EEB99, 0x34B0BCB5E19B48A8, 0x391C0CB3C5C95A63, 0x4ED8AA4AE3418ACB, 0x5B9CCA4F7763E373,
    0x682E6FF3D6B2B8A3, 0x748F82EE5DEFB2FC, 0x78A5636F43172F60, 0x84C87814A1F0AB72, 0x8CC702081A6439EC,
    0x90BEFFFA23631E28, 0xA4506CEBDE82BDE9, 0xBEF9A3F7B2C67915, 0xC67178F2E372532B, 0xCA273ECEEA26619C,
    0xD186B8C721C0C207, 0xEADA7DD6CDE0EB1E, 0xF57D4F7FEE6ED178, 0x06F067AA72176FBA, 0x0A637DC5A2C898A6,
    0x113F9804BEF90DAE, 0x1B710B35131C471B, 0x28DB77F523047D84, 0x32CAAB7B40C72493, 0x3C9EBE0A15C9BEBC,
    0x431D67C49C100D4C, 0x4CC5D4BECB3E42B6, 0x597F299CFC657E2A, 0x5FCB6FAB3AD6FAEC, 0x6C44198C4A475817,
)


def _rotr(x: int, n: int) -> int:
    return ((x >> n) | (x << (64 - n))) & _M64


def _ch(x: int, y: int, z: int) -> int:
    return (x & y) ^ (~x & _M64 & z)


def _maj(x: int, y: int, z: int) -> int:
    return (x & y) ^ (x & z) ^ (y & z)


def _big_sig0(x: int) -> int:
    return _rotr(x, 28) ^ _rotr(x, 34) ^ _rotr(x, 39)


def _big_sig1(x: int) -> int:
    return _rotr(x, 14) ^ _rotr(x, 18) ^ _rotr(x, 41)


def _small_sig0(x: int) -> int:
    return _rotr(x, 1) ^ _rotr(x, 8) ^ (x >> 7)


def _small_sig1(x: int) -> int:
    return _rotr(x, 19) ^ _rotr(x, 61) ^ (x >> 6)


def _as_bytes(value: Union[str, bytes, bytearray, Sequence[int]]) -> bytes:
    if isinstance(value, str):
        return value.encode("utf-8")
    return bytes(value)


def digest(hash_words: Iterable[int]) -> str:
    """Render hash words as lower-case hex, 16 digits per word."""
    return "".join(f"{word & _M64:016x}" for word in hash_words)


def preprocess(pwd: Union[str, bytes, bytearray]) -> List[int]:
    """Pad a message into 64-bit big-endian words, 16 per block."""
    message = _as_bytes(pwd)
    length = len(message)
    bits = length * CHAR_LEN_BITS
    n_blocks = ((895 - bits) % MESSAGE_BLOCK_SIZE + bits + 129) // MESSAGE_BLOCK_SIZE
    total = n_blocks * SEQUENCE_LEN * WORD_LEN

    padded = (message + b"\x80").ljust(total, b"\x00")[:total]
    words = list(struct.unpack(f">{n_blocks * SEQUENCE_LEN}Q", padded))
    words[-2] = 0
    words[-1] = bits & _M64
    return words


def process(words: Sequence[int]) -> List[int]:
    """Run the compression function over whole 16-word blocks."""
    if len(words) % SEQUENCE_LEN:
        raise ValueError("input must consist of whole 16-word blocks")

    h = list(H_PRIME)
    for block_start in range(0, len(words), SEQUENCE_LEN):
        w = [x & _M64 for x in words[block_start : block_start + SEQUENCE_LEN]]
        for j in range(SEQUENCE_LEN, MESSAGE_SCHEDULE_LEN):
            w.append(
                (w[j - 16] + _small_sig0(w[j - 15]) + w[j - 7] + _small_sig1(w[j - 2])) & _M64
            )

        s = list(h)
        for j in range(MESSAGE_SCHEDULE_LEN):
            temp1 = (
                s[7]
                + _big_sig1(s[4])
                + ((s[4] >> 3) ^ _ch(s[4], s[5], s[6]))
                + K[j]
                + w[j]
            ) & _M64
            temp2 = (_big_sig0(s[0]) + _maj(s[0], s[1], s[2])) & _M64
            s = [
                (temp1 + temp2) & _M64,
                s[0],
                s[1],
                s[2],
                (s[3] + temp1) & _M64,
                s[4],
                s[5],
                s[6],
            ]

        h = [(hv + (sv ^ _ROUND_XOR)) & _M64 for hv, sv in zip(h, s)]

    return h


def calc_dyn_salt(data: Sequence[int]) -> bytes:
    """Derive the four-byte dynamic salt from a file header."""
    if len(data) <= 0x10:
        raise ValueError("Invalid data size")

    d0, d1, d2 = data[7], data[11], data[13]
    salt = (
        ((d0 + 2 * d1) % 0xF6) & 0xFF,
        (d2 ^ data[14]) & 0xFF,
        (d0 ^ data[12]) & 0xFF,
        (d0 + d2 - d1) & 0xFF,
    )
    # A zero byte would act as a terminator in the salted password.
    return bytes(c if c else 1 for c in salt)


def salt_password(
    pwd: Union[str, bytes, bytearray],
    dyn_salt: Sequence[int],
    static_salt: Union[str, bytes, bytearray],
) -> bytes:
    """Return ``pwd`` followed by the dynamic and the static salt."""
    return _as_bytes(pwd) + bytes(dyn_salt) + _as_bytes(static_salt)


def hash_hex(pwd: Union[str, bytes, bytearray]) -> str:
    """Hash a message and return the hex digest."""
    return digest(process(preprocess(pwd)))