"""ChaCha20 stream cipher with the Wolf RPG key setup and seek behaviour."""

from __future__ import annotations

import struct
from typing import List, Sequence

_M32 = 0xFFFFFFFF

_MAGIC_CONSTANT = b"expand 32-byte k"

_MOD1 = (0x3F, 0xA7, 0xD2, 0x1C)
_MOD2 = (0xB4, 0xE1, 0x9D, 0x58)
_MOD3 = (0x6A, 0x2B, 0x4C, 0x8E)

KEY_SETUP_SIZE = 64


def pack4(data: Sequence[int]) -> int:
    """Read the first four bytes of ``data`` as a little-endian word."""
    if len(data) < 4:
        raise ValueError("four bytes are required")
    return struct.unpack("<I", bytes(data[:4]))[0]


def _rotl32(x: int, n: int) -> int:
    return ((x << n) | (x >> (32 - n))) & _M32


def _quarter_round(x: List[int], a: int, b: int, c: int, d: int) -> None:
    x[a] = (x[a] + x[b]) & _M32
    x[d] = _rotl32(x[d] ^ x[a], 16)
    x[c] = (x[c] + x[d]) & _M32
    x[b] = _rotl32(x[b] ^ x[c], 12)
    x[a] = (x[a] + x[b]) & _M32
    x[d] = _rotl32(x[d] ^ x[a], 8)
    x[c] = (x[c] + x[d]) & _M32
    x[b] = _rotl32(x[b] ^ x[c], 7)


class ChaCha20:
    """ChaCha20 keystream generator whose block counter starts at 1."""

    def __init__(self, key: Sequence[int], nonce: Sequence[int]) -> None:
        if len(key) < 32:
            raise ValueError("key must hold at least 32 bytes")
        if len(nonce) < 12:
            raise ValueError("nonce must hold at least 12 bytes")
        self.state: List[int] = [
            *struct.unpack("<4I", _MAGIC_CONSTANT),
            *struct.unpack("<8I", bytes(key[:32])),
            1,
            *struct.unpack("<3I", bytes(nonce[:12])),
        ]

    def block_next(self) -> bytes:
        """Return the next 64 keystream bytes and advance the counter."""
        x = list(self.state)
        for _ in range(10):
            _quarter_round(x, 0, 4, 8, 12)
            _quarter_round(x, 1, 5, 9, 13)
            _quarter_round(x, 2, 6, 10, 14)
            _quarter_round(x, 3, 7, 11, 15)
            _quarter_round(x, 0, 5, 10, 15)
            _quarter_round(x, 1, 6, 11, 12)
            _quarter_round(x, 2, 7, 8, 13)
            _quarter_round(x, 3, 4, 9, 14)

        stream = [(a + b) & _M32 for a, b in zip(x, self.state)]

        self.state[12] = (self.state[12] + 1) & _M32
        if self.state[12] == 0:
            self.state[13] = (self.state[13] + 1) & _M32

        return struct.pack("<16I", *stream)

    def execute(self, start_pos: int, data: bytearray) -> None:
        """XOR ``data`` in place with the keystream from byte ``start_pos`` on."""
        if start_pos < 0:
            raise ValueError("start position must not be negative")
        offset = start_pos % 64
        self.state[12] = (self.state[12] + start_pos // 64) & _M32

        position = 0
        length = len(data)
        while position < length:
            steps = min(64 - offset, length - position)
            stream = self.block_next()
            chunk = data[position : position + steps]
            data[position : position + steps] = bytes(
                a ^ b for a, b in zip(chunk, stream[offset : offset + steps])
            )
            position += steps
            offset = 0


def key_setup(data: Sequence[int]) -> bytes:
    """Stretch four bytes into the 64-byte key block; the last byte is zero."""
    if len(data) != 4:
        raise ValueError("exactly four bytes are required")

    key = bytearray(KEY_SETUP_SIZE)
    for i in range(KEY_SETUP_SIZE - 1):
        index = i % 4
        temp = ((data[index] + _MOD2[index]) ^ (_MOD1[index] + i + 16 * i)) & 0xFF
        if i % 2 == 0:
            temp = ((temp >> 5) | (temp << 3)) & 0xFF
        else:
            temp = ((temp >> 2) | (temp << 6)) & 0xFF
        key[i] = ~(temp ^ data[index] ^ _MOD3[index]) & 0xFF
    return bytes(key)