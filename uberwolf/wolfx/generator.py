"""Key blob generation and hashing for WolfX files."""

from __future__ import annotations

from typing import Iterable, Union

from .model import DECRYPT_BLOB_SIZE, STATIC_BLOB_SIZE

_M32 = 0xFFFFFFFF
_FNV_OFFSET = 0x811C9DC5
_FNV_PRIME = 0x01000193

BytesLike = Union[str, bytes, bytearray, Iterable[int]]


def _as_bytes(data: BytesLike) -> bytes:
    if isinstance(data, str):
        return data.encode("utf-8")
    return bytes(data)


def _rotl8(value: int, shift: int) -> int:
    return ((value << shift) | (value >> (8 - shift))) & 0xFF


def _rotr8(value: int, shift: int) -> int:
    return ((value >> shift) | (value << (8 - shift))) & 0xFF


def generate_decrypt_blob(seed: int, static_blob: BytesLike, file_size: int = 0) -> bytes:
    """Produce the 256-byte XOR blob from a seed and the static blob."""
    seed &= _M32
    for byte in _as_bytes(static_blob):
        seed ^= byte

    blob = bytearray(DECRYPT_BLOB_SIZE)
    for i in range(DECRYPT_BLOB_SIZE):
        seed = (seed * 1664525 + 1013904223) & _M32
        blob[i] = seed & 0xFF
    return bytes(blob)


def generate_static_blob(key: BytesLike = b"") -> bytes:
    """Stretch a key into the 64-byte static blob; no byte is ever zero."""
    key_bytes = _as_bytes(key)
    data = bytearray([0xAA] * STATIC_BLOB_SIZE)
    dynamic = 0xBE

    for i, k in enumerate(key_bytes):
        index = i % STATIC_BLOB_SIZE
        value = ((data[index] ^ k) + dynamic) & 0xFF
        data[index] = _rotl8(value, 3)
        dynamic = (k ^ (0xB3 * dynamic)) & 0xFF

    size = STATIC_BLOB_SIZE
    for _ in range(5):
        for j in range(size):
            prev = data[(j + 13) % size]
            mix = data[j] ^ data[(j + 7) % size]
            data[j] = _rotr8((prev + mix) & 0xFF, 7)

    return bytes(b if b else 1 for b in data)


def fnv1(data: BytesLike) -> int:
    """Hash bytes (or the UTF-8 bytes of a string) to 32 bits."""
    h = _FNV_OFFSET
    for byte in _as_bytes(data):
        h = (_FNV_PRIME * (h ^ byte)) & _M32
    return h