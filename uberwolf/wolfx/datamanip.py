"""XOR of WolfX file bodies with the decryption blob."""

from __future__ import annotations

from typing import Sequence

DATA_START = 15
_BLOB_BASE = 10


def xor_buffer_blob(
    in_buffer: Sequence[int], decrypt_blob: Sequence[int], out_buffer: bytearray
) -> None:
    """Write ``in_buffer[i] ^ blob[(i - 10) % len(blob)]`` to ``out_buffer[i]``.

    Only positions from 15 on are written; the header of ``out_buffer``
    is left as it is.
    """
    blob = bytes(decrypt_blob)
    if not blob:
        raise ValueError("decryption blob must not be empty")
    size = len(in_buffer)
    if len(out_buffer) < size:
        raise ValueError("output buffer is shorter than the input")

    count = size - DATA_START
    if count <= 0:
        return

    shift = (DATA_START - _BLOB_BASE) % len(blob)
    rotated = blob[shift:] + blob[:shift]
    keystream = (rotated * (count // len(rotated) + 1))[:count]

    body = bytes(in_buffer[DATA_START:size])
    mixed = int.from_bytes(body, "little") ^ int.from_bytes(keystream, "little")
    out_buffer[DATA_START:size] = mixed.to_bytes(count, "little")