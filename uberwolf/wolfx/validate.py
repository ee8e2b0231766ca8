"""Checksum validation of decrypted WolfX data."""

from __future__ import annotations

import sys
from typing import Sequence

CHECKSUM_SIZE = 5


def validate_checksum(
    data: Sequence[int], real_checksum: Sequence[int], verbose: bool = False
) -> bool:
    """Tell whether five bytes sampled across ``data`` equal ``real_checksum``.

    The samples are taken at ``int((len(data) - 1) * 0.25 * i)`` for
    ``i`` in 0..4.
    """
    if len(data) == 0:
        raise ValueError("Data is empty")
    if len(real_checksum) != CHECKSUM_SIZE:
        raise ValueError(f"checksum must hold {CHECKSUM_SIZE} bytes")

    final_idx = len(data) - 1
    checksum = bytes(data[int(final_idx * 0.25 * i)] & 0xFF for i in range(CHECKSUM_SIZE))

    if checksum == bytes(real_checksum):
        if verbose:
            print("Checksum match")
        return True

    if verbose:
        print("Checksum mismatch", file=sys.stderr)
    return False