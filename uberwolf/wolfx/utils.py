"""Byte packing helpers and discovery of WolfX files."""

from __future__ import annotations

import os
from pathlib import Path
from typing import List, Sequence, Union

from .model import WolfXFile

_M32 = 0xFFFFFFFF
WOLFX_SUFFIX = ".wolfx"


def extract_bytes(value: int, n: int) -> bytes:
    """Return the low ``n`` bytes of a 32-bit value, most significant first."""
    if not 0 <= n <= 4:
        raise ValueError("between 0 and 4 bytes can be extracted")
    return ((value & _M32) & ((1 << (8 * n)) - 1)).to_bytes(n, "big")


def combine_bytes(data: Sequence[int], n: int, start: int = 0) -> int:
    """Read ``n`` bytes from ``start`` on as a big-endian 32-bit value."""
    if n < 0 or start < 0 or start + n > len(data):
        raise IndexError("byte range lies outside the data")
    return int.from_bytes(bytes(data[start : start + n]), "big") & _M32


def collect_wolfx_files(base_folder: Union[str, "os.PathLike[str]"]) -> List[WolfXFile]:
    """Find every ``.wolfx`` file below ``base_folder``, smallest first."""
    base = Path(base_folder)
    if not base.is_dir():
        raise FileNotFoundError(f"No such folder: {base}")

    files = [
        WolfXFile(path, path.stat().st_size)
        for path in sorted(base.rglob("*"))
        if path.is_file() and path.suffix == WOLFX_SUFFIX
    ]
    files.sort(key=lambda f: f.file_size)
    return files