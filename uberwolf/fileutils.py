"""Small file helpers shared by the decryption tools."""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Union

PathLike = Union[str, "os.PathLike[str]"]


def byte_to_hex_string(byte: int) -> str:
    """Format one byte as two upper-case hex digits."""
    if not 0 <= byte <= 0xFF:
        raise ValueError(f"not a byte value: {byte}")
    return f"{byte:02X}"


def file_to_buffer(path: PathLike) -> bytearray:
    """Read a whole file; an empty file is an error."""
    file_path = Path(path)
    with file_path.open("rb") as handle:
        data = bytearray(handle.read())
    if not data:
        raise ValueError(f"File is empty: {file_path}")
    return data


def buffer_to_file(path: PathLike, buffer: bytes, offset: int = 0) -> None:
    """Write ``buffer`` from ``offset`` on to ``path``, replacing the file."""
    if not 0 <= offset <= len(buffer):
        raise ValueError(f"offset {offset} lies outside the buffer")
    with Path(path).open("wb") as handle:
        handle.write(bytes(buffer[offset:]))


def backup_file(path: PathLike, backup_folder: PathLike) -> Path:
    """Copy ``path`` into ``backup_folder`` unless a backup already exists.

    Returns the path of the backup copy.
    """
    source = Path(path)
    target = Path(backup_folder) / source.name
    if not target.exists():
        shutil.copyfile(source, target)
    return target