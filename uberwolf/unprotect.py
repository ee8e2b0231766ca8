"""Helpers for removing the 3.5 protection from Wolf RPG data files."""

from __future__ import annotations

import os
import struct
from pathlib import PurePath
from typing import Union

from .datadecrypt import WolfFileType
from .rng import MsvcRandom

PROTECTED_FILES = (
    "Game.dat",
    "CommonEvent.dat",
    "DataBase.dat",
    "SysDatabase.dat",
    "CDatabase.dat",
    "TileSetData.dat",
)

_DATABASE_FILES = frozenset({"DataBase.dat", "CDatabase.dat", "SysDatabase.dat"})
_GAME_DAT_HEADER_SIZE = 10
# Length-prefixed fields after the header: bytes, (raw dword), title, number, key, font.
_FIXED_FIELDS_AFTER_DWORD = 4


def get_wolf_file_type(path: Union[str, "os.PathLike[str]"]) -> WolfFileType:
    """Classify a data file by its name or extension."""
    p = PurePath(path)
    name = p.name
    if name == "Game.dat":
        return WolfFileType.GAME_DAT
    if name == "CommonEvent.dat":
        return WolfFileType.COMMON_EVENT
    if name in _DATABASE_FILES:
        return WolfFileType.DATABASE
    if name == "TileSetData.dat":
        return WolfFileType.TILESET_DATA
    if p.suffix == ".project":
        return WolfFileType.PROJECT
    if p.suffix == ".mps":
        return WolfFileType.MAP
    return WolfFileType.NONE


def _read_u32(data: bytearray, offset: int) -> int:
    try:
        return struct.unpack_from("<I", data, offset)[0]
    except struct.error as exc:
        raise ValueError(f"no size field at offset {offset}") from exc


def game_dat_update_size(data: bytearray, old_size: int) -> None:
    """Rewrite the stored file size of a decrypted Game.dat in place.

    The field holding ``old_size - 1`` is found by walking the
    length-prefixed fields and set to ``len(data) - 1``.
    """
    offset = _GAME_DAT_HEADER_SIZE
    offset += _read_u32(data, offset) + 4
    offset += 4
    for _ in range(_FIXED_FIELDS_AFTER_DWORD):
        offset += _read_u32(data, offset) + 4

    wanted = (old_size - 1) & 0xFFFFFFFF
    while True:
        value = _read_u32(data, offset)
        if value == wanted:
            break
        offset += value + 4

    struct.pack_into("<I", data, offset, (len(data) - 1) & 0xFFFFFFFF)


def unprotect_project(data: bytearray) -> None:
    """XOR a .project file in place with the rand() stream seeded by 0."""
    rng = MsvcRandom(0)
    for i, byte in enumerate(data):
        data[i] = byte ^ (rng.rand() & 0xFF)