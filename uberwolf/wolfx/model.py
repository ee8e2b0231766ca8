"""Data types shared by the WolfX decryption code."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Set, Union

DECRYPT_BLOB_SIZE = 256
STATIC_BLOB_SIZE = 64


@dataclass(frozen=True, order=True)
class WolfXDecryptKey:
    """A decryption key and the folder it applies to.

    Keys compare and sort by folder, then key.
    """

    folder: str = ""
    key: str = ""
    key_data: bytes = field(init=False, compare=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "key_data", self.key.encode("utf-8"))


@dataclass
class WolfXDecryptCollection:
    """Candidate keys and magic values gathered from a game."""

    decrypt_keys: List[WolfXDecryptKey] = field(default_factory=list)
    string_values: Dict[int, Set[str]] = field(default_factory=dict)
    int_values: Dict[int, Set[int]] = field(default_factory=dict)

    def clear(self) -> None:
        """Forget every collected key and value."""
        self.decrypt_keys.clear()
        self.string_values.clear()
        self.int_values.clear()


@dataclass(frozen=True)
class WolfXFile:
    """An encrypted file on disk and its size."""

    file_path: Union[str, Path]
    file_size: int


@dataclass
class DecryptParams:
    """Inputs shared by the stages of one decryption attempt."""

    enc_data: bytes
    magic_str: str
    xor_bytes: bytes
    data_offset: int
    int_index: int = 0
    magic_int: int = 0


@dataclass
class DecryptResult:
    """Outcome of decrypting a file, reused as a hint for the next one."""

    dec_data: bytearray = field(default_factory=bytearray)
    decrypt_key: WolfXDecryptKey = field(default_factory=WolfXDecryptKey)
    success: bool = False
    data_offset: int = 0
    magic_str: str = ""
    magic_int: int = 0