"""Recovery of WolfX file contents from candidate keys and magic values."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Sequence, Tuple, Union

from ..fileutils import buffer_to_file, file_to_buffer
from .datamanip import xor_buffer_blob
from .generator import fnv1, generate_decrypt_blob, generate_static_blob
from .model import (
    DecryptParams,
    DecryptResult,
    WolfXDecryptCollection,
    WolfXDecryptKey,
    WolfXFile,
)
from .utils import combine_bytes, extract_bytes
from .validate import CHECKSUM_SIZE, validate_checksum

log = logging.getLogger(__name__)

_M32 = 0xFFFFFFFF

WOLFX_MAGIC = b"WOLFX"
HEADER_SIZE = 10
MIN_FILE_SIZE = 15
MAX_RETRIES = 5

_CHECKSUM_START = 15
_BASE_DATA_OFFSET = 512
_STRING_INDEX_LIMIT = 10000
_INT_INDEX_LIMIT = 1000000
_INT_HASH_FACTOR = 73244475

KeyLike = Union[str, bytes, bytearray, Sequence[int]]


class DecryptionError(Exception):
    """Raised when a WolfX file cannot be decrypted with the given values."""


def _int_hash(magic_int: int) -> int:
    magic_int &= _M32
    return ((magic_int << 13) ^ (_INT_HASH_FACTOR * magic_int)) & _M32


def _int_index(magic_str: str, dec_data: Sequence[int]) -> int:
    str_hash = fnv1(magic_str)
    return (
        ((str_hash & 0xFFFF0000) >> 8)
        ^ (str_hash & 0xFFFF)
        ^ combine_bytes(dec_data, 3, 12)
    )


def _data_offset(static_blob: bytes) -> int:
    return _BASE_DATA_OFFSET + static_blob[0] + static_blob[1]


def _key_bytes(key: KeyLike) -> bytes:
    if isinstance(key, str):
        return key.encode("utf-8")
    return bytes(key)


def _apply_magic(
    blob: Sequence[int],
    xor_bytes: Sequence[int],
    magic_str: str,
    int_mod: bytes,
    mod_val: bytes,
) -> bytes:
    magic = magic_str.encode("utf-8")
    return bytes(
        b
        ^ xor_bytes[i % 2]
        ^ (magic[i % len(magic)] if magic else 0)
        ^ int_mod[i & 3]
        ^ mod_val[i % 3]
        for i, b in enumerate(blob)
    )


def _open_header(enc_data: bytes, static_blob: bytes, dec_data: bytearray) -> bytes:
    """Decrypt bytes 10..14 into ``dec_data`` and return the raw XOR blob."""
    seed = fnv1(static_blob) ^ combine_bytes(enc_data, 4, 5)
    blob = generate_decrypt_blob(seed, static_blob, len(enc_data))
    for i in range(5):
        dec_data[HEADER_SIZE + i] = enc_data[HEADER_SIZE + i] ^ blob[i]
    return blob


def _checksum_ok(dec_data: bytearray, data_offset: int) -> bool:
    checksum = bytes(dec_data[_CHECKSUM_START : _CHECKSUM_START + CHECKSUM_SIZE])
    with memoryview(dec_data) as view:
        return validate_checksum(view[data_offset:], checksum)


def _check_sizes(enc_data: bytes, result: DecryptResult) -> None:
    if len(enc_data) < MIN_FILE_SIZE:
        raise ValueError(f"encrypted data must hold at least {MIN_FILE_SIZE} bytes")
    if len(result.dec_data) < len(enc_data):
        raise ValueError("output buffer is shorter than the encrypted data")


def try_decrypt_p3(
    decrypt_blob: Sequence[int], params: DecryptParams, result: DecryptResult
) -> bool:
    """Apply the magic values to the blob, decrypt and check the checksum."""
    mod_val = extract_bytes(params.int_index, 3)
    int_mod = extract_bytes(_int_hash(params.magic_int), 4)
    blob = _apply_magic(decrypt_blob, params.xor_bytes, params.magic_str, int_mod, mod_val)
    xor_buffer_blob(params.enc_data, blob, result.dec_data)
    return _checksum_ok(result.dec_data, params.data_offset)


def try_decrypt_p2(
    decrypt_blob: Sequence[int],
    params: DecryptParams,
    collection: WolfXDecryptCollection,
    result: DecryptResult,
) -> bool:
    """Pick the magic integer (from the hint or the collection) and decrypt."""
    params.int_index = _int_index(params.magic_str, result.dec_data)

    if result.success:
        params.magic_int = result.magic_int
        return try_decrypt_p3(decrypt_blob, params, result)

    if params.int_index < _INT_INDEX_LIMIT:
        for value in sorted(collection.int_values.get(params.int_index, ())):
            params.magic_int = value
            if try_decrypt_p3(decrypt_blob, params, result):
                result.magic_int = value
                result.success = True
                return True
        return False

    if try_decrypt_p3(decrypt_blob, params, result):
        result.success = True
        return True
    return False


def try_decrypt_p1(
    enc_data: Sequence[int],
    key_data: KeyLike,
    collection: WolfXDecryptCollection,
    result: DecryptResult,
) -> bool:
    """Try one key: derive the blob, pick the magic string and go on."""
    enc = bytes(enc_data)
    _check_sizes(enc, result)

    static_blob = generate_static_blob(_key_bytes(key_data))
    data_offset = _data_offset(static_blob)
    if data_offset >= len(enc):
        return False
    result.data_offset = data_offset

    blob = _open_header(enc, static_blob, result.dec_data)
    xor_bytes = bytes(result.dec_data[HEADER_SIZE : HEADER_SIZE + 2])
    magic_str_index = combine_bytes(xor_bytes, 2)

    if result.success:
        params = DecryptParams(enc, result.magic_str, xor_bytes, data_offset)
        return try_decrypt_p2(blob, params, collection, result)

    if magic_str_index < _STRING_INDEX_LIMIT:
        for value in sorted(collection.string_values.get(magic_str_index, ())):
            params = DecryptParams(enc, value, xor_bytes, data_offset)
            if try_decrypt_p2(blob, params, collection, result):
                result.magic_str = value
                return True
        return False

    params = DecryptParams(enc, "", xor_bytes, data_offset)
    return try_decrypt_p2(blob, params, collection, result)


def _output_path(path: Path) -> Path:
    return path.with_suffix("")


def crack_wolfx(
    file: WolfXFile, collection: WolfXDecryptCollection, result: DecryptResult
) -> bool:
    """Decrypt one file with the collected keys and write the plain file.

    ``result`` carries the key and magic values of an earlier success,
    which are tried first.
    """
    path = Path(file.file_path)
    enc = bytes(file_to_buffer(path))

    if len(enc) < MIN_FILE_SIZE or not enc.startswith(WOLFX_MAGIC):
        log.error("Invalid WOLFX file: %s", path)
        return False

    result.dec_data = bytearray(len(enc))
    result.dec_data[:HEADER_SIZE] = enc[:HEADER_SIZE]

    if result.success and not try_decrypt_p1(
        enc, result.decrypt_key.key_data, collection, result
    ):
        return False

    for decrypt_key in collection.decrypt_keys:
        if try_decrypt_p1(enc, decrypt_key.key_data, collection, result):
            result.decrypt_key = decrypt_key
            break

    if not result.success:
        return False

    buffer_to_file(_output_path(path), result.dec_data, result.data_offset)
    return True


def crack_wolfx_files(
    files: Sequence[WolfXFile], collection: WolfXDecryptCollection, retries: int = 0
) -> bool:
    """Decrypt every file, retrying the failures up to five passes in all."""
    pending = list(files)
    for _ in range(retries, MAX_RETRIES):
        result = DecryptResult()
        pending = [f for f in pending if not crack_wolfx(f, collection, result)]
        if not pending:
            return True
        log.info("Retrying %d files ...", len(pending))

    log.error("Max retries reached, aborting")
    return False


def decrypt_full(
    enc_data: Sequence[int], decrypt_key: KeyLike, magic_str: str = "", magic_int: int = 0
) -> DecryptResult:
    """Decrypt data with a known key and magic values.

    The returned result holds the decrypted buffer, the offset of the
    payload and whether the checksum matched.
    """
    enc = bytes(enc_data)
    if len(enc) < MIN_FILE_SIZE:
        raise ValueError(f"encrypted data must hold at least {MIN_FILE_SIZE} bytes")

    dec = bytearray(len(enc))
    dec[:HEADER_SIZE] = enc[:HEADER_SIZE]

    static_blob = generate_static_blob(_key_bytes(decrypt_key))
    blob = _open_header(enc, static_blob, dec)
    xor_bytes = bytes(dec[HEADER_SIZE : HEADER_SIZE + 2])

    int_index = _int_index(magic_str, dec)
    if int_index < _INT_INDEX_LIMIT:
        int_mod = extract_bytes(_int_hash(magic_int), 4)
    else:
        int_mod = bytes(4)
    mod_val = extract_bytes(int_index, 3)

    blob = _apply_magic(blob, xor_bytes, magic_str, int_mod, mod_val)
    xor_buffer_blob(enc, blob, dec)

    data_offset = _data_offset(static_blob)
    success = data_offset < len(enc) and _checksum_ok(dec, data_offset)

    result = DecryptResult(
        dec_data=dec,
        success=success,
        data_offset=data_offset,
        magic_str=magic_str,
        magic_int=magic_int,
    )
    if isinstance(decrypt_key, str):
        result.decrypt_key = WolfXDecryptKey(key=decrypt_key)
    return result


def decrypt_file(
    filename: Union[str, "os.PathLike[str]"],
    decrypt_key: KeyLike,
    magic_str: str = "",
    magic_int: int = 0,
) -> Path:
    """Decrypt a file with known values and write it without its extension.

    Returns the path written; raises DecryptionError if the checksum fails.
    """
    path = Path(filename)
    result = decrypt_full(file_to_buffer(path), decrypt_key, magic_str, magic_int)
    if not result.success:
        raise DecryptionError(f"Decryption failed: {path}")

    output = _output_path(path)
    buffer_to_file(output, result.dec_data, result.data_offset)
    log.info("Decryption successful: %s", output)
    return output


def _unused() -> Tuple[int, ...]:  # pragma: no cover
    return ()