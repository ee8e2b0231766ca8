import pytest

from uberwolf.wolfx.crack import (
    DecryptionError,
    crack_wolfx,
    crack_wolfx_files,
    decrypt_file,
    decrypt_full,
    try_decrypt_p1,
)
from uberwolf.wolfx.generator import fnv1
from uberwolf.wolfx.model import (
    DecryptResult,
    WolfXDecryptCollection,
    WolfXDecryptKey,
    WolfXFile,
)
from uberwolf.wolfx.utils import combine_bytes

KEY = "secret"
WRONG_KEY = "token"
BODY = 0x41
SIZE = 1400
HEADER_A = b"WOLFX" + bytes([1, 2, 3, 4, 5]) + bytes([9, 8, 7, 6, 5])
HEADER_B = b"WOLFX" + bytes([11, 22, 33, 44, 55]) + bytes([90, 80, 70, 60, 50])


def _make(header=HEADER_A, key=KEY, size=SIZE):
    """Build encrypted data whose payload is all BODY bytes under ``key``."""
    probe = bytes(header) + bytes(size - len(header))
    zero = decrypt_full(probe, key, "", 0)
    offset = zero.data_offset
    keystream = bytes(zero.dec_data)
    plain = bytearray(keystream)
    plain[15:20] = bytes([BODY] * 5)
    plain[offset:] = bytes([BODY]) * (size - offset)
    enc = bytes(header) + bytes(a ^ b for a, b in zip(plain[15:], keystream[15:]))
    return enc, bytes(plain), offset


def _int_index(plain):
    h = fnv1("")
    return ((h & 0xFFFF0000) >> 8) ^ (h & 0xFFFF) ^ combine_bytes(plain, 3, 12)


def _collection(plains, keys):
    coll = WolfXDecryptCollection(decrypt_keys=list(keys))
    for plain in plains:
        str_index = combine_bytes(plain, 2, 10)
        if str_index < 10000:
            coll.string_values.setdefault(str_index, set()).add("")
        int_index = _int_index(plain)
        if int_index < 1000000:
            coll.int_values.setdefault(int_index, set()).add(0)
    return coll


def _keys():
    return [
        WolfXDecryptKey("/", ""),
        WolfXDecryptKey("/", WRONG_KEY),
        WolfXDecryptKey("/", KEY),
    ]


def test_decrypt_full_round_trip():
    enc, plain, offset = _make()
    result = decrypt_full(enc, KEY, "", 0)
    assert result.success is True
    assert bytes(result.dec_data) == plain
    assert bytes(result.dec_data[offset:]) == bytes([BODY]) * (SIZE - offset)
    assert result.decrypt_key.key == KEY


def test_decrypt_full_keeps_header_and_offset_range():
    enc, _, offset = _make()
    result = decrypt_full(enc, KEY)
    assert bytes(result.dec_data[:10]) == enc[:10]
    assert 514 <= result.data_offset <= 1022
    assert result.data_offset == offset


def test_decrypt_full_wrong_key_fails():
    enc, _, _ = _make()
    assert decrypt_full(enc, WRONG_KEY, "", 0).success is False


def test_decrypt_full_too_short():
    with pytest.raises(ValueError):
        decrypt_full(b"WOLFX", KEY)


def test_try_decrypt_p1_offset_beyond_data():
    enc = b"WOLFX" + bytes(95)
    result = DecryptResult(dec_data=bytearray(len(enc)))
    assert try_decrypt_p1(enc, KEY.encode(), WolfXDecryptCollection(), result) is False
    assert result.success is False


def test_crack_wolfx_writes_plain_file(tmp_path):
    enc, plain, offset = _make()
    path = tmp_path / "data.bin.wolfx"
    path.write_bytes(enc)
    coll = _collection([plain], _keys())
    result = DecryptResult()
    assert crack_wolfx(WolfXFile(path, len(enc)), coll, result) is True
    assert (tmp_path / "data.bin").read_bytes() == plain[offset:]
    assert result.success is True
    assert result.decrypt_key.key == KEY
    assert result.data_offset == offset


def test_crack_wolfx_reuses_previous_result(tmp_path):
    enc_a, plain_a, _ = _make(HEADER_A)
    enc_b, plain_b, offset_b = _make(HEADER_B)
    path_a = tmp_path / "a.wolfx"
    path_b = tmp_path / "b.wolfx"
    path_a.write_bytes(enc_a)
    path_b.write_bytes(enc_b)
    coll = _collection([plain_a, plain_b], _keys())
    result = DecryptResult()
    assert crack_wolfx(WolfXFile(path_a, len(enc_a)), coll, result) is True
    assert crack_wolfx(WolfXFile(path_b, len(enc_b)), coll, result) is True
    assert (tmp_path / "b").read_bytes() == plain_b[offset_b:]


def test_crack_wolfx_rejects_bad_magic(tmp_path):
    path = tmp_path / "bad.wolfx"
    path.write_bytes(b"NOTWOLF" + bytes(100))
    assert crack_wolfx(WolfXFile(path, 107), WolfXDecryptCollection(_keys()), DecryptResult()) is False
    assert not (tmp_path / "bad").exists()


def test_crack_wolfx_files_success(tmp_path):
    enc, plain, offset = _make()
    path = tmp_path / "x.wolfx"
    path.write_bytes(enc)
    coll = _collection([plain], _keys())
    assert crack_wolfx_files([WolfXFile(path, len(enc))], coll) is True
    assert (tmp_path / "x").read_bytes() == plain[offset:]


def test_crack_wolfx_files_no_matching_key(tmp_path):
    enc, plain, _ = _make()
    path = tmp_path / "y.wolfx"
    path.write_bytes(enc)
    coll = _collection([plain], [WolfXDecryptKey("/", WRONG_KEY)])
    assert crack_wolfx_files([WolfXFile(path, len(enc))], coll) is False
    assert not (tmp_path / "y").exists()


def test_crack_wolfx_files_max_retries(tmp_path):
    enc, plain, _ = _make()
    path = tmp_path / "z.wolfx"
    path.write_bytes(enc)
    coll = _collection([plain], _keys())
    assert crack_wolfx_files([WolfXFile(path, len(enc))], coll, 5) is False
    assert not (tmp_path / "z").exists()


def test_crack_wolfx_files_empty_list():
    assert crack_wolfx_files([], WolfXDecryptCollection()) is True


def test_decrypt_file_writes_output(tmp_path):
    enc, plain, offset = _make()
    path = tmp_path / "file.dat.wolfx"
    path.write_bytes(enc)
    out = decrypt_file(path, KEY, "", 0)
    assert out == tmp_path / "file.dat"
    assert out.read_bytes() == plain[offset:]


def test_decrypt_file_wrong_key_raises(tmp_path):
    enc, _, _ = _make()
    path = tmp_path / "file.wolfx"
    path.write_bytes(enc)
    with pytest.raises(DecryptionError):
        decrypt_file(path, WRONG_KEY, "", 0)
    assert not (tmp_path / "file").exists()