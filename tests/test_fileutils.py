import pytest

from uberwolf.fileutils import (
    backup_file,
    buffer_to_file,
    byte_to_hex_string,
    file_to_buffer,
)


def test_byte_to_hex_string_pads_and_uppercases():
    assert byte_to_hex_string(0x0A) == "0A"
    assert byte_to_hex_string(0xFF) == "FF"
    assert byte_to_hex_string(0) == "00"


def test_byte_to_hex_string_rejects_out_of_range():
    with pytest.raises(ValueError):
        byte_to_hex_string(256)
    with pytest.raises(ValueError):
        byte_to_hex_string(-1)


def test_round_trip(tmp_path):
    path = tmp_path / "data.bin"
    payload = bytes(range(256))
    buffer_to_file(path, payload)
    assert file_to_buffer(path) == bytearray(payload)


def test_write_with_offset(tmp_path):
    path = tmp_path / "data.bin"
    buffer_to_file(path, b"headerBODY", 6)
    assert path.read_bytes() == b"BODY"


def test_write_offset_out_of_range(tmp_path):
    with pytest.raises(ValueError):
        buffer_to_file(tmp_path / "x.bin", b"abc", 4)


def test_empty_file_is_error(tmp_path):
    path = tmp_path / "empty.bin"
    path.write_bytes(b"")
    with pytest.raises(ValueError):
        file_to_buffer(path)


def test_missing_file_is_error(tmp_path):
    with pytest.raises(FileNotFoundError):
        file_to_buffer(tmp_path / "missing.bin")


def test_backup_created_once(tmp_path):
    backup_dir = tmp_path / "backup"
    backup_dir.mkdir()
    original = tmp_path / "Game.dat"
    original.write_bytes(b"first")

    target = backup_file(original, backup_dir)
    assert target == backup_dir / "Game.dat"
    assert target.read_bytes() == b"first"

    original.write_bytes(b"second")
    backup_file(original, backup_dir)
    assert target.read_bytes() == b"first"