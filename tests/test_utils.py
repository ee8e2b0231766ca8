import pytest

from uberwolf.wolfx.utils import collect_wolfx_files, combine_bytes, extract_bytes


def test_extract_four_bytes_big_endian():
    assert extract_bytes(0x11223344, 4) == bytes([0x11, 0x22, 0x33, 0x44])


def test_extract_three_bytes_drops_top():
    assert extract_bytes(0x11223344, 3) == bytes([0x22, 0x33, 0x44])


def test_extract_invalid_count_raises():
    with pytest.raises(ValueError):
        extract_bytes(1, 5)


@pytest.mark.parametrize("value", [0, 1, 0xDEADBEEF, 0xFFFFFFFF, 0x00ABCDEF])
def test_extract_combine_round_trip(value):
    assert combine_bytes(extract_bytes(value, 4), 4) == value


def test_combine_with_start():
    data = bytes([0xFF, 0x01, 0x02, 0x03])
    assert combine_bytes(data, 3, 1) == 0x010203


def test_combine_out_of_range_raises():
    with pytest.raises(IndexError):
        combine_bytes(b"\x01\x02", 3, 0)


def test_collect_sorted_by_size_and_recursive(tmp_path):
    (tmp_path / "sub").mkdir()
    (tmp_path / "big.wolfx").write_bytes(b"x" * 30)
    (tmp_path / "sub" / "small.wolfx").write_bytes(b"x" * 5)
    (tmp_path / "mid.wolfx").write_bytes(b"x" * 10)
    (tmp_path / "other.dat").write_bytes(b"x" * 1)

    files = collect_wolfx_files(tmp_path)
    assert [f.file_path.name for f in files] == ["small.wolfx", "mid.wolfx", "big.wolfx"]
    assert [f.file_size for f in files] == [5, 10, 30]


def test_collect_empty_folder(tmp_path):
    assert collect_wolfx_files(tmp_path) == []


def test_collect_missing_folder_raises(tmp_path):
    with pytest.raises(FileNotFoundError):
        collect_wolfx_files(tmp_path / "missing")