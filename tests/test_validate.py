import pytest

from uberwolf.wolfx.validate import validate_checksum


def test_five_bytes_are_their_own_checksum():
    assert validate_checksum(b"abcde", b"abcde") is True


def test_samples_spread_over_data():
    data = bytes(range(9))
    assert validate_checksum(data, bytes([0, 2, 4, 6, 8])) is True


def test_single_byte_repeats_sample():
    assert validate_checksum(b"x", b"xxxxx") is True


def test_mismatch_returns_false():
    assert validate_checksum(b"abcde", b"abcdf") is False


def test_works_on_memoryview_slice():
    buffer = bytearray(b"....abcde")
    assert validate_checksum(memoryview(buffer)[4:], b"abcde") is True


def test_empty_data_raises():
    with pytest.raises(ValueError):
        validate_checksum(b"", b"abcde")


def test_wrong_checksum_length_raises():
    with pytest.raises(ValueError):
        validate_checksum(b"abcde", b"abc")


def test_verbose_match_message(capsys):
    assert validate_checksum(b"abcde", b"abcde", verbose=True) is True
    assert "Checksum match" in capsys.readouterr().out


def test_verbose_mismatch_message(capsys):
    assert validate_checksum(b"abcde", b"zzzzz", verbose=True) is False
    assert "Checksum mismatch" in capsys.readouterr().err