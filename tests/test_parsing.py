import pytest

from hypervisor_stats.exceptions import ParseError
from hypervisor_stats.parsing import parse_count, parse_size


def test_parse_size_kb_is_base_unit():
    size = parse_size("2048 KB")
    assert size.kib == 2048.0
    assert size.unit == "KB"
    assert str(size) == "2048 KB"


@pytest.mark.parametrize(
    "raw, expected",
    [
        ("65536 KiB", 65536.0),
        ("2 MiB", 2048.0),
        ("1.5 GB", 1.5 * 1024 * 1024),
        ("1 TiB", 1024.0 ** 3),
        ("2048 bytes", 2.0),
        ("  4096   KiB  ", 4096.0),
    ],
)
def test_parse_size_normalizes_units(raw, expected):
    assert parse_size(raw).kib == expected


def test_parse_size_unknown_unit_passes_through():
    size = parse_size("512 blocks")
    assert size.kib == 512.0
    assert size.unit == "blocks"


def test_parse_size_without_unit_assumes_base_unit():
    assert parse_size("1024").kib == 1024.0
    assert parse_size(4096).kib == 4096.0


@pytest.mark.parametrize("raw", ["abc KB", "", "   ", "2048KB", "-1 KiB", "nan KiB", None, True])
def test_parse_size_rejects_bad_magnitude(raw):
    with pytest.raises(ParseError):
        parse_size(raw)


def test_parse_count():
    assert parse_count("16") == 16
    assert parse_count(" 4 ") == 4
    assert parse_count(0) == 0


@pytest.mark.parametrize("raw", ["four", "1.5", "-2", None, False])
def test_parse_count_rejects_bad_values(raw):
    with pytest.raises(ParseError):
        parse_count(raw)


@pytest.mark.parametrize("raw", ["1e308 TiB", "1e303 GiB", "9e307 MiB"])
def test_parse_size_rejects_sizes_overflowing_after_conversion(raw):
    with pytest.raises(ParseError):
        parse_size(raw)
