import re

import pytest

from nandsim.ssd import SSD


@pytest.fixture
def ssd(tmp_path):
    return SSD(tmp_path)


def _line(ssd, number):
    return ssd.data_file.read_text().splitlines()[number]


def _write_non_zero(ssd, start, size):
    for lba in range(start, start + size):
        ssd.write(lba, 0x12345678)


def _erase_and_check(ssd, start, size):
    _write_non_zero(ssd, start, size)
    ssd.erase(start, size)
    assert [ssd.read(lba) for lba in range(start, start + size)] == [0] * size


def test_erase_success(ssd):
    _erase_and_check(ssd, 5, 10)


def test_only_erase_lba_range(ssd):
    _write_non_zero(ssd, 4, 13)
    _erase_and_check(ssd, 5, 10)
    assert ssd.read(4) == 0x12345678
    assert ssd.read(16) == 0x12345678


@pytest.mark.parametrize(
    "lba, value",
    [(3, 0x12345678), (5, 0x12345555), (20, 0x00000000)],
)
def test_write_then_read(ssd, lba, value):
    ssd.write(lba, value)
    assert ssd.read(lba) == value


def test_read_value_change(ssd):
    ssd.write(7, 0x12347777)
    ssd.write(7, 0x12377777)
    assert ssd.read(7) == 0x12377777


def test_read_output_file(ssd):
    ssd.write(15, 0x15151515)
    assert ssd.read(15) == 0x15151515
    assert ssd.output_file.read_text().splitlines()[0] == "0x15151515"


def test_init_creates_data_file(ssd):
    assert ssd.data_file.exists()
    assert len(ssd.data_file.read_text().splitlines()) == 100


def test_write_line_format(ssd):
    ssd.write(3, 0x12345678)
    assert _line(ssd, 3) == "03 0x12345678"


def test_file_line_format_is_correct(ssd):
    line = _line(ssd, 76)
    assert line == "76 0x00000000"
    assert bool(re.fullmatch(r"\d{2} 0x[0-9A-Fa-f]{8}", line)) is True


def test_write_uses_uppercase_hex(ssd):
    ssd.write(9, 0xABCDEF01)
    assert _line(ssd, 9) == "09 0xABCDEF01"


def test_existing_data_is_kept_on_reopen(tmp_path):
    first = SSD(tmp_path)
    first.write(42, 0xDEADBEEF)
    assert SSD(tmp_path).read(42) == 0xDEADBEEF


def test_record_error(ssd):
    ssd.record_error()
    assert ssd.output_file.read_text() == "ERROR"


def test_record_output_pads_value(ssd):
    ssd.record_output(0xAB)
    assert ssd.output_file.read_text() == "0x000000AB\n"


def test_write_out_of_range_lba(ssd):
    with pytest.raises(IndexError):
        ssd.write(100, 1)


def test_write_value_too_large(ssd):
    with pytest.raises(ValueError):
        ssd.write(1, 0x100000000)


def test_read_missing_data_file(ssd):
    ssd.data_file.unlink()
    assert ssd.read(3) == 0
    assert ssd.output_file.read_text() == "0x00000000\n"