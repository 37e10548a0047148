"""NAND storage file and result file of the simulated SSD."""

from __future__ import annotations

import os
from pathlib import Path

LBA_COUNT = 100
MAX_VALUE = 0xFFFFFFFF
DATA_FILE_NAME = "ssd_nand.txt"
OUTPUT_FILE_NAME = "ssd_output.txt"


def _format_entry(lba: int, value: int) -> str:
    return f"{lba:02d} 0x{value:08X}"


class SSD:
    """A 100-block SSD whose contents live in a text file, one block per line."""

    def __init__(self, directory: str | os.PathLike[str] = ".") -> None:
        self.directory = Path(directory)
        self.data_file = self.directory / DATA_FILE_NAME
        self.output_file = self.directory / OUTPUT_FILE_NAME
        if not self.data_file.exists():
            self.directory.mkdir(parents=True, exist_ok=True)
            self.data_file.write_text(
                "".join(_format_entry(lba, 0) + "\n" for lba in range(LBA_COUNT))
            )

    def write(self, lba: int, value: int) -> None:
        """Store a 32-bit value in the given block."""
        if not 0 <= value <= MAX_VALUE:
            raise ValueError(f"value {value!r} does not fit in 32 bits")
        lines = self.data_file.read_text().splitlines()
        if not 0 <= lba < len(lines):
            raise IndexError(f"LBA {lba} is out of range")
        lines[lba] = _format_entry(lba, value)
        self.data_file.write_text("\n".join(lines) + "\n")

    def read(self, lba: int) -> int:
        """Return the value of a block and record it in the output file."""
        value = self._lookup(lba)
        self.record_output(value)
        return value

    def erase(self, start_lba: int, size: int) -> None:
        """Zero `size` blocks starting at `start_lba`."""
        for lba in range(start_lba, start_lba + size):
            self.write(lba, 0)

    def record_output(self, value: int) -> None:
        """Replace the output file with a read result."""
        self.output_file.write_text(f"0x{value:08X}\n")

    def record_error(self) -> None:
        """Replace the output file with an error marker."""
        self.output_file.write_text("ERROR")

    def _lookup(self, lba: int) -> int:
        try:
            text = self.data_file.read_text()
        except FileNotFoundError:
            return 0
        for line in text.splitlines():
            fields = line.split()
            if len(fields) < 2:
                continue
            try:
                entry = int(fields[0])
            except ValueError:
                continue
            if entry != lba:
                continue
            data = fields[1].removeprefix("0x")
            return int(data, 16) if data else 0
        return 0