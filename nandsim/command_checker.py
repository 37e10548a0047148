"""Command-line front end: validates arguments and feeds the command buffer."""

from __future__ import annotations

import os
import re
import sys
from collections.abc import Sequence

from nandsim.command_buffer import BufferCommand, CommandBuffer, CommandBufferError, Op
from nandsim.ssd import SSD, LBA_COUNT
from nandsim.command_buffer import MAX_ERASE_SIZE

_ADDRESS = re.compile(r"0x[0-9A-Fa-f]{8}")
_LEADING_INT = re.compile(r"\s*([+-]?\d+)")
_INT_MIN = -(2**31)
_INT_MAX = 2**31 - 1

# Number of arguments each operator takes, the operator itself included.
_ARG_COUNTS = {Op.WRITE: 3, Op.READ: 2, Op.ERASE: 3, Op.FLUSH: 1}


class CommandError(ValueError):
    """Raised when command-line arguments do not form a valid command."""


def is_valid_address(text: str) -> bool:
    """Return True if `text` is a value of the form 0x followed by 8 hex digits."""
    return _ADDRESS.fullmatch(text) is not None


def _to_int(text: str) -> int:
    """Parse the leading decimal integer of `text` as a 32-bit signed number."""
    match = _LEADING_INT.match(text)
    if match is None:
        raise CommandError(f"not a number: {text!r}")
    value = int(match.group(1))
    if not _INT_MIN <= value <= _INT_MAX:
        raise CommandError(f"number out of range: {text!r}")
    return value


def _parse_lba(text: str, ssd: SSD) -> int:
    lba = _to_int(text)
    if not 0 <= lba < LBA_COUNT:
        ssd.record_error()
        raise CommandError(f"LBA {lba} is out of range")
    return lba


def _parse_erase_size(lba: int, text: str, ssd: SSD) -> int:
    size = min(_to_int(text), MAX_ERASE_SIZE)
    if size < 0:
        ssd.record_error()
        raise CommandError(f"erase size {size} is negative")
    if lba + size - 1 >= LBA_COUNT:
        ssd.record_error()
        raise CommandError(f"erase range {lba}..{lba + size - 1} is out of range")
    if size == 0:
        raise CommandError("erase size is zero")
    return size


def parse_command(args: Sequence[str], ssd: SSD) -> BufferCommand:
    """Turn arguments (operator first) into a command.

    Raises CommandError for invalid arguments; an out-of-range block is also
    recorded as an error in the SSD's output file.
    """
    if not args:
        raise CommandError("missing operator")
    try:
        op = Op(args[0])
    except ValueError as exc:
        raise CommandError(f"invalid operator: {args[0]!r}") from exc
    if len(args) != _ARG_COUNTS[op]:
        raise CommandError(f"wrong number of arguments for {op.value}")

    if op is Op.FLUSH:
        return BufferCommand(Op.FLUSH)
    lba = _parse_lba(args[1], ssd)
    if op is Op.READ:
        return BufferCommand(Op.READ, lba)
    if op is Op.WRITE:
        address = args[2]
        if not is_valid_address(address):
            raise CommandError(f"invalid value: {address!r}")
        return BufferCommand(Op.WRITE, lba, int(address[2:], 16))
    size = _parse_erase_size(lba, args[2], ssd)
    return BufferCommand(Op.ERASE, lba, size)


def execute(args: Sequence[str], directory: str | os.PathLike[str] = ".") -> int:
    """Validate and run one command; return the value read for a read, else 0."""
    ssd = SSD(directory)
    command = parse_command(args, ssd)
    with CommandBuffer(ssd) as buffer:
        return buffer.enqueue(command)


def main(argv: Sequence[str] | None = None) -> int:
    """Run the command given on the command line in the current directory."""
    args = list(sys.argv[1:] if argv is None else argv)
    try:
        execute(args)
    except CommandError:
        pass
    except CommandBufferError as error:
        print(f"CommandBuffer error: {error}", file=sys.stderr)
    return 0


if __name__ == "__main__":
    sys.exit(main())