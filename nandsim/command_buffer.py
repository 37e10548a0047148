"""Write-back buffer of pending SSD commands, persisted as file names."""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from nandsim.ssd import SSD

MAX_BUFFER_SIZE = 5
MAX_ERASE_SIZE = 10

_BUFFER_FILE = re.compile(r"[1-5]_.*\.txt")


class Op(str, Enum):
    WRITE = "W"
    READ = "R"
    ERASE = "E"
    FLUSH = "F"


@dataclass(frozen=True)
class BufferCommand:
    """A command; `data` is the value for a write and the block count for an erase."""

    op: Op
    lba: int = 0
    data: int = 0

    @property
    def end(self) -> int:
        """Last block an erase covers."""
        return self.lba + self.data - 1


class CommandBufferError(Exception):
    """Raised when the buffer or its directory cannot be handled."""


def parse_buffer_filename(name: str) -> BufferCommand | None:
    """Return the command a buffer file name holds, or None if it holds none."""
    if not _BUFFER_FILE.fullmatch(name):
        return None
    tokens = [token.split(".txt", 1)[0] for token in name.split("_")]
    if "empty" in tokens:
        return None
    if len(tokens) < 2 or tokens[1] not in (Op.WRITE.value, Op.ERASE.value):
        return None
    op = Op(tokens[1])
    try:
        lba = int(tokens[2]) if len(tokens) > 2 else 0
        if len(tokens) > 3:
            data = int(tokens[3], 16 if op is Op.WRITE else 10)
        else:
            data = 0
    except ValueError as exc:
        raise CommandBufferError(f"Malformed buffer file name: {name}") from exc
    return BufferCommand(op, lba, data)


def buffer_filename(index: int, command: BufferCommand) -> str:
    """Return the file name that stores `command` at 1-based position `index`."""
    data = str(command.data) if command.op is Op.ERASE else format(command.data, "X")
    return f"{index}_{command.op.value}_{command.lba}_{data}.txt"


def remove_overwritten(commands: list[BufferCommand]) -> list[BufferCommand]:
    """Drop writes and erases whose every block a later command replaces."""
    affected: set[int] = set()
    kept: list[BufferCommand] = []
    for command in reversed(commands):
        if command.op is Op.ERASE:
            blocks = range(command.lba, command.lba + command.data)
            if command.data > 0 and all(block in affected for block in blocks):
                continue
            affected.update(blocks)
            kept.append(command)
        elif command.op is Op.WRITE:
            if command.lba not in affected:
                affected.add(command.lba)
                kept.append(command)
    kept.reverse()
    return kept


def merge_erases(commands: list[BufferCommand]) -> list[BufferCommand]:
    """Fold later overlapping or adjacent erases into earlier ones, up to 10 blocks."""
    pending = list(commands)
    result: list[BufferCommand] = []
    while pending:
        head = pending.pop(0)
        if head.op is not Op.ERASE:
            result.append(head)
            continue
        start, end = head.lba, head.end
        remaining: list[BufferCommand] = []
        for other in pending:
            if other.op is Op.ERASE:
                next_start, next_end = other.lba, other.end
                touches = (start <= next_start <= end + 1) or (
                    start - 1 <= next_end <= end
                )
                new_start = min(start, next_start)
                new_end = max(end, next_end)
                if touches and new_end - new_start + 1 <= MAX_ERASE_SIZE:
                    start, end = new_start, new_end
                    continue
            remaining.append(other)
        pending = remaining
        result.append(BufferCommand(Op.ERASE, start, end - start + 1))
    return result


def optimize(commands: list[BufferCommand]) -> list[BufferCommand]:
    """Remove overwritten commands, then merge erases."""
    return merge_erases(remove_overwritten(commands))


class CommandBuffer:
    """Pending writes and erases in front of an SSD, flushed when full."""

    def __init__(
        self, ssd: SSD, directory: str | os.PathLike[str] | None = None
    ) -> None:
        self.ssd = ssd
        self.directory = Path(directory) if directory is not None else ssd.directory / "buffer"
        self.commands: list[BufferCommand] = []

    def __enter__(self) -> CommandBuffer:
        self.load()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.save()

    def load(self) -> None:
        """Read pending commands from the buffer directory, creating it if needed."""
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
        except OSError as error:
            raise CommandBufferError(
                f"Failed to create directory: {self.directory}"
            ) from error
        self.commands = []
        found = False
        for name in self.file_names():
            if not _BUFFER_FILE.fullmatch(name):
                continue
            found = True
            command = parse_buffer_filename(name)
            if command is not None:
                self.commands.append(command)
        if not found:
            self._create_empty_files()

    def save(self) -> None:
        """Replace the buffer directory's files with the pending commands."""
        self.clear_directory()
        self.directory.mkdir(parents=True, exist_ok=True)
        for index, command in enumerate(self.commands, start=1):
            (self.directory / buffer_filename(index, command)).touch()
        self._create_empty_files()

    def clear_directory(self) -> None:
        """Delete every file in the buffer directory."""
        if not self.directory.is_dir():
            return
        for path in self.directory.iterdir():
            if not path.is_dir():
                path.unlink()

    def file_names(self) -> list[str]:
        """Names of the entries in the buffer directory, sorted."""
        if not self.directory.is_dir():
            return []
        return sorted(path.name for path in self.directory.iterdir())

    def is_full(self) -> bool:
        return len(self.commands) >= MAX_BUFFER_SIZE

    def fast_read(self, lba: int) -> int | None:
        """Return the value a pending command fixes for `lba`, or None."""
        for command in reversed(self.commands):
            if command.op is Op.WRITE and command.lba == lba:
                return command.data
            if command.op is Op.ERASE and command.lba <= lba <= command.end:
                return 0
        return None

    def enqueue(self, command: BufferCommand) -> int:
        """Accept a command; return the value read for a read command, else 0."""
        op = Op(command.op)
        if op is Op.FLUSH or self.is_full():
            self.flush()
            if op is Op.FLUSH:
                return 0
        value = 0
        if op in (Op.WRITE, Op.ERASE):
            self.commands.append(command)
        elif op is Op.READ:
            cached = self.fast_read(command.lba)
            if cached is None:
                value = self.ssd.read(command.lba)
            else:
                value = cached
                self.ssd.record_output(value)
        self.commands = optimize(self.commands)
        return value

    def flush(self) -> None:
        """Apply every pending command to the SSD and empty the buffer."""
        for command in self.commands:
            if command.op is Op.WRITE:
                self.ssd.write(command.lba, command.data)
            elif command.op is Op.ERASE:
                self.ssd.erase(command.lba, command.data)
            else:
                raise CommandBufferError(f"Invalid Command :{command.op}")
        self.commands = []

    def _create_empty_files(self) -> None:
        for index in range(len(self.commands) + 1, MAX_BUFFER_SIZE + 1):
            path = self.directory / f"{index}_empty.txt"
            if path.exists():
                continue
            try:
                path.touch()
            except OSError as error:
                raise CommandBufferError(f"Failed to create file: {path}") from error