# nandsim

A small simulator of an SSD with 100 logical blocks (LBA 0–99). Each block holds
one 32-bit value. The device keeps its contents in plain text files in a working
directory. Writes and erases go through a command buffer of up to five entries.
The buffer is saved as empty marker files, and it is optimised every time a
command is queued.

## Installation

```
pip install .
```

For the tests:

```
pip install .[test]
pytest
```

## Command line

The `nandsim` command works on the current directory:

```
nandsim W 3 0x12345678    # write a value to LBA 3
nandsim R 3               # read LBA 3; the result goes to ssd_output.txt
nandsim E 5 4             # erase 4 blocks starting at LBA 5 (size capped at 10)
nandsim F                 # flush the command buffer to the device
```

The command prints nothing and always exits with status 0. It ignores invalid
arguments: an unknown operator, the wrong number of arguments, a malformed value,
or an erase size of zero. There is one exception. If the LBA is outside 0–99, or
an erase would run past LBA 99, or an erase size is negative, the command writes
`ERROR` to `ssd_output.txt` and does nothing more. A value must be written as
`0x` followed by exactly eight hexadecimal digits.

Files the command uses:

- `ssd_nand.txt`: the device contents, one line per LBA, such as `03 0x12345678`.
  The file is created with all blocks set to zero if it does not exist.
- `ssd_output.txt`: the result of the last read, such as `0x12345678`, or `ERROR`.
- `buffer/`: five files that name the pending commands, for example
  `1_W_3_12345678.txt`, `2_E_5_4.txt` and `3_empty.txt`.

A read is answered from the pending commands when they fix the block's value.
Otherwise it is answered from `ssd_nand.txt`. A queued command first flushes the
buffer to the device when five commands are already pending.

## Library use

```python
from nandsim.ssd import SSD
from nandsim.command_buffer import BufferCommand, CommandBuffer, Op

ssd = SSD("work")
with CommandBuffer(ssd, "work/buffer") as buffer:
    buffer.enqueue(BufferCommand(Op.WRITE, 1, 0x11111111))
    buffer.enqueue(BufferCommand(Op.ERASE, 4, 3))
    value = buffer.enqueue(BufferCommand(Op.READ, 1))
```

`CommandBuffer(ssd)` without a directory uses `buffer/` inside the SSD's
directory. Entering the `with` block loads the pending commands from that
directory. Leaving it writes them back. `enqueue` returns the value read for a
read command and 0 for every other command. `flush()` applies all pending
commands to the device. `fast_read(lba)` returns the value that the pending
commands fix for a block, or `None`.

`SSD` can also be used directly, through `write(lba, value)`, `read(lba)`,
`erase(start_lba, size)`, `record_output(value)` and `record_error()`.

The optimisation functions in `nandsim.command_buffer` work on lists of
`BufferCommand`:

- `remove_overwritten(commands)` drops the writes and erases that later commands
  fully overwrite.
- `merge_erases(commands)` joins overlapping or adjacent erases, as long as the
  merged range stays at 10 blocks or fewer.
- `optimize(commands)` runs both, in that order.

`parse_buffer_filename(name)` and `buffer_filename(index, command)` convert
between commands and buffer file names.

`nandsim.command_checker.parse_command(args, ssd)` turns command-line style
arguments (operator first) into a `BufferCommand`, or raises `CommandError`.
`nandsim.command_checker.execute(args, directory)` validates the arguments and
runs the command in the given directory. It returns the value read, or 0.
Problems with the buffer raise `CommandBufferError`.