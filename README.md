# rvfat

A small toolkit for raw disk images. It has no dependencies outside the standard library.

- `rvfat.disk.DiskImage` holds an image in memory. It reads and writes 512-byte sectors with `read_sector` and `write_sector`, and `has_boot_signature` checks sector 0 for the `0x55 0xAA` boot signature. `DiskImage.from_file` loads an image from disk.
- `rvfat.mbr` parses the four primary entries of an MBR with `parse_partition_table` and `PartitionEntry`. `mbr_init` mounts every partition of type `0x83` that holds FAT32 and returns the volumes keyed by partition number. `partition_init` mounts a single partition.
- `rvfat.fat32` decodes the boot sector (`BootSector`) and directory entries (`DirEntry`). `Fat32Volume` follows cluster chains and opens files in the root directory by their 8-character name (`open_file`). It also provides `lseek`, `read` and `write`. `is_fat32`, `next_slash` and `to_upper_case` are small helpers.
- `rvfat.fs` has a file-descriptor table (`FileTable`) of 16 slots. Descriptors 0, 1 and 2 are bound to the console. Paths under `/fat32/` open files on the mounted volume and give an `OpenFile` with `read`, `write` and `lseek`. `get_fs_type` tells which filesystem a path's prefix names.
- `rvfat.vfs` contains the console reads and writes used by the standard descriptors: `stdin_read`, `stdout_write` and `stderr_write`.
- `rvfat.fmt` is a printf-style formatter (`format`, `printk`). It supports the `#`, `0`, `+` and space flags, width, precision, `*`, the length letters `l`/`z`/`t`/`j`, `%x`/`%X`/`%p`, `%d`/`%i`/`%u`, `%s`, `%c`, `%n` and `%%`. Any other conversion character is printed as-is. `strtol` and `isspace` are also available.
- `rvfat.rand` is a 64-bit linear congruential generator (`Rand`, plus the module-level `srand` and `rand`).

## Install

```
pip install .
```

To run the tests, install the `test` extra:

```
pip install .[test]
pytest
```

## Formatting

```python
from rvfat.fmt import format

format("%5d|%#x", 42, 255)   # '   42|0xff'
format("%08.3d", 7)          # '     007'
```

`printk(fmt, *args, stream=None)` writes the formatted text to the stream, or to standard output by default. It returns the number of characters written.

## Random numbers

```python
from rvfat.rand import Rand

gen = Rand()
gen.srand(1)
values = [gen.rand() for _ in range(3)]
```

Each value lies in `[0, 2**31)`.

## Reading a file from an image

```python
from rvfat.disk import DiskImage
from rvfat.fs import FileTable, FILE_READABLE
from rvfat.mbr import mbr_init

device = DiskImage.from_file("disk.img")
volume = next(iter(mbr_init(device).values()))
files = FileTable(volume)
fd = files.open("/fat32/EMAIL", FILE_READABLE)
print(files.get(fd).read(100))
files.close(fd)
```

## Shell

```
rvfat-shell [IMAGE]
```

The shell reads characters from standard input one at a time and echoes them. Backspace (`0x7f`) erases one character, and a carriage return or newline runs the line. The commands are:

- `echo TEXT` or `echo "quoted text"`.
- `cat /fat32/NAME` prints a file. NUL bytes are shown as `x`, and a line containing `$` is added when the file does not end in a newline.
- `edit /fat32/NAME OFFSET CONTENT` writes CONTENT, which may be quoted, into the file at OFFSET.

Any other line prints `command not found`. If an IMAGE is given, it must carry an MBR boot signature. The first FAT32 partition found is mounted, and the image is written back to the file when input ends.

## What it does not do

- Only the root directory of a FAT32 volume is searched, and only the 8-character base name is compared. Subdirectories and long file names are not supported.
- Files cannot be created, deleted or grown beyond the clusters already allocated to them. `write` stops at the end of the cluster chain, although it updates the recorded size when writing past the old end within that chain.
- ext2 paths (`/ext2/...`) are recognised but refused, and there is no other filesystem.
- No FAT table updates or free-cluster allocation are ever made.