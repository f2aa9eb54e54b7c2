import errno
import io
import struct

import pytest

from rvfat.disk import DiskImage
from rvfat.fat32 import SEEK_SET, Fat32Volume
from rvfat.fs import FILE_READABLE, FILE_WRITABLE, MAX_FILE_NUMBER, FileTable, FsType, get_fs_type


def volume():
    disk = DiskImage(8)
    boot = bytearray(512)
    boot[13] = 1
    struct.pack_into("<H", boot, 14, 1)
    boot[16] = 1
    struct.pack_into("<I", boot, 36, 1)
    struct.pack_into("<I", boot, 44, 2)
    struct.pack_into("<H", boot, 510, 0xAA55)
    disk.write_sector(0, bytes(boot))
    fat = bytearray(512)
    struct.pack_into("<IIII", fat, 0, 0x0FFFFFF8, 0x0FFFFFFF, 0x0FFFFFFF, 0x0FFFFFFF)
    disk.write_sector(1, bytes(fat))
    root = bytearray(512)
    root[0:32] = struct.pack("<8s3sBBBHHHHHHHI", b"NOTE    ", b"TXT", 0, 0, 0, 0, 0, 0, 0, 0, 0, 3, 5)
    disk.write_sector(2, bytes(root))
    disk.write_sector(3, b"hello" + bytes(507))
    return Fat32Volume(disk, 0)


def test_get_fs_type():
    assert get_fs_type("/fat32/a") is FsType.FAT32
    assert get_fs_type("/ext2/a") is FsType.EXT2
    assert get_fs_type("/tmp/a") is None


def test_open_read_seek_write():
    table = FileTable(volume())
    fd = table.open("/fat32/note", FILE_READABLE | FILE_WRITABLE)
    assert fd == 3
    f = table.get(fd)
    assert f.read(100) == b"hello"
    f.lseek(0, SEEK_SET)
    assert f.write(b"J") == 1
    f.lseek(0, SEEK_SET)
    assert f.read(5) == b"Jello"


def test_read_only_file_rejects_write():
    table = FileTable(volume())
    f = table.get(table.open("/fat32/note", FILE_READABLE))
    with pytest.raises(PermissionError):
        f.write(b"x")


def test_console_descriptors():
    out, err = io.StringIO(), io.StringIO()
    table = FileTable(None, io.StringIO("ab"), out, err)
    assert table.get(0).read(2) == b"ab"
    table.get(1).write(b"hi")
    table.get(2).write(b"no")
    assert (out.getvalue(), err.getvalue()) == ("hi", "no")
    with pytest.raises(OSError):
        table.get(1).lseek(0, SEEK_SET)


def test_open_errors():
    table = FileTable(volume())
    with pytest.raises(OSError) as info:
        table.open("/ext2/x", FILE_READABLE)
    assert info.value.errno == errno.ENOTSUP
    with pytest.raises(OSError):
        table.open("/other/x", FILE_READABLE)
    with pytest.raises(FileNotFoundError):
        table.open("/fat32/missing", FILE_READABLE)


def test_close_and_exhaustion():
    table = FileTable(volume())
    fds = [table.open("/fat32/note", FILE_READABLE) for _ in range(MAX_FILE_NUMBER - 3)]
    assert fds == list(range(3, MAX_FILE_NUMBER))
    with pytest.raises(OSError):
        table.open("/fat32/note", FILE_READABLE)
    table.close(5)
    with pytest.raises(OSError):
        table.get(5)
    assert table.open("/fat32/note", FILE_READABLE) == 5