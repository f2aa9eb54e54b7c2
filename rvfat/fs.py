"""Per-process table of open files."""

from __future__ import annotations

import errno
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import TextIO

from rvfat import vfs
from rvfat.fat32 import Fat32File, Fat32Volume

MAX_PATH_LENGTH = 80
MAX_FILE_NUMBER = 16

FILE_READABLE = 0x1
FILE_WRITABLE = 0x2


class FsType(IntEnum):
    FAT32 = 0x1
    EXT2 = 0x2


def get_fs_type(path: str) -> FsType | None:
    """The filesystem a path's mount prefix names, or None."""
    if path.startswith("/fat32/"):
        return FsType.FAT32
    if path.startswith("/ext2/"):
        return FsType.EXT2
    return None


@dataclass
class OpenFile:
    """An open file: a console stream or a file on a FAT32 volume."""

    perms: int
    path: str = ""
    fs_type: FsType | None = None
    cfo: int = 0
    fat32_file: Fat32File | None = None
    volume: Fat32Volume | None = None
    console: str | None = None
    stream: TextIO | None = None

    def read(self, size: int) -> bytes:
        if not self.perms & FILE_READABLE or self.console in ("stdout", "stderr"):
            raise PermissionError(errno.EBADF, "file not readable", self.path)
        if self.volume is not None:
            return self.volume.read(self, size)
        return vfs.stdin_read(self, size, self.stream)

    def write(self, data: bytes) -> int:
        if not self.perms & FILE_WRITABLE or self.console == "stdin":
            raise PermissionError(errno.EBADF, "file not writable", self.path)
        if self.volume is not None:
            return self.volume.write(self, data)
        if self.console == "stderr":
            return vfs.stderr_write(self, data, self.stream)
        return vfs.stdout_write(self, data, self.stream)

    def lseek(self, offset: int, whence: int) -> int:
        if self.volume is None:
            raise OSError(errno.ESPIPE, "illegal seek")
        return self.volume.lseek(self, offset, whence)


class FileTable:
    """File descriptors 0 to 15, with 0, 1 and 2 bound to the console."""

    def __init__(
        self,
        volume: Fat32Volume | None = None,
        stdin: TextIO | None = None,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.volume = volume
        self._files: list[OpenFile | None] = [None] * MAX_FILE_NUMBER
        self._files[0] = OpenFile(FILE_READABLE, console="stdin", stream=stdin)
        self._files[1] = OpenFile(FILE_WRITABLE, console="stdout", stream=stdout or sys.stdout)
        self._files[2] = OpenFile(FILE_WRITABLE, console="stderr", stream=stderr or sys.stderr)

    def open(self, path: str, flags: int) -> int:
        """Open ``path`` and return its descriptor."""
        if len(path) >= MAX_PATH_LENGTH:
            raise OSError(errno.ENAMETOOLONG, "path too long", path)
        fs_type = get_fs_type(path)
        if fs_type is FsType.EXT2:
            raise OSError(errno.ENOTSUP, "ext2 is not supported", path)
        if fs_type is None:
            raise OSError(errno.ENOENT, "unknown filesystem", path)
        if self.volume is None:
            raise OSError(errno.ENODEV, "no fat32 volume mounted", path)
        try:
            fd = self._files.index(None)
        except ValueError:
            raise OSError(errno.EMFILE, "too many open files") from None
        fat32_file = self.volume.open_file(path)
        self._files[fd] = OpenFile(flags, path, fs_type, 0, fat32_file, self.volume)
        return fd

    def get(self, fd: int) -> OpenFile:
        if not 0 <= fd < MAX_FILE_NUMBER or self._files[fd] is None:
            raise OSError(errno.EBADF, "bad file descriptor")
        return self._files[fd]

    def close(self, fd: int) -> None:
        self.get(fd)
        self._files[fd] = None