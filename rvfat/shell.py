"""An interactive command shell over the open-file table: echo, cat and edit."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Any, TextIO

from rvfat.disk import DiskImage
from rvfat.fat32 import SEEK_SET, Fat32Volume
from rvfat.fmt import CLEAR, YELLOW, format, printk
from rvfat.fs import FileTable
from rvfat.mbr import mbr_init

O_RDONLY = 0x0001
O_WRONLY = 0x0002
O_RDWR = 0x0003

CAT_BUF_SIZE = 509
PROMPT = YELLOW + "SHELL > " + CLEAR

_BACKSPACE = "\x7f"


def atoi(text: str) -> int:
    """Accumulate decimal digits; every character counts as ``ord(c) - ord('0')``."""
    value = 0
    for ch in text:
        value = value * 10 + ord(ch) - ord("0")
    return value


def _split_param(cmd: str) -> tuple[str, str]:
    """Split off the first blank-delimited word; return it and the remainder."""
    cmd = cmd.lstrip(" ")
    end = cmd.find(" ")
    if end < 0:
        return cmd, ""
    return cmd[:end], cmd[end:]


def get_param(cmd: str) -> str:
    """The first word of ``cmd`` after leading blanks."""
    return _split_param(cmd)[0]


def get_string(cmd: str) -> str:
    """A double-quoted string, or else the first word of ``cmd``."""
    stripped = cmd.lstrip(" ")
    if stripped.startswith('"'):
        end = stripped.find('"', 1)
        return stripped[1:] if end < 0 else stripped[1:end]
    return get_param(stripped)


class Shell:
    """A line-editing shell whose commands act on files of one FAT32 volume."""

    def __init__(
        self,
        volume: Fat32Volume | None = None,
        *,
        stdout: TextIO | None = None,
        stderr: TextIO | None = None,
    ) -> None:
        self.files = FileTable(volume, stdout=stdout, stderr=stderr)
        self._line: list[str] = []

    def _write(self, fd: int, data: Any) -> int:
        return self.files.get(fd).write(data)

    def _printf(self, fmt: str, *args: Any) -> int:
        text = format(fmt, *args)
        self._write(1, text)
        return len(text)

    def _echo(self, rest: str) -> None:
        content = get_string(rest)
        self._write(1, content)
        self._write(1, "\n")

    def _cat(self, rest: str) -> None:
        filename = get_param(rest)
        try:
            fd = self.files.open(filename, O_RDONLY)
        except OSError:
            self._printf("can't open file: %s\n", filename)
            return
        try:
            last_char: int | None = None
            while True:
                chunk = self.files.get(fd).read(CAT_BUF_SIZE)
                if not chunk:
                    if last_char != ord("\n"):
                        self._printf("$\n")
                    break
                self._write(1, chunk.replace(b"\0", b"x"))
                last_char = chunk[-1]
        finally:
            self.files.close(fd)

    def _edit(self, rest: str) -> None:
        filename, rest = _split_param(rest)
        offset, rest = _split_param(rest)
        content = get_string(rest)
        try:
            fd = self.files.open(filename, O_RDWR)
        except OSError:
            self._printf("can't open file: %s\n", filename)
            return
        try:
            handle = self.files.get(fd)
            try:
                handle.lseek(atoi(offset), SEEK_SET)
            except ValueError:
                self._printf("invalid offset: %s\n", offset)
                return
            handle.write(content.encode("latin-1"))
        finally:
            self.files.close(fd)

    def parse_cmd(self, cmd: str) -> None:
        """Run one command line."""
        if cmd.startswith("echo"):
            self._echo(cmd[4:])
        elif cmd.startswith("cat"):
            self._cat(cmd[3:])
        elif cmd.startswith("edit"):
            self._edit(cmd[4:])
        else:
            self._printf("command not found: %s\n", cmd)

    def feed(self, char: str) -> None:
        """Handle one input character: echo it, edit the line, run it on return."""
        if char == "\n":
            char = "\r"
        if char == "\r":
            self._write(1, "\n")
        elif char == _BACKSPACE:
            if self._line:
                self._write(1, "\b \b")
                self._line.pop()
            return
        self._write(1, char)
        if char == "\r":
            line = "".join(self._line)
            self._line.clear()
            self.parse_cmd(line)
            self._printf(PROMPT)
        else:
            self._line.append(char)

    def run(self, stream: TextIO | None = None) -> None:
        """Greet, then read characters from ``stream`` until it ends."""
        stdin = self.files.get(0)
        if stream is not None:
            stdin.stream = stream
        self._printf("user main\n")
        self._write(1, "hello, stdout!\n")
        self._write(2, "hello, stderr!\n")
        self._printf(PROMPT)
        while True:
            try:
                data = stdin.read(1)
            except EOFError:
                break
            self.feed(data.decode("latin-1"))


def main(argv: list[str] | None = None) -> int:
    """Start the shell, optionally over a partitioned disk image."""
    parser = argparse.ArgumentParser(prog="rvfat-shell", description="Shell over a FAT32 disk image.")
    parser.add_argument("image", nargs="?", help="disk image with an MBR partition table")
    args = parser.parse_args(argv)

    device: DiskImage | None = None
    volume: Fat32Volume | None = None
    if args.image:
        device = DiskImage.from_file(args.image)
        if not device.has_boot_signature():
            print("[S] mbr boot signature not found!", file=sys.stderr)
            return 1
        printk("...virtio_blk_init done!\n")
        volume = next(iter(mbr_init(device).values()), None)

    Shell(volume).run(sys.stdin)

    if device is not None:
        Path(args.image).write_bytes(bytes(device.data))
    return 0