"""Console-backed reads and writes for the standard file descriptors."""

from __future__ import annotations

import sys
from typing import Any, TextIO


def _text(data: bytes | str) -> str:
    return data if isinstance(data, str) else bytes(data).decode("latin-1")


def stdin_read(file: Any, size: int, stream: TextIO | None = None) -> bytes:
    """Read exactly ``size`` characters, raising EOFError if input ends first."""
    source = sys.stdin if stream is None else stream
    chars = []
    while len(chars) < size:
        ch = source.read(1)
        if not ch:
            raise EOFError("console input closed")
        chars.append(ch)
    return "".join(chars).encode("latin-1")


def _console_write(data: bytes | str, target: TextIO) -> int:
    text = _text(data)
    target.write(text)
    target.flush()
    return len(text)


def stdout_write(file: Any, data: bytes | str, stream: TextIO | None = None) -> int:
    """Write ``data`` to standard output and return the count written."""
    return _console_write(data, sys.stdout if stream is None else stream)


def stderr_write(file: Any, data: bytes | str, stream: TextIO | None = None) -> int:
    """Write ``data`` to standard error and return the count written."""
    return _console_write(data, sys.stderr if stream is None else stream)