"""printf-style formatting with the conversions and quirks of the kernel console."""

from __future__ import annotations

import sys
from dataclasses import dataclass
from typing import Any, Iterator, TextIO

RED = "\033[31m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
BLUE = "\033[34m"
PURPLE = "\033[35m"
DEEPGREEN = "\033[36m"
CLEAR = "\033[0m"

_MASK32 = (1 << 32) - 1
_MASK64 = (1 << 64) - 1
_INT64_MIN_BITS = 1 << 63

_LOWER_XDIGITS = "0123456789abcdef"
_UPPER_XDIGITS = "0123456789ABCDEF"


def _signed(value: int, bits: int) -> int:
    mask = (1 << bits) - 1
    value &= mask
    return value - (1 << bits) if value >> (bits - 1) else value


def isspace(c: str) -> bool:
    """Return True for a blank or one of the control characters tab to carriage return."""
    return c == " " or "\t" <= c <= "\r"


def strtol(text: str, base: int = 10) -> tuple[int, int]:
    """Parse a leading integer from ``text``.

    Returns the value and the index at which parsing stopped. Leading blanks
    and a sign are always consumed; base 0 picks octal, hex or decimal from
    the prefix.
    """
    pos = 0
    length = len(text)
    while pos < length and isspace(text[pos]):
        pos += 1

    negative = False
    if pos < length and text[pos] in "+-":
        negative = text[pos] == "-"
        pos += 1

    if base == 0:
        if pos < length and text[pos] == "0":
            pos += 1
            if pos < length and text[pos] in "xX":
                base = 16
                pos += 1
            else:
                base = 8
        else:
            base = 10

    value = 0
    while pos < length:
        ch = text[pos]
        if "0" <= ch <= "9":
            digit = ord(ch) - ord("0")
        elif "a" <= ch <= "z":
            digit = ord(ch) - ord("a") + 10
        elif "A" <= ch <= "Z":
            digit = ord(ch) - ord("A") + 10
        else:
            break
        if digit >= base:
            break
        value = value * base + digit
        pos += 1

    return _signed(-value if negative else value, 64), pos


@dataclass
class _Flags:
    longflag: bool = False
    sharpflag: bool = False
    zeroflag: bool = False
    spaceflag: bool = False
    sign: bool = False
    width: int = 0
    prec: int = -1


def _decimal(num: int, is_signed: bool, flags: _Flags) -> str:
    """Render an unsigned 64-bit ``num`` as a decimal field."""
    if is_signed and num == _INT64_MIN_BITS:
        return "-9223372036854775808"
    if flags.prec == 0 and num == 0:
        return ""

    negative = is_signed and _signed(num, 64) < 0
    if negative:
        num = (-num) & _MASK64

    digits = str(num)
    has_sign = 1 if is_signed and (negative or flags.sign or flags.spaceflag) else 0

    prec = flags.prec
    if prec == -1 and flags.zeroflag:
        prec = flags.width

    parts = [" " * (flags.width - max(len(digits), prec) - has_sign)]
    if has_sign:
        parts.append("-" if negative else "+" if flags.sign else " ")
    parts.append("0" * (prec - has_sign - len(digits)))
    parts.append(digits)
    return "".join(parts)


def _hexadecimal(num: int, conv: str, flags: _Flags) -> str:
    if flags.prec == 0 and num == 0 and conv != "p":
        return ""

    prefix = conv == "p" or (flags.sharpflag and num != 0)
    xdigits = _UPPER_XDIGITS if conv == "X" else _LOWER_XDIGITS
    digits = []
    while True:
        digits.append(xdigits[num & 0xF])
        num >>= 4
        if not num:
            break
    hexdigits = "".join(reversed(digits))

    prefix_len = 2 if prefix else 0
    prec = flags.prec
    if prec == -1 and flags.zeroflag:
        prec = flags.width - prefix_len

    parts = [" " * (flags.width - prefix_len - max(len(hexdigits), prec))]
    if prefix:
        parts.append("0X" if conv == "X" else "0x")
    parts.append("0" * (prec - len(hexdigits)))
    parts.append(hexdigits)
    return "".join(parts)


def _next_arg(args: Iterator[Any]) -> Any:
    try:
        return next(args)
    except StopIteration:
        raise TypeError("not enough arguments for format string") from None


def format(fmt: str, *args: Any) -> str:  # noqa: A001
    """Format ``args`` according to ``fmt`` and return the resulting text.

    ``%n`` takes a mutable sequence and stores the count written so far in
    its first slot.
    """
    values = iter(args)
    out: list[str] = []
    written = 0

    def emit(text: str) -> None:
        nonlocal written
        out.append(text)
        written += len(text)

    flags: _Flags | None = None
    pos = 0
    length = len(fmt)

    while pos < length:
        ch = fmt[pos]
        if flags is None:
            if ch == "%":
                flags = _Flags()
            else:
                emit(ch)
            pos += 1
            continue

        if ch == "#":
            flags.sharpflag = True
        elif ch == "0":
            flags.zeroflag = True
        elif ch in "lztj":
            flags.longflag = True
        elif ch == "+":
            flags.sign = True
        elif ch == " ":
            flags.spaceflag = True
        elif ch == "*":
            flags.width = _signed(int(_next_arg(values)), 32)
        elif "1" <= ch <= "9":
            flags.width, consumed = strtol(fmt[pos:], 10)
            pos += consumed
            continue
        elif ch == ".":
            pos += 1
            if pos < length and fmt[pos] == "*":
                flags.prec = _signed(int(_next_arg(values)), 32)
            else:
                flags.prec, consumed = strtol(fmt[pos:], 10)
                pos += consumed
                continue
        elif ch in "xXp":
            mask = _MASK64 if ch == "p" or flags.longflag else _MASK32
            emit(_hexadecimal(int(_next_arg(values)) & mask, ch, flags))
            flags = None
        elif ch in "diu":
            bits = 64 if flags.longflag else 32
            num = _signed(int(_next_arg(values)), bits) & _MASK64
            emit(_decimal(num, ch != "u", flags))
            flags = None
        elif ch == "n":
            target = _next_arg(values)
            target[0] = written
            flags = None
        elif ch == "s":
            value = _next_arg(values)
            emit("(null)" if value is None else str(value))
            flags = None
        elif ch == "c":
            value = _next_arg(values)
            emit(chr(value & 0xFF) if isinstance(value, int) else str(value)[:1])
            flags = None
        else:
            # "%%" and any unknown conversion print the character itself.
            emit(ch)
            flags = None
        pos += 1

    return "".join(out)


def printk(fmt: str, *args: Any, stream: TextIO | None = None) -> int:
    """Write the formatted text to ``stream`` (standard output by default).

    Returns the number of characters written.
    """
    text = format(fmt, *args)
    target = sys.stdout if stream is None else stream
    target.write(text)
    target.flush()
    return len(text)