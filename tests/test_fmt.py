import io

import pytest

from rvfat.fmt import format, isspace, printk, strtol


@pytest.mark.parametrize("ch", [" ", "\t", "\n", "\v", "\f", "\r"])
def test_isspace_accepts_blanks(ch):
    assert isspace(ch) is True


@pytest.mark.parametrize("ch", ["a", "0", "_", "\x08"])
def test_isspace_rejects_others(ch):
    assert isspace(ch) is False


def test_strtol_skips_blanks_and_sign():
    assert strtol("  -42abc", 10) == (-42, 5)


def test_strtol_base_zero_hex():
    assert strtol("0x1F", 0) == (int("1F", 16), 4)


def test_strtol_base_zero_octal():
    assert strtol("017", 0) == (int("17", 8), 3)


def test_strtol_base_36():
    assert strtol("zz!", 36) == (int("zz", 36), 2)


def test_strtol_stops_at_digit_out_of_base():
    assert strtol("129", 2) == (1, 1)


@pytest.mark.parametrize(
    "spec, value",
    [
        ("%d", 0),
        ("%d", 42),
        ("%d", -17),
        ("%5d", 123),
        ("%05d", 123),
        ("%+d", 9),
        ("% d", 5),
        ("%+05d", 3),
        ("%.3d", 5),
        ("%ld", 2**62),
        ("%i", -2**31),
        ("%x", 255),
        ("%X", 0xABC),
        ("%08x", 0xBEEF),
        ("%#x", 255),
        ("%#X", 255),
        ("%#010x", 255),
        ("%8.3x", 255),
        ("%lx", 2**40 + 7),
    ],
)
def test_format_matches_standard_formatting(spec, value):
    assert format(spec, value) == spec.replace("l", "") % value


def test_int64_minimum_is_special_cased():
    assert format("%ld", -(2**63)) == "-9223372036854775808"


def test_unsigned_of_negative_int_widens_to_64_bits():
    assert format("%u", -1) == str(2**64 - 1)


def test_hex_of_negative_int_uses_32_bits():
    assert format("%x", -1) == "%x" % (2**32 - 1)


def test_int_argument_truncates_to_32_bits():
    assert format("%d", 2**32 + 5) == "5"


def test_zero_precision_prints_nothing_for_zero():
    assert format("[%.0d][%.0x]", 0, 0) == "[][]"


def test_sharp_flag_gives_no_prefix_for_zero():
    assert format("%#x", 0) == "0"


def test_pointer_always_has_prefix():
    assert format("%p", 0x1000) == "0x1000"


def test_string_and_null():
    assert format("<%s|%s>", "abc", None) == "<abc|(null)>"


def test_char_from_int_and_str():
    assert format("%c%c", ord("A"), "b") == "Ab"


def test_percent_and_unknown_conversion():
    assert format("100%% %q") == "100% q"


def test_star_width_and_precision():
    assert format("%*d|%.*d", 6, 7, 4, 7) == "%6d|%.4d" % (7, 7)


def test_n_stores_written_count():
    holder = [0]
    result = format("abc%n", holder)
    assert result == "abc"
    assert holder[0] == len("abc")


def test_trailing_percent_is_dropped():
    assert format("abc%") == "abc"


def test_missing_argument_raises():
    with pytest.raises(TypeError):
        format("%d %d", 1)


def test_printk_writes_to_stream_and_returns_length():
    stream = io.StringIO()
    count = printk("value=%d %s\n", 12, "ok", stream=stream)
    assert stream.getvalue() == "value=12 ok\n"
    assert count == len(stream.getvalue())