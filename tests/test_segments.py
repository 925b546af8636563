import pytest

from termqr.segments import (
    ALPHANUMERIC_CHARSET,
    BitBuffer,
    Mode,
    Segment,
    calc_segment_bit_length,
    calc_segment_buffer_size,
    get_total_bits,
    is_alphanumeric,
    is_numeric,
    make_alphanumeric,
    make_bytes,
    make_eci,
    make_numeric,
    num_char_count_bits,
)


def _bits(seg):
    return [(seg.data[i >> 3] >> (7 - (i & 7))) & 1 for i in range(seg.bit_length)]


def _take(bits, pos, n):
    value = 0
    for b in bits[pos:pos + n]:
        value = (value << 1) | b
    return value, pos + n


def _decode_numeric(seg):
    bits = _bits(seg)
    pos = 0
    out = []
    remaining = seg.num_chars
    while remaining > 0:
        count = min(3, remaining)
        value, pos = _take(bits, pos, count * 3 + 1)
        out.append(str(value).zfill(count))
        remaining -= count
    assert pos == len(bits)
    return "".join(out)


def _decode_alphanumeric(seg):
    bits = _bits(seg)
    pos = 0
    out = []
    remaining = seg.num_chars
    while remaining >= 2:
        value, pos = _take(bits, pos, 11)
        hi, lo = divmod(value, 45)
        out.append(ALPHANUMERIC_CHARSET[hi] + ALPHANUMERIC_CHARSET[lo])
        remaining -= 2
    if remaining:
        value, pos = _take(bits, pos, 6)
        out.append(ALPHANUMERIC_CHARSET[value])
    assert pos == len(bits)
    return "".join(out)


def test_mode_indicators():
    segs = [make_numeric("1"), make_alphanumeric("A"), make_bytes(b"a"), make_eci(1)]
    assert [int(s.mode) for s in segs] == [1, 2, 4, 7]


def test_bit_buffer_packs_big_endian():
    buf = BitBuffer()
    buf.append_bits(0b101, 3)
    buf.append_bits(1, 1)
    assert len(buf) == 4
    assert list(buf) == [1, 0, 1, 1]
    assert buf.to_bytes() == bytes([0b10110000])


def test_bit_buffer_round_trip_multibyte():
    buf = BitBuffer()
    buf.append_bits(0xEC, 8)
    buf.append_bits(0x11, 8)
    assert buf.to_bytes() == bytes([0xEC, 0x11])


@pytest.mark.parametrize("value,num_bits", [(8, 3), (-1, 4), (0, 17), (0, -1)])
def test_bit_buffer_rejects_bad_values(value, num_bits):
    with pytest.raises(ValueError):
        BitBuffer().append_bits(value, num_bits)


@pytest.mark.parametrize(
    "text,expected",
    [("", True), ("0123456789", True), ("12a", False), ("\u0663", False), ("1 2", False)],
)
def test_is_numeric(text, expected):
    assert is_numeric(text) is expected


@pytest.mark.parametrize(
    "text,expected",
    [("", True), (ALPHANUMERIC_CHARSET, True), ("HELLO WORLD", True), ("hello", False), ("A#B", False)],
)
def test_is_alphanumeric(text, expected):
    assert is_alphanumeric(text) is expected


@pytest.mark.parametrize(
    "mode,num_chars,expected",
    [
        (Mode.NUMERIC, 3, 10),
        (Mode.NUMERIC, 0, 0),
        (Mode.ALPHANUMERIC, 2, 11),
        (Mode.BYTE, 5, 40),
        (Mode.KANJI, 2, 26),
        (Mode.ECI, 0, 24),
        (Mode.BYTE, 4095, 32760),
    ],
)
def test_calc_segment_bit_length(mode, num_chars, expected):
    assert calc_segment_bit_length(mode, num_chars) == expected


@pytest.mark.parametrize(
    "mode,num_chars", [(Mode.BYTE, 4096), (Mode.NUMERIC, 32768), (Mode.ECI, 1), (Mode.BYTE, -1)]
)
def test_calc_segment_bit_length_failures(mode, num_chars):
    with pytest.raises(ValueError):
        calc_segment_bit_length(mode, num_chars)


def test_calc_segment_buffer_size():
    assert calc_segment_buffer_size(Mode.ECI, 0) == 3
    assert calc_segment_buffer_size(Mode.BYTE, 7) == 7
    for n in range(1, 20):
        size = calc_segment_buffer_size(Mode.NUMERIC, n)
        assert size * 8 >= calc_segment_bit_length(Mode.NUMERIC, n) > (size - 1) * 8
    with pytest.raises(ValueError):
        calc_segment_buffer_size(Mode.BYTE, 5000)


def test_make_bytes():
    seg = make_bytes(b"\x00\xffab")
    assert seg.mode is Mode.BYTE
    assert seg.num_chars == 4
    assert seg.bit_length == 32
    assert seg.data == b"\x00\xffab"


def test_make_bytes_empty():
    seg = make_bytes(b"")
    assert (seg.num_chars, seg.bit_length, seg.data) == (0, 0, b"")


@pytest.mark.parametrize("digits", ["", "7", "42", "012", "01234567", "00000000001", "9" * 50])
def test_make_numeric_round_trip(digits):
    seg = make_numeric(digits)
    assert seg.mode is Mode.NUMERIC
    assert seg.num_chars == len(digits)
    assert seg.bit_length == calc_segment_bit_length(Mode.NUMERIC, len(digits))
    assert _decode_numeric(seg) == digits


def test_make_numeric_rejects_letters():
    with pytest.raises(ValueError):
        make_numeric("12A")


@pytest.mark.parametrize("text", ["", "A", "AC-42", "HELLO WORLD", ALPHANUMERIC_CHARSET])
def test_make_alphanumeric_round_trip(text):
    seg = make_alphanumeric(text)
    assert seg.mode is Mode.ALPHANUMERIC
    assert seg.num_chars == len(text)
    assert seg.bit_length == calc_segment_bit_length(Mode.ALPHANUMERIC, len(text))
    assert _decode_alphanumeric(seg) == text


def test_make_alphanumeric_rejects_lowercase():
    with pytest.raises(ValueError):
        make_alphanumeric("abc")


def test_make_eci_one_byte():
    seg = make_eci(127)
    assert seg.mode is Mode.ECI
    assert seg.num_chars == 0
    assert seg.bit_length == 8
    assert seg.data == bytes([127])


def test_make_eci_two_bytes():
    seg = make_eci(128)
    bits = _bits(seg)
    assert seg.bit_length == 16
    prefix, pos = _take(bits, 0, 2)
    value, _ = _take(bits, pos, 14)
    assert (prefix, value) == (2, 128)


def test_make_eci_three_bytes():
    seg = make_eci(999999)
    bits = _bits(seg)
    assert seg.bit_length == 24
    prefix, pos = _take(bits, 0, 3)
    high, pos = _take(bits, pos, 11)
    low, _ = _take(bits, pos, 10)
    assert prefix == 6
    assert (high << 10) | low == 999999


@pytest.mark.parametrize("value", [-1, 1000000])
def test_make_eci_out_of_range(value):
    with pytest.raises(ValueError):
        make_eci(value)


@pytest.mark.parametrize(
    "mode,version,expected",
    [
        (Mode.NUMERIC, 1, 10),
        (Mode.NUMERIC, 9, 10),
        (Mode.NUMERIC, 10, 12),
        (Mode.NUMERIC, 26, 12),
        (Mode.NUMERIC, 27, 14),
        (Mode.ALPHANUMERIC, 40, 13),
        (Mode.BYTE, 1, 8),
        (Mode.BYTE, 10, 16),
        (Mode.KANJI, 27, 12),
        (Mode.ECI, 5, 0),
    ],
)
def test_num_char_count_bits(mode, version, expected):
    assert num_char_count_bits(mode, version) == expected


@pytest.mark.parametrize("version", [0, 41])
def test_num_char_count_bits_bad_version(version):
    with pytest.raises(ValueError):
        num_char_count_bits(Mode.BYTE, version)


def test_get_total_bits_sums_headers_and_data():
    segs = [make_bytes(b"abc"), make_numeric("12345")]
    expected = sum(4 + num_char_count_bits(s.mode, 1) + s.bit_length for s in segs)
    assert get_total_bits(segs, 1) == expected
    assert get_total_bits([], 1) == 0


def test_get_total_bits_count_field_overflow():
    seg = make_bytes(bytes(256))
    assert get_total_bits([seg], 1) is None
    assert get_total_bits([seg], 10) == 4 + 16 + 256 * 8


def test_get_total_bits_total_overflow():
    seg = make_bytes(bytes(4000))
    assert get_total_bits([seg, seg], 40) is None


def test_segment_validation():
    with pytest.raises(ValueError):
        Segment(Mode.BYTE, 1, b"", 8)
    with pytest.raises(ValueError):
        Segment(Mode.BYTE, -1, b"", 0)
    seg = Segment(4, 1, bytearray(b"x"), 8)
    assert seg.mode is Mode.BYTE
    assert seg.data == b"x"