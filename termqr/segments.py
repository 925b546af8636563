"""Segments of QR Code payload data and the bit buffer that holds them."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Iterable, Iterator, Optional, Sequence

from termqr.ecc import VERSION_MAX, VERSION_MIN

# Every legal alphanumeric-mode character; a character's value is its index here.
ALPHANUMERIC_CHARSET = "0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZ $%*+-./:"
_ALPHANUMERIC_INDEX = {ch: i for i, ch in enumerate(ALPHANUMERIC_CHARSET)}
_DIGITS = frozenset("0123456789")

MAX_BIT_LENGTH = 32767  # the largest symbol (version 40) has 31329 modules


class Mode(IntEnum):
    """How a segment's data bits are interpreted; the value is the mode indicator."""

    NUMERIC = 0x1
    ALPHANUMERIC = 0x2
    BYTE = 0x4
    KANJI = 0x8
    ECI = 0x7


_CHAR_COUNT_BITS = {
    Mode.NUMERIC: (10, 12, 14),
    Mode.ALPHANUMERIC: (9, 11, 13),
    Mode.BYTE: (8, 16, 16),
    Mode.KANJI: (8, 10, 12),
    Mode.ECI: (0, 0, 0),
}


class BitBuffer:
    """A growable sequence of bits, packed big-endian by :meth:`to_bytes`."""

    def __init__(self, bits: Iterable[int] = ()) -> None:
        self._bits: list[int] = [1 if b else 0 for b in bits]

    def append_bits(self, value: int, num_bits: int) -> None:
        """Append the ``num_bits`` low-order bits of ``value``, most significant first."""
        if not 0 <= num_bits <= 16:
            raise ValueError(f"num_bits must be in [0, 16], got {num_bits}")
        if value < 0 or value >> num_bits:
            raise ValueError(f"value {value} does not fit in {num_bits} bits")
        self._bits.extend((value >> i) & 1 for i in reversed(range(num_bits)))

    def to_bytes(self) -> bytes:
        """The bits packed into bytes, the last byte padded with zero bits."""
        out = bytearray((len(self._bits) + 7) // 8)
        for i, bit in enumerate(self._bits):
            if bit:
                out[i >> 3] |= 0x80 >> (i & 7)
        return bytes(out)

    def __len__(self) -> int:
        return len(self._bits)

    def __iter__(self) -> Iterator[int]:
        return iter(self._bits)


@dataclass(frozen=True)
class Segment:
    """A segment of character, binary or control data.

    ``num_chars`` counts characters for numeric, alphanumeric and kanji mode,
    bytes for byte mode and is zero for ECI. ``data`` holds ``bit_length``
    bits packed big-endian.
    """

    mode: Mode
    num_chars: int
    data: bytes
    bit_length: int

    def __post_init__(self) -> None:
        object.__setattr__(self, "mode", Mode(self.mode))
        object.__setattr__(self, "data", bytes(self.data))
        if not 0 <= self.num_chars <= MAX_BIT_LENGTH:
            raise ValueError(f"num_chars out of range: {self.num_chars}")
        if not 0 <= self.bit_length <= MAX_BIT_LENGTH:
            raise ValueError(f"bit_length out of range: {self.bit_length}")
        if self.bit_length > len(self.data) * 8:
            raise ValueError("bit_length exceeds the data supplied")


def is_numeric(text: str) -> bool:
    """True if every character is a decimal digit 0 to 9."""
    return all(ch in _DIGITS for ch in text)


def is_alphanumeric(text: str) -> bool:
    """True if every character belongs to the alphanumeric-mode charset."""
    return all(ch in _ALPHANUMERIC_INDEX for ch in text)


def calc_segment_bit_length(mode: Mode, num_chars: int) -> int:
    """Number of data bits a segment of ``num_chars`` characters needs.

    For ECI mode ``num_chars`` must be 0 and the worst case is returned.
    Raises ValueError if the count or the result exceeds 32767.
    """
    mode = Mode(mode)
    if num_chars < 0:
        raise ValueError("num_chars must not be negative")
    if num_chars > MAX_BIT_LENGTH:
        raise ValueError(f"too many characters: {num_chars}")
    if mode is Mode.NUMERIC:
        result = (num_chars * 10 + 2) // 3
    elif mode is Mode.ALPHANUMERIC:
        result = (num_chars * 11 + 1) // 2
    elif mode is Mode.BYTE:
        result = num_chars * 8
    elif mode is Mode.KANJI:
        result = num_chars * 13
    elif num_chars == 0:
        result = 3 * 8
    else:
        raise ValueError("an ECI segment has no characters")
    if result > MAX_BIT_LENGTH:
        raise ValueError(f"segment needs {result} bits, more than {MAX_BIT_LENGTH}")
    return result


def calc_segment_buffer_size(mode: Mode, num_chars: int) -> int:
    """Number of bytes needed for the data of such a segment."""
    return (calc_segment_bit_length(mode, num_chars) + 7) // 8


def make_bytes(data: bytes) -> Segment:
    """A byte-mode segment holding the given data."""
    data = bytes(data)
    return Segment(Mode.BYTE, len(data), data, calc_segment_bit_length(Mode.BYTE, len(data)))


def make_numeric(digits: str) -> Segment:
    """A numeric-mode segment for a string of decimal digits."""
    if not is_numeric(digits):
        raise ValueError("string contains non-numeric characters")
    calc_segment_bit_length(Mode.NUMERIC, len(digits))
    buffer = BitBuffer()
    for start in range(0, len(digits), 3):
        group = digits[start:start + 3]
        buffer.append_bits(int(group), len(group) * 3 + 1)
    return Segment(Mode.NUMERIC, len(digits), buffer.to_bytes(), len(buffer))


def make_alphanumeric(text: str) -> Segment:
    """An alphanumeric-mode segment for text drawn from the charset."""
    if not is_alphanumeric(text):
        raise ValueError("string contains characters outside the alphanumeric charset")
    calc_segment_bit_length(Mode.ALPHANUMERIC, len(text))
    buffer = BitBuffer()
    for start in range(0, len(text) - 1, 2):
        value = _ALPHANUMERIC_INDEX[text[start]] * 45 + _ALPHANUMERIC_INDEX[text[start + 1]]
        buffer.append_bits(value, 11)
    if len(text) % 2:
        buffer.append_bits(_ALPHANUMERIC_INDEX[text[-1]], 6)
    return Segment(Mode.ALPHANUMERIC, len(text), buffer.to_bytes(), len(buffer))


def make_eci(assign_val: int) -> Segment:
    """An Extended Channel Interpretation designator segment."""
    buffer = BitBuffer()
    if assign_val < 0:
        raise ValueError("ECI assignment value must not be negative")
    if assign_val < 1 << 7:
        buffer.append_bits(assign_val, 8)
    elif assign_val < 1 << 14:
        buffer.append_bits(2, 2)
        buffer.append_bits(assign_val, 14)
    elif assign_val < 1_000_000:
        buffer.append_bits(6, 3)
        buffer.append_bits(assign_val >> 10, 11)
        buffer.append_bits(assign_val & 0x3FF, 10)
    else:
        raise ValueError("ECI assignment value out of range")
    return Segment(Mode.ECI, 0, buffer.to_bytes(), len(buffer))


def num_char_count_bits(mode: Mode, version: int) -> int:
    """Width of the character count field for a mode at a version."""
    if not VERSION_MIN <= version <= VERSION_MAX:
        raise ValueError(f"version must be in [{VERSION_MIN}, {VERSION_MAX}], got {version}")
    return _CHAR_COUNT_BITS[Mode(mode)][(version + 7) // 17]


def get_total_bits(segs: Sequence[Segment], version: int) -> Optional[int]:
    """Bits needed to encode the segments at a version.

    Returns None if a segment's length does not fit its count field or the
    total exceeds 32767.
    """
    result = 0
    for seg in segs:
        ccbits = num_char_count_bits(seg.mode, version)
        if seg.num_chars >= 1 << ccbits:
            return None
        result += 4 + ccbits + seg.bit_length
        if result > MAX_BIT_LENGTH:
            return None
    return result