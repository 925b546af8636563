"""High- and low-level functions that turn text, bytes or segments into QR Codes."""

from __future__ import annotations

from typing import Sequence

from termqr.ecc import (
    VERSION_MAX,
    VERSION_MIN,
    Ecc,
    add_ecc_and_interleave,
    get_num_data_codewords,
)
from termqr.matrix import Mask, QrCode, build_matrix
from termqr.segments import (
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
    make_numeric,
    num_char_count_bits,
)


class DataTooLongError(ValueError):
    """The data does not fit in any version of the allowed range at the given level."""


def buffer_len_for_version(version: int) -> int:
    """Bytes needed to store any symbol up to and including the given version."""
    if not VERSION_MIN <= version <= VERSION_MAX:
        raise ValueError(f"version must be in [{VERSION_MIN}, {VERSION_MAX}], got {version}")
    size = version * 4 + 17
    return (size * size + 7) // 8 + 1


def _check_version_range(min_version: int, max_version: int) -> None:
    if not VERSION_MIN <= min_version <= max_version <= VERSION_MAX:
        raise ValueError(
            f"need {VERSION_MIN} <= min_version <= max_version <= {VERSION_MAX}, "
            f"got {min_version} and {max_version}"
        )


def encode_text(
    text: str,
    ecl: Ecc = Ecc.LOW,
    min_version: int = VERSION_MIN,
    max_version: int = VERSION_MAX,
    mask: Mask = Mask.AUTO,
    boost_ecl: bool = True,
) -> QrCode:
    """Encode text in numeric, alphanumeric or byte (UTF-8) mode, whichever applies.

    Raises DataTooLongError if the text does not fit in the version range.
    """
    _check_version_range(min_version, max_version)
    if not text:
        return encode_segments_advanced([], ecl, min_version, max_version, mask, boost_ecl)

    buf_len = buffer_len_for_version(max_version)
    try:
        if is_numeric(text):
            if calc_segment_buffer_size(Mode.NUMERIC, len(text)) > buf_len:
                raise DataTooLongError("numeric text too long for the version range")
            seg = make_numeric(text)
        elif is_alphanumeric(text):
            if calc_segment_buffer_size(Mode.ALPHANUMERIC, len(text)) > buf_len:
                raise DataTooLongError("alphanumeric text too long for the version range")
            seg = make_alphanumeric(text)
        else:
            data = text.encode("utf-8")
            if len(data) > buf_len:
                raise DataTooLongError("text too long for the version range")
            seg = make_bytes(data)
    except DataTooLongError:
        raise
    except ValueError as exc:
        raise DataTooLongError(str(exc)) from exc
    return encode_segments_advanced([seg], ecl, min_version, max_version, mask, boost_ecl)


def encode_binary(
    data: bytes,
    ecl: Ecc = Ecc.LOW,
    min_version: int = VERSION_MIN,
    max_version: int = VERSION_MAX,
    mask: Mask = Mask.AUTO,
    boost_ecl: bool = True,
) -> QrCode:
    """Encode binary data in byte mode.

    Raises DataTooLongError if the data does not fit in the version range.
    """
    data = bytes(data)
    try:
        calc_segment_bit_length(Mode.BYTE, len(data))
    except ValueError as exc:
        raise DataTooLongError(str(exc)) from exc
    return encode_segments_advanced(
        [make_bytes(data)], ecl, min_version, max_version, mask, boost_ecl
    )


def encode_segments(segs: Sequence[Segment], ecl: Ecc = Ecc.LOW) -> QrCode:
    """Encode segments at the smallest fitting version, automatic mask, boosted level."""
    return encode_segments_advanced(segs, ecl, VERSION_MIN, VERSION_MAX, Mask.AUTO, True)


def encode_segments_advanced(
    segs: Sequence[Segment],
    ecl: Ecc = Ecc.LOW,
    min_version: int = VERSION_MIN,
    max_version: int = VERSION_MAX,
    mask: Mask = Mask.AUTO,
    boost_ecl: bool = True,
) -> QrCode:
    """Encode segments with the given parameters.

    The smallest version in the range that fits is chosen. If ``boost_ecl`` is
    true the error correction level is raised as far as the data still fits
    that version. Raises DataTooLongError if no version in the range fits.
    """
    _check_version_range(min_version, max_version)
    ecl = Ecc(ecl)
    mask = Mask(mask)
    segs = list(segs)

    for version in range(min_version, max_version + 1):
        capacity = get_num_data_codewords(version, ecl) * 8
        used = get_total_bits(segs, version)
        if used is not None and used <= capacity:
            break
    else:
        raise DataTooLongError(
            f"data does not fit in versions {min_version} to {max_version} at level {ecl.name}"
        )

    if boost_ecl:
        for candidate in (Ecc.MEDIUM, Ecc.QUARTILE, Ecc.HIGH):
            if used <= get_num_data_codewords(version, candidate) * 8:
                ecl = candidate

    buffer = BitBuffer()
    for seg in segs:
        buffer.append_bits(int(seg.mode), 4)
        buffer.append_bits(seg.num_chars, num_char_count_bits(seg.mode, version))
        for j in range(seg.bit_length):
            buffer.append_bits((seg.data[j >> 3] >> (7 - (j & 7))) & 1, 1)

    capacity = get_num_data_codewords(version, ecl) * 8
    buffer.append_bits(0, min(4, capacity - len(buffer)))
    buffer.append_bits(0, (8 - len(buffer) % 8) % 8)
    pad = 0xEC
    while len(buffer) < capacity:
        buffer.append_bits(pad, 8)
        pad ^= 0xEC ^ 0x11

    codewords = add_ecc_and_interleave(buffer.to_bytes(), version, ecl)
    return build_matrix(version, ecl, codewords, mask)