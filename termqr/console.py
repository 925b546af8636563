"""Render QR Codes as text made of Unicode block characters, and a small command."""

from __future__ import annotations

import argparse
import logging
import sys
from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Optional, Sequence, TextIO

from termqr.ecc import VERSION_MIN, Ecc
from termqr.encoder import DataTooLongError, encode_text
from termqr.matrix import Mask, QrCode

_log = logging.getLogger(__name__)

BORDER = 2

# Each character pair draws a 2x2 block of modules. Index bit 0 is the top-left
# module, bit 1 top-right, bit 2 bottom-left and bit 3 bottom-right.
BLOCK_CHARS: tuple[str, ...] = (
    "  ",
    "\u2580 ",
    " \u2580",
    "\u2580\u2580",
    "\u2584 ",
    "\u2588 ",
    "\u2584\u2580",
    "\u2588\u2580",
    " \u2584",
    "\u2580\u2584",
    " \u2588",
    "\u2580\u2588",
    "\u2584\u2584",
    "\u2588\u2584",
    "\u2584\u2588",
    "\u2588\u2588",
)


class EccLevel(IntEnum):
    """Error correction level as given in a configuration."""

    LOW = 0  # about 7% error tolerance
    MED = 1  # about 15%
    QUART = 2  # about 25%
    HIGH = 3  # about 30%

    def to_ecc(self) -> Ecc:
        """The encoder's level for this configuration level."""
        return Ecc(int(self))


def render_console(qrcode: QrCode) -> str:
    """The symbol with a light border as lines of block characters."""
    size = qrcode.size
    lines = []
    for y in range(-BORDER, size + BORDER, 2):
        row = []
        for x in range(-BORDER, size + BORDER, 2):
            num = (
                qrcode.get_module(x, y)
                | qrcode.get_module(x + 1, y) << 1
                | qrcode.get_module(x, y + 1) << 2
                | qrcode.get_module(x + 1, y + 1) << 3
            )
            row.append(BLOCK_CHARS[num])
        lines.append("".join(row) + "\n")
    lines.append("\n")
    return "".join(lines)


def print_console(qrcode: QrCode, file: Optional[TextIO] = None) -> None:
    """Write the rendered symbol to ``file``, standard output by default."""
    out = sys.stdout if file is None else file
    out.write(render_console(qrcode))


def get_size(qrcode: QrCode) -> int:
    """Side length of the symbol in modules, in the range [21, 177]."""
    return qrcode.size


def get_module(qrcode: QrCode, x: int, y: int) -> bool:
    """True for a dark module at (x, y); out-of-bounds coordinates are light."""
    return qrcode.get_module(x, y)


@dataclass
class QrConfig:
    """Options for :func:`generate`."""

    display_func: Optional[Callable[[QrCode], None]] = print_console
    max_qrcode_version: int = 10
    qrcode_ecc_level: int = EccLevel.LOW


def _ecc_for(level: int) -> Ecc:
    try:
        return EccLevel(level).to_ecc()
    except ValueError:
        return Ecc.LOW


def generate(config: QrConfig, text: str) -> QrCode:
    """Encode text into a symbol and hand it to the configured display function.

    Raises DataTooLongError if the text does not fit up to the configured
    maximum version, and ValueError if no display function is configured.
    """
    if config.display_func is None:
        raise ValueError("no display function configured")
    ecl = _ecc_for(config.qrcode_ecc_level)
    _log.info(
        "Encoding text with ECC level %d and QR Code version %d",
        int(ecl),
        config.max_qrcode_version,
    )
    _log.info("%s", text)
    qrcode = encode_text(text, ecl, VERSION_MIN, config.max_qrcode_version, Mask.AUTO, True)
    config.display_func(qrcode)
    return qrcode


_ECC_NAMES = {"low": EccLevel.LOW, "med": EccLevel.MED, "quart": EccLevel.QUART, "high": EccLevel.HIGH}


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Print a QR Code for the given text on the terminal."""
    parser = argparse.ArgumentParser(prog="termqr", description="Show text as a QR Code.")
    parser.add_argument("text", help="text to encode")
    parser.add_argument(
        "--max-version", type=int, default=10, help="largest QR Code version to use (default 10)"
    )
    parser.add_argument(
        "--ecc", choices=sorted(_ECC_NAMES), default="low", help="error correction level"
    )
    args = parser.parse_args(argv)
    config = QrConfig(
        display_func=print_console,
        max_qrcode_version=args.max_version,
        qrcode_ecc_level=_ECC_NAMES[args.ecc],
    )
    try:
        generate(config, args.text)
    except DataTooLongError as exc:
        print(f"termqr: {exc}", file=sys.stderr)
        return 1
    except ValueError as exc:
        print(f"termqr: {exc}", file=sys.stderr)
        return 2
    return 0


if __name__ == "__main__":
    sys.exit(main())