# termqr

A self-contained QR Code generator written in plain Python. It supports every
QR Code Model 2 version from 1 to 40, all four error correction levels, and
numeric, alphanumeric, byte and ECI segments. The finished symbol can be drawn
in a terminal with Unicode block characters.

## Installation

```
pip install .
```

The package has no runtime dependencies. To run the tests:

```
pip install .[test]
pytest
```

## Command line

```
termqr "HELLO WORLD"
termqr --max-version 20 --ecc high "Some longer text"
```

The text is encoded and the QR Code printed to standard output. Two modules fit
in each character cell, with a two-module light border around the symbol.

Options:

- `--max-version N`: largest version to try (default 10).
- `--ecc {low,med,quart,high}`: minimum error correction level (default `low`).
  The level is raised automatically while the data still fits the same version.

The command exits with status 1 if the text does not fit up to the maximum
version, and 2 for other invalid input.

## Library use

The package is split into modules:

- `termqr.ecc`: the `Ecc` levels, capacity tables and Reed-Solomon arithmetic
  (`reed_solomon_compute_divisor`, `reed_solomon_compute_remainder`,
  `add_ecc_and_interleave`, ...).
- `termqr.segments`: `Mode`, `BitBuffer`, `Segment` and the segment makers
  `make_numeric`, `make_alphanumeric`, `make_bytes` and `make_eci`.
- `termqr.matrix`: `Mask`, the immutable `QrCode` result and the grid drawing,
  masking and penalty functions.
- `termqr.encoder`: `encode_text`, `encode_binary`, `encode_segments`,
  `encode_segments_advanced` and `DataTooLongError`.
- `termqr.console`: terminal rendering, `QrConfig`, `generate` and the command.

Encode text and inspect the result:

```python
from termqr.ecc import Ecc
from termqr.encoder import encode_text
from termqr.matrix import Mask

qr = encode_text("Hello, world!", Ecc.LOW, 1, 40, Mask.AUTO, True)
print(qr.version, qr.ecl.name, qr.mask.name, qr.size)
print(qr.get_module(0, 0))  # True: the top-left finder pattern is dark
```

`encode_text` picks numeric mode for digit strings, alphanumeric mode for text
made only of `0-9`, `A-Z`, space and `$%*+-./:`, and UTF-8 byte mode otherwise.
`QrCode.get_module` returns False (light) for coordinates outside the symbol.

Raw bytes and hand-built segment lists work too:

```python
from termqr.encoder import encode_binary, encode_segments
from termqr.segments import make_alphanumeric, make_numeric

qr = encode_binary(b"\x00\x01\x02", Ecc.MEDIUM, 1, 40, Mask.AUTO, True)
qr = encode_segments([make_alphanumeric("ID:"), make_numeric("0123456789")], Ecc.HIGH)
```

When the data does not fit in any version of the allowed range,
`DataTooLongError` (a subclass of `ValueError`) is raised.

### Terminal output

```python
from termqr.console import EccLevel, QrConfig, generate, render_console

config = QrConfig(max_qrcode_version=10, qrcode_ecc_level=EccLevel.LOW)
generate(config, "https://example.com")   # prints the symbol and returns it

text = render_console(qr)                  # or get the drawing as a string
```

`QrConfig.display_func` is called with the finished `QrCode`; it defaults to
`print_console`, which writes to standard output (or to a file passed as its
second argument). `generate` raises `ValueError` if `display_func` is None.

## What it does not do

- It only encodes; it cannot read or decode QR Codes.
- There is no maker for kanji segments, though `Mode.KANJI` can be used in a
  hand-built `Segment`.
- It draws only to text; there is no image (PNG, SVG) output.