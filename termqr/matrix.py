"""Module grids of QR Code symbols: function patterns, data placement and masking."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum
from typing import Callable, Iterator, Sequence

from termqr.ecc import VERSION_MAX, VERSION_MIN, Ecc, get_num_raw_data_modules

Grid = list[list[bool]]

PENALTY_N1 = 3
PENALTY_N2 = 3
PENALTY_N3 = 40
PENALTY_N4 = 10


class Mask(IntEnum):
    """Mask pattern of a symbol; AUTO lets the encoder choose the best one."""

    AUTO = -1
    MASK_0 = 0
    MASK_1 = 1
    MASK_2 = 2
    MASK_3 = 3
    MASK_4 = 4
    MASK_5 = 5
    MASK_6 = 6
    MASK_7 = 7


_MASK_PATTERNS: dict[int, Callable[[int, int], bool]] = {
    0: lambda x, y: (x + y) % 2 == 0,
    1: lambda x, y: y % 2 == 0,
    2: lambda x, y: x % 3 == 0,
    3: lambda x, y: (x + y) % 3 == 0,
    4: lambda x, y: (x // 3 + y // 2) % 2 == 0,
    5: lambda x, y: x * y % 2 + x * y % 3 == 0,
    6: lambda x, y: (x * y % 2 + x * y % 3) % 2 == 0,
    7: lambda x, y: ((x + y) % 2 + x * y % 3) % 2 == 0,
}


@dataclass(frozen=True)
class QrCode:
    """A finished symbol: an immutable square grid of dark (True) and light modules."""

    version: int
    ecl: Ecc
    mask: Mask
    modules: tuple[tuple[bool, ...], ...]

    @property
    def size(self) -> int:
        """Side length in modules, in the range [21, 177]."""
        return len(self.modules)

    def get_module(self, x: int, y: int) -> bool:
        """Colour of the module at (x, y); out-of-bounds coordinates are light."""
        size = self.size
        return 0 <= x < size and 0 <= y < size and self.modules[y][x]

    def __iter__(self) -> Iterator[tuple[bool, ...]]:
        return iter(self.modules)


def _check_version(version: int) -> None:
    if not VERSION_MIN <= version <= VERSION_MAX:
        raise ValueError(f"version must be in [{VERSION_MIN}, {VERSION_MAX}], got {version}")


def _size_for(version: int) -> int:
    return version * 4 + 17


def get_alignment_pattern_positions(version: int) -> list[int]:
    """Ascending centre coordinates of alignment patterns, used on both axes."""
    _check_version(version)
    if version == 1:
        return []
    num_align = version // 7 + 2
    if version == 32:
        step = 26
    else:
        step = (version * 4 + num_align * 2 + 1) // (num_align * 2 - 2) * 2
    last = version * 4 + 10
    tail = [last - step * i for i in range(num_align - 1)]
    return [6] + sorted(tail)


def _alignment_centres(version: int) -> Iterator[tuple[int, int]]:
    positions = get_alignment_pattern_positions(version)
    last = len(positions) - 1
    corners = {(0, 0), (0, last), (last, 0)}
    for i, px in enumerate(positions):
        for j, py in enumerate(positions):
            if (i, j) not in corners:
                yield px, py


def _fill_rectangle(grid: Grid, left: int, top: int, width: int, height: int) -> None:
    for y in range(top, top + height):
        for x in range(left, left + width):
            grid[y][x] = True


def function_module_grid(version: int) -> Grid:
    """A grid of the version's size with every function module marked True."""
    _check_version(version)
    size = _size_for(version)
    grid = [[False] * size for _ in range(size)]
    # Timing patterns
    _fill_rectangle(grid, 6, 0, 1, size)
    _fill_rectangle(grid, 0, 6, size, 1)
    # Finder patterns with separators and format bits
    _fill_rectangle(grid, 0, 0, 9, 9)
    _fill_rectangle(grid, size - 8, 0, 8, 9)
    _fill_rectangle(grid, 0, size - 8, 9, 8)
    for cx, cy in _alignment_centres(version):
        _fill_rectangle(grid, cx - 2, cy - 2, 5, 5)
    if version >= 7:
        _fill_rectangle(grid, size - 11, 0, 3, 6)
        _fill_rectangle(grid, 0, size - 11, 6, 3)
    return grid


def _draw_light_function_modules(grid: Grid, version: int) -> None:
    """Draw the light (and a few dark) parts of function patterns, format bits aside."""
    size = len(grid)
    for i in range(7, size - 7, 2):
        grid[i][6] = False
        grid[6][i] = False

    def set_bounded(x: int, y: int, value: bool) -> None:
        if 0 <= x < size and 0 <= y < size:
            grid[y][x] = value

    for dy in range(-4, 5):
        for dx in range(-4, 5):
            if max(abs(dx), abs(dy)) in (2, 4):
                set_bounded(3 + dx, 3 + dy, False)
                set_bounded(size - 4 + dx, 3 + dy, False)
                set_bounded(3 + dx, size - 4 + dy, False)

    for cx, cy in _alignment_centres(version):
        for dy in range(-1, 2):
            for dx in range(-1, 2):
                grid[cy + dy][cx + dx] = dx == 0 and dy == 0

    if version >= 7:
        rem = version
        for _ in range(12):
            rem = (rem << 1) ^ ((rem >> 11) * 0x1F25)
        bits = version << 12 | rem
        for i in range(6):
            for j in range(3):
                k = size - 11 + j
                bit = bool(bits & 1)
                grid[i][k] = bit
                grid[k][i] = bit
                bits >>= 1


def _draw_format_bits(grid: Grid, ecl: Ecc, mask: int) -> None:
    """Draw both copies of the format information for the level and mask."""
    data = Ecc(ecl).format_bits << 3 | mask
    rem = data
    for _ in range(10):
        rem = (rem << 1) ^ ((rem >> 9) * 0x537)
    bits = (data << 10 | rem) ^ 0x5412

    def bit(i: int) -> bool:
        return (bits >> i) & 1 != 0

    for i in range(6):
        grid[i][8] = bit(i)
    grid[7][8] = bit(6)
    grid[8][8] = bit(7)
    grid[8][7] = bit(8)
    for i in range(9, 15):
        grid[8][14 - i] = bit(i)

    size = len(grid)
    for i in range(8):
        grid[8][size - 1 - i] = bit(i)
    for i in range(8, 15):
        grid[size - 15 + i][8] = bit(i)
    grid[size - 8][8] = True  # always dark


def _codeword_bits(codewords: bytes) -> Iterator[bool]:
    for byte in codewords:
        for i in reversed(range(8)):
            yield (byte >> i) & 1 != 0


def _draw_codewords(grid: Grid, functions: Grid, codewords: bytes) -> None:
    """Place codeword bits in the zigzag order; remainder modules stay light."""
    size = len(grid)
    bits = _codeword_bits(codewords)
    right = size - 1
    while right >= 1:
        if right == 6:
            right = 5
        upward = ((right + 1) & 2) == 0
        for vert in range(size):
            y = size - 1 - vert if upward else vert
            for x in (right, right - 1):
                if not functions[y][x]:
                    grid[y][x] = next(bits, False)
        right -= 2


def apply_mask(
    function_modules: Sequence[Sequence[bool]],
    grid: Sequence[Sequence[bool]],
    mask: Mask,
) -> Grid:
    """A copy of the grid with non-function modules XORed by the mask pattern.

    Applying the same mask twice gives back the original grid.
    """
    mask = Mask(mask)
    if mask is Mask.AUTO:
        raise ValueError("a concrete mask is required, not AUTO")
    invert = _MASK_PATTERNS[mask]
    return [
        [
            value if function_modules[y][x] else value != invert(x, y)
            for x, value in enumerate(row)
        ]
        for y, row in enumerate(grid)
    ]


def _count_finder_patterns(history: list[int]) -> int:
    n = history[1]
    core = (
        n > 0
        and history[2] == n
        and history[3] == n * 3
        and history[4] == n
        and history[5] == n
    )
    if not core:
        return 0
    return int(history[0] >= n * 4 and history[6] >= n) + int(
        history[6] >= n * 4 and history[0] >= n
    )


def _push_history(history: list[int], run_length: int) -> None:
    history.insert(0, run_length)
    history.pop()


def _line_penalty(line: Sequence[bool], size: int) -> int:
    result = 0
    run_color = False
    run = 0
    history = [0] * 7
    pad = size  # light border before the line
    for color in line:
        if color == run_color:
            run += 1
            if run == 5:
                result += PENALTY_N1
            elif run > 5:
                result += 1
        else:
            _push_history(history, run + pad)
            pad = 0
            if not run_color:
                result += _count_finder_patterns(history) * PENALTY_N3
            run_color = color
            run = 1
    # Terminate the line, adding the light border after it
    if run_color:
        _push_history(history, run + pad)
        run = 0
        pad = 0
    _push_history(history, run + pad + size)
    result += _count_finder_patterns(history) * PENALTY_N3
    return result


def penalty_score(grid: Sequence[Sequence[bool]]) -> int:
    """Penalty of the grid's current modules; lower is better for mask choice."""
    size = len(grid)
    if size == 0:
        raise ValueError("grid must not be empty")
    result = sum(_line_penalty(row, size) for row in grid)
    result += sum(_line_penalty(column, size) for column in zip(*grid))

    for y in range(size - 1):
        upper, lower = grid[y], grid[y + 1]
        for x in range(size - 1):
            color = upper[x]
            if color == upper[x + 1] == lower[x] == lower[x + 1]:
                result += PENALTY_N2

    dark = sum(bool(v) for row in grid for v in row)
    total = size * size
    # Smallest k >= 0 with (45-5k)% <= dark/total <= (55+5k)%
    k = (abs(dark * 20 - total * 10) + total - 1) // total - 1
    result += k * PENALTY_N4
    return result


def build_matrix(version: int, ecl: Ecc, codewords: bytes, mask: Mask = Mask.AUTO) -> QrCode:
    """Draw a complete symbol from interleaved data and ECC codewords."""
    _check_version(version)
    ecl = Ecc(ecl)
    mask = Mask(mask)
    codewords = bytes(codewords)
    expected = get_num_raw_data_modules(version) // 8
    if len(codewords) != expected:
        raise ValueError(f"expected {expected} codewords, got {len(codewords)}")

    functions = function_module_grid(version)
    grid = [row[:] for row in functions]
    _draw_codewords(grid, functions, codewords)
    _draw_light_function_modules(grid, version)

    if mask is Mask.AUTO:
        best_penalty = None
        for candidate in list(Mask)[1:]:
            trial = apply_mask(functions, grid, candidate)
            _draw_format_bits(trial, ecl, candidate)
            penalty = penalty_score(trial)
            if best_penalty is None or penalty < best_penalty:
                mask, best_penalty = candidate, penalty

    final = apply_mask(functions, grid, mask)
    _draw_format_bits(final, ecl, mask)
    return QrCode(version, ecl, mask, tuple(tuple(row) for row in final))