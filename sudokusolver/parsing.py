"""Turn hand-typed puzzle text into the canonical 81-token line."""
from __future__ import annotations

import re
from typing import List

from .board import CELLS, SIZE, Board, Grid
from .models import PuzzleFormatError

_PUZZLE_START = re.compile(r"^[0-9.]")
_CANONICAL_LEN = CELLS * 2 - 1


def is_puzzle_line(line: str) -> bool:
    return bool(_PUZZLE_START.match(line.strip()))


def normalize(text: str) -> str:
    """
    Accepts the canonical form, compact 81-character strings with '.' or '0'
    for blanks, and either of those with arbitrary whitespace between cells.
    Returns "d d d ... d" (81 digits, 0 = blank).
    """
    s = text.strip()
    if not is_puzzle_line(s):
        raise PuzzleFormatError("Puzzle must start with a digit or '.'.")

    if len(s) == _CANONICAL_LEN and re.fullmatch(r"[0-9](?: [0-9]){80}", s):
        return s

    cells: List[str] = []
    for ch in s:
        if ch.isspace():
            continue
        if ch == ".":
            cells.append("0")
        elif ch in "0123456789":
            cells.append(ch)
        else:
            raise PuzzleFormatError(f"Unexpected character {ch!r} in puzzle.")

    if len(cells) != CELLS:
        raise PuzzleFormatError(f"Expected {CELLS} cells, got {len(cells)}.")
    return " ".join(cells)


def parse_board(text: str) -> Board:
    return Board(normalize(text))


def grid_to_line(grid: Grid) -> str:
    if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
        raise PuzzleFormatError("Board must be 9 x 9.")
    return " ".join(str(v) for row in grid for v in row)


def line_to_grid(line: str) -> Grid:
    tokens = normalize(line).split()
    return [[int(t) for t in tokens[r * SIZE:(r + 1) * SIZE]] for r in range(SIZE)]
