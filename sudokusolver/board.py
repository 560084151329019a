from __future__ import annotations

from typing import List, Optional, Tuple

from .models import BoardStateError, PuzzleFormatError, Strategy
from .render import format_grid

Cell = Tuple[int, int]
Grid = List[List[int]]  # 0 = empty, values 1..9

SIZE = 9
BASE = 3
CELLS = SIZE * SIZE
EMPTY = -1
FULL_MASK = (1 << SIZE) - 1  # bits 0..8 set, bit d = digit d+1


def box_index(r: int, c: int) -> int:
    return (r // BASE) * BASE + (c // BASE)


class Board:
    """
    9x9 grid with one occupancy bitmask per row, column and box.

    Cells hold a digit index 0..8 (digit - 1) or EMPTY. Cells given in the
    puzzle are fixed and never change; `clear()` returns every other cell to
    empty. The masks always mirror the cells: bit d of row_masks[r] is set
    iff some cell of row r holds d (likewise for columns and boxes).
    """

    def __init__(self, line: str) -> None:
        tokens = line.split()
        if len(tokens) != CELLS:
            raise PuzzleFormatError(f"Expected {CELLS} cells, got {len(tokens)}.")

        # Built in locals first so a bad token leaves nothing half-initialised.
        digits = [EMPTY] * CELLS
        fixed = [False] * CELLS
        rows = [0] * SIZE
        cols = [0] * SIZE
        boxes = [0] * SIZE
        conflicts = False

        for idx, tok in enumerate(tokens):
            if len(tok) != 1 or tok not in "0123456789":
                raise PuzzleFormatError(f"Cell {idx + 1}: '{tok}' is not a digit 0..{SIZE}.")
            number = int(tok)
            if number == 0:
                continue

            r, c = divmod(idx, SIZE)
            d = number - 1
            bit = 1 << d
            b = box_index(r, c)
            if (rows[r] | cols[c] | boxes[b]) & bit:
                conflicts = True

            digits[idx] = d
            fixed[idx] = True
            rows[r] |= bit
            cols[c] |= bit
            boxes[b] |= bit

        self._digits = digits
        self._fixed = fixed
        self.row_masks = rows
        self.col_masks = cols
        self.box_masks = boxes
        self.has_conflicting_givens = conflicts
        # set by the search engine after a failed or interrupted solve
        self.needs_clear = False

    @classmethod
    def from_line(cls, line: str) -> "Board":
        return cls(line)

    @classmethod
    def from_grid(cls, grid: Grid) -> "Board":
        if len(grid) != SIZE or any(len(row) != SIZE for row in grid):
            raise PuzzleFormatError("Board must be 9 x 9.")
        return cls(" ".join(str(v) for row in grid for v in row))

    # -----------------------------
    # Read access
    # -----------------------------

    @staticmethod
    def _index(r: int, c: int) -> int:
        if not (0 <= r < SIZE and 0 <= c < SIZE):
            raise IndexError(f"Cell ({r},{c}) outside the 9x9 grid.")
        return r * SIZE + c

    def digit(self, r: int, c: int) -> int:
        """Digit index 0..8, or EMPTY."""
        return self._digits[self._index(r, c)]

    def value(self, r: int, c: int) -> int:
        """Digit 1..9, or 0 for an empty cell."""
        return self._digits[self._index(r, c)] + 1

    def is_fixed(self, r: int, c: int) -> bool:
        return self._fixed[self._index(r, c)]

    def is_assigned(self, r: int, c: int) -> bool:
        return self._digits[self._index(r, c)] != EMPTY

    def empty_cells(self) -> List[Cell]:
        return [divmod(i, SIZE) for i, d in enumerate(self._digits) if d == EMPTY]

    def to_grid(self) -> Grid:
        return [[self._digits[r * SIZE + c] + 1 for c in range(SIZE)] for r in range(SIZE)]

    def to_line(self) -> str:
        return " ".join(str(d + 1) for d in self._digits)

    def fixed_grid(self) -> List[List[bool]]:
        return [self._fixed[r * SIZE:(r + 1) * SIZE] for r in range(SIZE)]

    def is_solved(self) -> bool:
        if self.has_conflicting_givens or EMPTY in self._digits:
            return False
        return all(m == FULL_MASK for m in self.row_masks + self.col_masks + self.box_masks)

    def __str__(self) -> str:
        return format_grid(self)

    def __repr__(self) -> str:
        return f"Board({self.to_line()!r})"

    # -----------------------------
    # Domains
    # -----------------------------

    def _excluded(self, r: int, c: int) -> int:
        return self.row_masks[r] | self.col_masks[c] | self.box_masks[box_index(r, c)]

    def candidates_mask(self, r: int, c: int) -> int:
        """Digits not yet used by the cell's row, column or box (bit d = digit d+1)."""
        return FULL_MASK & ~self._excluded(r, c)

    def candidates(self, r: int, c: int) -> List[int]:
        """Same as candidates_mask, as a sorted list of digits 1..9."""
        mask = self.candidates_mask(r, c)
        return [d + 1 for d in range(SIZE) if mask & (1 << d)]

    def possibility_count(self, r: int, c: int) -> int:
        # Local bound only: ignores what peers' own domains imply.
        return SIZE - self._excluded(r, c).bit_count()

    def has_possibilities(self, r: int, c: int) -> bool:
        return self._excluded(r, c) != FULL_MASK or self._digits[r * SIZE + c] != EMPTY

    # -----------------------------
    # Assign / unassign
    # -----------------------------

    def fill(self, r: int, c: int, digit: int) -> bool:
        """
        Place digit index `digit` at (r, c) unless its row, column or box
        already holds it. Returns False and changes nothing on conflict.
        """
        i = self._index(r, c)
        if self._digits[i] != EMPTY:
            raise BoardStateError(f"Cell ({r},{c}) is already assigned.")
        if not 0 <= digit < SIZE:
            raise ValueError(f"Digit index {digit} outside 0..8.")

        bit = 1 << digit
        b = box_index(r, c)
        if (self.row_masks[r] | self.col_masks[c] | self.box_masks[b]) & bit:
            return False

        self._digits[i] = digit
        self.row_masks[r] |= bit
        self.col_masks[c] |= bit
        self.box_masks[b] |= bit
        return True

    def fill_forward_checking(self, r: int, c: int, digit: int) -> bool:
        """
        Like `fill`, but also rejects the placement when it leaves any cell in
        the same row, column or box without a legal digit.
        """
        if not self.fill(r, c, digit):
            return False

        box_r = (r // BASE) * BASE
        box_c = (c // BASE) * BASE
        for k in range(SIZE):
            if (
                not self.has_possibilities(k, c)
                or not self.has_possibilities(r, k)
                or not self.has_possibilities(box_r + k // BASE, box_c + k % BASE)
            ):
                self._unset(r, c, digit)
                return False
        return True

    def clear_cell(self, r: int, c: int) -> None:
        """Empty a cell previously filled by `fill` / `fill_forward_checking`."""
        i = self._index(r, c)
        if self._fixed[i]:
            raise BoardStateError(f"Cell ({r},{c}) is fixed.")
        digit = self._digits[i]
        if digit == EMPTY:
            raise BoardStateError(f"Cell ({r},{c}) is already empty.")
        self._unset(r, c, digit)

    def _unset(self, r: int, c: int, digit: int) -> None:
        bit = 1 << digit
        self._digits[r * SIZE + c] = EMPTY
        self.row_masks[r] ^= bit
        self.col_masks[c] ^= bit
        self.box_masks[box_index(r, c)] ^= bit

    def clear(self) -> None:
        """Reset every non-fixed cell to empty. Safe to call repeatedly."""
        for i in range(CELLS):
            if self._fixed[i] or self._digits[i] == EMPTY:
                continue
            r, c = divmod(i, SIZE)
            self._unset(r, c, self._digits[i])
        self.needs_clear = False

    # -----------------------------
    # Solving
    # -----------------------------

    def solve(self, strategy: "Strategy | str" = Strategy.MCV, max_steps: Optional[int] = None) -> bool:
        """
        Search for a completion in place. True iff the board now holds a full
        valid assignment; on False call `clear()` before solving again.
        """
        from .engine import search  # engine imports Board

        return search(self, strategy, max_steps=max_steps)
