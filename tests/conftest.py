# tests/conftest.py
import sys
from pathlib import Path


# Add project root to sys.path so "sudokusolver" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

CLASSIC = (
    "5 3 0 0 7 0 0 0 0 6 0 0 1 9 5 0 0 0 0 9 8 0 0 0 0 6 0 8 0 0 0 6 0 0 0 3 "
    "4 0 0 8 0 3 0 0 1 7 0 0 0 2 0 0 0 6 0 6 0 0 0 0 2 8 0 0 0 0 4 1 9 0 0 5 "
    "0 0 0 0 8 0 0 7 9"
)
CLASSIC_SOLUTION = (
    "5 3 4 6 7 8 9 1 2 6 7 2 1 9 5 3 4 8 1 9 8 3 4 2 5 6 7 8 5 9 7 6 1 4 2 3 "
    "4 2 6 8 5 3 7 9 1 7 1 3 9 2 4 8 5 6 9 6 1 5 3 7 2 8 4 2 8 7 4 1 9 6 3 5 "
    "3 4 5 2 8 6 1 7 9"
)
# compact form, '0' for blanks
GRID_01 = "003020600900305001001806400008102900700000008006708200002609500800203009005010300"

EMPTY = " ".join(["0"] * 81)

# two 5s in the first row
DUPLICATE_IN_ROW = " ".join(["5", "5"] + ["0"] * 79)

# consistent givens, but (0,8) can only be 9 and column 8 already holds a 9
DEAD_CELL = " ".join(["1", "2", "3", "4", "5", "6", "7", "8", "0"] + ["0"] * 8 + ["9"] + ["0"] * 63)


def assert_valid_solution(grid):
    digits = set(range(1, 10))
    for r in range(9):
        assert set(grid[r]) == digits, f"row {r}"
    for c in range(9):
        assert {grid[r][c] for r in range(9)} == digits, f"col {c}"
    for b in range(9):
        br, bc = (b // 3) * 3, (b % 3) * 3
        assert {grid[br + i][bc + j] for i in range(3) for j in range(3)} == digits, f"box {b}"


