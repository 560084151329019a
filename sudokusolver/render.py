from __future__ import annotations

from html import escape
from typing import TYPE_CHECKING, List, Optional

if TYPE_CHECKING:
    from .board import Board

SEPARATOR = "+------+------+------+"


def format_grid(board: "Board") -> str:
    """
    Text grid with box borders, blank for unassigned cells:

        +------+------+------+
        | 5 3 4| 6 7 8| 9 1 2|
        ...
    """
    lines: List[str] = []
    for r in range(9):
        if r % 3 == 0:
            lines.append(SEPARATOR)
        parts = []
        for c in range(9):
            v = board.value(r, c)
            ch = str(v) if v else " "
            parts.append(f"| {ch}" if c % 3 == 0 else f" {ch}")
        lines.append("".join(parts) + "|")
    lines.append(SEPARATOR)
    return "\n".join(lines) + "\n"


def board_to_csv(grid: List[List[int]]) -> bytes:
    lines = [",".join(str(v) for v in row) for row in grid]
    return ("\n".join(lines) + "\n").encode("utf-8")


def board_to_html(
    grid: List[List[int]],
    fixed: Optional[List[List[bool]]] = None,
    title: str = "",
) -> str:
    """
    HTML table for the grid with thick 3x3 borders. Fixed cells get the
    `given` class so the app can tell clues from solved digits.
    """
    html = [f"<div class='sudoku-wrap'><div class='sudoku-title'>{escape(title)}</div>"]
    html.append("<table class='sudoku'>")
    for r in range(9):
        html.append("<tr>")
        for c in range(9):
            v = grid[r][c]
            cls = []
            if r % 3 == 0:
                cls.append("top")
            if c % 3 == 0:
                cls.append("left")
            if r == 8:
                cls.append("bottom")
            if c == 8:
                cls.append("right")
            if fixed is not None and fixed[r][c]:
                cls.append("given")
            cls_attr = f" class='{' '.join(cls)}'" if cls else ""
            disp = "" if v == 0 else str(v)
            html.append(f"<td{cls_attr}>{disp}</td>")
        html.append("</tr>")
    html.append("</table></div>")
    return "".join(html)
