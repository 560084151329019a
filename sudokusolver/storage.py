from __future__ import annotations

import json
import os
from typing import Iterable, List, Optional

from . import config
from .board import Board
from .models import PuzzleFormatError, SolveResult
from .parsing import is_puzzle_line, normalize


def resolve_puzzle_path() -> str:
    return os.environ.get(config.PUZZLE_PATH_ENV, config.DEFAULT_PUZZLE_PATH)


def ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)), exist_ok=True)


def read_puzzles(path: Optional[str] = None) -> List[str]:
    """
    Canonical lines for every puzzle in a text file, one puzzle per line.
    Lines that do not start with a digit or '.' (titles, comments) are skipped.
    """
    p = path or resolve_puzzle_path()
    out: List[str] = []
    with open(p, "r", encoding="utf-8") as f:
        for lineno, line in enumerate(f, start=1):
            if not is_puzzle_line(line):
                continue
            try:
                out.append(normalize(line))
            except PuzzleFormatError as e:
                raise PuzzleFormatError(f"{p}:{lineno}: {e}") from e
    return out


def load_boards(path: Optional[str] = None) -> List[Board]:
    return [Board(line) for line in read_puzzles(path)]


def save_results(results: Iterable[SolveResult], path: str) -> None:
    ensure_parent_dir(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump([r.to_jsonable() for r in results], f, ensure_ascii=False, indent=2)


def load_results(path: str) -> List[SolveResult]:
    if not os.path.exists(path):
        return []
    with open(path, "r", encoding="utf-8") as f:
        raw = json.load(f)
    return [SolveResult.from_jsonable(r) for r in raw]
