from __future__ import annotations

from dataclasses import dataclass, field, asdict
from enum import Enum
from typing import Optional


class SudokuError(Exception):
    pass


class PuzzleFormatError(SudokuError, ValueError):
    """Puzzle text could not be turned into 81 cells in 0..9."""


class BoardStateError(SudokuError, RuntimeError):
    """Board used in a way its current state does not allow."""


class SearchBudgetExceeded(SudokuError):
    def __init__(self, steps: int) -> None:
        super().__init__(f"search stopped after {steps} digit trials")
        self.steps = steps


class Strategy(str, Enum):
    CHRONOLOGICAL = "chronological"
    FORWARD_CHECKING = "forward-checking"
    MCV = "mcv"

    @classmethod
    def parse(cls, name: "str | Strategy") -> "Strategy":
        if isinstance(name, Strategy):
            return name
        key = str(name).strip().lower()
        for s in cls:
            if key in (s.value, s.name.lower()):
                return s
        raise ValueError(f"Unknown strategy: {name!r} (choose from {', '.join(s.value for s in cls)})")


@dataclass
class SearchStats:
    steps: int = 0          # digit trials
    backtracks: int = 0
    max_depth: int = 0


@dataclass
class SolveResult:
    status: str             # "solved" | "unsolvable" | "timeout"
    strategy: str
    puzzle: str             # canonical line
    solution: Optional[str] = None
    duration_ms: float = 0.0
    stats: SearchStats = field(default_factory=SearchStats)
    message: str = ""

    @property
    def solved(self) -> bool:
        return self.status == "solved"

    def to_jsonable(self) -> dict:
        return asdict(self)

    @staticmethod
    def from_jsonable(raw: dict) -> "SolveResult":
        data = dict(raw)
        data["stats"] = SearchStats(**data.get("stats", {}))
        return SolveResult(**data)
