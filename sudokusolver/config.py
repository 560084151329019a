"""
Settings shared by the solver, the console front end and the streamlit app.

Each value can be overridden through the environment, so a benchmark run or a
deployment does not need code edits.
"""

from __future__ import annotations

import os
from typing import Optional


def _env_int(name: str, default: Optional[int]) -> Optional[int]:
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    return int(raw)


# ==== Search ================================================================

# "chronological" | "forward-checking" | "mcv"
DEFAULT_STRATEGY: str = os.environ.get("SUDOKU_STRATEGY", "mcv")

# Upper bound on digit trials per solve. None = unbounded.
DEFAULT_MAX_STEPS: Optional[int] = _env_int("SUDOKU_MAX_STEPS", None)

# ==== Files =================================================================

DEFAULT_PUZZLE_PATH: str = os.path.join(".", "data", "puzzles.txt")
PUZZLE_PATH_ENV: str = "SUDOKU_PUZZLES"

# ==== Benchmark =============================================================

# Rounds per timed batch; every puzzle is cleared and solved once per round.
BENCH_BATCH_SIZE: int = 200

# Total rounds; the number of batches is BENCH_ITERATIONS // BENCH_BATCH_SIZE.
BENCH_ITERATIONS: int = 1000

# z-value for the 95% confidence interval of the batch means
BENCH_CONFIDENCE_Z: float = 1.96

# ==== Logging ===============================================================

LOG_LEVEL: str = os.environ.get("SUDOKU_LOG_LEVEL", "INFO").upper()
