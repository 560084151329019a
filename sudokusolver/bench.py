from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from . import config
from .board import Board
from .logging_utils import get_logger
from .models import SolveResult, Strategy

log = get_logger("bench")


@dataclass
class BenchmarkResult:
    strategy: str
    mean_ns: float      # per puzzle, averaged over batches
    conf_ns: float      # half-width of the 95% interval on mean_ns
    batches: int
    puzzles: int
    success: bool = True


def benchmark(
    boards: Sequence[Board],
    strategy: "Strategy | str" = Strategy.MCV,
    iterations: int = config.BENCH_ITERATIONS,
    batch_size: int = config.BENCH_BATCH_SIZE,
) -> BenchmarkResult:
    """
    Time `strategy` over `boards`. Each round clears and re-solves every
    board; rounds are grouped into batches and each batch yields one
    nanoseconds-per-puzzle sample. Stops early with success=False as soon as
    a board fails to solve.
    """
    strategy = Strategy.parse(strategy)
    if not boards:
        raise ValueError("benchmark needs at least one board")
    if batch_size <= 0:
        raise ValueError("batch_size must be positive")

    batches = max(1, iterations // batch_size)
    samples: List[float] = []

    for _ in range(batches):
        start = time.perf_counter_ns()
        for _ in range(batch_size):
            for board in boards:
                board.clear()
                if not board.solve(strategy):
                    log.warning("benchmark aborted: %s failed on %s", strategy.value, board.to_line())
                    board.clear()
                    return BenchmarkResult(strategy.value, math.nan, math.nan, len(samples), len(boards), success=False)
        elapsed = time.perf_counter_ns() - start
        samples.append(elapsed / batch_size / len(boards))

    mean = sum(samples) / len(samples)
    std = math.sqrt(sum((s - mean) ** 2 for s in samples) / len(samples))
    conf = std / math.sqrt(len(samples)) * config.BENCH_CONFIDENCE_Z

    log.info("benchmark %s: %.0f +- %.0f ns over %d batch(es)", strategy.value, mean, conf, len(samples))
    return BenchmarkResult(strategy.value, mean, conf, len(samples), len(boards))


def compare_strategies(
    boards: Sequence[Board],
    strategies: Optional[Iterable["Strategy | str"]] = None,
    iterations: int = config.BENCH_ITERATIONS,
    batch_size: int = config.BENCH_BATCH_SIZE,
) -> pd.DataFrame:
    rows = []
    for s in (strategies if strategies is not None else list(Strategy)):
        res = benchmark(boards, s, iterations=iterations, batch_size=batch_size)
        rows.append(
            {
                "strategy": res.strategy,
                "mean_us": res.mean_ns / 1000,
                "conf_us": res.conf_ns / 1000,
                "batches": res.batches,
                "puzzles": res.puzzles,
                "success": res.success,
            }
        )
    if not rows:
        return pd.DataFrame(columns=["strategy", "mean_us", "conf_us", "batches", "puzzles", "success"])
    return pd.DataFrame(rows)


def results_frame(results: Iterable[SolveResult]) -> pd.DataFrame:
    rows = []
    for i, r in enumerate(results):
        rows.append(
            {
                "#": i + 1,
                "status": r.status,
                "strategy": r.strategy,
                "duration_ms": round(r.duration_ms, 3),
                "steps": r.stats.steps,
                "backtracks": r.stats.backtracks,
                "message": r.message,
            }
        )
    if not rows:
        return pd.DataFrame(columns=["#", "status", "strategy", "duration_ms", "steps", "backtracks", "message"])
    return pd.DataFrame(rows)
