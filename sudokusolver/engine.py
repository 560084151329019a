from __future__ import annotations

import time
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from .board import SIZE, Board
from .logging_utils import get_logger
from .models import (
    BoardStateError,
    SearchBudgetExceeded,
    SearchStats,
    SolveResult,
    Strategy,
)

Cell = Tuple[int, int]

log = get_logger("engine")


@dataclass(frozen=True)
class SearchPolicy:
    forward_checking: bool
    most_constrained: bool


POLICIES: Dict[Strategy, SearchPolicy] = {
    Strategy.CHRONOLOGICAL: SearchPolicy(forward_checking=False, most_constrained=False),
    Strategy.FORWARD_CHECKING: SearchPolicy(forward_checking=True, most_constrained=False),
    Strategy.MCV: SearchPolicy(forward_checking=True, most_constrained=True),
}


# -----------------------------
# Variable selection
# -----------------------------

def select_most_constrained(board: Board, empty: Sequence[Cell]) -> Optional[int]:
    """
    Index into `empty` of the unassigned cell with the fewest possible
    digits. Earliest index wins ties; the scan stops at the first cell with
    a single possibility. None when every cell in `empty` is assigned.
    """
    best_idx: Optional[int] = None
    best_count = SIZE + 1

    for idx, (r, c) in enumerate(empty):
        if board.is_assigned(r, c):
            continue
        count = board.possibility_count(r, c)
        if count < best_count:
            best_count = count
            best_idx = idx
            if count == 1:
                break

    return best_idx


# -----------------------------
# Search
# -----------------------------

def search(
    board: Board,
    strategy: "Strategy | str" = Strategy.MCV,
    max_steps: Optional[int] = None,
    stats: Optional[SearchStats] = None,
) -> bool:
    """
    Iterative depth-first search over the board's empty cells.

    One frame per depth: `chosen[depth]` is the index into the empty list
    assigned at that depth and `trials[depth]` the next digit to try there.
    Returns True with the board solved, False if no completion exists.
    Raises SearchBudgetExceeded once `max_steps` digit trials have been made.
    """
    policy = POLICIES[Strategy.parse(strategy)]
    if stats is None:
        stats = SearchStats()

    if board.needs_clear:
        raise BoardStateError("Board holds a previous unfinished search; call clear() first.")
    if board.has_conflicting_givens:
        board.needs_clear = True
        return False

    place = board.fill_forward_checking if policy.forward_checking else board.fill
    empty: List[Cell] = board.empty_cells()
    n = len(empty)
    trials = [0] * n
    chosen = [0] * n
    depth = 0

    while 0 <= depth < n:
        if policy.most_constrained:
            idx = select_most_constrained(board, empty)
            if idx is None:
                depth = n
                break
        else:
            idx = depth
        chosen[depth] = idx
        r, c = empty[idx]

        placed = False
        while trials[depth] < SIZE:
            if max_steps is not None and stats.steps >= max_steps:
                board.needs_clear = True
                raise SearchBudgetExceeded(max_steps)
            stats.steps += 1
            if place(r, c, trials[depth]):
                placed = True
                break
            trials[depth] += 1

        if placed:
            depth += 1
            if depth > stats.max_depth:
                stats.max_depth = depth
            continue

        # every digit failed here: undo the previous decision and move past it
        trials[depth] = 0
        depth -= 1
        stats.backtracks += 1
        if depth >= 0:
            pr, pc = empty[chosen[depth]]
            board.clear_cell(pr, pc)
            trials[depth] += 1

    if depth < 0:
        board.needs_clear = True
        return False
    return True


def run(
    board: Board,
    strategy: "Strategy | str" = Strategy.MCV,
    max_steps: Optional[int] = None,
) -> SolveResult:
    """Solve `board` in place and report the outcome, timing and search counters."""
    strategy = Strategy.parse(strategy)
    puzzle = board.to_line()
    stats = SearchStats()

    log.debug("solve start: strategy=%s empty=%d", strategy.value, len(board.empty_cells()))
    start = time.perf_counter()
    try:
        ok = search(board, strategy, max_steps=max_steps, stats=stats)
    except SearchBudgetExceeded as e:
        duration_ms = (time.perf_counter() - start) * 1000
        log.warning("solve timed out: strategy=%s %s", strategy.value, e)
        return SolveResult(
            status="timeout",
            strategy=strategy.value,
            puzzle=puzzle,
            duration_ms=duration_ms,
            stats=stats,
            message=f"Gave up after {e.steps} digit trials.",
        )
    duration_ms = (time.perf_counter() - start) * 1000

    if not ok:
        message = (
            "Given digits repeat within a row, column or box."
            if board.has_conflicting_givens
            else "No solution exists."
        )
        log.info("solve failed in %.2f ms: %s", duration_ms, message)
        return SolveResult(
            status="unsolvable",
            strategy=strategy.value,
            puzzle=puzzle,
            duration_ms=duration_ms,
            stats=stats,
            message=message,
        )

    log.info(
        "solve end in %.2f ms; strategy=%s steps=%d backtracks=%d",
        duration_ms, strategy.value, stats.steps, stats.backtracks,
    )
    return SolveResult(
        status="solved",
        strategy=strategy.value,
        puzzle=puzzle,
        solution=board.to_line(),
        duration_ms=duration_ms,
        stats=stats,
        message="Solved successfully.",
    )


def solve_all(
    boards: Iterable[Board],
    strategy: "Strategy | str" = Strategy.MCV,
    max_steps: Optional[int] = None,
) -> List[SolveResult]:
    """`run` each board; boards left unsolved are cleared back to their givens."""
    results: List[SolveResult] = []
    for board in boards:
        result = run(board, strategy, max_steps=max_steps)
        if not result.solved:
            board.clear()
        results.append(result)
    return results
