import pytest

from conftest import (
    CLASSIC,
    CLASSIC_SOLUTION,
    DEAD_CELL,
    DUPLICATE_IN_ROW,
    EMPTY,
    GRID_01,
    assert_valid_solution,
)
from sudokusolver.board import Board
from sudokusolver.engine import POLICIES, run, search, select_most_constrained, solve_all
from sudokusolver.models import BoardStateError, SearchBudgetExceeded, SearchStats, Strategy
from sudokusolver.parsing import parse_board

ALL = list(Strategy)

# 17 givens; the most-constrained search has to undo thousands of guesses
HARD = "000000010400000000020000000000050407008000300001090000300400200050100000000806000"

# (0,0), (0,1), (0,2) all have only {1, 2} left: three cells, two digits
PAIR_TRAP_TOP = " ".join(["0", "0", "0", "4", "5", "6", "7", "8", "9", "3"] + ["0"] * 71)

# same trap in the last row, so the cell branched on first is not empty_cells()[0]
PAIR_TRAP_BOTTOM = " ".join(["0"] * 63 + ["3"] + ["0"] * 8 + ["0", "0", "0", "4", "5", "6", "7", "8", "9"])


@pytest.mark.parametrize("strategy", ALL)
def test_classic_puzzle_solves_to_known_completion(strategy):
    b = Board(CLASSIC)
    assert b.solve(strategy)
    assert b.to_line() == CLASSIC_SOLUTION
    assert b.is_solved()


def test_strategies_agree_on_unique_puzzle():
    lines = set()
    for strategy in ALL:
        b = parse_board(GRID_01)
        assert b.solve(strategy)
        assert_valid_solution(b.to_grid())
        lines.add(b.to_line())
    assert len(lines) == 1


@pytest.mark.parametrize("strategy", ALL)
def test_empty_grid_gives_valid_solution(strategy):
    b = Board(EMPTY)
    assert b.solve(strategy)
    assert_valid_solution(b.to_grid())


def test_chronological_returns_first_solution_in_digit_order():
    b = Board(EMPTY)
    assert b.solve(Strategy.CHRONOLOGICAL)
    assert b.to_grid()[0] == [1, 2, 3, 4, 5, 6, 7, 8, 9]
    assert b.to_grid()[1] == [4, 5, 6, 7, 8, 9, 1, 2, 3]


@pytest.mark.parametrize("strategy", ALL)
def test_fixed_cells_survive_solve_and_clear(strategy):
    b = Board(CLASSIC)
    given = {(r, c): b.value(r, c) for r in range(9) for c in range(9) if b.is_fixed(r, c)}
    assert b.solve(strategy)
    b.clear()
    assert b.solve(strategy)
    b.clear()
    b.clear()
    for (r, c), v in given.items():
        assert b.value(r, c) == v


@pytest.mark.parametrize("strategy", ALL)
def test_duplicate_givens_are_unsolvable(strategy):
    b = Board(DUPLICATE_IN_ROW)
    assert not b.solve(strategy)
    assert b.value(0, 0) == 5
    assert b.value(0, 1) == 5
    assert b.is_fixed(0, 0) and b.is_fixed(0, 1)


@pytest.mark.parametrize("strategy", ALL)
def test_dead_cell_is_unsolvable(strategy):
    b = Board(DEAD_CELL)
    assert not b.has_conflicting_givens
    assert not b.solve(strategy)
    b.clear()
    assert b.to_line() == DEAD_CELL


@pytest.mark.parametrize("strategy", ALL)
def test_full_valid_puzzle_returns_true_without_changes(strategy):
    b = Board(CLASSIC_SOLUTION)
    stats = SearchStats()
    assert search(b, strategy, stats=stats)
    assert b.to_line() == CLASSIC_SOLUTION
    assert stats.steps == 0


def test_failed_board_must_be_cleared_before_solving_again():
    b = Board(DEAD_CELL)
    assert not b.solve(Strategy.MCV)
    assert b.needs_clear
    with pytest.raises(BoardStateError):
        b.solve(Strategy.MCV)
    b.clear()
    assert not b.needs_clear
    assert not b.solve(Strategy.MCV)


def test_failure_does_not_leak_into_other_boards():
    bad = Board(DEAD_CELL)
    assert not bad.solve(Strategy.FORWARD_CHECKING)
    bad.clear()

    good = Board(CLASSIC)
    assert good.solve(Strategy.FORWARD_CHECKING)
    assert good.to_line() == CLASSIC_SOLUTION


def test_strategy_accepts_names():
    b = Board(CLASSIC)
    assert b.solve("forward-checking")
    assert Strategy.parse("MCV") is Strategy.MCV
    assert Strategy.parse("forward_checking") is Strategy.FORWARD_CHECKING
    with pytest.raises(ValueError):
        Strategy.parse("random")


def test_policies_cover_every_strategy():
    assert set(POLICIES) == set(Strategy)
    assert not POLICIES[Strategy.CHRONOLOGICAL].forward_checking
    assert POLICIES[Strategy.MCV].most_constrained


# -----------------------------
# Variable selection
# -----------------------------

def test_select_most_constrained_prefers_fewest_possibilities():
    b = Board(CLASSIC)
    empty = b.empty_cells()
    idx = select_most_constrained(b, empty)
    r, c = empty[idx]
    best = min(b.possibility_count(*cell) for cell in empty)
    assert b.possibility_count(r, c) == best
    # earliest cell with that count
    assert idx == next(i for i, cell in enumerate(empty) if b.possibility_count(*cell) == best)


def test_select_most_constrained_skips_assigned_cells():
    b = Board(EMPTY)
    empty = b.empty_cells()
    # every cell ties at 9, so the first one wins
    assert select_most_constrained(b, empty) == 0
    assert b.fill(0, 0, 0)
    # row 0, column 0 and box 0 now have 8; (0,1) is the first of them
    assert select_most_constrained(b, empty) == 1


def test_select_most_constrained_none_when_all_assigned():
    b = Board(CLASSIC)
    empty = b.empty_cells()
    assert b.solve(Strategy.CHRONOLOGICAL)
    assert select_most_constrained(b, empty) is None


# -----------------------------
# run() results
# -----------------------------

def test_run_reports_solved():
    b = Board(CLASSIC)
    res = run(b, Strategy.MCV)
    assert res.solved
    assert res.status == "solved"
    assert res.puzzle == CLASSIC
    assert res.solution == CLASSIC_SOLUTION
    assert res.stats.steps > 0
    assert res.stats.max_depth == len(Board(CLASSIC).empty_cells())


def test_run_reports_unsolvable():
    res = run(Board(DUPLICATE_IN_ROW), "chronological")
    assert res.status == "unsolvable"
    assert res.solution is None
    assert "repeat" in res.message


def test_run_reports_timeout_and_board_recovers():
    b = Board(EMPTY)
    res = run(b, Strategy.CHRONOLOGICAL, max_steps=5)
    assert res.status == "timeout"
    assert res.stats.steps == 5
    with pytest.raises(BoardStateError):
        b.solve()
    b.clear()
    assert b.to_line() == EMPTY
    assert b.solve()


def test_timeout_counts_only_trials_made():
    b = Board(EMPTY)
    stats = SearchStats()
    with pytest.raises(SearchBudgetExceeded):
        search(b, Strategy.MCV, max_steps=3, stats=stats)
    assert stats.steps == 3


# -----------------------------
# Backtracking
# -----------------------------

@pytest.mark.parametrize("strategy", ALL)
def test_backtracks_out_of_a_pair_trap(strategy):
    b = Board(PAIR_TRAP_TOP)
    stats = SearchStats()
    assert not search(b, strategy, stats=stats)
    assert stats.backtracks > 0
    assert b.to_line() == PAIR_TRAP_TOP


def test_mcv_backtrack_clears_the_cell_it_chose():
    b = Board(PAIR_TRAP_BOTTOM)
    empty = b.empty_cells()
    assert empty[select_most_constrained(b, empty)] == (8, 0)

    stats = SearchStats()
    assert not search(b, Strategy.MCV, stats=stats)
    # (8,1) fails under both (8,0)=1 and (8,0)=2, then (8,0) runs out
    assert stats.backtracks == 3
    assert b.to_line() == PAIR_TRAP_BOTTOM
    b.clear()
    assert b.to_line() == PAIR_TRAP_BOTTOM


def test_mcv_solves_puzzle_that_needs_backtracking():
    b = parse_board(HARD)
    givens = b.to_line().split()
    stats = SearchStats()
    assert search(b, Strategy.MCV, stats=stats)
    assert stats.backtracks > 0
    assert_valid_solution(b.to_grid())
    for given, solved in zip(givens, b.to_line().split()):
        assert given == "0" or given == solved


def test_solve_all_clears_unsolved_boards():
    boards = [Board(CLASSIC), Board(DEAD_CELL)]
    results = solve_all(boards, Strategy.MCV)
    assert [r.status for r in results] == ["solved", "unsolvable"]
    assert boards[0].to_line() == CLASSIC_SOLUTION
    assert not boards[1].needs_clear


def test_solve_all_leaves_timed_out_board_at_its_givens():
    b = Board(EMPTY)
    (res,) = solve_all([b], Strategy.CHRONOLOGICAL, max_steps=5)
    assert res.status == "timeout"
    assert not b.needs_clear
    assert b.to_line() == EMPTY
    assert b.solve(Strategy.MCV)
