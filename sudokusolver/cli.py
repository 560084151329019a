"""Console front end: solve puzzles typed at the prompt or read from files."""
from __future__ import annotations

import argparse
import os
import sys
from typing import List, Optional, TextIO

from . import config
from .bench import compare_strategies
from .board import Board
from .engine import run
from .models import PuzzleFormatError, SolveResult, Strategy
from .parsing import parse_board
from .storage import load_boards, save_results

WELCOME = (
    "Welcome to this sudoku-solver\n"
    "Input the location of a text file containing some sudokus, or input a puzzle "
    "description directly (digits, with or without spaces, dots or zeros for unknown cells)"
)
BAD_INPUT = "Incorrect sudoku format or invalid file location"


def solve_and_report(
    board: Board,
    strategy: Strategy,
    max_steps: Optional[int] = None,
    out: Optional[TextIO] = None,
) -> SolveResult:
    out = out if out is not None else sys.stdout
    result = run(board, strategy, max_steps=max_steps)
    if result.solved:
        out.write("Sudoku was solved successfully: \n")
    elif result.status == "timeout":
        out.write(f"Gave up on sudoku: {result.message}\n")
        board.clear()
    else:
        out.write("Failed to solve sudoku!\n")
        board.clear()
    out.write(str(board))
    return result


def boards_from_input(text: str) -> List[Board]:
    """A file path yields every puzzle in the file, anything else is parsed as one puzzle."""
    path = text.strip()
    if path and os.path.isfile(path):
        return load_boards(path)
    return [parse_board(text)]


def interactive(
    strategy: Strategy,
    max_steps: Optional[int],
    inp: Optional[TextIO] = None,
    out: Optional[TextIO] = None,
) -> List[SolveResult]:
    inp = inp if inp is not None else sys.stdin
    out = out if out is not None else sys.stdout
    results: List[SolveResult] = []
    out.write(WELCOME + "\n")
    for line in inp:
        text = line.strip()
        if text == "exit":
            break
        if not text:
            continue
        try:
            boards = boards_from_input(text)
        except (PuzzleFormatError, OSError):
            out.write(BAD_INPUT + "\n")
            continue
        for board in boards:
            results.append(solve_and_report(board, strategy, max_steps, out))
    return results


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="sudoku-solve", description="Backtracking Sudoku solver.")
    src = parser.add_mutually_exclusive_group()
    src.add_argument("--puzzle", help="Puzzle text (canonical, compact or dotted).")
    src.add_argument("--file", help="Text file with one puzzle per line.")
    parser.add_argument(
        "--strategy",
        default=config.DEFAULT_STRATEGY,
        choices=[s.value for s in Strategy],
        help="Search strategy (default: %(default)s).",
    )
    parser.add_argument("--max-steps", type=int, default=config.DEFAULT_MAX_STEPS, help="Give up after this many digit trials.")
    parser.add_argument("--report", help="Write solve results as JSON to this path.")
    parser.add_argument("--bench", action="store_true", help="Benchmark every strategy on --file instead of printing solutions.")
    parser.add_argument("--iterations", type=int, default=config.BENCH_ITERATIONS)
    parser.add_argument("--batch-size", type=int, default=config.BENCH_BATCH_SIZE)
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    strategy = Strategy.parse(args.strategy)

    if args.bench:
        if not args.file:
            print("--bench needs --file", file=sys.stderr)
            return 2
        df = compare_strategies(load_boards(args.file), iterations=args.iterations, batch_size=args.batch_size)
        print(df.to_string(index=False))
        return 0 if bool(df["success"].all()) else 1

    if args.puzzle is None and args.file is None:
        results = interactive(strategy, args.max_steps)
    else:
        try:
            boards = [parse_board(args.puzzle)] if args.puzzle is not None else load_boards(args.file)
        except (PuzzleFormatError, OSError) as e:
            print(f"{BAD_INPUT}: {e}", file=sys.stderr)
            return 2
        results = [solve_and_report(b, strategy, args.max_steps) for b in boards]

    if args.report:
        save_results(results, args.report)
    return 0 if all(r.solved for r in results) else 1


if __name__ == "__main__":
    sys.exit(main())
