from __future__ import annotations

import os
from typing import List, Optional, Tuple

import pandas as pd
import streamlit as st

from sudokusolver import config
from sudokusolver.bench import compare_strategies, results_frame
from sudokusolver.board import Board
from sudokusolver.engine import run, solve_all
from sudokusolver.models import PuzzleFormatError, Strategy
from sudokusolver.parsing import grid_to_line, is_puzzle_line, normalize, parse_board
from sudokusolver.render import board_to_csv, board_to_html
from sudokusolver.storage import load_boards, resolve_puzzle_path

N = 9


# -----------------------------
# App setup
# -----------------------------

st.set_page_config(page_title="Sudoku Solver", layout="wide")

st.markdown(
    """
<style>
div[data-testid="stTextInput"] input {
    text-align: center;
    font-size: 22px !important;
    height: 2.8rem;
    padding: 0.25rem 0.25rem;
}
div[data-testid="stTextInput"] { margin-bottom: 0rem; }

.sudoku-wrap { margin-top: 0.5rem; }
.sudoku-title { font-size: 1.05rem; font-weight: 600; margin: 0.5rem 0 0.35rem 0; }
table.sudoku { border-collapse: collapse; }
table.sudoku td {
    width: 2.8rem;
    height: 2.8rem;
    text-align: center;
    vertical-align: middle;
    font-size: 22px;
    border: 1px solid rgba(49, 51, 63, 0.25);
}
table.sudoku td.given { font-weight: 700; background: rgba(49, 51, 63, 0.06); }
table.sudoku td.top { border-top: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.left { border-left: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.bottom { border-bottom: 3px solid rgba(49, 51, 63, 0.65); }
table.sudoku td.right { border-right: 3px solid rgba(49, 51, 63, 0.65); }
.sudoku-spacer { height: 0.25rem; }
</style>
""",
    unsafe_allow_html=True,
)

st.title("Sudoku Solver")

pages = ["Solve", "Batch", "Benchmark"]
page = st.sidebar.radio("Navigate", pages)

strategy_names = [s.value for s in Strategy]
strategy = Strategy.parse(
    st.sidebar.selectbox(
        "Strategy",
        strategy_names,
        index=strategy_names.index(Strategy.parse(config.DEFAULT_STRATEGY).value),
    )
)
max_steps = st.sidebar.number_input("Max digit trials (0 = unlimited)", min_value=0, value=0, step=10000)
budget = int(max_steps) or None


# -----------------------------
# Input grid helpers
# -----------------------------

def cell_key(r: int, c: int) -> str:
    return f"cell_{r}_{c}"


def reset_board() -> None:
    for r in range(N):
        for c in range(N):
            st.session_state[cell_key(r, c)] = ""


def load_into_form(line: str) -> None:
    for i, tok in enumerate(line.split()):
        r, c = divmod(i, N)
        st.session_state[cell_key(r, c)] = "" if tok == "0" else tok


def read_form() -> Tuple[List[List[int]], List[str]]:
    """
    Read cell widget values from session_state and build an int grid.
    Returns (grid, errors). Empty string or '0' => 0.
    """
    errors: List[str] = []
    grid: List[List[int]] = [[0] * N for _ in range(N)]

    for r in range(N):
        for c in range(N):
            raw = str(st.session_state.get(cell_key(r, c), "")).strip()
            if raw == "":
                continue
            if not raw.isdigit():
                errors.append(f"Cell ({r+1},{c+1}) is not a number: '{raw}'")
                continue
            v = int(raw)
            if 0 <= v <= N:
                grid[r][c] = v
            else:
                errors.append(f"Cell ({r+1},{c+1}) out of range: {v} (allowed 1..{N}, or blank/0).")

    return grid, errors


def show_board(board: Board, title: str) -> None:
    st.markdown(board_to_html(board.to_grid(), board.fixed_grid(), title), unsafe_allow_html=True)


# -----------------------------
# Solve
# -----------------------------

if page == "Solve":
    st.caption("Leave cells blank (or enter 0), or paste a puzzle below. Click **Solve** to get the solution.")

    with st.sidebar:
        st.divider()
        if st.button("Reset board", use_container_width=True):
            reset_board()

    with st.expander("Paste a puzzle"):
        pasted = st.text_input("Puzzle (81 digits, '.' or '0' for blanks)", value="")
        if st.button("Load puzzle"):
            try:
                load_into_form(normalize(pasted))
                st.rerun()
            except PuzzleFormatError as e:
                st.error(str(e))

    st.subheader("Input")
    with st.form("sudoku_form", clear_on_submit=False):
        spacer_w = 0.18
        widths = []
        for g in range(3):
            widths.extend([1.0] * 3)
            if g != 2:
                widths.append(spacer_w)

        for r in range(N):
            cols = st.columns(widths, gap="small")
            col_idx = 0
            for c in range(N):
                if c > 0 and c % 3 == 0:
                    col_idx += 1  # skip spacer column
                with cols[col_idx]:
                    key = cell_key(r, c)
                    if key not in st.session_state:
                        st.session_state[key] = ""
                    st.text_input(label="", key=key, label_visibility="collapsed", placeholder="")
                col_idx += 1

            if (r + 1) % 3 == 0 and (r + 1) != N:
                st.markdown("<div class='sudoku-spacer'></div>", unsafe_allow_html=True)

        colA, colB, _ = st.columns([1, 1, 2])
        validate_clicked = colA.form_submit_button("Validate", use_container_width=True)
        solve_clicked = colB.form_submit_button("Solve", use_container_width=True)

    grid, parse_errors = read_form()
    if (validate_clicked or solve_clicked) and parse_errors:
        st.error("Please fix these input issues:")
        st.write("\n".join([f"- {e}" for e in parse_errors]))
    elif validate_clicked or solve_clicked:
        board = Board(grid_to_line(grid))
        if board.has_conflicting_givens:
            st.error("Conflict: a digit appears twice in a row, column or box.")
        else:
            st.success("Board looks valid.")
        show_board(board, "Current board (preview)")

        if solve_clicked:
            result = run(board, strategy, max_steps=budget)
            c1, c2, c3 = st.columns(3)
            c1.metric("Time (ms)", f"{result.duration_ms:.2f}")
            c2.metric("Digit trials", result.stats.steps)
            c3.metric("Backtracks", result.stats.backtracks)

            if result.solved:
                st.success("Solution found ✅")
                show_board(board, "Solution")
                st.download_button(
                    "Download solution as CSV",
                    data=board_to_csv(board.to_grid()),
                    file_name="sudoku_solution_9x9.csv",
                    mime="text/csv",
                )
            elif result.status == "timeout":
                st.warning(result.message)
            else:
                st.error(f"No solution found. {result.message}")
            board.clear()
    else:
        preview = Board(grid_to_line(grid)) if not parse_errors else None
        if preview is not None:
            show_board(preview, "Current board (preview)")

# -----------------------------
# Batch
# -----------------------------

elif page == "Batch":
    st.subheader("Solve a puzzle file")
    upload = st.file_uploader("Puzzle file (one puzzle per line)", type=["txt", "sdk"])
    default_path = resolve_puzzle_path()
    st.caption(f"Without an upload, puzzles are read from `{default_path}`.")

    boards: Optional[List[Board]] = None
    if upload is not None:
        boards = []
        lines = [ln for ln in upload.getvalue().decode("utf-8").splitlines() if is_puzzle_line(ln)]
        for i, ln in enumerate(lines, start=1):
            try:
                boards.append(parse_board(ln))
            except PuzzleFormatError as e:
                st.warning(f"Line {i}: {e}")
    elif os.path.exists(default_path):
        try:
            boards = load_boards(default_path)
        except PuzzleFormatError as e:
            st.error(str(e))

    if boards is not None:
        # unsolved boards come back cleared
        results = solve_all(boards, strategy, max_steps=budget)

        st.dataframe(results_frame(results), use_container_width=True, hide_index=True)
        if boards:
            pick = st.selectbox("Show puzzle", list(range(1, len(boards) + 1)))
            show_board(boards[pick - 1], f"Puzzle {pick}")

# -----------------------------
# Benchmark
# -----------------------------

elif page == "Benchmark":
    st.subheader("Compare strategies")
    upload = st.file_uploader("Puzzle file (one puzzle per line)", type=["txt", "sdk"], key="bench_file")

    c1, c2 = st.columns(2)
    with c1:
        iterations = st.number_input("Rounds", min_value=1, max_value=100000, value=config.BENCH_ITERATIONS, step=100)
    with c2:
        batch_size = st.number_input("Rounds per batch", min_value=1, max_value=100000, value=config.BENCH_BATCH_SIZE, step=10)
    chosen = st.multiselect("Strategies", strategy_names, default=strategy_names)

    if upload is not None and st.button("Run benchmark"):
        try:
            boards = [
                Board(normalize(ln))
                for ln in upload.getvalue().decode("utf-8").splitlines()
                if is_puzzle_line(ln)
            ]
        except PuzzleFormatError as e:
            st.error(str(e))
            boards = []

        if boards:
            with st.spinner("Benchmarking..."):
                df = compare_strategies(boards, chosen, iterations=int(iterations), batch_size=int(batch_size))
            st.dataframe(df, use_container_width=True, hide_index=True)
            ok = df[df["success"]]
            if not ok.empty:
                st.bar_chart(pd.DataFrame({"mean_us": ok["mean_us"].values}, index=ok["strategy"].values))
            if not bool(df["success"].all()):
                st.warning("Some strategy failed to solve a puzzle; its timings are missing.")
