import argparse
import logging
import sys
from typing import List, Optional

from nonogram_engine.board import Board
from nonogram_engine.formats import load_puzzle, save_puzzle
from nonogram_engine.hints import generate_hint
from nonogram_engine.puzzle import Puzzle
from nonogram_engine.reports import check_completion, generate_mistake_report, generate_violation_report
from nonogram_engine.solver import solve_puzzle

logger = logging.getLogger(__name__)


def print_puzzle(puzzle: Puzzle):
    print(f"Size: {puzzle.n_rows} rows x {puzzle.n_cols} columns")
    print("Row hints:   " + " | ".join(" ".join(map(str, h)) or "-" for h in puzzle.row_hints))
    print("Col hints:   " + " | ".join(" ".join(map(str, h)) or "-" for h in puzzle.col_hints))


def print_grid(board: Board):
    print(board.pretty())


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="nonogram", description="Nonogram solver and hint engine")
    p.add_argument("--puzzle", required=True, help="Puzzle file (ROWS/COLS/ROW_HINTS/COL_HINTS format), e.g. puzzles/diamond.txt")
    p.add_argument("--board", required=False, help="Current board, rows separated by '/' ('#' filled, 'x' empty, '.' unknown)")
    p.add_argument("--solve", action="store_true", help="Run the backtracking solver")
    p.add_argument("--hint", action="store_true", help="Print one next-step hint")
    p.add_argument("--time-limit", type=float, default=None, help="Abort the search after this many seconds")
    p.add_argument("--save", required=False, help="Write the puzzle back out in the file format")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    return p


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        puzzle = load_puzzle(args.puzzle)
        board = Board.from_text(args.board) if args.board else Board.empty(puzzle.n_rows, puzzle.n_cols)
    except (OSError, ValueError) as e:
        logger.error("Cannot load input: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 2

    print("\nPUZZLE:\n")
    print_puzzle(puzzle)
    print("\nUSER BOARD:\n")
    print_grid(board)
    print()

    print("RUN REPORT")
    print("=" * 60)

    # 1) VALIDATION
    violation = generate_violation_report(puzzle, board)
    print("VALIDATION REPORT")
    print("-" * 60)
    if violation.has_violation:
        print("Status: FAIL")
        print(violation.explanation)
        print("=" * 60)
        return 1
    print("Status: PASS")
    if check_completion(puzzle, board):
        print("The board is complete and matches every hint.")
    else:
        print("Every row and column can still match its hints.")
    print("-" * 60)

    # 2) SOLVE (optional)
    if args.solve:
        sol = solve_puzzle(puzzle, time_limit=args.time_limit)
        print("SOLVER REPORT")
        print("-" * 60)
        if not sol.is_solvable or sol.solution_grid is None:
            print(f"Status: FAIL ({sol.status.value})")
            print(f"Explanation: {sol.message}")
        else:
            print("Status: PASS")
            print(f"Candidates tried: {sol.stats.candidates_tried} | Backtracks: {sol.stats.backtracks}")
            print("\nSOLUTION:\n")
            print_grid(Board.from_solution(sol.solution_grid))
            print("-" * 60)

            # 3) MISTAKE REPORT
            mistakes = generate_mistake_report(board, sol.solution_grid)
            print("MISTAKE REPORT")
            print("-" * 60)
            print(mistakes.summary)
            for item in mistakes.items:
                r, c = item.cell
                print(f"- Cell (r{r+1}, c{c+1}) Entered: {item.entered.value} | Expected: {item.expected.value}")
        print("-" * 60)

    # 4) HINT REPORT (optional)
    if args.hint:
        hint = generate_hint(puzzle, board)
        print("HINT REPORT")
        print("-" * 60)
        if hint.has_hint:
            print(f"Technique: {hint.technique}")
            print(f"Action: {hint.action}")
            print(hint.message)
        else:
            print(hint.message)
        print("-" * 60)

    if args.save:
        save_puzzle(puzzle, args.save)
        print(f"Puzzle saved to {args.save}")

    print("=" * 60)
    print()
    return 0


if __name__ == "__main__":
    sys.exit(main())
