from __future__ import annotations
from dataclasses import dataclass, field
from typing import List, Optional, Sequence

from nonogram_engine.board import Board
from nonogram_engine.models import RC, CellState, LineKind
from nonogram_engine.patterns import line_matches, line_runs
from nonogram_engine.puzzle import Puzzle


@dataclass(frozen=True)
class ViolationReport:
    has_violation: bool
    violation_type: str = ""          # "SHAPE" | "ROW" | "COL"
    line_index: int = -1              # 1-indexed (if applicable)
    conflict_cells: List[RC] = field(default_factory=list)
    explanation: str = ""


@dataclass(frozen=True)
class MistakeItem:
    cell: RC
    entered: CellState
    expected: CellState


@dataclass(frozen=True)
class MistakeReport:
    has_mistake: bool
    items: List[MistakeItem]
    summary: str


def _cells_1_indexed(cells: List[RC]) -> List[RC]:
    return [(r + 1, c + 1) for (r, c) in cells]


def _violation(puzzle: Puzzle, board: Board, kind: LineKind, idx: int) -> ViolationReport:
    if kind is LineKind.ROW:
        line, hints = board.row(idx), puzzle.row_hints[idx]
        cells = [(idx, c) for c in range(board.n_cols)]
        name = "Row"
    else:
        line, hints = board.col(idx), puzzle.col_hints[idx]
        cells = [(r, idx) for r in range(board.n_rows)]
        name = "Column"
    known = [rc for rc, s in zip(cells, line) if s.is_known]
    if not puzzle.candidates.line(kind, idx):
        return ViolationReport(
            has_violation=True,
            violation_type=kind.value,
            line_index=idx + 1,
            explanation=(
                f"{name} hint violation: hints {list(hints)} of {name.lower()} {idx+1} "
                f"cannot fit in a line of length {len(line)}."
            ),
        )
    return ViolationReport(
        has_violation=True,
        violation_type=kind.value,
        line_index=idx + 1,
        conflict_cells=known,
        explanation=(
            f"{name} rule violation: the marked cells of {name.lower()} {idx+1} "
            f"cannot be completed to match hints {list(hints)}.\n"
            f"Known cells (1-indexed): {_cells_1_indexed(known)}."
        ),
    )


def generate_violation_report(puzzle: Puzzle, board: Board) -> ViolationReport:
    """
    1) Board shape must match the puzzle
    2) Every row, then every column, must still have a candidate agreeing with its known cells
    Returns the FIRST detected violation.
    """
    if (board.n_rows, board.n_cols) != (puzzle.n_rows, puzzle.n_cols):
        return ViolationReport(
            has_violation=True,
            violation_type="SHAPE",
            explanation=(
                f"Board is {board.n_rows}x{board.n_cols} but the puzzle is "
                f"{puzzle.n_rows}x{puzzle.n_cols}."
            ),
        )

    for i in range(puzzle.n_rows):
        line = board.row(i)
        if not any(line_matches(p, line) for p in puzzle.candidates.rows[i]):
            return _violation(puzzle, board, LineKind.ROW, i)

    for j in range(puzzle.n_cols):
        line = board.col(j)
        if not any(line_matches(p, line) for p in puzzle.candidates.cols[j]):
            return _violation(puzzle, board, LineKind.COL, j)

    return ViolationReport(
        has_violation=False,
        explanation="No violations detected: every row and column can still match its hints.",
    )


def generate_mistake_report(board: Board, solution_grid: Sequence[Sequence[int]]) -> MistakeReport:
    """
    Mistake = a known cell whose state differs from the solved grid.

    With several solutions this only compares against the one the solver
    returned, so a "mistake" may still belong to another valid solution.
    """
    items: List[MistakeItem] = []
    for r in range(board.n_rows):
        for c in range(board.n_cols):
            entered = board.grid[r][c]
            if not entered.is_known:
                continue
            expected = CellState.from_bit(solution_grid[r][c])
            if entered is not expected:
                items.append(MistakeItem(cell=(r, c), entered=entered, expected=expected))

    if items:
        return MistakeReport(
            has_mistake=True,
            items=items,
            summary=f"{len(items)} cell{'' if len(items) == 1 else 's'} differ from the solution.",
        )
    return MistakeReport(
        has_mistake=False,
        items=[],
        summary="No mistakes detected: all marked cells match the solution.",
    )


def check_completion(puzzle: Puzzle, board: Board) -> bool:
    """True if every cell is known and every line reproduces its hints."""
    bits: Optional[List[List[int]]] = board.to_bits()
    if bits is None or (board.n_rows, board.n_cols) != (puzzle.n_rows, puzzle.n_cols):
        return False
    for i, hints in enumerate(puzzle.row_hints):
        if line_runs(bits[i]) != list(hints):
            return False
    for j, hints in enumerate(puzzle.col_hints):
        if line_runs([bits[r][j] for r in range(puzzle.n_rows)]) != list(hints):
            return False
    return True
