from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Sequence

from nonogram_engine.board import Board
from nonogram_engine.models import RC, CellState, LineKind, Pattern
from nonogram_engine.patterns import line_matches
from nonogram_engine.puzzle import Puzzle
from nonogram_engine.reports import generate_violation_report

logger = logging.getLogger(__name__)


class LineStatus(str, Enum):
    FORCED = "FORCED"
    NO_FORCED_MOVE = "NO_FORCED_MOVE"
    INCONSISTENT = "INCONSISTENT"


@dataclass(frozen=True)
class LineHint:
    status: LineStatus
    index: Optional[int] = None
    value: Optional[CellState] = None


# ------------------ single line ------------------
def forced_move_from_line(candidates: Sequence[Pattern], current_line: Sequence[CellState]) -> LineHint:
    """
    Find the lowest unknown cell of `current_line` that every candidate still
    agreeing with the known cells fills the same way.

    INCONSISTENT means no candidate agrees with the known cells at all, which
    is a broken board rather than a missing hint.
    """
    surviving: List[Pattern] = [p for p in candidates if line_matches(p, current_line)]
    if not surviving:
        return LineHint(LineStatus.INCONSISTENT)

    for i, state in enumerate(current_line):
        if state.is_known:
            continue
        first = surviving[0][i]
        if all(p[i] == first for p in surviving):
            return LineHint(LineStatus.FORCED, i, CellState.from_bit(first))

    return LineHint(LineStatus.NO_FORCED_MOVE)


# ------------------ board hints ------------------
@dataclass(frozen=True)
class HintResult:
    has_hint: bool
    technique: str = ""
    action: str = ""  # "FILL" | "MARK_EMPTY" | "ERROR" | "NONE"
    message: str = ""
    cell: Optional[RC] = None
    value: Optional[CellState] = None


def _fmt_cell(r: int, c: int) -> str:
    return f"row {r+1}, column {c+1}"


def _forced_hint(kind: LineKind, line_idx: int, hint: LineHint) -> HintResult:
    if kind is LineKind.ROW:
        r, c = line_idx, hint.index
        technique = "Row Line Forcing"
    else:
        r, c = hint.index, line_idx
        technique = "Column Line Forcing"
    action = "FILL" if hint.value is CellState.FILLED else "MARK_EMPTY"
    msg = f"Hint: Cell at {_fmt_cell(r, c)} must be {hint.value.value}."
    return HintResult(True, technique, action, msg, (r, c), hint.value)


def next_hint(puzzle: Puzzle, board: Board) -> HintResult:
    """
    Rows top to bottom, then columns left to right; the first forced cell wins.
    Lines that are inconsistent are skipped here; generate_hint reports them first.
    """
    for i in range(puzzle.n_rows):
        h = forced_move_from_line(puzzle.candidates.rows[i], board.row(i))
        if h.status is LineStatus.FORCED:
            return _forced_hint(LineKind.ROW, i, h)

    for j in range(puzzle.n_cols):
        h = forced_move_from_line(puzzle.candidates.cols[j], board.col(j))
        if h.status is LineStatus.FORCED:
            return _forced_hint(LineKind.COL, j, h)

    return HintResult(False, "", "NONE", "No immediate forced moves are available.")


def generate_hint(puzzle: Puzzle, board: Board) -> HintResult:
    """
    Priority order:
      1) If the board contradicts the hints -> return ERROR hint.
      2) Otherwise -> first forced cell, rows before columns.
    """
    violation = generate_violation_report(puzzle, board)
    if violation.has_violation:
        logger.debug("No hint: %s", violation.explanation)
        return HintResult(True, "Validation", "ERROR", violation.explanation)

    hint = next_hint(puzzle, board)
    logger.debug("Hint: %s", hint.message)
    return hint
