from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional, Sequence, Tuple

from nonogram_engine.models import HintList, LineKind, Pattern
from nonogram_engine.patterns import generate_line_patterns

logger = logging.getLogger(__name__)

LineCandidates = Tuple[Pattern, ...]


def validate_hint_list(hints, label: str) -> HintList:
    """Return `hints` as a tuple, or raise ValueError if it is not a list of positive ints."""
    if isinstance(hints, (str, bytes)) or not isinstance(hints, Sequence):
        raise ValueError(f"{label}: hints must be a list of integers, got {hints!r}")
    out = []
    for h in hints:
        # bool is an int subclass; True is not a block length
        if isinstance(h, bool) or not isinstance(h, int):
            raise ValueError(f"{label}: hint {h!r} is not an integer")
        if h < 1:
            raise ValueError(f"{label}: block lengths must be >= 1, got {h}")
        out.append(h)
    return tuple(out)


def validate_hints(row_hints, col_hints) -> Tuple[Tuple[HintList, ...], Tuple[HintList, ...]]:
    if len(row_hints) < 1 or len(col_hints) < 1:
        raise ValueError("A puzzle needs at least one row and one column.")
    rows = tuple(validate_hint_list(h, f"Row {i+1}") for i, h in enumerate(row_hints))
    cols = tuple(validate_hint_list(h, f"Column {j+1}") for j, h in enumerate(col_hints))
    return rows, cols


@dataclass(frozen=True)
class CandidateCache:
    rows: Tuple[LineCandidates, ...]
    cols: Tuple[LineCandidates, ...]

    def line(self, kind: LineKind, index: int) -> LineCandidates:
        return self.rows[index] if kind is LineKind.ROW else self.cols[index]

    def empty_lines(self) -> List[Tuple[LineKind, int]]:
        """Lines whose hints cannot be placed at all, rows first."""
        out = [(LineKind.ROW, i) for i, c in enumerate(self.rows) if not c]
        out += [(LineKind.COL, j) for j, c in enumerate(self.cols) if not c]
        return out


def rebuild_candidate_cache(
    row_hints: Sequence[Sequence[int]],
    col_hints: Sequence[Sequence[int]],
    should_cancel: Optional[Callable[[], bool]] = None,
) -> CandidateCache:
    """
    Full rebuild: rows over width len(col_hints), columns over height len(row_hints).

    `should_cancel` is handed to the generator; SearchCancelled propagates.
    """
    n_rows, n_cols = len(row_hints), len(col_hints)
    rows = tuple(tuple(generate_line_patterns(n_cols, h, should_cancel)) for h in row_hints)
    cols = tuple(tuple(generate_line_patterns(n_rows, h, should_cancel)) for h in col_hints)
    logger.debug(
        "Candidate cache rebuilt for %dx%d: %d row patterns, %d column patterns",
        n_rows, n_cols, sum(len(c) for c in rows), sum(len(c) for c in cols),
    )
    return CandidateCache(rows, cols)


@dataclass(frozen=True)
class Puzzle:
    """
    Row and column hints bundled with the candidate cache derived from them.

    The cache is built in the constructor, so a Puzzle can never pair hints
    with candidates computed from different hints. Changing a hint means
    building a new Puzzle.
    """
    row_hints: Tuple[HintList, ...]
    col_hints: Tuple[HintList, ...]
    candidates: CandidateCache = field(init=False, repr=False, compare=False)

    def __post_init__(self) -> None:
        rows, cols = validate_hints(self.row_hints, self.col_hints)
        object.__setattr__(self, "row_hints", rows)
        object.__setattr__(self, "col_hints", cols)
        object.__setattr__(self, "candidates", rebuild_candidate_cache(rows, cols))

    @property
    def n_rows(self) -> int:
        return len(self.row_hints)

    @property
    def n_cols(self) -> int:
        return len(self.col_hints)

    def with_row_hints(self, i: int, hints: Sequence[int]) -> "Puzzle":
        rows = list(self.row_hints)
        rows[i] = tuple(hints)
        return Puzzle(tuple(rows), self.col_hints)

    def with_col_hints(self, j: int, hints: Sequence[int]) -> "Puzzle":
        cols = list(self.col_hints)
        cols[j] = tuple(hints)
        return Puzzle(self.row_hints, tuple(cols))
