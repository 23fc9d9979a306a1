from __future__ import annotations

import logging
import time
from typing import Callable, List, Optional, Sequence

from nonogram_engine.models import (
    HintList,
    LineKind,
    Pattern,
    SearchCancelled,
    SearchStats,
    SolutionResult,
    SolveStatus,
)
from nonogram_engine.puzzle import CandidateCache, LineCandidates, Puzzle, rebuild_candidate_cache, validate_hints

logger = logging.getLogger(__name__)

CancelHook = Callable[[], bool]


# ------------------ column prefix tracking ------------------
def narrow_columns(
    alive: Sequence[LineCandidates],
    candidate: Pattern,
    row: int,
    should_cancel: Optional[CancelHook] = None,
) -> Optional[List[LineCandidates]]:
    """
    Keep, per column, the column candidates that also agree with `candidate`
    at `row`. Returns None as soon as one column has none left.

    `alive[j]` holds exactly the column-j candidates having the committed
    rows as a prefix, so an empty result means the extended prefix is not a
    prefix of any column candidate.
    """
    narrowed: List[LineCandidates] = []
    for j, col_patterns in enumerate(alive):
        if should_cancel is not None and should_cancel():
            raise SearchCancelled(f"column narrowing cancelled at row {row+1}, column {j+1}")
        v = candidate[j]
        keep = tuple(p for p in col_patterns if p[row] == v)
        if not keep:
            return None
        narrowed.append(keep)
    return narrowed


def _deadline_hook(time_limit: Optional[float], should_cancel: Optional[CancelHook]) -> Optional[CancelHook]:
    if time_limit is None:
        return should_cancel
    deadline = time.monotonic() + time_limit

    def hook() -> bool:
        if time.monotonic() >= deadline:
            return True
        return should_cancel() if should_cancel is not None else False

    return hook


def _cancelled(message: str, stats: Optional[SearchStats] = None) -> SolutionResult:
    return SolutionResult(False, None, SolveStatus.CANCELLED, message, stats or SearchStats())


# ------------------ search ------------------
def search(
    cache: CandidateCache,
    should_cancel: Optional[CancelHook] = None,
) -> SolutionResult:
    """
    Depth-first search over rows 0..R-1 with column-prefix pruning.

    Row candidates are tried in generator order, so the first solution found
    is the same on every run. `should_cancel` is polled before each candidate
    attempt; when it returns True the search stops with CANCELLED.
    """
    row_candidates = cache.rows
    n_rows = len(row_candidates)
    stats = SearchStats()

    chosen: List[Pattern] = []
    alive: List[List[LineCandidates]] = [list(cache.cols)]
    next_index: List[int] = [0]

    while next_index:
        row = len(next_index) - 1
        if row == n_rows:
            return SolutionResult(
                True, [list(p) for p in chosen], SolveStatus.SOLVED, "Solved.", stats
            )

        if should_cancel is not None and should_cancel():
            return _cancelled(
                f"Search cancelled at row {row+1} after {stats.candidates_tried} candidates.", stats
            )

        candidates = row_candidates[row]
        k = next_index[row]
        if k >= len(candidates):
            # row exhausted: undo the row above and resume its next candidate
            next_index.pop()
            alive.pop()
            if chosen:
                chosen.pop()
                stats.backtracks += 1
            continue

        next_index[row] = k + 1
        candidate = candidates[k]
        stats.candidates_tried += 1

        try:
            narrowed = narrow_columns(alive[row], candidate, row, should_cancel)
        except SearchCancelled as e:
            return _cancelled(f"Search cancelled: {e}.", stats)
        if narrowed is None:
            stats.rejected += 1
            continue

        chosen.append(candidate)
        alive.append(narrowed)
        next_index.append(0)

    return SolutionResult(
        False, None, SolveStatus.UNSATISFIABLE,
        "No valid solution found for the puzzle.", stats,
    )


# ------------------ public API ------------------
def _empty_line_result(
    row_hints: Sequence[HintList],
    col_hints: Sequence[HintList],
    cache: CandidateCache,
) -> Optional[SolutionResult]:
    """EMPTY_CANDIDATE_SET naming the first line (rows first) with no candidates, else None."""
    empty = cache.empty_lines()
    if not empty:
        return None
    kind, idx = empty[0]
    name = "Row" if kind is LineKind.ROW else "Column"
    hints = row_hints[idx] if kind is LineKind.ROW else col_hints[idx]
    length = len(col_hints) if kind is LineKind.ROW else len(row_hints)
    msg = f"{name} {idx+1} hints {list(hints)} cannot fit in a line of length {length}."
    logger.info("Puzzle has no candidates for %s %d", name.lower(), idx + 1)
    return SolutionResult(False, None, SolveStatus.EMPTY_CANDIDATE_SET, msg)


def _run_search(cache: CandidateCache, should_cancel: Optional[CancelHook]) -> SolutionResult:
    started = time.perf_counter()
    result = search(cache, should_cancel)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "Search finished: %s in %.1f ms (%d tried, %d rejected, %d backtracks)",
        result.status.value, elapsed_ms,
        result.stats.candidates_tried, result.stats.rejected, result.stats.backtracks,
    )
    return result


def solve_puzzle(
    puzzle: Puzzle,
    should_cancel: Optional[CancelHook] = None,
    time_limit: Optional[float] = None,
) -> SolutionResult:
    """Solve from the puzzle's prebuilt cache; the time limit covers the search only."""
    empty = _empty_line_result(puzzle.row_hints, puzzle.col_hints, puzzle.candidates)
    if empty is not None:
        return empty
    return _run_search(puzzle.candidates, _deadline_hook(time_limit, should_cancel))


def solve(
    row_hints: Sequence[Sequence[int]],
    col_hints: Sequence[Sequence[int]],
    should_cancel: Optional[CancelHook] = None,
    time_limit: Optional[float] = None,
) -> SolutionResult:
    """
    Build the candidate cache and search it. The time limit starts before
    the cache is built, so pattern generation counts against it too.

    Raises ValueError on malformed hints; every other outcome is a SolutionResult.
    """
    rows, cols = validate_hints(row_hints, col_hints)
    hook = _deadline_hook(time_limit, should_cancel)
    try:
        cache = rebuild_candidate_cache(rows, cols, hook)
    except SearchCancelled as e:
        logger.info("Solve cancelled while building candidates: %s", e)
        return _cancelled(f"Search cancelled: {e}.")

    empty = _empty_line_result(rows, cols, cache)
    if empty is not None:
        return empty
    return _run_search(cache, hook)
