from __future__ import annotations

from typing import Callable, List, Optional, Sequence, Tuple

from nonogram_engine.models import CellState, HintList, Pattern, SearchCancelled


# ------------------ line helpers ------------------
def min_line_length(hints: Sequence[int]) -> int:
    """Blocks plus the mandatory single gap between consecutive blocks."""
    if not hints:
        return 0
    return sum(hints) + len(hints) - 1


def line_runs(line: Sequence[int]) -> List[int]:
    runs: List[int] = []
    current = 0
    for v in line:
        if v:
            current += 1
        elif current:
            runs.append(current)
            current = 0
    if current:
        runs.append(current)
    return runs


def line_matches(pattern: Sequence[int], line: Sequence[CellState]) -> bool:
    """True if `pattern` agrees with every known cell of `line`."""
    for i, state in enumerate(line):
        bit = state.to_bit()
        if bit is not None and pattern[i] != bit:
            return False
    return True


def pattern_to_str(pattern: Sequence[int]) -> str:
    return "".join("1" if v else "0" for v in pattern)


def _tail_lengths(hints: HintList) -> List[int]:
    # tail[k] = room needed by blocks k..end, gaps included
    tail = [0] * (len(hints) + 1)
    for k in range(len(hints) - 1, -1, -1):
        gap = 1 if k + 1 < len(hints) else 0
        tail[k] = hints[k] + gap + tail[k + 1]
    return tail


# ------------------ public API ------------------
def generate_line_patterns(
    length: int,
    hints: Sequence[int],
    should_cancel: Optional[Callable[[], bool]] = None,
) -> List[Pattern]:
    """
    Enumerate every 0/1 line of `length` whose filled runs are exactly `hints`.

    Patterns come out ordered by the start position of each block, left to
    right (first block leftmost first). The solver's search order depends on
    this order, so it must stay stable.

    Returns [] when the blocks cannot fit; that is a valid outcome, not an error.
    `should_cancel` is polled once per stack step; SearchCancelled is raised
    when it returns True.
    """
    hints = tuple(hints)
    if not hints:
        return [(0,) * length]
    if min_line_length(hints) > length:
        return []

    tail = _tail_lengths(hints)
    patterns: List[Pattern] = []

    # (cursor, block index, cells emitted so far)
    stack: List[Tuple[int, int, Pattern]] = [(0, 0, ())]
    while stack:
        if should_cancel is not None and should_cancel():
            raise SearchCancelled(f"pattern generation cancelled for hints {list(hints)}")
        pos, k, prefix = stack.pop()
        if k == len(hints):
            patterns.append(prefix + (0,) * (length - pos))
            continue

        block = hints[k]
        is_last = k == len(hints) - 1
        children: List[Tuple[int, int, Pattern]] = []
        for start in range(pos, length - tail[k] + 1):
            placed = prefix + (0,) * (start - pos) + (1,) * block
            end = start + block
            if is_last:
                children.append((end, k + 1, placed))
            else:
                children.append((end + 1, k + 1, placed + (0,)))

        # leftmost start must be popped first
        stack.extend(reversed(children))

    return patterns
