from __future__ import annotations

from pathlib import Path
from typing import List, Optional, Tuple, Union

from nonogram_engine.models import HintList
from nonogram_engine.puzzle import Puzzle, validate_hint_list

ROW_MARKER = "ROW_HINTS:"
COL_MARKER = "COL_HINTS:"


def parse_hint_line(line: str, label: str) -> HintList:
    """'1 2 3' -> (1, 2, 3); a blank line is an empty hint list."""
    tokens = line.split()
    try:
        values = [int(t) for t in tokens]
    except ValueError:
        raise ValueError(f"{label}: non-numeric hint in {line.strip()!r}") from None
    return validate_hint_list(values, label)


def _parse_count(line: str, key: str) -> int:
    raw = line[len(key) + 1:].strip()
    try:
        n = int(raw)
    except ValueError:
        raise ValueError(f"Invalid {key} count: {raw!r}") from None
    if n < 1:
        raise ValueError(f"{key} must be at least 1, got {n}")
    return n


def _section(lines: List[str], start: int, stop: int, count: int, name: str) -> List[str]:
    body = lines[start:stop]
    # lines past the declared count must be blank (trailing newlines)
    extra = [ln for ln in body[count:] if ln.strip()]
    if extra:
        raise ValueError(f"{name}: expected {count} lines, found extra line {extra[0].strip()!r}")
    if len(body) < count:
        raise ValueError(f"{name}: expected {count} lines, found {len(body)}")
    return body[:count]


def parse_puzzle_hints(text: str) -> Tuple[Tuple[HintList, ...], Tuple[HintList, ...]]:
    """
    ROWS:<int>
    COLS:<int>
    ROW_HINTS:
    <one line per row, space separated, blank = empty row>
    COL_HINTS:
    <one line per column>

    Returns (row_hints, col_hints) without building candidates.
    """
    lines = [ln.rstrip("\r") for ln in text.split("\n")]
    rows: Optional[int] = None
    cols: Optional[int] = None
    row_start = col_start = -1

    for i, raw in enumerate(lines):
        ln = raw.strip()
        if ln.startswith("ROWS:"):
            rows = _parse_count(ln, "ROWS")
        elif ln.startswith("COLS:"):
            cols = _parse_count(ln, "COLS")
        elif ln == ROW_MARKER:
            row_start = i + 1
        elif ln == COL_MARKER:
            col_start = i + 1

    if rows is None or cols is None or row_start < 0 or col_start < 0:
        raise ValueError("Invalid puzzle file format: missing ROWS, COLS, ROW_HINTS or COL_HINTS.")
    if col_start < row_start:
        raise ValueError("Invalid puzzle file format: ROW_HINTS must come before COL_HINTS.")

    row_lines = _section(lines, row_start, col_start - 1, rows, "ROW_HINTS")
    col_lines = _section(lines, col_start, len(lines), cols, "COL_HINTS")

    row_hints = tuple(parse_hint_line(ln, f"Row {i+1}") for i, ln in enumerate(row_lines))
    col_hints = tuple(parse_hint_line(ln, f"Column {j+1}") for j, ln in enumerate(col_lines))
    return row_hints, col_hints


def parse_puzzle_text(text: str) -> Puzzle:
    return Puzzle(*parse_puzzle_hints(text))


def format_puzzle_text(puzzle: Puzzle) -> str:
    out = [f"ROWS:{puzzle.n_rows}", f"COLS:{puzzle.n_cols}", ROW_MARKER]
    out += [" ".join(str(h) for h in hints) for hints in puzzle.row_hints]
    out.append(COL_MARKER)
    out += [" ".join(str(h) for h in hints) for hints in puzzle.col_hints]
    return "\n".join(out) + "\n"


def load_puzzle(path: Union[str, Path]) -> Puzzle:
    return parse_puzzle_text(Path(path).read_text(encoding="utf-8"))


def save_puzzle(puzzle: Puzzle, path: Union[str, Path]) -> None:
    Path(path).write_text(format_puzzle_text(puzzle), encoding="utf-8")


def hints_from_json(value, label: str, line_name: str) -> Tuple[HintList, ...]:
    """
    JSON list of lists -> tuple of hint tuples, validated like file input.
    `line_name` prefixes per-line errors ("Row 2: ...").
    """
    if not isinstance(value, list) or not value:
        raise ValueError(f"{label} must be a non-empty list of hint lists.")
    return tuple(validate_hint_list(h, f"{line_name} {i+1}") for i, h in enumerate(value))
