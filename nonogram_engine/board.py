from __future__ import annotations
from typing import List, Optional, Sequence

from nonogram_engine.models import CellState

FILLED_CHARS = "#1"
EMPTY_CHARS = "xX0"
UNKNOWN_CHARS = ".?"

_CHAR_OF = {
    CellState.FILLED: "#",
    CellState.EMPTY: "x",
    CellState.UNKNOWN: ".",
}

# click cycle of the editing surface
_TOGGLE_NEXT = {
    CellState.UNKNOWN: CellState.FILLED,
    CellState.FILLED: CellState.EMPTY,
    CellState.EMPTY: CellState.UNKNOWN,
}


def parse_cell(ch: str) -> CellState:
    if ch in FILLED_CHARS:
        return CellState.FILLED
    if ch in EMPTY_CHARS:
        return CellState.EMPTY
    if ch in UNKNOWN_CHARS:
        return CellState.UNKNOWN
    raise ValueError(f"Invalid cell char '{ch}' (use '#' filled, 'x' empty, '.' unknown).")


class Board:
    """
    Player board:
    - grid[r][c] = CellState, UNKNOWN until the player (or a hint) decides it
    - mutable while editing; a computed solution is loaded with from_solution
    """

    def __init__(self, grid: Sequence[Sequence[CellState]]):
        if not grid or not grid[0]:
            raise ValueError("Board needs at least one row and one column.")
        width = len(grid[0])
        if any(len(row) != width for row in grid):
            raise ValueError("All board rows must have the same length.")
        self.grid: List[List[CellState]] = [list(row) for row in grid]

    @staticmethod
    def empty(n_rows: int, n_cols: int) -> "Board":
        return Board([[CellState.UNKNOWN] * n_cols for _ in range(n_rows)])

    @staticmethod
    def from_strings(rows: Sequence[str]) -> "Board":
        grid = []
        for r, line in enumerate(rows):
            line = "".join(ch for ch in line if not ch.isspace())
            try:
                grid.append([parse_cell(ch) for ch in line])
            except ValueError as e:
                raise ValueError(f"Row {r+1}: {e}") from e
        return Board(grid)

    @staticmethod
    def from_text(text: str) -> "Board":
        """Rows separated by newlines or '/'; blank rows are ignored."""
        rows = [part.strip() for part in text.replace("/", "\n").splitlines()]
        return Board.from_strings([r for r in rows if r])

    @staticmethod
    def from_solution(solution_grid: Sequence[Sequence[int]]) -> "Board":
        return Board([[CellState.from_bit(v) for v in row] for row in solution_grid])

    def clone(self) -> "Board":
        return Board(self.grid)

    @property
    def n_rows(self) -> int:
        return len(self.grid)

    @property
    def n_cols(self) -> int:
        return len(self.grid[0])

    def row(self, r: int) -> List[CellState]:
        return list(self.grid[r])

    def col(self, c: int) -> List[CellState]:
        return [self.grid[r][c] for r in range(self.n_rows)]

    def set_cell(self, r: int, c: int, state: CellState) -> None:
        self.grid[r][c] = CellState(state)

    def toggle(self, r: int, c: int) -> CellState:
        self.grid[r][c] = _TOGGLE_NEXT[self.grid[r][c]]
        return self.grid[r][c]

    def clear(self) -> None:
        for row in self.grid:
            for c in range(len(row)):
                row[c] = CellState.UNKNOWN

    def is_complete(self) -> bool:
        return all(v.is_known for row in self.grid for v in row)

    def to_bits(self) -> Optional[List[List[int]]]:
        """0/1 grid if every cell is known, else None."""
        if not self.is_complete():
            return None
        return [[v.to_bit() for v in row] for row in self.grid]

    def to_strings(self) -> List[str]:
        return ["".join(_CHAR_OF[v] for v in row) for row in self.grid]

    def pretty(self) -> str:
        return "\n".join(" ".join(line) for line in self.to_strings())
