from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional, Tuple

RC = Tuple[int, int]  # (row, col)
HintList = Tuple[int, ...]
Pattern = Tuple[int, ...]  # 0 = empty, 1 = filled


class CellState(str, Enum):
    UNKNOWN = "UNKNOWN"
    FILLED = "FILLED"
    EMPTY = "EMPTY"

    @property
    def is_known(self) -> bool:
        return self is not CellState.UNKNOWN

    def to_bit(self) -> Optional[int]:
        if self is CellState.FILLED:
            return 1
        if self is CellState.EMPTY:
            return 0
        return None

    @staticmethod
    def from_bit(value: int) -> "CellState":
        return CellState.FILLED if value else CellState.EMPTY


class LineKind(str, Enum):
    ROW = "ROW"
    COL = "COL"


class SolveStatus(str, Enum):
    SOLVED = "SOLVED"
    UNSATISFIABLE = "UNSATISFIABLE"
    EMPTY_CANDIDATE_SET = "EMPTY_CANDIDATE_SET"
    CANCELLED = "CANCELLED"


@dataclass
class SearchStats:
    candidates_tried: int = 0
    rejected: int = 0
    backtracks: int = 0


@dataclass(frozen=True)
class SolutionResult:
    is_solvable: bool
    solution_grid: Optional[List[List[int]]] = None
    status: SolveStatus = SolveStatus.UNSATISFIABLE
    message: str = ""
    stats: SearchStats = field(default_factory=SearchStats)


class SearchCancelled(Exception):
    """Raised by a cancel hook check; solve() turns it into a CANCELLED result."""
