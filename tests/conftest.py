# tests/conftest.py
import sys
from pathlib import Path

import pytest

# Add project root to sys.path so "nonogram_engine" and "flask_api" can be imported in tests
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

DIAMOND_HINTS = [[3], [1, 1], [5], [1, 1], [3]]

# first solution in generation order; the mirror image also satisfies the hints
DIAMOND_SOLUTION = [
    [1, 1, 1, 0, 0],
    [1, 0, 1, 0, 0],
    [1, 1, 1, 1, 1],
    [0, 0, 1, 0, 1],
    [0, 0, 1, 1, 1],
]


@pytest.fixture
def diamond_puzzle():
    from nonogram_engine.puzzle import Puzzle

    return Puzzle(DIAMOND_HINTS, DIAMOND_HINTS)


@pytest.fixture
def diamond_file():
    return ROOT / "puzzles" / "diamond.txt"
