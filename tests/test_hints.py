from nonogram_engine.board import Board
from nonogram_engine.hints import LineStatus, forced_move_from_line, generate_hint, next_hint
from nonogram_engine.models import CellState
from nonogram_engine.patterns import generate_line_patterns
from nonogram_engine.puzzle import Puzzle

from conftest import DIAMOND_SOLUTION

U, F, E = CellState.UNKNOWN, CellState.FILLED, CellState.EMPTY


def test_full_block_forces_first_cell():
    hint = forced_move_from_line(generate_line_patterns(5, [5]), [U] * 5)
    assert hint.status is LineStatus.FORCED
    assert (hint.index, hint.value) == (0, F)


def test_overlap_forces_middle_cell():
    hint = forced_move_from_line(generate_line_patterns(5, [3]), [U] * 5)
    assert (hint.index, hint.value) == (2, F)


def test_known_cells_narrow_candidates():
    hint = forced_move_from_line(generate_line_patterns(5, [3]), [F, U, U, U, U])
    assert (hint.index, hint.value) == (1, F)


def test_forced_empty_cell():
    hint = forced_move_from_line(generate_line_patterns(3, [1]), [F, U, U])
    assert (hint.index, hint.value) == (1, E)


def test_no_forced_move():
    hint = forced_move_from_line(generate_line_patterns(3, [1]), [U, U, U])
    assert hint.status is LineStatus.NO_FORCED_MOVE
    assert hint.index is None and hint.value is None


def test_filled_cell_no_candidate_allows_is_inconsistent():
    hint = forced_move_from_line(generate_line_patterns(3, [1, 1]), [U, F, U])
    assert hint.status is LineStatus.INCONSISTENT

    hint = forced_move_from_line(generate_line_patterns(4, []), [U, U, F, U])
    assert hint.status is LineStatus.INCONSISTENT


def test_empty_candidate_set_is_inconsistent():
    assert forced_move_from_line([], [U, U]).status is LineStatus.INCONSISTENT


def test_same_inputs_same_answer():
    candidates = generate_line_patterns(6, [2, 1])
    line = [U, F, U, U, U, U]
    assert forced_move_from_line(candidates, line) == forced_move_from_line(candidates, line)


def test_board_hint_prefers_rows(diamond_puzzle):
    hint = next_hint(diamond_puzzle, Board.empty(5, 5))
    assert hint.has_hint
    assert hint.technique == "Row Line Forcing"
    assert hint.action == "FILL"
    assert hint.cell == (0, 2)
    assert hint.message == "Hint: Cell at row 1, column 3 must be FILLED."


def test_board_hint_falls_back_to_columns():
    puzzle = Puzzle([[1], [1]], [[2], []])
    hint = next_hint(puzzle, Board.empty(2, 2))
    assert hint.technique == "Column Line Forcing"
    assert hint.cell == (0, 0)
    assert hint.value is F


def test_board_hint_marks_empty():
    puzzle = Puzzle([[1], [1]], [[2], []])
    board = Board.from_strings(["#.", ".."])
    hint = next_hint(puzzle, board)
    assert hint.cell == (0, 1)
    assert hint.action == "MARK_EMPTY"
    assert hint.message.endswith("must be EMPTY.")


def test_generate_hint_reports_broken_board(diamond_puzzle):
    board = Board.empty(5, 5)
    board.set_cell(2, 0, E)  # row 3 needs all five cells
    hint = generate_hint(diamond_puzzle, board)
    assert hint.action == "ERROR"
    assert "Row" in hint.message


def test_generate_hint_on_solved_board(diamond_puzzle):
    hint = generate_hint(diamond_puzzle, Board.from_solution(DIAMOND_SOLUTION))
    assert not hint.has_hint
    assert hint.action == "NONE"
    assert hint.message == "No immediate forced moves are available."


def test_following_hints_fills_the_board(diamond_puzzle):
    board = Board.empty(5, 5)
    for _ in range(25):
        hint = generate_hint(diamond_puzzle, board)
        if not hint.has_hint:
            break
        assert hint.action in ("FILL", "MARK_EMPTY")
        board.set_cell(*hint.cell, hint.value)
    # the diamond has two mirror solutions, so line logic alone stalls early
    assert not board.is_complete()
    assert generate_hint(diamond_puzzle, board).action == "NONE"
