from __future__ import annotations

import logging
import os

from flask import Flask, request, jsonify
from flask_cors import CORS

from nonogram_engine.board import Board
from nonogram_engine.formats import hints_from_json, parse_puzzle_hints
from nonogram_engine.hints import generate_hint
from nonogram_engine.patterns import generate_line_patterns, pattern_to_str
from nonogram_engine.puzzle import Puzzle, validate_hint_list
from nonogram_engine.reports import check_completion, generate_mistake_report, generate_violation_report
from nonogram_engine import solver
from nonogram_engine.solver import solve_puzzle

logger = logging.getLogger(__name__)

app = Flask(__name__)
app.config.update(SOLVE_TIME_LIMIT=10.0, MAX_LINE_LENGTH=60)
# NONOGRAM_SOLVE_TIME_LIMIT=30 etc.
app.config.from_prefixed_env("NONOGRAM")
CORS(app)


def _hints_from_request(data):
    """Either {"puzzle": "<file text>"} or {"row_hints": [...], "col_hints": [...]}; size-checked."""
    if data.get("puzzle"):
        row_hints, col_hints = parse_puzzle_hints(str(data["puzzle"]))
    else:
        row_hints = hints_from_json(data.get("row_hints"), "row_hints", "Row")
        col_hints = hints_from_json(data.get("col_hints"), "col_hints", "Column")

    limit = app.config["MAX_LINE_LENGTH"]
    if len(row_hints) > limit or len(col_hints) > limit:
        raise ValueError(
            f"Puzzle is {len(row_hints)}x{len(col_hints)}, larger than {limit}x{limit}."
        )
    return row_hints, col_hints


def _puzzle_from_request(data) -> Puzzle:
    return Puzzle(*_hints_from_request(data))


def _board_from_request(data, puzzle: Puzzle) -> Board:
    rows = data.get("board")
    if rows is None or rows == "" or rows == []:
        return Board.empty(puzzle.n_rows, puzzle.n_cols)
    if isinstance(rows, str):
        return Board.from_text(rows)
    if not isinstance(rows, list) or not all(isinstance(r, str) for r in rows):
        raise ValueError("board must be a list of row strings or a '/'-separated string")
    return Board.from_strings(rows)


def _solution_json(sol):
    return {
        "ok": sol.is_solvable,
        "status": sol.status.value,
        "message": sol.message,
        "solution": Board.from_solution(sol.solution_grid).to_strings() if sol.solution_grid is not None else None,
        "stats": {
            "candidates_tried": sol.stats.candidates_tried,
            "rejected": sol.stats.rejected,
            "backtracks": sol.stats.backtracks,
        },
    }


def _hint_json(hint):
    return {
        "has_hint": hint.has_hint,
        "technique": hint.technique,
        "action": hint.action,
        "message": hint.message,
        "cell": {"r": hint.cell[0] + 1, "c": hint.cell[1] + 1} if hint.cell is not None else None,
        "value": hint.value.value if hint.value is not None else None,
    }


def _json_body():
    data = request.get_json(force=True) or {}
    if not isinstance(data, dict):
        raise ValueError("Request body must be a JSON object")
    return data


@app.errorhandler(ValueError)
def bad_request(e):
    logger.warning("Rejected request to %s: %s", request.path, e)
    return jsonify({"error": str(e)}), 400


@app.get("/health")
def health():
    return jsonify({"ok": True})


@app.post("/patterns")
def patterns():
    data = _json_body()
    length = data.get("length")
    if isinstance(length, bool) or not isinstance(length, int) or length < 0:
        raise ValueError("length must be a non-negative integer")
    if length > app.config["MAX_LINE_LENGTH"]:
        raise ValueError(f"length must be at most {app.config['MAX_LINE_LENGTH']}")
    hints = validate_hint_list(data.get("hints", []), "hints")
    found = generate_line_patterns(length, hints)
    return jsonify({"count": len(found), "patterns": [pattern_to_str(p) for p in found]})


@app.post("/solve")
def solve():
    data = _json_body()
    row_hints, col_hints = _hints_from_request(data)
    # time limit also bounds candidate generation
    sol = solver.solve(row_hints, col_hints, time_limit=app.config["SOLVE_TIME_LIMIT"])
    return jsonify({"solver": _solution_json(sol)})


@app.post("/hint")
def hint():
    data = _json_body()
    puzzle = _puzzle_from_request(data)
    board = _board_from_request(data, puzzle)
    return jsonify({"hint": _hint_json(generate_hint(puzzle, board))})


@app.post("/analyze")
def analyze():
    data = _json_body()
    puzzle = _puzzle_from_request(data)
    board = _board_from_request(data, puzzle)

    # 1) RULE VIOLATION (a line that can no longer match its hints)
    violation = generate_violation_report(puzzle, board)
    if violation.has_violation:
        return jsonify({
            "validation": {
                "ok": False,
                "type": violation.violation_type,
                "line": violation.line_index,
                "explanation": violation.explanation,
                "cells": [{"r": r + 1, "c": c + 1} for (r, c) in violation.conflict_cells],
            },
            "complete": False,
            "hint": {"has_hint": False, "technique": None, "message": ""},
            "solver": None,
            "mistakes": {"has_mistake": False, "items": []},
        })

    # 2) SOLVE FROM HINTS ONLY
    sol = solve_puzzle(puzzle, time_limit=app.config["SOLVE_TIME_LIMIT"])
    mistakes = {"has_mistake": False, "items": []}
    if sol.is_solvable and sol.solution_grid is not None:
        report = generate_mistake_report(board, sol.solution_grid)
        mistakes = {
            "has_mistake": report.has_mistake,
            "summary": report.summary,
            "items": [
                {
                    "r": it.cell[0] + 1,
                    "c": it.cell[1] + 1,
                    "entered": it.entered.value,
                    "expected": it.expected.value,
                }
                for it in report.items
            ],
        }

    # 3) NEXT FORCED CELL
    return jsonify({
        "validation": {"ok": True, "explanation": ""},
        "complete": check_completion(puzzle, board),
        "hint": _hint_json(generate_hint(puzzle, board)),
        "solver": _solution_json(sol),
        "mistakes": mistakes,
    })


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    app.run(
        host=os.environ.get("NONOGRAM_HOST", "0.0.0.0"),
        port=int(os.environ.get("NONOGRAM_PORT", "8000")),
        debug=True,
    )
