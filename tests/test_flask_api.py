import time

import pytest

from flask_api import app

from conftest import DIAMOND_HINTS


@pytest.fixture
def client():
    app.config.update(TESTING=True)
    with app.test_client() as c:
        yield c


def test_health(client):
    assert client.get("/health").get_json() == {"ok": True}


def test_patterns(client):
    data = client.post("/patterns", json={"length": 5, "hints": [1, 1]}).get_json()
    assert data["count"] == 6
    assert data["patterns"][0] == "10100"
    assert data["patterns"][-1] == "00101"


def test_patterns_rejects_bad_length(client):
    resp = client.post("/patterns", json={"length": "5", "hints": [1]})
    assert resp.status_code == 400
    assert "length" in resp.get_json()["error"]


def test_solve_from_hint_arrays(client):
    data = client.post("/solve", json={"row_hints": DIAMOND_HINTS, "col_hints": DIAMOND_HINTS}).get_json()
    solver = data["solver"]
    assert solver["ok"] is True
    assert solver["status"] == "SOLVED"
    assert solver["solution"] == ["###xx", "#x#xx", "#####", "xx#x#", "xx###"]


def test_solve_from_puzzle_text(client):
    text = "ROWS:1\nCOLS:1\nROW_HINTS:\n1\nCOL_HINTS:\n\n"
    data = client.post("/solve", json={"puzzle": text}).get_json()
    assert data["solver"]["ok"] is False
    assert data["solver"]["status"] == "UNSATISFIABLE"
    assert data["solver"]["solution"] is None


def test_solve_rejects_malformed_hints(client):
    resp = client.post("/solve", json={"row_hints": [[0]], "col_hints": [[1]]})
    assert resp.status_code == 400
    assert "Row 1" in resp.get_json()["error"]


def test_non_object_body(client):
    resp = client.post("/solve", json=[1, 2])
    assert resp.status_code == 400


def test_hint(client):
    data = client.post(
        "/hint", json={"row_hints": DIAMOND_HINTS, "col_hints": DIAMOND_HINTS}
    ).get_json()
    hint = data["hint"]
    assert hint["has_hint"] is True
    assert hint["cell"] == {"r": 1, "c": 3}
    assert hint["value"] == "FILLED"


def test_analyze_reports_violation(client):
    data = client.post(
        "/analyze",
        json={"row_hints": DIAMOND_HINTS, "col_hints": DIAMOND_HINTS, "board": "...../...../##x../...../....."},
    ).get_json()
    assert data["validation"]["ok"] is False
    assert data["validation"]["type"] == "ROW"
    assert data["validation"]["line"] == 3
    assert data["solver"] is None


def test_analyze_reports_mistakes_and_hint(client):
    board = ["x....", ".....", ".....", ".....", "....."]
    data = client.post(
        "/analyze", json={"row_hints": DIAMOND_HINTS, "col_hints": DIAMOND_HINTS, "board": board}
    ).get_json()
    assert data["validation"]["ok"] is True
    assert data["complete"] is False
    assert data["solver"]["ok"] is True
    # x at r1c1 belongs to the mirrored solution, not the one the solver returns
    assert data["mistakes"]["has_mistake"] is True
    assert data["mistakes"]["items"][0] == {"r": 1, "c": 1, "entered": "EMPTY", "expected": "FILLED"}
    assert data["hint"]["has_hint"] is True


def test_analyze_complete_board(client):
    board = ["###xx", "#x#xx", "#####", "xx#x#", "xx###"]
    data = client.post(
        "/analyze", json={"row_hints": DIAMOND_HINTS, "col_hints": DIAMOND_HINTS, "board": board}
    ).get_json()
    assert data["complete"] is True
    assert data["mistakes"]["has_mistake"] is False
    assert data["hint"]["action"] == "NONE"


def test_oversized_puzzle_text_rejected_before_building(client):
    n = 61
    text = f"ROWS:{n}\nCOLS:{n}\nROW_HINTS:\n" + "1 1 1\n" * n + "COL_HINTS:\n" + "1 1 1\n" * n
    started = time.monotonic()
    resp = client.post("/solve", json={"puzzle": text})
    assert resp.status_code == 400
    assert "larger than 60x60" in resp.get_json()["error"]
    assert time.monotonic() - started < 1.0


def test_oversized_hint_arrays_rejected(client):
    resp = client.post("/hint", json={"row_hints": [[1]] * 61, "col_hints": [[1]]})
    assert resp.status_code == 400
    assert "61x1" in resp.get_json()["error"]


def test_solve_time_limit_covers_candidate_generation(client):
    app.config.update(SOLVE_TIME_LIMIT=0.2)
    try:
        started = time.monotonic()
        data = client.post("/solve", json={"row_hints": [[1] * 6] * 26, "col_hints": [[1] * 6] * 26}).get_json()
    finally:
        app.config.update(SOLVE_TIME_LIMIT=10.0)
    assert data["solver"]["status"] == "CANCELLED"
    assert time.monotonic() - started < 2.0
