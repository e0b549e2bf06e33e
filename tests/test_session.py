"""
Unit tests for session.py module.
Tests recomputation on input change and the bounded history buffer.
"""
import json
from avrpwm.session import CalculationSession
from avrpwm.config import HISTORY_BUFFER_SIZE


def test_session_starts_with_default_result(session):
    assert session.result.ok
    assert session.result.timer == 1
    assert session.result.top == 15999


def test_session_accepts_initial_settings():
    session = CalculationSession({"timer": 2, "clock": 20000000, "freq": 500, "duty": 75})

    assert session.result.prescaler == 256
    assert session.result.registers[0].name == "TCCR2A"


def test_update_replaces_result(session):
    """
    Tests that an input change produces a new result object.

    Why: Results are immutable; the session swaps them wholesale.
    """
    before = session.result

    success, _ = session.update("freq", "2000")

    assert success
    assert session.result is not before
    assert before.top == 15999
    assert session.result.top == 7999


def test_rejected_update_keeps_result(session):
    before = session.result

    success, msg = session.update("duty", "150")

    assert not success
    assert session.result is before
    assert session.history[-1]["type"] == "REJECTED"
    assert session.history[-1]["data"] == msg


def test_update_to_unachievable(session):
    session.update("freq", "0.01")

    assert not session.result.ok
    assert session.history[-1]["type"] == "UNACHIEVABLE"


def test_extended_flag_reaches_solver():
    session = CalculationSession({"timer": 2, "freq": 2000})
    assert session.result.prescaler == 64

    session.update("extended", "1")

    assert session.result.prescaler == 32


def test_apply_preset(session):
    success, _ = session.apply_preset(8000000)
    assert success
    assert session.settings["clock"] == 8000000
    assert session.result.top == 7999

    success, msg = session.apply_preset(12000000)
    assert not success
    assert "No clock preset" in msg


def test_history_is_bounded(session):
    for i in range(HISTORY_BUFFER_SIZE + 5):
        session.log_event("TEST", i)

    assert len(session.history) == HISTORY_BUFFER_SIZE
    assert session.history[-1]["data"] == HISTORY_BUFFER_SIZE + 4


def test_save_history(session, tmp_path):
    path = tmp_path / "history.json"
    session.log_event("EXPORT", "setup.ino")

    session.save_history(str(path))

    data = json.loads(path.read_text())
    assert data[-1]["type"] == "EXPORT"
    assert data[-1]["data"] == "setup.ino"
