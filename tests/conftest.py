"""
Pytest configuration and shared fixtures for the PWM calculator test suite.
"""
import pytest
import sys
from pathlib import Path

# Add parent directory to path for imports (avrpwm folder is at project root)
sys.path.insert(0, str(Path(__file__).parent.parent))

from avrpwm.session import CalculationSession  # noqa: E402
import pwmconsole.debug_logger  # noqa: E402

pwmconsole.debug_logger.USE_COLOUR = False


@pytest.fixture
def temp_workdir(tmp_path, monkeypatch):
    """
    Runs the test inside a temporary directory.

    Why: Settings and history files are written to the working directory.
    """
    monkeypatch.chdir(tmp_path)
    return tmp_path


@pytest.fixture
def session():
    """Fresh session on the factory defaults (16 MHz, 1 kHz, 50 %, Timer 1)."""
    return CalculationSession()


@pytest.fixture
def log_lines():
    """Collects everything a command handler reports."""
    lines = []
    return lines
