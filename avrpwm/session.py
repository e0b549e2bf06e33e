"""
Calculation session: current inputs, latest result and a bounded event history.

Why: The console and dashboard share one owner for the inputs. Every accepted input
change re-runs the solver from scratch and replaces the previous result, so no
surface ever sees a half-updated configuration.
"""
from typing import Dict, Any, List
import json
import time

from .config import (SETTINGS_DEFAULTS, HISTORY_BUFFER_SIZE, HISTORY_FILE, CLOCK_PRESETS,
                     validate_and_update_setting)
from .solver import solve, PWMResult


class CalculationSession:
    """
    Holds calculator inputs and recomputes the PWM result on every change.

    Example:
        >>> session = CalculationSession()
        >>> session.result.top
        15999
        >>> session.update("timer", "0")
        (True, 'Updated timer (Timer selection) from 1 to 0 id')
        >>> session.result.prescaler
        64
    """

    def __init__(self, settings: Dict[str, Any] = None) -> None:
        self.settings = dict(SETTINGS_DEFAULTS)
        if settings:
            self.settings.update(settings)
        self.history: List[Dict[str, Any]] = []
        self.result = self.recalculate()

    def recalculate(self) -> PWMResult:
        """
        Runs the solver on the current inputs and stores the new result.

        Returns:
            The fresh Configured or Unachievable result
        """
        s = self.settings
        self.result = solve(s["clock"], s["freq"], s["duty"], int(s["timer"]),
                            extended=bool(s["extended"]))
        if self.result.ok:
            self.log_event("CALC", {"prescaler": self.result.prescaler, "top": self.result.top,
                                    "ocr": self.result.ocr})
        else:
            self.log_event("UNACHIEVABLE", {"freq": s["freq"], "timer": s["timer"]})
        return self.result

    def update(self, name: str, raw_value: str) -> tuple[bool, str]:
        """
        Validates and applies one input, then recomputes.

        Args:
            name: Setting name ("clock", "freq", "duty", "timer", "extended")
            raw_value: Value as typed by the user

        Returns:
            (success, message) from validation; the result is untouched on failure
        """
        success, message = validate_and_update_setting(name, raw_value, self.settings)
        if success:
            self.log_event("INPUT", {name: self.settings[name]})
            self.recalculate()
        else:
            self.log_event("REJECTED", message)
        return success, message

    def apply_preset(self, clock_hz: int) -> tuple[bool, str]:
        """Selects one of the common crystal frequencies (8, 16 or 20 MHz)."""
        if clock_hz not in CLOCK_PRESETS:
            return (False, f"No clock preset {clock_hz} Hz")
        return self.update("clock", str(clock_hz))

    def log_event(self, event_type: str, data: Any) -> None:
        """
        Adds an event to the history buffer (oldest entry dropped when full).

        Example:
            >>> session.log_event("EXPORT", "setup.ino")
        """
        self.history.append({"t": time.time(), "type": event_type, "data": data})
        if len(self.history) > HISTORY_BUFFER_SIZE:
            self.history.pop(0)

    def save_history(self, path: str = HISTORY_FILE) -> None:
        """
        Writes the history buffer as JSON.

        Raises:
            OSError: If the file cannot be written
        """
        with open(path, 'w', encoding='utf-8') as f:
            json.dump(self.history, f)
