"""
Fast PWM configuration solver for ATmega328P Timers 0, 1 and 2.

Why: The only non-trivial step in configuring a hardware PWM is choosing the clock
prescaler. F_pwm = F_clk / (N * (1 + TOP)), so for each candidate N in ascending
order we derive TOP and stop at the first one that fits the counter. The smallest
usable N gives the largest TOP and therefore the finest frequency and duty resolution.

Safety: solve() never raises for an unreachable frequency; it returns an
Unachievable result. Only an unknown timer id raises ValueError.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple
import math

from .config import SHARED_PRESCALERS, TIMER_PRESCALERS, TIMER_SPECS
from .registers import Register, derive_registers


class PWMResult:
    """Behaviour shared by both solver outcomes."""

    @property
    def ok(self) -> bool:
        """True when a register configuration was found."""
        return self.error is None

    @property
    def period_ms(self) -> float:
        """PWM period in milliseconds at the achieved frequency (0.0 if none)."""
        if self.actual_frequency <= 0:
            return 0.0
        return 1000.0 / self.actual_frequency

    def as_dict(self) -> Dict[str, Any]:
        """
        Flattens the result into the calculator's record layout.

        Returns:
            Dict with timer, prescaler, top, ocr, frequency, actualFrequency,
            dutyCycle, actualDutyCycle, error and registers (list of dicts)

        Example:
            >>> solve(16000000, 1000, 50, 1).as_dict()["actualFrequency"]
            1000.0
        """
        return {
            "timer": self.timer,
            "prescaler": self.prescaler,
            "top": self.top,
            "ocr": self.ocr,
            "frequency": self.frequency,
            "actualFrequency": self.actual_frequency,
            "dutyCycle": self.duty_cycle,
            "actualDutyCycle": self.actual_duty_cycle,
            "error": self.error,
            "registers": [reg._asdict() for reg in self.registers],
        }


@dataclass(frozen=True)
class Configured(PWMResult):
    """A reachable configuration and the register writes that produce it."""
    timer: int
    prescaler: int
    top: int
    ocr: int
    frequency: float
    actual_frequency: float
    duty_cycle: float
    actual_duty_cycle: float
    registers: Tuple[Register, ...]

    @property
    def error(self) -> Optional[str]:
        return None


@dataclass(frozen=True)
class Unachievable(PWMResult):
    """No candidate prescaler yields a TOP inside the timer's range."""
    timer: int
    frequency: float
    duty_cycle: float
    reason: str

    prescaler = 0
    top = 0
    ocr = 0
    actual_frequency = 0.0
    actual_duty_cycle = 0.0
    registers = ()

    @property
    def error(self) -> Optional[str]:
        return self.reason


def round_half_away(value: float) -> int:
    """
    Rounds to the nearest integer with halves going away from zero.

    Why: Python's round() uses banker's rounding, which would pick 312 instead
    of 313 for 312.5 and shift TOP by one count.

    Example:
        >>> round_half_away(312.5)
        313
        >>> round_half_away(-0.5)
        -1
    """
    magnitude = int(math.floor(abs(value) + 0.5))
    return magnitude if value >= 0 else -magnitude


def max_top(timer: int) -> int:
    """
    Returns the largest TOP the timer's counter can hold.

    Raises:
        ValueError: If the timer id is unknown

    Example:
        >>> max_top(1), max_top(0)
        (65535, 255)
    """
    if timer not in TIMER_SPECS:
        raise ValueError(f"Timer {timer} unknown (expected 0, 1 or 2)")
    return TIMER_SPECS[timer][1]


def candidate_prescalers(timer: int, extended: bool = False) -> Tuple[int, ...]:
    """
    Returns the ascending prescaler sequence searched for a timer.

    Args:
        timer: Timer id (0, 1 or 2)
        extended: Search the timer's own hardware set (adds 32 and 128 on Timer 2)

    Returns:
        Tuple of prescaler values, smallest first

    Example:
        >>> candidate_prescalers(2)
        (1, 8, 64, 256, 1024)
        >>> candidate_prescalers(2, extended=True)
        (1, 8, 32, 64, 128, 256, 1024)
    """
    if extended:
        return TIMER_PRESCALERS[timer]
    return SHARED_PRESCALERS


def _top_for(clock_hz: float, prescaler: int, target_hz: float) -> Optional[int]:
    """TOP for one prescaler, or None when the division has no finite answer."""
    if target_hz == 0:
        return None
    ratio = clock_hz / (prescaler * target_hz)
    if not math.isfinite(ratio):
        return None
    return round_half_away(ratio) - 1


def _ocr_for(top: int, duty_percent: float) -> int:
    """Compare value for a duty cycle; never negative, 0 for a non-finite duty."""
    if not math.isfinite(duty_percent):
        return 0
    return max(0, round_half_away(((top + 1) * duty_percent) / 100) - 1)


def _find_prescaler(clock_hz: float, target_hz: float, limit: int,
                    candidates: Tuple[int, ...]) -> Optional[Tuple[int, int]]:
    for prescaler in candidates:
        top = _top_for(clock_hz, prescaler, target_hz)
        if top is not None and 0 < top <= limit:
            return prescaler, top
    return None


def solve(clock_hz: float, target_hz: float, duty_percent: float, timer: int,
          extended: bool = False) -> PWMResult:
    """
    Finds the Fast PWM settings that best approximate a target frequency.

    Args:
        clock_hz: Oscillator frequency driving the timer (e.g. 16000000)
        target_hz: Requested PWM frequency
        duty_percent: Requested high fraction of the period, 0-100
        timer: Timer id; 1 is 16-bit (TOP <= 65535), 0 and 2 are 8-bit (TOP <= 255)
        extended: Search the timer's own prescaler set instead of the shared one

    Returns:
        Configured on success, Unachievable when no prescaler gives 0 < TOP <= max

    Raises:
        ValueError: If the timer id is unknown

    Example:
        >>> result = solve(16000000, 1000, 50, 1)
        >>> result.prescaler, result.top, result.ocr
        (1, 15999, 7999)
        >>> solve(16000000, 0.01, 50, 1).error is not None
        True
    """
    limit = max_top(timer)
    found = _find_prescaler(clock_hz, target_hz, limit, candidate_prescalers(timer, extended))
    if found is None:
        return Unachievable(
            timer=timer,
            frequency=target_hz,
            duty_cycle=duty_percent,
            reason=(f"Requested frequency {target_hz} Hz is not achievable on Timer {timer} "
                    f"with a {clock_hz} Hz clock. Change the frequency or the timer."),
        )

    prescaler, top = found
    actual_frequency = clock_hz / (prescaler * (1 + top))
    ocr = _ocr_for(top, duty_percent)
    actual_duty = ((ocr + 1) / (top + 1)) * 100

    return Configured(
        timer=timer,
        prescaler=prescaler,
        top=top,
        ocr=ocr,
        frequency=target_hz,
        actual_frequency=actual_frequency,
        duty_cycle=duty_percent,
        actual_duty_cycle=actual_duty,
        registers=derive_registers(timer, prescaler, top, ocr),
    )
