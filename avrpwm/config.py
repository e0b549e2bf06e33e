"""
Configuration management for the ATmega328P PWM calculator.
Holds timer hardware constants, clock-select tables and the persisted input settings.
"""
from typing import Dict, Any
import json
import os

# --- HARDWARE CONSTANTS (ATmega328P datasheet) ---
TIMER_IDS = (0, 1, 2)
MAX_TOP_8BIT = 255
MAX_TOP_16BIT = 65535

# Candidate prescalers searched in ascending order
SHARED_PRESCALERS = (1, 8, 64, 256, 1024)

# Prescalers each timer supports in hardware (Timer 2 has its own divider chain)
TIMER_PRESCALERS = {
    0: (1, 8, 64, 256, 1024),
    1: (1, 8, 64, 256, 1024),
    2: (1, 8, 32, 64, 128, 256, 1024),
}

# CSn2:0 clock-select codes per timer
CLOCK_SELECT_BITS = {
    0: {1: 0b001, 8: 0b010, 64: 0b011, 256: 0b100, 1024: 0b101},
    1: {1: 0b001, 8: 0b010, 64: 0b011, 256: 0b100, 1024: 0b101},
    2: {1: 0b001, 8: 0b010, 32: 0b011, 64: 0b100, 128: 0b101, 256: 0b110, 1024: 0b111},
}

# Format: timer: (bits, max_top, wgm_mode, output_channel, arduino_pin)
TIMER_SPECS = {
    0: (8, MAX_TOP_8BIT, 7, "OC0B", 5),
    1: (16, MAX_TOP_16BIT, 14, "OC1A", 9),
    2: (8, MAX_TOP_8BIT, 7, "OC2B", 3),
}

CLOCK_PRESETS = (8000000, 16000000, 20000000)

# File paths
SETTINGS_FILE = 'pwm_settings.json'
HISTORY_FILE = 'calc_history.json'
HISTORY_BUFFER_SIZE = 20

# Factory defaults
SETTINGS_DEFAULTS = {
    "clock": 16000000,   # Oscillator frequency (Hz)
    "freq": 1000,        # Target PWM frequency (Hz)
    "duty": 50,          # Duty cycle (%)
    "timer": 1,          # Timer 1 (16-bit)
    "extended": 0,       # Search the timer's own prescaler set (1=ON)
}

# Validation bounds
# Format: name: (min_value, max_value, unit, description)
SETTING_BOUNDS = {
    "clock": (1000, 32000000, "Hz", "Clock frequency"),
    "freq": (0.001, 16000000, "Hz", "Target PWM frequency"),
    "duty": (0.0, 100.0, "%", "Duty cycle"),
    "timer": (0, 2, "id", "Timer selection"),
    "extended": (0, 1, "bool", "Extended prescaler search"),
}


def ensure_environment() -> None:
    """
    Checks for existence of the settings and history files; creates defaults if missing.

    Why:
        The console expects a settings table on start. Provisioning on demand keeps
        a fresh checkout usable without any setup step.

    Raises:
        OSError: If the working directory is not writable

    Example:
        >>> ensure_environment()
        >>> os.path.exists('pwm_settings.json')
        True
    """
    files = os.listdir()
    if SETTINGS_FILE not in files:
        with open(SETTINGS_FILE, 'w', encoding='utf-8') as f:
            json.dump(SETTINGS_DEFAULTS, f)
    if HISTORY_FILE not in files:
        with open(HISTORY_FILE, 'w', encoding='utf-8') as f:
            f.write("[]")


def load_settings() -> Dict[str, Any]:
    """
    Loads saved calculator inputs, filling any missing key from the defaults.

    Returns:
        Dictionary of setting name to value

    Raises:
        FileNotFoundError: If pwm_settings.json doesn't exist (call ensure_environment first)
        json.JSONDecodeError: If the settings file is corrupted

    Example:
        >>> settings = load_settings()
        >>> settings["timer"]
        1
    """
    with open(SETTINGS_FILE, 'r', encoding='utf-8') as f:
        data = json.load(f)
    settings = dict(SETTINGS_DEFAULTS)
    settings.update({k: v for k, v in data.items() if k in SETTINGS_DEFAULTS})
    return settings


def save_settings(settings: Dict[str, Any]) -> None:
    """
    Persists calculator inputs to disk.

    Args:
        settings: Dictionary of setting name to value

    Raises:
        TypeError: If settings is not a dictionary
        OSError: If the write fails

    Example:
        >>> settings = load_settings()
        >>> settings["duty"] = 25
        >>> save_settings(settings)
    """
    if not isinstance(settings, dict):
        raise TypeError(f"settings must be dict, got {type(settings)}")

    with open(SETTINGS_FILE, 'w', encoding='utf-8') as f:
        json.dump(settings, f)


def validate_and_update_setting(name: str, new_value: str,
                                settings: Dict[str, Any]) -> tuple[bool, str]:
    """
    Validates a setting name and value against bounds before update.

    Why: Keeps the console from feeding the solver a timer that does not exist or a
    duty cycle outside 0-100 %. The solver itself accepts any number.

    Args:
        name: Setting name (must be in SETTING_BOUNDS)
        new_value: New value as string (parsed to int/float)
        settings: Current settings dictionary (modified on success)

    Returns:
        (True, "Updated ...") on success
        (False, reason) on unknown name, unparsable value or out-of-range value

    Example:
        >>> settings = dict(SETTINGS_DEFAULTS)
        >>> validate_and_update_setting("duty", "25", settings)
        (True, 'Updated duty (Duty cycle) from 50 to 25 %')
        >>> validate_and_update_setting("timer", "3", settings)
        (False, 'timer out of range 0-2 id')
    """
    if name not in SETTING_BOUNDS:
        return (False, f"{name} unknown (not in validation table)")

    min_val, max_val, unit, description = SETTING_BOUNDS[name]

    try:
        parsed_value = float(new_value)
        if parsed_value.is_integer():
            parsed_value = int(parsed_value)
    except (ValueError, TypeError, OverflowError):
        return (False, f"{name} invalid value '{new_value}' (not a number)")

    if not min_val <= parsed_value <= max_val:
        return (False, f"{name} out of range {min_val}-{max_val} {unit}")

    # Timer and flag settings are whole numbers only
    if unit in ("id", "bool") and not isinstance(parsed_value, int):
        return (False, f"{name} must be a whole number")

    old_value = settings.get(name, "unset")
    settings[name] = parsed_value

    return (True, f"Updated {name} ({description}) from {old_value} to {parsed_value} {unit}")
