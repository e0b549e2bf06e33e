"""
ATmega328P Fast PWM Register Calculator
Offline prescaler search and timer register derivation for AVR Timers 0, 1 and 2.
"""

# Versioning: YY.MM.release_number (e.g., 26.10.1)
__version__ = "26.10.1"
__author__ = "AVR PWM Calculator Project"
__licence__ = "MIT"


# Parse version string for major, minor, patch
_version_parts = __version__.split('.')
_major = int(_version_parts[0]) if len(_version_parts) > 0 else 0
_minor = int(_version_parts[1]) if len(_version_parts) > 1 else 0
_patch = int(_version_parts[2]) if len(_version_parts) > 2 else 0
_release = 'stable'

VERSION_INFO = {
    "version": __version__,
    "scheme": "YY.MM.release_number",
    "build_date": "2026-10-17",
    "major": _major,
    "minor": _minor,
    "patch": _patch,
    "release": _release
}


def get_version() -> str:
    """
    Returns the current software version in YY.MM.release_number format.

    Why: Date-based versioning for release tracking and bug reports.

    Returns:
        str: Version string (e.g., '26.10.1')

    Example:
        >>> from avrpwm import get_version
        >>> get_version()
        '26.10.1'
    """
    return __version__


def get_version_info() -> dict:
    """
    Returns detailed version information (date-based scheme).

    Returns:
        dict: Dictionary with version string, scheme, build date, major, minor, patch, release

    Example:
        >>> from avrpwm import get_version_info
        >>> info = get_version_info()
        >>> info['major']
        26
    """
    return VERSION_INFO.copy()


# pylint: disable=wrong-import-position
from .solver import solve, Configured, Unachievable  # noqa: E402

__all__ = ["solve", "Configured", "Unachievable", "get_version", "get_version_info"]
