"""
Timer register derivation for ATmega328P Fast PWM.

Why: Maps a solved (timer, prescaler, TOP, OCR) configuration onto the register
writes that realise it. Timer 1 runs in WGM mode 14 (TOP = ICR1, output on OC1A);
Timers 0 and 2 run in WGM mode 7 (TOP = OCRnA, output on OCnB).
"""
from typing import NamedTuple, Tuple
from .config import CLOCK_SELECT_BITS

# TCCRnA bit positions
COMNA1 = 7
COMNB1 = 5
WGMN1 = 1
WGMN0 = 0
# TCCRnB bit positions
WGM13 = 4
WGM12 = 3
WGMN2 = 3


class Register(NamedTuple):
    """One register write: name, hex value string and a human-readable note."""
    name: str
    value: str
    description: str


def format_hex(value: int) -> str:
    """Uppercase hex with a 0x prefix and no padding (e.g. 0x3E7F)."""
    return f"0x{value:X}"


def format_byte(value: int) -> str:
    """Two-digit uppercase hex for 8-bit control registers (e.g. 0x0B)."""
    return f"0x{value:02X}"


def clock_select_bits(timer: int, prescaler: int) -> int:
    """
    Returns the CSn2:0 clock-select code for a prescaler on a given timer.

    Args:
        timer: Timer id (0, 1 or 2)
        prescaler: Clock divider (must be supported by that timer)

    Returns:
        3-bit clock-select code

    Raises:
        ValueError: If the timer is unknown or does not support the prescaler

    Example:
        >>> clock_select_bits(1, 64)
        3
        >>> clock_select_bits(2, 64)
        4
    """
    if timer not in CLOCK_SELECT_BITS:
        raise ValueError(f"Timer {timer} unknown (expected 0, 1 or 2)")
    table = CLOCK_SELECT_BITS[timer]
    if prescaler not in table:
        raise ValueError(f"Prescaler {prescaler} not available on Timer {timer}")
    return table[prescaler]


def _timer1_registers(prescaler: int, top: int, ocr: int) -> Tuple[Register, ...]:
    cs_bits = clock_select_bits(1, prescaler)
    tccr1a = (1 << COMNA1) | (1 << WGMN1)
    tccr1b = (1 << WGM13) | (1 << WGM12) | cs_bits
    return (
        Register("TCCR1A", format_byte(tccr1a), "COM1A1=1, WGM11=1 (Fast PWM, Non-inverting)"),
        Register("TCCR1B", format_byte(tccr1b),
                 f"WGM13=1, WGM12=1, CS={cs_bits:03b} (Prescaler {prescaler})"),
        Register("ICR1", format_hex(top), f"TOP value for frequency ({top} decimal)"),
        Register("OCR1A", format_hex(ocr), f"Duty cycle value ({ocr} decimal)"),
    )


def _timer8_registers(timer: int, prescaler: int, top: int, ocr: int) -> Tuple[Register, ...]:
    # Mode 7 only frees OCnB for output; OCRnA holds TOP
    cs_bits = clock_select_bits(timer, prescaler)
    tccra = (1 << COMNB1) | (1 << WGMN1) | (1 << WGMN0)
    tccrb = (1 << WGMN2) | cs_bits
    return (
        Register(f"TCCR{timer}A", format_byte(tccra),
                 f"COM{timer}B1=1, WGM{timer}1=1, WGM{timer}0=1 (Fast PWM, OC{timer}B non-inverting)"),
        Register(f"TCCR{timer}B", format_byte(tccrb),
                 f"WGM{timer}2=1, CS={cs_bits:03b} (Prescaler {prescaler})"),
        Register(f"OCR{timer}A", format_hex(top), f"TOP value for frequency ({top} decimal)"),
        Register(f"OCR{timer}B", format_hex(ocr), f"Duty cycle value ({ocr} decimal)"),
    )


def derive_registers(timer: int, prescaler: int, top: int, ocr: int) -> Tuple[Register, ...]:
    """
    Builds the ordered register writes for a solved Fast PWM configuration.

    Why: Control registers are composed from datasheet bit positions rather than
    copied literals, so the WGM and CS fields can be checked independently.

    Args:
        timer: Timer id (0, 1 or 2)
        prescaler: Selected clock divider
        top: Counter TOP value
        ocr: Output-compare value (negative values are written as 0)

    Returns:
        Tuple of four Register entries: control A, control B, TOP register, compare register

    Raises:
        ValueError: If the timer is unknown or the prescaler is unsupported on it

    Example:
        >>> [r.name for r in derive_registers(2, 256, 155, 116)]
        ['TCCR2A', 'TCCR2B', 'OCR2A', 'OCR2B']
        >>> derive_registers(1, 1, 15999, 7999)[2].value
        '0x3E7F'
    """
    ocr = max(0, ocr)
    if timer == 1:
        return _timer1_registers(prescaler, top, ocr)
    if timer in (0, 2):
        return _timer8_registers(timer, prescaler, top, ocr)
    raise ValueError(f"Timer {timer} unknown (expected 0, 1 or 2)")
