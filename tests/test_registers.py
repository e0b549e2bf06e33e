"""
Unit tests for registers.py module.
Tests clock-select tables and register bit composition for Fast PWM modes 14 and 7.
"""
import pytest
from avrpwm.registers import (derive_registers, clock_select_bits, format_hex, format_byte,
                              Register)


def test_timer1_mode14_registers():
    """
    Tests Timer 1 register set for 16 MHz / 1 kHz / 50 %.

    Why: Mode 14 needs WGM11 in TCCR1A and WGM13+WGM12 in TCCR1B.
    """
    regs = derive_registers(1, 1, 15999, 7999)

    assert regs == (
        Register("TCCR1A", "0x82", "COM1A1=1, WGM11=1 (Fast PWM, Non-inverting)"),
        Register("TCCR1B", "0x19", "WGM13=1, WGM12=1, CS=001 (Prescaler 1)"),
        Register("ICR1", "0x3E7F", "TOP value for frequency (15999 decimal)"),
        Register("OCR1A", "0x1F3F", "Duty cycle value (7999 decimal)"),
    )


@pytest.mark.parametrize("prescaler,expected", [
    (1, "0x19"), (8, "0x1A"), (64, "0x1B"), (256, "0x1C"), (1024, "0x1D"),
])
def test_timer1_tccr1b_per_prescaler(prescaler, expected):
    assert derive_registers(1, prescaler, 100, 50)[1].value == expected


def test_timer0_mode7_registers():
    """
    Tests Timer 0 uses OCR0A as TOP and OCR0B as the duty comparator.
    """
    regs = derive_registers(0, 64, 249, 124)

    assert [r.name for r in regs] == ["TCCR0A", "TCCR0B", "OCR0A", "OCR0B"]
    assert regs[0].value == "0x23"
    assert regs[1].value == "0x0B"
    assert regs[2].value == "0xF9"
    assert regs[3].value == "0x7C"


@pytest.mark.parametrize("prescaler,code", [
    (1, 0b001), (8, 0b010), (32, 0b011), (64, 0b100), (128, 0b101), (256, 0b110), (1024, 0b111),
])
def test_timer2_clock_select_table(prescaler, code):
    """
    Tests the full Timer 2 table, including 32 and 128 which Timer 0 lacks.
    """
    assert clock_select_bits(2, prescaler) == code
    assert derive_registers(2, prescaler, 200, 10)[1].value == format_byte(0x08 | code)


def test_timer0_rejects_timer2_only_prescalers():
    """
    Safety: Writing Timer 2's CS code for 32 into TCCR0B would select 64 instead.
    """
    with pytest.raises(ValueError):
        clock_select_bits(0, 32)
    with pytest.raises(ValueError):
        derive_registers(0, 128, 200, 10)


def test_unknown_timer_rejected():
    with pytest.raises(ValueError):
        clock_select_bits(5, 1)
    with pytest.raises(ValueError):
        derive_registers(3, 1, 100, 10)


def test_negative_ocr_written_as_zero():
    regs = derive_registers(2, 8, 200, -1)

    assert regs[3].value == "0x0"
    assert "(0 decimal)" in regs[3].description


def test_hex_formatting():
    assert format_hex(0) == "0x0"
    assert format_hex(255) == "0xFF"
    assert format_hex(65535) == "0xFFFF"
    assert format_byte(0x0B) == "0x0B"
    assert format_byte(0x82) == "0x82"
