"""
Arduino setup code generated from a solved PWM configuration.
"""
from .config import TIMER_SPECS
from .solver import PWMResult


def _require_configured(result: PWMResult) -> None:
    if not result.ok:
        raise ValueError(f"No register configuration to render: {result.error}")


def render_clipboard_code(result: PWMResult) -> str:
    """
    Compact setup() body: control register resets followed by the register writes.

    Raises:
        ValueError: If the result is Unachievable

    Example:
        >>> print(render_clipboard_code(solve(16000000, 1000, 50, 1)))
        void setup() {
          TCCR1A = 0;
          TCCR1B = 0;
          TCCR1A = 0x82;
          TCCR1B = 0x19;
          ICR1 = 0x3E7F;
          OCR1A = 0x1F3F;
        }
    """
    _require_configured(result)
    lines = ["void setup() {",
             f"  TCCR{result.timer}A = 0;",
             f"  TCCR{result.timer}B = 0;"]
    lines.extend(f"  {reg.name} = {reg.value};" for reg in result.registers)
    lines.append("}")
    return "\n".join(lines)


def render_setup_code(result: PWMResult) -> str:
    """
    Full Arduino sketch configuring the timer's output pin and registers.

    Why: The register list alone does not say which pin carries the waveform;
    mode 14 drives OC1A (D9), mode 7 drives OC0B (D5) or OC2B (D3).

    Args:
        result: A Configured solver result

    Returns:
        Sketch text with setup() and an empty loop()

    Raises:
        ValueError: If the result is Unachievable
    """
    _require_configured(result)
    _, _, _, channel, pin = TIMER_SPECS[result.timer]
    lines = [
        f"// Timer {result.timer} setup for {result.actual_frequency:.1f}Hz",
        "void setup() {",
        "  // Configure the PWM output pin",
        f"  pinMode({pin}, OUTPUT); // {channel}",
        "  ",
        f"  TCCR{result.timer}A = 0;",
        f"  TCCR{result.timer}B = 0;",
        "  ",
    ]
    lines.extend(f"  {reg.name} = {reg.value};" for reg in result.registers)
    lines.extend([
        "}",
        "",
        "void loop() {",
        "  // Main program",
        "}",
    ])
    return "\n".join(lines) + "\n"


def write_snippet(result: PWMResult, path: str) -> None:
    """
    Writes the full sketch to a file.

    Raises:
        ValueError: If the result is Unachievable
        OSError: If the file cannot be written
    """
    code = render_setup_code(result)
    with open(path, 'w', encoding='utf-8') as f:
        f.write(code)
