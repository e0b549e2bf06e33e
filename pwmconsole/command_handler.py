"""
command_handler.py

Shared command parsing and execution logic for both CLI and dashboard.
"""

import os

from avrpwm.config import TIMER_SPECS, TIMER_PRESCALERS, save_settings
from avrpwm.snippet import render_setup_code, write_snippet

INPUT_COMMANDS = ('clock', 'freq', 'duty', 'timer')

# Scripts currently executing, by absolute path
_running_scripts = set()


class ExitRequested(SystemExit):
    """Raised by the exit command; the dashboard catches it to close its event loop."""


def describe_result(result):
    if not result.ok:
        return f"[RESULT] ERROR: {result.error}"
    return (
        f"[RESULT] Timer {result.timer}  prescaler {result.prescaler}  "
        f"TOP {result.top}  OCR {result.ocr}\n"
        f"  frequency {result.frequency} Hz -> {result.actual_frequency:.4f} Hz "
        f"(T = {result.period_ms:.3f} ms)\n"
        f"  duty {result.duty_cycle} % -> {result.actual_duty_cycle:.2f} %"
    )


def describe_registers(result):
    if not result.ok:
        return "[REGISTERS] none (frequency not achievable)"
    lines = ["[REGISTERS]"]
    for reg in result.registers:
        lines.append(f"  {reg.name:<7} = {reg.value:<7} {reg.description}")
    return "\n".join(lines)


def describe_timers():
    lines = ["[TIMERS]"]
    for timer, (bits, top, mode, channel, pin) in TIMER_SPECS.items():
        prescalers = ", ".join(str(p) for p in TIMER_PRESCALERS[timer])
        lines.append(f"  Timer {timer}: {bits}-bit, TOP <= {top}, WGM mode {mode}, "
                     f"output {channel} (pin {pin}), prescalers {prescalers}")
    return "\n".join(lines)


def _cmd_input(parts, session, log_action):
    if len(parts) < 2:
        log_action(f"[CLI] Usage: {parts[0]} <value>")
        return
    success, message = session.update(parts[0], parts[1])
    log_action(f"[CLI] {message}")
    if success:
        log_action(describe_result(session.result))


def _cmd_extended(parts, session, log_action):
    if len(parts) < 2 or parts[1].lower() not in ('on', 'off'):
        log_action('[CLI] Usage: extended <on|off>')
        return
    _, message = session.update('extended', '1' if parts[1].lower() == 'on' else '0')
    log_action(f"[CLI] {message}")
    log_action(describe_result(session.result))


def _cmd_preset(parts, session, log_action):
    try:
        clock_hz = int(float(parts[1]) * 1000000)
    except (IndexError, ValueError):
        log_action('[CLI] Usage: preset <8|16|20>')
        return
    success, message = session.apply_preset(clock_hz)
    log_action(f"[CLI] {message}")
    if success:
        log_action(describe_result(session.result))


def _cmd_code(parts, session, log_action):
    if not session.result.ok:
        log_action(f"[ERROR] {session.result.error}")
        return
    log_action(render_setup_code(session.result))


def _cmd_export(parts, session, log_action):
    if len(parts) < 2:
        log_action('[CLI] Usage: export <file>')
        return
    try:
        write_snippet(session.result, parts[1])
    except (ValueError, OSError) as e:
        log_action(f"[ERROR] Export failed: {e}")
        return
    session.log_event("EXPORT", parts[1])
    log_action(f"[CLI] Setup code written to {parts[1]}")


def _cmd_save(parts, session, log_action):
    try:
        save_settings(session.settings)
        session.save_history()
    except OSError as e:
        log_action(f"[ERROR] Save failed: {e}")
        return
    log_action('[CLI] Settings and history saved.')


def _cmd_history(parts, session, log_action):
    if not session.history:
        log_action('[HISTORY] empty')
        return
    lines = ["[HISTORY]"]
    lines.extend(f"  {event['type']}: {event['data']}" for event in session.history)
    log_action("\n".join(lines))


def _cmd_run(parts, session, log_action):
    if len(parts) < 2:
        log_action('[CLI] Usage: run <scriptfile>')
        return
    try:
        with open(parts[1], 'r', encoding='utf-8') as f:
            lines = [line.strip() for line in f]
    except OSError as e:
        log_action(f"[SCRIPT] Error: {e}")
        return
    script_path = os.path.abspath(parts[1])
    if script_path in _running_scripts:
        log_action(f"[SCRIPT] Error: recursive run of {parts[1]}")
        return
    _running_scripts.add(script_path)
    try:
        for line in lines:
            if not line or line.startswith('#'):
                continue
            log_action(f"[SCRIPT] > {line}")
            handle_command(line, session, log_action)
    finally:
        _running_scripts.discard(script_path)


def _cmd_exit(parts, session, log_action):
    log_action('[CLI] Exiting calculator.')
    raise ExitRequested(0)


COMMANDS = {
    'help': lambda parts, session, log_action: log_action(_help_text()),
    'show': lambda parts, session, log_action: log_action(describe_result(session.result)),
    'registers': lambda parts, session, log_action: log_action(describe_registers(session.result)),
    'timers': lambda parts, session, log_action: log_action(describe_timers()),
    'extended': _cmd_extended,
    'preset': _cmd_preset,
    'code': _cmd_code,
    'export': _cmd_export,
    'save': _cmd_save,
    'history': _cmd_history,
    'run': _cmd_run,
    'exit': _cmd_exit,
    'quit': _cmd_exit,
}
for _name in INPUT_COMMANDS:
    COMMANDS[_name] = _cmd_input


def handle_command(cmd: str, session, log_action):
    parts = cmd.strip().split()
    if not parts:
        return
    handler = COMMANDS.get(parts[0].lower())
    if handler is None:
        log_action(f"[CLI] Unknown command: {' '.join(parts)}")
        return
    handler(parts, session, log_action)


def _help_text():
    return (
        "Available commands:\n"
        "  help                         Show this help message\n"
        "  clock <hz>                   Set the clock frequency\n"
        "  freq <hz>                    Set the target PWM frequency\n"
        "  duty <percent>               Set the duty cycle (0-100)\n"
        "  timer <0|1|2>                Select the timer\n"
        "  preset <8|16|20>             Use an 8, 16 or 20 MHz clock\n"
        "  extended <on|off>            Search the timer's own prescaler set\n"
        "  show                         Show the current result\n"
        "  registers                    List the register values\n"
        "  code                         Print the Arduino setup code\n"
        "  export <file>                Write the setup code to a file\n"
        "  timers                       Describe Timers 0, 1 and 2\n"
        "  save                         Save settings and history\n"
        "  history                      Show recent calculator events\n"
        "  run <scriptfile>             Run a script of commands\n"
        "  exit | quit                  Exit the calculator\n"
        "\nExamples:\n"
        "  preset 16\n"
        "  timer 2\n"
        "  freq 500\n"
        "  duty 75\n"
        "  export pwm_setup.ino\n"
    )
