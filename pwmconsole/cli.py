"""
cli.py

Command line entry point and line REPL for the PWM calculator.

One-shot:
    avr-pwm --clock 16000000 --freq 1000 --duty 50 --timer 1 --code
Interactive:
    avr-pwm --interactive
"""

import argparse
import json
import sys

from avrpwm import get_version
from avrpwm.config import (ensure_environment, load_settings, SETTINGS_DEFAULTS,
                           validate_and_update_setting)
from avrpwm.session import CalculationSession
from avrpwm.snippet import render_setup_code
import pwmconsole.command_handler
import pwmconsole.debug_logger


def log_action(msg):
    print(msg)


def run_script(filename: str, session: CalculationSession):
    """
    Run a script of calculator commands, one per line ('#' starts a comment).
    """
    pwmconsole.command_handler.handle_command(f"run {filename}", session, log_action)


def repl(session: CalculationSession = None):
    if session is None:
        ensure_environment()
        session = CalculationSession(load_settings())
    print('[CLI] AVR PWM Calculator Ready.')
    print("Type 'help' for the command list.\n")
    log_action(pwmconsole.command_handler.describe_result(session.result))
    while True:
        try:
            cmd = input('> ')
        except (EOFError, KeyboardInterrupt):
            print('\n[CLI] Exiting calculator.')
            break
        pwmconsole.command_handler.handle_command(cmd, session, log_action)
    return session


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="avr-pwm",
        description="ATmega328P Fast PWM register calculator"
    )
    parser.add_argument("--clock", type=float, default=16000000,
                        help="Clock frequency in Hz (default 16000000)")
    parser.add_argument("--freq", type=float, default=1000,
                        help="Target PWM frequency in Hz (default 1000)")
    parser.add_argument("--duty", type=float, default=50,
                        help="Duty cycle in percent (default 50)")
    parser.add_argument("--timer", type=int, choices=[0, 1, 2], default=1,
                        help="Timer to configure (default 1)")
    parser.add_argument("--extended", action="store_true",
                        help="Search the timer's own prescaler set")
    parser.add_argument("--code", action="store_true",
                        help="Print Arduino setup code")
    parser.add_argument("--json", action="store_true",
                        help="Print the result as JSON")
    parser.add_argument("--interactive", action="store_true",
                        help="Start the command REPL")
    parser.add_argument("--version", action="version", version=f"%(prog)s {get_version()}")
    return parser


def _settings_from_args(args: argparse.Namespace) -> tuple[dict, list]:
    """Validate command line inputs the same way the REPL does; returns (settings, rejections)."""
    settings = dict(SETTINGS_DEFAULTS)
    rejected = []
    for name in ("clock", "freq", "duty", "timer"):
        success, message = validate_and_update_setting(name, str(getattr(args, name)), settings)
        if not success:
            rejected.append(message)
    settings["extended"] = 1 if args.extended else 0
    return settings, rejected


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.interactive:
        repl()
        return 0

    settings, rejected = _settings_from_args(args)
    for message in rejected:
        pwmconsole.debug_logger.error(message)
    if rejected:
        return 1

    session = CalculationSession(settings)
    result = session.result
    if args.json:
        print(json.dumps(result.as_dict(), indent=2))
    else:
        print(pwmconsole.command_handler.describe_result(result))
        if result.ok:
            print(pwmconsole.command_handler.describe_registers(result))

    if not result.ok:
        pwmconsole.debug_logger.error(result.error)
        return 1
    if args.code:
        print(render_setup_code(result))
    return 0


if __name__ == "__main__":
    sys.exit(main())
