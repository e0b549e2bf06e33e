"""
dashboard.py

Terminal dashboard UI for the calculator using prompt_toolkit.
Panels:
- Inputs (top)
- Result
- Registers
- Setup Code
- Command Log (scrollable)
- Command Input (bottom)
"""


from prompt_toolkit.application import Application
from prompt_toolkit.layout import Layout, HSplit, Window
from prompt_toolkit.widgets import TextArea
from prompt_toolkit.completion import WordCompleter
from prompt_toolkit.key_binding import KeyBindings
from prompt_toolkit.styles import Style
from prompt_toolkit.buffer import Buffer
from prompt_toolkit.layout.controls import BufferControl
from prompt_toolkit.layout.margins import ScrollbarMargin

from avrpwm.config import ensure_environment, load_settings, TIMER_SPECS
from avrpwm.session import CalculationSession
from avrpwm.snippet import render_clipboard_code
import pwmconsole.command_handler


def get_inputs(session):
    s = session.settings
    bits = TIMER_SPECS[int(s['timer'])][0]
    return (
        f"[INPUTS]"
        f"\nClock: {s['clock']} Hz   Target: {s['freq']} Hz   Duty: {s['duty']} %"
        f"\nTimer: {s['timer']} ({bits}-bit)   Extended prescalers: {'ON' if s['extended'] else 'OFF'}"
    )


def get_result(session):
    return pwmconsole.command_handler.describe_result(session.result)


def get_registers(session):
    return pwmconsole.command_handler.describe_registers(session.result)


def get_code(session):
    if not session.result.ok:
        return "[CODE] unavailable"
    return "[CODE]\n" + render_clipboard_code(session.result)


style = Style.from_dict({
    'inputs': 'bg:#222244 #ffffff',
    'result': 'bg:#223322 #ffffff',
    'registers': 'bg:#222222 #ffffaa',
    'code': 'bg:#1a1a1a #aaffaa',
    'input': 'bg:#222222 #ffffff',
})

command_completer = WordCompleter([
    'help', 'exit', 'quit',
    'clock', 'freq', 'duty', 'timer 0', 'timer 1', 'timer 2',
    'preset 8', 'preset 16', 'preset 20',
    'extended on', 'extended off',
    'show', 'registers', 'code', 'export', 'timers', 'save', 'history', 'run',
], ignore_case=True, match_middle=True)


def dispatch(cmd, session, log_action) -> bool:
    """Runs one command line; False once an exit was requested, directly or from a script."""
    cmd = cmd.strip()
    if not cmd:
        return True
    log_action(f"[USER] {cmd}")
    try:
        pwmconsole.command_handler.handle_command(cmd, session, log_action)
    except pwmconsole.command_handler.ExitRequested:
        return False
    return True


def build_app(session: CalculationSession) -> Application:
    action_log = Buffer()

    def log_action(msg):
        action_log.insert_text(msg + "\n")

    inputs_area = TextArea(text=get_inputs(session), style="class:inputs", height=3, focusable=False)
    result_area = TextArea(text=get_result(session), style="class:result", height=3, focusable=False)
    registers_area = TextArea(text=get_registers(session), style="class:registers", height=5,
                              focusable=False)
    code_area = TextArea(text=get_code(session), style="class:code", height=9, focusable=False,
                         scrollbar=True)
    log_area = Window(BufferControl(buffer=action_log), height=10, wrap_lines=True,
                      right_margins=[ScrollbarMargin()])
    input_area = TextArea(height=1, prompt='> ', style="class:input", completer=command_completer,
                          complete_while_typing=True, multiline=False)

    def refresh():
        inputs_area.text = get_inputs(session)
        result_area.text = get_result(session)
        registers_area.text = get_registers(session)
        code_area.text = get_code(session)

    kb = KeyBindings()

    @kb.add('c-c')
    def _(event):
        event.app.exit()

    def accept(buff):
        if not dispatch(buff.text, session, log_action):
            app.exit()
            return False
        refresh()
        return False

    input_area.accept_handler = accept

    root_container = HSplit([
        inputs_area,
        result_area,
        registers_area,
        code_area,
        log_area,
        input_area,
    ])
    app = Application(layout=Layout(root_container, focused_element=input_area),
                      key_bindings=kb, style=style, full_screen=True)
    return app


def run_dashboard():
    ensure_environment()
    session = CalculationSession(load_settings())
    build_app(session).run()


if __name__ == "__main__":
    run_dashboard()
