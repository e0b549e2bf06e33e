"""
Unit tests for the console logger.
"""
import pwmconsole.debug_logger as debug_logger


def test_levels_prefix_message(capsys):
    debug_logger.info("solver ready")
    debug_logger.warn("clock preset missing")
    debug_logger.error("not achievable")

    lines = capsys.readouterr().out.splitlines()
    assert lines[0].startswith("[INFO] ")
    assert lines[0].endswith(" solver ready")
    assert lines[1].startswith("[WARN] ")
    assert lines[2].startswith("[ERROR] ")


def test_colour_wraps_line(monkeypatch):
    monkeypatch.setattr(debug_logger, "USE_COLOUR", True)

    line = debug_logger.format_line("ERROR", "boom")

    assert line.startswith("\033[91m[ERROR]")
    assert line.endswith("boom\033[0m")


def test_unknown_level_uncoloured(monkeypatch):
    monkeypatch.setattr(debug_logger, "USE_COLOUR", True)

    assert debug_logger.format_line("DEBUG", "x").startswith("[DEBUG]")
