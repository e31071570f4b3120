from pychip8.utils import debug
from pychip8.utils.debug import debug_enabled, debug_log, reload_categories


def _set_env(monkeypatch, value):
    if value is None:
        monkeypatch.delenv(debug.ENV_VARIABLE, raising=False)
    else:
        monkeypatch.setenv(debug.ENV_VARIABLE, value)
    reload_categories()


def test_debug_disabled_without_environment(monkeypatch, capsys):
    _set_env(monkeypatch, None)

    debug_log("cpu", "pc=%03x", 0x200)

    assert not debug_enabled("cpu")
    assert capsys.readouterr().out == ""


def test_selected_categories_only(monkeypatch, capsys):
    _set_env(monkeypatch, "CPU, timer")

    debug_log("cpu", "pc=%03x", 0x200)
    debug_log("machine", "ignored")

    assert debug_enabled("timer")
    assert capsys.readouterr().out == "[CHIP8][cpu] pc=200\n"
    _set_env(monkeypatch, None)


def test_all_enables_every_category(monkeypatch, capsys):
    _set_env(monkeypatch, "all")

    debug_log("audio", "tone=%s", "on")

    assert capsys.readouterr().out == "[CHIP8][audio] tone=on\n"
    _set_env(monkeypatch, None)


def test_bad_format_arguments_are_appended(monkeypatch, capsys):
    _set_env(monkeypatch, "input")

    debug_log("input", "key=%d", "x")

    assert capsys.readouterr().out == "[CHIP8][input] key=%d ('x',)\n"
    _set_env(monkeypatch, None)
