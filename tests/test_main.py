import contextlib
import logging
import sys

import shargs
from shargs import const


def run(monkeypatch, argv: list[str], extra: str | None = None) -> int:
    monkeypatch.setattr(sys, "argv", [const.ARGV0] + argv)
    if extra is None:
        monkeypatch.delenv(const.EXTRA_ARGS_ENV, raising=False)
    else:
        monkeypatch.setenv(const.EXTRA_ARGS_ENV, extra)
    return shargs.main()


def test_main_success(monkeypatch, capsys):
    assert run(monkeypatch, ["-a", "-b", "10", "/tmp/target"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["a-opt: set", "b-param: 10", "positional: /tmp/target"]


def test_main_no_args(monkeypatch, capsys):
    assert run(monkeypatch, []) == 0
    captured = capsys.readouterr()
    assert captured.out == ""
    assert captured.err == ""


def test_main_help(monkeypatch, capsys):
    assert run(monkeypatch, ["-a", "--help"]) == const.HELP_EXIT_CODE
    captured = capsys.readouterr()
    assert "Usage" in captured.out
    assert "--verbose" in captured.out
    assert "a-opt: set" not in captured.out
    assert captured.err == ""


def test_main_unknown_flag(monkeypatch, capsys):
    assert run(monkeypatch, ["-z"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Unknown argument '-z'" in captured.err
    assert "Usage: shargs" in captured.err


def test_main_missing_value(monkeypatch, capsys):
    assert run(monkeypatch, ["/tmp/target", "-b"]) == 1
    captured = capsys.readouterr()
    assert captured.out == ""
    assert "Expected value for argument '-b'" in captured.err


def test_main_extra_args(monkeypatch, capsys):
    assert run(monkeypatch, ["file"], extra="-a --b-param=x") == 0
    out = capsys.readouterr().out.splitlines()
    assert out == ["a-opt: set", "b-param: x", "positional: file"]


def test_argv_without_extra(monkeypatch):
    monkeypatch.setattr(sys, "argv", [const.ARGV0, "--", "-a"])
    monkeypatch.delenv(const.EXTRA_ARGS_ENV, raising=False)
    assert shargs.argv() == ["--", "-a"]


@contextlib.contextmanager
def bareRootLogger():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    for handler in handlers:
        root.removeHandler(handler)

    try:
        yield root
    finally:
        for handler in root.handlers[:]:
            root.removeHandler(handler)
        for handler in handlers:
            root.addHandler(handler)
        root.setLevel(level)


def test_main_verbose(monkeypatch, capsys):
    with bareRootLogger():
        assert run(monkeypatch, ["--verbose", "-a", "x", "--", "-b"]) == 0
    captured = capsys.readouterr()
    assert captured.out.splitlines() == [
        "a-opt: set",
        "positional: x",
        "positional: -b",
    ]
    assert "shargs.cli" in captured.err
    assert "Flag 'verbose' set by '--verbose'" in captured.err
    assert "Flag 'a-opt' set by '-a'" in captured.err
    assert "Separator reached" in captured.err


def test_main_quiet_hides_parser_logs(monkeypatch, capsys):
    with bareRootLogger():
        assert run(monkeypatch, ["-a", "x"]) == 0
    assert capsys.readouterr().err == ""


def test_logger_early():
    assert shargs.logger.early(["x", "--verbose"]).verbose is True
    assert shargs.logger.early(["x"]).verbose is False
    assert shargs.logger.early(["--", "--verbose"]).verbose is False
