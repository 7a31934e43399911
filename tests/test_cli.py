# test_cli.py

import io
import pytest
from unittest.mock import Mock

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

import chromashift.cli as cli
from chromashift.alias import alias_script
from chromashift.cli import main, parse_args, supports_color, use_color


@pytest.fixture(autouse=True)
def isolated_home(tmp_path, monkeypatch):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.delenv("CHROMASHIFT_CONFIG", raising=False)
    monkeypatch.delenv("CHROMASHIFT_RULES", raising=False)
    monkeypatch.delenv("FORCE_COLOR", raising=False)
    monkeypatch.delenv("TTY_COMPATIBLE", raising=False)
    return tmp_path


class TestAliasScripts:
    """Shell wrapper generation."""

    def test_zsh(self):
        script = alias_script("zsh", ["ls", "df"])
        assert script.startswith("#!/bin/zsh")
        assert 'chromashift -- df "$@"' in script
        assert script.index("function df") < script.index("function ls")

    def test_bash(self):
        script = alias_script("bash", ["ping"])
        assert 'chromashift -- "ping" "$@"' in script

    def test_fish(self):
        script = alias_script("fish", ["ls", "df"])
        assert "set chromashift_cmd_list df ls" in script
        assert "for executable in $chromashift_cmd_list" in script

    def test_nu_skips_builtins(self):
        script = alias_script("nu", ["rm", "ls", "ps"])
        assert "def --wrapped ls [...p] { chromashift -- ls ...$p }" in script
        assert "def --wrapped rm" not in script
        assert "def --wrapped ps" not in script

    def test_unknown_shell(self):
        with pytest.raises(KeyError):
            alias_script("tcsh", ["ls"])


class TestParseArgs:
    """Separating chromashift options from the wrapped command."""

    def test_explicit_separator(self):
        args, command, explicit = parse_args(["--color", "always", "--", "list", "-x"])
        assert args.color == "always"
        assert command == ["list", "-x"]
        assert explicit

    def test_implicit_command(self):
        args, command, explicit = parse_args(["-d", "ls", "-la"])
        assert args.debug
        assert command == ["ls", "-la"]
        assert not explicit

    def test_command_options_are_not_parsed(self):
        args, command, _ = parse_args(["ping", "--color", "x"])
        assert args.color == "auto"
        assert command == ["ping", "--color", "x"]


class TestColorDecision:
    """When output gets colorized."""

    def test_modes(self):
        assert use_color("always") is True
        assert use_color("never") is False

    def test_non_terminal_stream(self):
        assert supports_color(io.StringIO()) is False

    def test_auto_on_captured_output(self, capsys):
        assert use_color("auto") is False


class TestMain:
    """Command line entry point."""

    def test_alias(self, capsys):
        assert main(["alias", "zsh"]) == 0
        assert "function ping" in capsys.readouterr().out

    def test_alias_nu_warns(self, capsys):
        assert main(["alias", "nu"]) == 0
        captured = capsys.readouterr()
        assert "experimental" in captured.err
        assert "def --wrapped ping" in captured.out

    def test_alias_bad_shell(self, capsys):
        assert main(["alias", "tcsh"]) == 2

    def test_list(self, capsys):
        assert main(["list"]) == 0
        out = capsys.readouterr().out
        assert "ping" in out
        assert "make" in out

    def test_no_command_prints_help(self, capsys):
        assert main([]) == 0
        assert "chromashift" in capsys.readouterr().out

    def test_color_never_runs_plainly(self, monkeypatch):
        runner = Mock(return_value=3)
        monkeypatch.setattr(cli, "run_without_color", runner)
        assert main(["--color", "never", "--", "ping", "host"]) == 3
        runner.assert_called_once_with(["ping", "host"])

    def test_unconfigured_command_runs_plainly(self, monkeypatch):
        runner = Mock(return_value=0)
        monkeypatch.setattr(cli, "run_without_color", runner)
        assert main(["--color", "always", "--", "some-unknown-tool", "-v"]) == 0
        runner.assert_called_once_with(["some-unknown-tool", "-v"])

    def test_configured_command_is_colorized(self, monkeypatch):
        output = Mock()
        monkeypatch.setattr(cli, "Output", output)
        monkeypatch.setattr(cli.asyncio, "run", Mock(return_value=5))
        assert main(["--color", "always", "--", "ping", "host"]) == 5
        command, rules = output.call_args.args
        assert command == ["ping", "host"]
        assert rules

    def test_missing_executable(self, capsys):
        assert main(["--color", "never", "--", "definitely-not-a-command-4821"]) == 127
        assert "definitely-not-a-command-4821" in capsys.readouterr().err
