# test_config.py

import pytest
from unittest.mock import Mock

import sys
import os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from chromashift.config import (
    CommandConfig,
    SubCommand,
    get_rule_file_name,
    load_config,
    parse_config,
)
from chromashift.errors import ConfigError, RulesNotFoundError
from chromashift.rules import RULES_ENV, load_rules, parse_rules


RULES_DOC = """
stderr = true

[[rules]]
regexp = 'b'
colors = 'red'
priority = 2

[[rules]]
regexp = 'a'
colors = 'bold'
overwrite = true

[[rules]]
regexp = 'c'
colors = 'green'
priority = 1
"""


@pytest.fixture
def isolated_home(tmp_path, monkeypatch):
    """Point HOME at an empty directory and clear chromashift variables."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.delenv(RULES_ENV, raising=False)
    monkeypatch.delenv("CHROMASHIFT_CONFIG", raising=False)
    return home


class TestRules:
    """Decoding and locating rule files."""

    def test_parse_rules_sorts(self):
        cmd_rules = parse_rules(RULES_DOC)
        assert cmd_rules.stderr is True
        assert cmd_rules.pty is False
        assert [r.regexp for r in cmd_rules.rules] == ["c", "b", "a"]
        assert cmd_rules.rules[-1].overwrite

    def test_invalid_regex_is_logged(self):
        logger = Mock()
        cmd_rules = parse_rules("[[rules]]\nregexp = '('\ncolors = 'red'\n", logger)
        assert cmd_rules.rules[0].pattern is None
        logger.warning.assert_called_once()

    def test_load_from_rules_dir(self, isolated_home, tmp_path):
        rules_dir = tmp_path / "rules"
        rules_dir.mkdir()
        (rules_dir / "custom.toml").write_text(RULES_DOC)
        cmd_rules = load_rules("custom.toml", str(rules_dir))
        assert len(cmd_rules.rules) == 3

    def test_load_from_env(self, isolated_home, tmp_path, monkeypatch):
        rules_dir = tmp_path / "env-rules"
        rules_dir.mkdir()
        (rules_dir / "custom.toml").write_text(RULES_DOC)
        monkeypatch.setenv(RULES_ENV, str(rules_dir))
        assert len(load_rules("custom.toml").rules) == 3

    def test_load_from_user_config_dir(self, isolated_home):
        rules_dir = isolated_home / ".config" / "ChromaShift" / "rules"
        rules_dir.mkdir(parents=True)
        (rules_dir / "custom.toml").write_text(RULES_DOC)
        assert len(load_rules("custom.toml").rules) == 3

    def test_bundled_rules(self, isolated_home):
        cmd_rules = load_rules("ping.toml")
        assert cmd_rules.rules
        assert all(r.pattern is not None for r in cmd_rules.rules)

    def test_invalid_user_file_falls_back_to_bundled(self, isolated_home, tmp_path):
        rules_dir = tmp_path / "rules"
        rules_dir.mkdir()
        (rules_dir / "ping.toml").write_text("[[rules]\nnot toml")
        assert load_rules("ping.toml", str(rules_dir)).rules

    def test_missing_rules(self, isolated_home):
        with pytest.raises(RulesNotFoundError):
            load_rules("does-not-exist.toml")


class TestLoadConfig:
    """Merging configuration sources."""

    def test_bundled_config(self, isolated_home):
        config = load_config()
        assert config["ping"].file == "ping.toml"
        assert config["git"].sub["status"].file == "git-status.toml"

    def test_explicit_file_is_merged(self, isolated_home, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text('[foo]\nfile = "foo.toml"\n\n[ping]\nfile = "my-ping.toml"\n')
        config = load_config(str(path))
        assert config["foo"].file == "foo.toml"
        assert config["ping"].file == "my-ping.toml"
        assert "df" in config

    def test_user_config_overrides_env_config(self, isolated_home, tmp_path, monkeypatch):
        env_path = tmp_path / "env.toml"
        env_path.write_text('[foo]\nfile = "env.toml"\n')
        monkeypatch.setenv("CHROMASHIFT_CONFIG", str(env_path))
        user_path = isolated_home / ".config" / "ChromaShift" / "config.toml"
        user_path.parent.mkdir(parents=True)
        user_path.write_text('[foo]\nfile = "user.toml"\n')
        assert load_config()["foo"].file == "user.toml"

    def test_broken_file_is_ignored(self, isolated_home, tmp_path):
        path = tmp_path / "config.toml"
        path.write_text("[foo\n")
        logger = Mock()
        assert "ping" in load_config(str(path), logger)
        logger.debug.assert_called()


class TestGetRuleFileName:
    """Choosing the rules file for a command line."""

    def setup_method(self):
        self.config = parse_config("""
[ping]
file = "ping.toml"

[make]
regexp = '^(g?make|ninja)\\b'
file = "make.toml"

[git]
file = "git.toml"

[git.sub.status]
file = "git-status.toml"

[git.sub.log]
regexp = '^git\\s+log\\b'
file = "git-log.toml"

[docker]

[docker.sub.ps]
file = "docker-ps.toml"
""")

    def test_by_base_name(self):
        assert get_rule_file_name(self.config, ["/bin/ping", "-c", "1", "host"]) == "ping.toml"

    def test_by_regexp(self):
        assert get_rule_file_name(self.config, ["ninja", "-j4"]) == "make.toml"

    def test_subcommand_by_name(self):
        assert get_rule_file_name(self.config, ["git", "status"]) == "git-status.toml"

    def test_subcommand_by_regexp(self):
        assert get_rule_file_name(self.config, ["git", "log", "-p"]) == "git-log.toml"

    def test_unknown_subcommand_uses_command_file(self):
        assert get_rule_file_name(self.config, ["git", "diff"]) == "git.toml"

    def test_unknown_subcommand_without_command_file(self):
        with pytest.raises(ConfigError):
            get_rule_file_name(self.config, ["docker", "run"])

    def test_no_match(self):
        with pytest.raises(ConfigError):
            get_rule_file_name(self.config, ["cat", "file"])

    def test_empty_command(self):
        with pytest.raises(ConfigError):
            get_rule_file_name(self.config, [])

    def test_dataclass_config(self):
        config = {"tool": CommandConfig(sub={"x": SubCommand(file="x.toml")})}
        assert get_rule_file_name(config, ["tool", "x"]) == "x.toml"
