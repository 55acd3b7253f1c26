"""
Tests for configuration loading and the command-line entry point.
"""

from pathlib import Path

import pytest

from dirwatch.__main__ import build_parser, main, resolve_settings
from dirwatch.config import ConfigError, load_config


def write_config(tmp_path: Path, text: str) -> Path:
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


class TestLoadConfig:
    """Test cases for load_config."""

    def test_relative_root_resolved_against_config(self, tmp_path: Path):
        """Relative roots are resolved from the config file's directory."""
        path = write_config(tmp_path, "watcher:\n  root_path: incoming\n  refresh_interval: 0.5\n")

        config = load_config(path)

        assert config.watcher.root_path == (tmp_path / "incoming").resolve()
        assert config.watcher.refresh_interval == 0.5
        assert config.log_level == "INFO"

    def test_defaults(self, tmp_path: Path):
        path = write_config(tmp_path, "watcher:\n  root_path: /data\nlogging:\n  level: debug\n")

        config = load_config(path)

        assert config.watcher.root_path == Path("/data")
        assert config.watcher.refresh_interval == 1.0
        assert config.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "text, message",
        [
            ("- a\n- b\n", "root must be a mapping"),
            ("other: 1\n", "'watcher' section"),
            ("watcher:\n  root_path: 3\n", "root_path must be a string"),
            ("watcher:\n  root_path: x\n  refresh_interval: fast\n", "must be numeric"),
            ("watcher:\n  root_path: x\n  refresh_interval: 0\n", "must be positive"),
            ("watcher:\n  root_path: x\nlogging:\n  level: loud\n", "logging.level"),
            ("watcher: [\n", "Failed to parse"),
        ],
    )
    def test_invalid(self, tmp_path: Path, text: str, message: str):
        """Invalid files raise ConfigError with a pointed message."""
        path = write_config(tmp_path, text)

        with pytest.raises(ConfigError, match=message):
            load_config(path)

    def test_missing_file(self, tmp_path: Path):
        with pytest.raises(ConfigError, match="not found"):
            load_config(tmp_path / "absent.yaml")


class TestCommandLine:
    """Test cases for argument handling in __main__."""

    def test_path_only(self, tmp_path: Path):
        args = build_parser().parse_args([str(tmp_path), "--interval", "0.2"])

        watcher_cfg, log_level = resolve_settings(args)

        assert watcher_cfg.root_path == tmp_path
        assert watcher_cfg.refresh_interval == 0.2
        assert log_level == "INFO"

    def test_overrides_config(self, tmp_path: Path):
        """Command-line values take precedence over the config file."""
        path = write_config(tmp_path, "watcher:\n  root_path: a\n  refresh_interval: 3\n")
        args = build_parser().parse_args(
            ["--config", str(path), "--interval", "0.1", "--log-level", "DEBUG", str(tmp_path / "b")]
        )

        watcher_cfg, log_level = resolve_settings(args)

        assert watcher_cfg.root_path == tmp_path / "b"
        assert watcher_cfg.refresh_interval == 0.1
        assert log_level == "DEBUG"

    def test_requires_path_or_config(self):
        with pytest.raises(ConfigError):
            resolve_settings(build_parser().parse_args([]))

    def test_bad_interval_exit_code(self, tmp_path: Path):
        assert main([str(tmp_path), "--interval", "-1"]) == 2

    def test_missing_directory_exit_code(self, tmp_path: Path):
        """A missing directory ends the run with exit code 1."""
        assert main([str(tmp_path / "missing"), "--interval", "0.05"]) == 1
