"""Configuration loading utilities for the directory watcher."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml  # type: ignore


logger = logging.getLogger(__name__)

DEFAULT_REFRESH_INTERVAL = 1.0
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class ConfigError(Exception):
    """Raised when the configuration file is missing or invalid."""


@dataclass
class WatcherConfig:
    """Options describing which directory to poll and how often."""

    root_path: Path
    refresh_interval: float = DEFAULT_REFRESH_INTERVAL


@dataclass
class AppConfig:
    """Top-level configuration structure."""

    watcher: WatcherConfig
    log_level: str = "INFO"


def load_config(path: Path) -> AppConfig:
    """Load and validate the YAML configuration file."""

    if not path.exists():
        raise ConfigError(f"Configuration file not found: {path}")

    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse YAML configuration: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be a mapping")

    watcher_cfg = _parse_watcher_config(data.get("watcher"), config_path=path)
    log_level = _parse_log_level(data.get("logging"))

    logger.debug(
        "Loaded configuration from %s: root=%s interval=%ss",
        path,
        watcher_cfg.root_path,
        watcher_cfg.refresh_interval,
    )
    return AppConfig(watcher=watcher_cfg, log_level=log_level)


def parse_refresh_interval(value: Any, *, field_name: str = "watcher.refresh_interval") -> float:
    """Coerce ``value`` to a positive number of seconds."""

    if isinstance(value, bool):
        raise ConfigError(f"{field_name} must be numeric")
    try:
        interval = float(value)
    except (TypeError, ValueError) as exc:
        raise ConfigError(f"{field_name} must be numeric") from exc
    if interval <= 0:
        raise ConfigError(f"{field_name} must be positive")
    return interval


def _parse_watcher_config(raw: Any, *, config_path: Path) -> WatcherConfig:
    if not isinstance(raw, dict):
        raise ConfigError("'watcher' section must be a mapping")

    root_path_raw = raw.get("root_path")
    if not isinstance(root_path_raw, str):
        raise ConfigError("watcher.root_path must be a string")

    root_path = Path(root_path_raw)
    if not root_path.is_absolute():
        root_path = (config_path.parent / root_path).resolve()

    refresh_interval = parse_refresh_interval(raw.get("refresh_interval", DEFAULT_REFRESH_INTERVAL))

    return WatcherConfig(root_path=root_path, refresh_interval=refresh_interval)


def _parse_log_level(raw: Any) -> str:
    if raw is None:
        return "INFO"
    if not isinstance(raw, dict):
        raise ConfigError("'logging' section must be a mapping if provided")

    level = raw.get("level", "INFO")
    if not isinstance(level, str) or level.upper() not in _LOG_LEVELS:
        allowed = ", ".join(_LOG_LEVELS)
        raise ConfigError(f"logging.level must be one of: {allowed}")
    return level.upper()
