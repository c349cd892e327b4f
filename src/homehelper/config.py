"""Configuration management for HomeHelper."""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path

logger = logging.getLogger(__name__)

HOMEHELPER_HOME = Path(os.environ.get("HOMEHELPER_HOME", Path.home() / "homehelper"))
CONFIG_FILE = HOMEHELPER_HOME / "config" / "homehelper.conf"
DATA_DIR = HOMEHELPER_HOME / "data"


@dataclass
class Config:
    """HomeHelper configuration."""

    timezone: str = "Asia/Hong_Kong"
    db_path: str = field(default_factory=lambda: str(DATA_DIR / "homehelper.sqlite3"))
    undo_window_minutes: int = 5
    enforce_undo_window: bool = True
    alarm_interval_seconds: int = 60
    alarm_snooze_minutes: int = 5
    log_level: str = "INFO"


def _unquote(value: str) -> str:
    # Handle quoted values with inline comments: "value" # comment
    for quote in ('"', "'"):
        if value.startswith(quote):
            end_quote = value.find(quote, 1)
            return value[1:end_quote] if end_quote != -1 else value[1:]
    # Unquoted: strip inline comments
    if "#" in value:
        value = value.split("#")[0].strip()
    return value


def _parse_int(key: str, value: str, default: int) -> int:
    try:
        parsed = int(value)
    except ValueError:
        logger.warning(f"Invalid integer for {key.upper()}: {value!r}, using {default}")
        return default
    if parsed <= 0:
        logger.warning(f"{key.upper()} must be positive, using {default}")
        return default
    return parsed


def _parse_bool(key: str, value: str, default: bool) -> bool:
    lowered = value.lower()
    if lowered in ("1", "true", "yes", "on"):
        return True
    if lowered in ("0", "false", "no", "off"):
        return False
    logger.warning(f"Invalid boolean for {key.upper()}: {value!r}, using {default}")
    return default


def parse_config(text: str, config: Config | None = None) -> Config:
    """Apply KEY=value lines from `text` on top of `config` (or defaults)."""
    config = config or Config()

    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            continue

        key, _, value = line.partition("=")
        key = key.strip().lower()
        value = _unquote(value.strip())

        match key:
            case "timezone":
                config.timezone = value
            case "db_path":
                config.db_path = str(Path(value).expanduser())
            case "undo_window_minutes":
                config.undo_window_minutes = _parse_int(key, value, config.undo_window_minutes)
            case "enforce_undo_window":
                config.enforce_undo_window = _parse_bool(key, value, config.enforce_undo_window)
            case "alarm_interval_seconds":
                config.alarm_interval_seconds = _parse_int(key, value, config.alarm_interval_seconds)
            case "alarm_snooze_minutes":
                config.alarm_snooze_minutes = _parse_int(key, value, config.alarm_snooze_minutes)
            case "log_level":
                config.log_level = value.upper()
            case _:
                logger.debug(f"Ignoring unknown config key: {key}")

    return config


def load_config(path: Path | None = None) -> Config:
    """Load configuration from homehelper.conf file."""
    path = path or CONFIG_FILE
    if not path.exists():
        return Config()
    return parse_config(path.read_text())
