"""Configuration helpers for options persistence and logging."""
from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Dict

from storybranch.data import paths

_DEFAULT_LOG_LEVEL = "INFO"
_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")
_LOG_FORMAT = "%(asctime)s  %(levelname)-8s  %(name)s  %(message)s"


def _normalize_log_level(value: object) -> str:
    if isinstance(value, str) and value.upper() in _LOG_LEVELS:
        return value.upper()
    return _DEFAULT_LOG_LEVEL


def _normalize_story_dir(value: object) -> str:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return str(paths.get_default_story_dir())


def default_config() -> Dict[str, str]:
    return {
        "log_level": _DEFAULT_LOG_LEVEL,
        "story_dir": str(paths.get_default_story_dir()),
    }


def load_config(path: Path | None = None) -> Dict[str, str]:
    """Load config from disk or return defaults."""
    config_path = path or paths.get_default_config_path()
    try:
        raw = json.loads(config_path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return default_config()
    except (OSError, ValueError):
        return default_config()
    if not isinstance(raw, dict):
        return default_config()
    return {
        "log_level": _normalize_log_level(raw.get("log_level")),
        "story_dir": _normalize_story_dir(raw.get("story_dir")),
    }


def save_config(config: Dict[str, str], path: Path | None = None) -> None:
    """Persist config to disk."""
    config_path = path or paths.get_default_config_path()
    config_path.parent.mkdir(parents=True, exist_ok=True)
    payload = {
        "log_level": _normalize_log_level(config.get("log_level")),
        "story_dir": _normalize_story_dir(config.get("story_dir")),
    }
    config_path.write_text(json.dumps(payload, indent=2, sort_keys=True), encoding="utf-8")


def get_story_dir(config: Dict[str, str] | None = None) -> Path:
    """Return the story store directory named by the config."""
    settings = config if config is not None else load_config()
    return Path(_normalize_story_dir(settings.get("story_dir"))).expanduser()


def configure_logging(level: str | None = None) -> None:
    """Install a root handler for applications embedding the library."""
    logging.basicConfig(
        level=_normalize_log_level(level or load_config().get("log_level")),
        format=_LOG_FORMAT,
        datefmt="%H:%M:%S",
    )
