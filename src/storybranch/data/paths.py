"""Helpers for resolving per-user file locations."""
from __future__ import annotations

import os
from pathlib import Path


def get_user_data_dir() -> Path:
    """Return the per-user data directory."""
    if os.name == "nt":
        base = os.environ.get("APPDATA")
        if base:
            return Path(base) / "StoryBranch"
        return Path.home() / "StoryBranch"
    return Path.home() / ".config" / "storybranch"


def get_default_config_path() -> Path:
    """Return the default per-user config path."""
    return get_user_data_dir() / "config.json"


def get_default_story_dir() -> Path:
    """Return the default directory holding one JSON file per story."""
    return get_user_data_dir() / "stories"
