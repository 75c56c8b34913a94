"""Data layer: persisted records, migration and the story store."""

from .errors import (
    DataError,
    DataLoadError,
    StoryNotFoundError,
    StoryStoreError,
)
from .migration import is_legacy_content, migrate_story_content
from .paths import get_default_config_path, get_default_story_dir, get_user_data_dir

__all__ = [
    "DataError",
    "DataLoadError",
    "StoryNotFoundError",
    "StoryStoreError",
    "get_default_config_path",
    "get_default_story_dir",
    "get_user_data_dir",
    "is_legacy_content",
    "migrate_story_content",
]
