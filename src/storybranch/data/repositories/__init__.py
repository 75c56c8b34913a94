"""Repository exports."""

from .story_store import JsonStoryStore, StoryRecord, StoryStore

__all__ = [
    "JsonStoryStore",
    "StoryRecord",
    "StoryStore",
]
