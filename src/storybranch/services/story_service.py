"""Story lifecycle on top of the persistence collaborator."""
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List

from storybranch.core.ids import IdGenerator
from storybranch.data.codec import story_content_to_record, story_from_record
from storybranch.data.repositories import StoryStore
from storybranch.domain.story import Story
from storybranch.services.errors import StoryServiceError
from storybranch.services.story_graph_validator import format_issue, validate_story

logger = logging.getLogger(__name__)

SHARE_PATH_PREFIX = "/s/"
_OLDEST = datetime.min.replace(tzinfo=timezone.utc)


class StoryService:
    """Loads, saves, publishes and deletes stories through a StoryStore.

    Store failures propagate unchanged; nothing here retries.
    """

    def __init__(self, store: StoryStore, *, id_generator: IdGenerator | None = None) -> None:
        self._store = store
        self._ids = id_generator or IdGenerator()

    def load_story(self, story_id: str) -> Story:
        """Fetch a story, upgrading legacy flat content to the branch tree."""
        record = self._store.load(story_id)
        return story_from_record(record, self._ids)

    def list_stories(self) -> List[Story]:
        """Return every stored story, most recently updated first."""
        stories = [self.load_story(story_id) for story_id in self._store.list_ids()]
        stories.sort(key=lambda story: story.updated_at or _OLDEST, reverse=True)
        return stories

    def save_story(self, story: Story) -> Story:
        """Create or overwrite the story's stored row and sync ids/timestamps back."""
        for issue in validate_story(story):
            if issue.severity == "ERROR":
                logger.warning("Saving story with graph issue %s", format_issue(issue))
        if story.id is None and not story.short_url:
            story.short_url = self._ids.short_code()
        record: Dict[str, Any] = {
            "name": story.name,
            "content": story_content_to_record(story),
            "status": story.status or "draft",
            "category": story.category or "general",
            "short_url": story.short_url,
            "qr_code_url": story.qr_code_url,
        }
        saved = self._store.save(story.id, record)
        story.id = saved["id"]
        story.created_at = _parse_timestamp(saved.get("created_at")) or story.created_at
        story.updated_at = _parse_timestamp(saved.get("updated_at")) or story.updated_at
        logger.info("Saved story '%s' (%d branches).", story.id, len(story.branches))
        return story

    def publish_story(self, story_id: str) -> Story:
        story = self.load_story(story_id)
        story.status = "published"
        return self.save_story(story)

    def delete_story(self, story_id: str) -> None:
        self._store.delete(story_id)
        logger.info("Deleted story '%s'.", story_id)

    @staticmethod
    def share_path(story: Story) -> str:
        """Return the viewer link path for a saved story."""
        if not story.short_url:
            raise StoryServiceError(f"Story '{story.name}' has no share code; save it first.")
        return f"{SHARE_PATH_PREFIX}{story.short_url}"


def _parse_timestamp(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        return None
