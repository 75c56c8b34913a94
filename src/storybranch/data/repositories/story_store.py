"""Persistence collaborator: one JSON document per story on disk."""
from __future__ import annotations

import logging
import re
import uuid
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Mapping, Protocol

from storybranch import config
from storybranch.data.errors import DataLoadError, StoryNotFoundError, StoryStoreError
from storybranch.data.json_loader import load_json, write_json

logger = logging.getLogger(__name__)

StoryRecord = Dict[str, Any]

_NEW_STORY_ID = "new"
_STORY_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]+$")


class StoryStore(Protocol):
    """Contract the story service expects from a persistence backend."""

    def load(self, story_id: str) -> StoryRecord:
        ...

    def save(self, story_id: str | None, record: Mapping[str, Any]) -> StoryRecord:
        ...

    def delete(self, story_id: str) -> None:
        ...

    def list_ids(self) -> List[str]:
        ...


class JsonStoryStore:
    """Stores each story row as ``<story_id>.json`` under a directory.

    Saves overwrite the whole document; there is no concurrency control, so
    the last writer wins.
    """

    def __init__(self, base_dir: Path | str | None = None) -> None:
        self._base_dir = Path(base_dir) if base_dir is not None else config.get_story_dir()

    @property
    def base_dir(self) -> Path:
        return self._base_dir

    def load(self, story_id: str) -> StoryRecord:
        """Return the stored row for ``story_id``."""
        path = self._story_path(story_id)
        if not path.exists():
            raise StoryNotFoundError(f"Story '{story_id}' does not exist.")
        try:
            payload = load_json(path)
        except DataLoadError as exc:
            raise StoryStoreError(f"Story '{story_id}' could not be read: {exc}") from exc
        if not isinstance(payload, dict):
            raise StoryStoreError(f"Story '{story_id}' is not a JSON object.")
        return payload

    def save(self, story_id: str | None, record: Mapping[str, Any]) -> StoryRecord:
        """Create (``story_id`` None or ``"new"``) or overwrite a story row."""
        now = datetime.now(timezone.utc).isoformat()
        row: StoryRecord = dict(record)
        if story_id is None or story_id == _NEW_STORY_ID:
            story_id = str(uuid.uuid4())
            row["created_at"] = now
        else:
            existing = self.load(story_id)
            row["created_at"] = existing.get("created_at") or now
        row["id"] = story_id
        row["updated_at"] = now
        try:
            write_json(self._story_path(story_id), row)
        except OSError as exc:
            raise StoryStoreError(f"Story '{story_id}' could not be written: {exc}") from exc
        logger.debug("Wrote story '%s' to %s.", story_id, self._base_dir)
        return row

    def delete(self, story_id: str) -> None:
        """Delete the story row if it exists."""
        path = self._story_path(story_id)
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise StoryStoreError(f"Story '{story_id}' could not be deleted: {exc}") from exc

    def list_ids(self) -> List[str]:
        if not self._base_dir.exists():
            return []
        return sorted(path.stem for path in self._base_dir.glob("*.json"))

    def _story_path(self, story_id: str) -> Path:
        if not isinstance(story_id, str) or not _STORY_ID_PATTERN.match(story_id):
            raise StoryStoreError(f"Invalid story id {story_id!r}.")
        return self._base_dir / f"{story_id}.json"
