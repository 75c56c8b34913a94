"""Authoring cursor over a story being edited."""
from __future__ import annotations

from dataclasses import dataclass

from storybranch.domain.story import Branch, Story


@dataclass(slots=True)
class BuilderSession:
    """Mutable builder state: the story plus the branch and block in focus."""

    story: Story
    current_branch_id: str
    selected_block_id: str | None = None

    def current_branch(self) -> Branch | None:
        return self.story.get_branch(self.current_branch_id)
