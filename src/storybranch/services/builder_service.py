"""Authoring-time mutations of the branch tree."""
from __future__ import annotations

import logging
from typing import List

from storybranch.core.ids import IdGenerator
from storybranch.domain.blocks import (
    Block,
    BlockContent,
    BranchChoiceContent,
    Media,
    Option,
    default_content,
    is_block_type,
)
from storybranch.domain.session import BuilderSession
from storybranch.domain.settings import BlockSettings
from storybranch.domain.story import ROOT_BRANCH_ID, ROOT_BRANCH_NAME, Branch, Story

logger = logging.getLogger(__name__)

_UNSET = object()


class StoryBuilderService:
    """Applies builder operations to a session's current branch.

    Every operation is total: ids that do not resolve are treated as cache
    misses and ignored.
    """

    def __init__(self, id_generator: IdGenerator | None = None) -> None:
        self._ids = id_generator or IdGenerator()

    def start_session(self, story: Story) -> BuilderSession:
        """Open a session positioned on the root branch, creating it if absent."""
        root = story.root_branch()
        if root is None:
            root_id = story.root_branch_id or ROOT_BRANCH_ID
            root = Branch(id=root_id, name=ROOT_BRANCH_NAME)
            story.root_branch_id = root_id
            story.add_branch(root)
            logger.info("Story '%s' had no root branch; created '%s'.", story.name, root_id)
        return BuilderSession(story=story, current_branch_id=root.id)

    # --- blocks -------------------------------------------------------------

    def add_block(self, session: BuilderSession, block_type: str) -> Block | None:
        """Append a default block to the current branch and select it."""
        branch = session.current_branch()
        if branch is None:
            logger.debug("add_block ignored: branch '%s' not found.", session.current_branch_id)
            return None
        if not is_block_type(block_type):
            logger.warning("add_block ignored: unknown block type %r.", block_type)
            return None
        content = default_content(block_type)
        block = Block(id=self._ids.new_id(), type=content.type, content=content)
        branch.blocks.append(block)
        session.selected_block_id = block.id
        session.story.touch()
        return block

    def update_block(self, session: BuilderSession, block_id: str, content: BlockContent) -> None:
        """Replace a block's content; unknown ids and mismatched types are ignored."""
        block = self._find_block(session, block_id)
        if block is None:
            return
        if content.type != block.type:
            logger.warning(
                "update_block ignored: block '%s' is '%s', content is '%s'.",
                block_id,
                block.type,
                content.type,
            )
            return
        block.content = content
        session.story.touch()

    def update_block_settings(
        self, session: BuilderSession, block_id: str, settings: BlockSettings | None
    ) -> None:
        block = self._find_block(session, block_id)
        if block is None:
            return
        block.settings = settings
        session.story.touch()

    def move_block(self, session: BuilderSession, block_id: str, new_index: int) -> None:
        """Move a block within the current branch; the index is clamped."""
        branch = session.current_branch()
        if branch is None:
            return
        index = branch.block_index(block_id)
        if index is None:
            return
        block = branch.blocks.pop(index)
        target = max(0, min(new_index, len(branch.blocks)))
        branch.blocks.insert(target, block)
        session.story.touch()

    def delete_block(self, session: BuilderSession, block_id: str) -> None:
        """Remove a block. Branches its options pointed at are kept."""
        branch = session.current_branch()
        if branch is None:
            return
        index = branch.block_index(block_id)
        if index is None:
            return
        del branch.blocks[index]
        if session.selected_block_id == block_id:
            session.selected_block_id = None
        session.story.touch()

    def select_block(self, session: BuilderSession, block_id: str | None) -> None:
        if block_id is None or self._find_block(session, block_id) is not None:
            session.selected_block_id = block_id

    # --- options ------------------------------------------------------------

    def add_option(self, session: BuilderSession, block_id: str) -> Option | None:
        """Add an option and a fresh child branch for it to lead to."""
        branch = session.current_branch()
        choice = self._find_choice(session, block_id)
        if branch is None or choice is None:
            return None
        label = f"Option {len(choice.options) + 1}"
        target = Branch(id=self._ids.new_id(), name=label, parent_id=branch.id)
        session.story.add_branch(target)
        option = Option(
            id=self._ids.new_id(),
            text=label,
            media=Media(),
            target_branch_id=target.id,
            target_branch_name=target.name,
        )
        choice.options.append(option)
        session.story.touch()
        logger.debug("Option '%s' created branch '%s' under '%s'.", option.id, target.id, branch.id)
        return option

    def update_option(
        self,
        session: BuilderSession,
        block_id: str,
        option_id: str,
        *,
        text: object = _UNSET,
        media: object = _UNSET,
        target_branch_id: object = _UNSET,
    ) -> Option | None:
        """Shallow-merge option fields.

        A text change renames the target branch in the same call and refreshes
        every option cache pointing at it. Target changes that would point at
        the containing branch, one of its ancestors, or a missing branch are
        rejected.
        """
        choice = self._find_choice(session, block_id)
        option = choice.get_option(option_id) if choice is not None else None
        if option is None:
            return None
        story = session.story
        if target_branch_id is not _UNSET and isinstance(target_branch_id, str):
            self._retarget_option(session, option, target_branch_id)
        if media is not _UNSET and (media is None or isinstance(media, Media)):
            option.media = media
        if text is not _UNSET and isinstance(text, str) and text != option.text:
            option.text = text
            target = story.get_branch(option.target_branch_id) if option.target_branch_id else None
            if target is not None:
                self._rename(story, target, text)
        story.touch()
        return option

    def delete_option(self, session: BuilderSession, block_id: str, option_id: str) -> None:
        """Remove an option. Its target branch stays in the story."""
        choice = self._find_choice(session, block_id)
        if choice is None:
            return
        remaining = [option for option in choice.options if option.id != option_id]
        if len(remaining) == len(choice.options):
            return
        choice.options = remaining
        session.story.touch()

    # --- branches -----------------------------------------------------------

    def navigate_to_branch(self, session: BuilderSession, branch_id: str) -> bool:
        """Move the authoring cursor; unknown ids leave it where it is."""
        if session.story.get_branch(branch_id) is None:
            logger.debug("navigate_to_branch ignored: '%s' not found.", branch_id)
            return False
        session.current_branch_id = branch_id
        session.selected_block_id = None
        return True

    def rename_branch(self, session: BuilderSession, branch_id: str, name: str) -> None:
        branch = session.story.get_branch(branch_id)
        if branch is None:
            return
        self._rename(session.story, branch, name)
        session.story.touch()

    def breadcrumb(self, session: BuilderSession) -> List[Branch]:
        return session.story.breadcrumb(session.current_branch_id)

    def child_branches(self, session: BuilderSession) -> List[Branch]:
        return session.story.child_branches(session.current_branch_id)

    def available_target_branches(self, session: BuilderSession) -> List[Branch]:
        """Branches an option in the current branch may point at."""
        excluded = set(session.story.ancestor_ids(session.current_branch_id))
        excluded.add(session.current_branch_id)
        return [branch for branch in session.story.branches.values() if branch.id not in excluded]

    # --- helpers ------------------------------------------------------------

    def _retarget_option(self, session: BuilderSession, option: Option, target_branch_id: str) -> None:
        story = session.story
        if not target_branch_id:
            option.target_branch_id = ""
            option.target_branch_name = ""
            return
        if target_branch_id == session.current_branch_id:
            logger.warning("Rejected option '%s' targeting its own branch '%s'.", option.id, target_branch_id)
            return
        if target_branch_id in story.ancestor_ids(session.current_branch_id):
            logger.warning("Rejected option '%s' targeting ancestor branch '%s'.", option.id, target_branch_id)
            return
        target = story.get_branch(target_branch_id)
        if target is None:
            logger.debug("Ignored option '%s' target '%s': branch not found.", option.id, target_branch_id)
            return
        option.target_branch_id = target.id
        option.target_branch_name = target.name

    @staticmethod
    def _rename(story: Story, branch: Branch, name: str) -> None:
        branch.name = name
        for option in story.options_targeting(branch.id):
            option.target_branch_name = name

    @staticmethod
    def _find_block(session: BuilderSession, block_id: str) -> Block | None:
        branch = session.current_branch()
        if branch is None:
            return None
        return branch.get_block(block_id)

    def _find_choice(self, session: BuilderSession, block_id: str) -> BranchChoiceContent | None:
        block = self._find_block(session, block_id)
        if block is None or not isinstance(block.content, BranchChoiceContent):
            return None
        return block.content


def option_target_name(story: Story, option: Option) -> str:
    """Display name of an option's target, read from the live branch when it resolves."""
    branch = story.get_branch(option.target_branch_id) if option.target_branch_id else None
    if branch is not None:
        return branch.name
    return option.target_branch_name
