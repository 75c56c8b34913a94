"""Viewer-time traversal of a story's branch tree."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List

from storybranch.core.types import ProgressMode
from storybranch.domain.blocks import Block, BranchChoiceContent
from storybranch.domain.navigation import NavigationState
from storybranch.domain.story import Branch, Story

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class NavigationEvent:
    """Base class for navigation events."""


@dataclass(slots=True)
class BranchEnteredEvent(NavigationEvent):
    from_branch_id: str
    to_branch_id: str
    option_id: str


@dataclass(slots=True)
class BranchReturnedEvent(NavigationEvent):
    from_branch_id: str
    to_branch_id: str
    block_index: int


@dataclass(slots=True)
class OptionInertEvent(NavigationEvent):
    """An option was selected but leads nowhere."""

    option_id: str
    reason: str


@dataclass(slots=True)
class ProgressView:
    segment_count: int
    current_index: int
    active: List[bool]


@dataclass(slots=True)
class NavigationView:
    """Data returned to the presentation layer for rendering."""

    branch_id: str
    branch_name: str
    block_index: int
    block: Block | None
    progress: ProgressView
    can_go_back: bool


@dataclass(slots=True)
class NavigationResult:
    """Result returned after a navigation step."""

    moved: bool
    view: NavigationView
    events: List[NavigationEvent] = field(default_factory=list)


class NavigationService:
    """Stack machine over ``{branch, block index}`` positions.

    There is no forward jump except through an option, and no memory of
    visited branches: entering a branch always starts at block 0.
    """

    def __init__(self, progress_mode: ProgressMode = "current") -> None:
        self._progress_mode = progress_mode

    def start(self, story: Story) -> NavigationState:
        return NavigationState(current_branch_id=story.root_branch_id)

    def next(self, story: Story, state: NavigationState) -> NavigationResult:
        """Advance within the branch; the last block is a resting point."""
        branch = story.get_branch(state.current_branch_id)
        moved = branch is not None and state.current_block_index < len(branch.blocks) - 1
        if moved:
            state.current_block_index += 1
        return NavigationResult(moved=moved, view=self.get_current_view(story, state))

    def previous(self, story: Story, state: NavigationState) -> NavigationResult:
        """Step back within the branch, or unwind one branch jump at block 0."""
        if state.current_block_index > 0:
            state.current_block_index -= 1
            return NavigationResult(moved=True, view=self.get_current_view(story, state))
        return self.back(story, state)

    def back(self, story: Story, state: NavigationState) -> NavigationResult:
        """Restore the most recent branch-jump origin, if any."""
        if not state.navigation_stack:
            return NavigationResult(moved=False, view=self.get_current_view(story, state))
        from_branch_id = state.current_branch_id
        snapshot = state.navigation_stack.pop()
        state.restore(snapshot)
        event = BranchReturnedEvent(
            from_branch_id=from_branch_id,
            to_branch_id=snapshot.branch_id,
            block_index=snapshot.block_index,
        )
        return NavigationResult(moved=True, view=self.get_current_view(story, state), events=[event])

    def select_option(self, story: Story, state: NavigationState, option_id: str) -> NavigationResult:
        """Jump to the option's target branch, remembering where we came from."""
        block = self.current_block(story, state)
        if block is None or not isinstance(block.content, BranchChoiceContent):
            logger.debug("select_option ignored: current block is not a choice block.")
            return NavigationResult(moved=False, view=self.get_current_view(story, state))
        option = block.content.get_option(option_id)
        if option is None:
            return NavigationResult(moved=False, view=self.get_current_view(story, state))
        reason: str | None = None
        if not option.target_branch_id:
            reason = "unresolved_target"
        elif story.get_branch(option.target_branch_id) is None:
            reason = "missing_branch"
        if reason is not None:
            logger.debug("Option '%s' is inert: %s.", option.id, reason)
            return NavigationResult(
                moved=False,
                view=self.get_current_view(story, state),
                events=[OptionInertEvent(option_id=option.id, reason=reason)],
            )
        from_branch_id = state.current_branch_id
        state.navigation_stack.append(state.snapshot())
        state.current_branch_id = option.target_branch_id
        state.current_block_index = 0
        event = BranchEnteredEvent(
            from_branch_id=from_branch_id,
            to_branch_id=option.target_branch_id,
            option_id=option.id,
        )
        return NavigationResult(moved=True, view=self.get_current_view(story, state), events=[event])

    def current_branch(self, story: Story, state: NavigationState) -> Branch | None:
        return story.get_branch(state.current_branch_id)

    def current_block(self, story: Story, state: NavigationState) -> Block | None:
        branch = self.current_branch(story, state)
        if branch is None or not 0 <= state.current_block_index < len(branch.blocks):
            return None
        return branch.blocks[state.current_block_index]

    def progress(
        self, story: Story, state: NavigationState, mode: ProgressMode | None = None
    ) -> ProgressView:
        """One segment per block of the current branch."""
        branch = self.current_branch(story, state)
        count = len(branch.blocks) if branch is not None else 0
        index = state.current_block_index
        if (mode or self._progress_mode) == "cumulative":
            active = [position <= index for position in range(count)]
        else:
            active = [position == index for position in range(count)]
        return ProgressView(segment_count=count, current_index=index, active=active)

    def get_current_view(self, story: Story, state: NavigationState) -> NavigationView:
        branch = self.current_branch(story, state)
        return NavigationView(
            branch_id=state.current_branch_id,
            branch_name=branch.name if branch is not None else "",
            block_index=state.current_block_index,
            block=self.current_block(story, state),
            progress=self.progress(story, state),
            can_go_back=state.current_block_index > 0 or bool(state.navigation_stack),
        )
