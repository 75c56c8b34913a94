"""Branch tree and story aggregate."""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Dict, Iterator, List, Tuple

from storybranch.core.types import StoryStatus
from storybranch.domain.blocks import Block, BranchChoiceContent, Option

ROOT_BRANCH_ID = "root"
ROOT_BRANCH_NAME = "Main Story"


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(slots=True)
class Branch:
    """Named, ordered sequence of blocks; one node of the branch tree."""

    id: str
    name: str
    parent_id: str | None = None
    blocks: List[Block] = field(default_factory=list)
    icon: str | None = None

    @property
    def is_root(self) -> bool:
        return self.parent_id is None

    def get_block(self, block_id: str) -> Block | None:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def block_index(self, block_id: str) -> int | None:
        for index, block in enumerate(self.blocks):
            if block.id == block_id:
                return index
        return None


@dataclass(slots=True)
class Story:
    """Top-level aggregate: the branch tree plus publishing metadata."""

    id: str | None
    name: str
    branches: Dict[str, Branch] = field(default_factory=dict)
    root_branch_id: str = ROOT_BRANCH_ID
    status: StoryStatus = "draft"
    category: str = "general"
    short_url: str | None = None
    qr_code_url: str | None = None
    created_at: datetime | None = None
    updated_at: datetime | None = None

    def get_branch(self, branch_id: str) -> Branch | None:
        return self.branches.get(branch_id)

    def root_branch(self) -> Branch | None:
        return self.branches.get(self.root_branch_id)

    def add_branch(self, branch: Branch) -> None:
        """Insert a branch; an existing branch with the same id is replaced."""
        self.branches[branch.id] = branch

    def child_branches(self, branch_id: str) -> List[Branch]:
        """Return branches whose parent is ``branch_id``, in insertion order."""
        return [branch for branch in self.branches.values() if branch.parent_id == branch_id]

    def breadcrumb(self, branch_id: str) -> List[Branch]:
        """Return the path root -> ``branch_id`` by following parent pointers.

        The walk is bounded by the number of branches. On a cycle or a
        dangling parent it stops and returns the partial path it collected,
        still ordered root-first.
        """
        path: List[Branch] = []
        seen: set[str] = set()
        current_id: str | None = branch_id
        for _ in range(len(self.branches)):
            if current_id is None or current_id in seen:
                break
            branch = self.branches.get(current_id)
            if branch is None:
                break
            seen.add(current_id)
            path.append(branch)
            current_id = branch.parent_id
        path.reverse()
        return path

    def ancestor_ids(self, branch_id: str) -> List[str]:
        """Ids of the branches above ``branch_id``, root first."""
        return [branch.id for branch in self.breadcrumb(branch_id)[:-1]]

    def iter_blocks(self) -> Iterator[Tuple[Branch, Block]]:
        for branch in self.branches.values():
            for block in branch.blocks:
                yield branch, block

    def find_block(self, block_id: str) -> Tuple[Branch, Block] | None:
        for branch, block in self.iter_blocks():
            if block.id == block_id:
                return branch, block
        return None

    def iter_options(self) -> Iterator[Tuple[Branch, Block, Option]]:
        for branch, block in self.iter_blocks():
            if isinstance(block.content, BranchChoiceContent):
                for option in block.content.options:
                    yield branch, block, option

    def options_targeting(self, branch_id: str) -> List[Option]:
        return [option for _, _, option in self.iter_options() if option.target_branch_id == branch_id]

    def touch(self) -> None:
        self.updated_at = utc_now()


def new_story(name: str, *, category: str = "general") -> Story:
    """Create an unsaved story holding an empty root branch."""
    now = utc_now()
    story = Story(id=None, name=name, category=category, created_at=now, updated_at=now)
    story.add_branch(Branch(id=ROOT_BRANCH_ID, name=ROOT_BRANCH_NAME))
    return story
