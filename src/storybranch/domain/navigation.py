"""Viewer-time navigation state."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List


@dataclass(frozen=True, slots=True)
class NavigationSnapshot:
    """Position saved before a branch jump."""

    branch_id: str
    block_index: int


@dataclass(slots=True)
class NavigationState:
    """Current viewer position plus the stack of branch-jump origins."""

    current_branch_id: str
    current_block_index: int = 0
    navigation_stack: List[NavigationSnapshot] = field(default_factory=list)

    def snapshot(self) -> NavigationSnapshot:
        return NavigationSnapshot(branch_id=self.current_branch_id, block_index=self.current_block_index)

    def restore(self, snapshot: NavigationSnapshot) -> None:
        self.current_branch_id = snapshot.branch_id
        self.current_block_index = snapshot.block_index
