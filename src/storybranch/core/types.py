"""Shared type aliases for the core and domain layers."""
from typing import Literal

BlockType = Literal["text", "video", "image", "map", "branch_choice"]
StoryStatus = Literal["draft", "published"]
HotspotAction = Literal["text", "link", "evidence"]
Padding = Literal["tight", "normal", "spacious"]
Alignment = Literal["top", "center", "bottom"]
AnimationKind = Literal["fade", "slide", "zoom", "none"]
AnimationDuration = Literal["fast", "normal", "slow"]
ProgressMode = Literal["current", "cumulative"]

BLOCK_TYPES: tuple[BlockType, ...] = ("text", "video", "image", "map", "branch_choice")
LEGACY_BUTTON_TYPE = "button"

__all__ = [
    "Alignment",
    "AnimationDuration",
    "AnimationKind",
    "BLOCK_TYPES",
    "BlockType",
    "HotspotAction",
    "LEGACY_BUTTON_TYPE",
    "Padding",
    "ProgressMode",
    "StoryStatus",
]
