"""Content block structures and per-type default payloads."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Union

from storybranch.core.types import BlockType, HotspotAction
from storybranch.domain.settings import BlockSettings


@dataclass(slots=True)
class Media:
    """Reference to an uploaded asset; an empty url means no media."""

    url: str = ""
    type: str | None = None


@dataclass(slots=True)
class Substantiation:
    """Evidence backing a claim made by a block."""

    claim: str = ""
    evidence: str = ""
    source_url: str | None = None


@dataclass(slots=True)
class VideoChapter:
    time: float
    title: str
    description: str | None = None


@dataclass(slots=True)
class VideoHotspot:
    """Interactive marker shown over the video at ``time`` seconds."""

    time: float = 0.0
    x: float = 50.0
    y: float = 50.0
    icon: str = "info"
    action: HotspotAction = "text"
    content: str = ""


@dataclass(slots=True)
class TextContent:
    title: str = "New Section"
    body_html: str = "<p>Tell your sustainability story...</p>"
    body_text: str = "Tell your sustainability story..."
    substantiation: Substantiation | None = None
    type: BlockType = field(default="text", init=False)


@dataclass(slots=True)
class VideoContent:
    url: str = ""
    title: str = ""
    description: str = ""
    autoplay: bool = False
    loop: bool = False
    muted: bool = True
    chapters: List[VideoChapter] = field(default_factory=list)
    hotspots: List[VideoHotspot] = field(default_factory=list)
    substantiation: Substantiation | None = None
    type: BlockType = field(default="video", init=False)


@dataclass(slots=True)
class ImageContent:
    url: str = ""
    alt: str = ""
    caption: str | None = None
    type: BlockType = field(default="image", init=False)


@dataclass(slots=True)
class MapContent:
    label: str = "Amsterdam Workshop"
    latitude: float = 52.3676
    longitude: float = 4.9041
    type: BlockType = field(default="map", init=False)


@dataclass(slots=True)
class Option:
    """Selectable choice inside a branch_choice block."""

    id: str
    text: str
    media: Media | None = None
    target_branch_id: str = ""
    target_branch_name: str = ""

    @property
    def is_resolved(self) -> bool:
        return bool(self.target_branch_id)


@dataclass(slots=True)
class BranchChoiceContent:
    background_color: str = "#000000"
    media: Media | None = None
    background_media: Media | None = None
    text: str = ""
    options: List[Option] = field(default_factory=list)
    type: BlockType = field(default="branch_choice", init=False)

    def get_option(self, option_id: str) -> Option | None:
        for option in self.options:
            if option.id == option_id:
                return option
        return None


BlockContent = Union[TextContent, VideoContent, ImageContent, MapContent, BranchChoiceContent]

_CONTENT_TYPES: dict[str, type] = {
    "text": TextContent,
    "video": VideoContent,
    "image": ImageContent,
    "map": MapContent,
    "branch_choice": BranchChoiceContent,
}


@dataclass(slots=True)
class Block:
    """A single content unit inside a branch."""

    id: str
    type: BlockType
    content: BlockContent
    settings: BlockSettings | None = None

    def __post_init__(self) -> None:
        if self.content.type != self.type:
            raise ValueError(
                f"Block '{self.id}' has type '{self.type}' but content of type '{self.content.type}'."
            )


def default_content(block_type: str) -> BlockContent:
    """Return a fresh default payload for the block type."""
    try:
        content_cls = _CONTENT_TYPES[block_type]
    except KeyError as exc:
        raise ValueError(f"Unknown block type '{block_type}'.") from exc
    return content_cls()


def is_block_type(value: object) -> bool:
    return isinstance(value, str) and value in _CONTENT_TYPES
