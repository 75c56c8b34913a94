"""Conversion between persisted story records and typed domain objects.

Decoding is lenient: wrong-typed fields fall back to their defaults and
malformed entries are dropped with a warning, so a partially written record
still opens. Encoding always produces the current camelCase content shape.
"""
from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Dict, List, Mapping, Sequence, Tuple

from storybranch.core.ids import IdGenerator
from storybranch.core.types import LEGACY_BUTTON_TYPE
from storybranch.data.migration import migrate_story_content, translate_button_block
from storybranch.domain.blocks import (
    Block,
    BlockContent,
    BranchChoiceContent,
    ImageContent,
    MapContent,
    Media,
    Option,
    Substantiation,
    TextContent,
    VideoChapter,
    VideoContent,
    VideoHotspot,
    is_block_type,
)
from storybranch.domain.settings import (
    AccessibilitySettings,
    AnalyticsSettings,
    AnimationSettings,
    AppearanceSettings,
    BlockSettings,
)
from storybranch.domain.story import ROOT_BRANCH_ID, Branch, Story

logger = logging.getLogger(__name__)

Record = Dict[str, Any]

_STATUSES = ("draft", "published")
_HOTSPOT_ACTIONS = ("text", "link", "evidence")
_PADDINGS = ("tight", "normal", "spacious")
_ALIGNMENTS = ("top", "center", "bottom")
_ANIMATIONS = ("fade", "slide", "zoom", "none")
_DURATIONS = ("fast", "normal", "slow")


# --- decoding -----------------------------------------------------------------


def story_from_record(record: Mapping[str, Any], id_generator: IdGenerator | None = None) -> Story:
    """Build a Story from a stored row, migrating legacy content on the way."""
    ids = id_generator or IdGenerator()
    content = migrate_story_content(record.get("content"), ids)
    branches, root_branch_id = branches_from_content(content, ids)
    short_url = record.get("short_url") or record.get("shortUrl")
    qr_code_url = record.get("qr_code_url") or record.get("qrCodeUrl")
    return Story(
        id=_optional_str(record.get("id")),
        name=_str(record.get("name"), "Untitled Story"),
        branches=branches,
        root_branch_id=root_branch_id,
        status=_choice(record.get("status"), _STATUSES, "draft"),
        category=_str(record.get("category"), "general"),
        short_url=_optional_str(short_url),
        qr_code_url=_optional_str(qr_code_url),
        created_at=_optional_datetime(record.get("created_at")),
        updated_at=_optional_datetime(record.get("updated_at")),
    )


def branches_from_content(
    content: Mapping[str, Any], id_generator: IdGenerator
) -> Tuple[Dict[str, Branch], str]:
    """Decode migrated ``{branches, rootBranchId}`` content."""
    branches: Dict[str, Branch] = {}
    raw_branches = content.get("branches")
    for index, entry in enumerate(raw_branches if isinstance(raw_branches, list) else []):
        branch = branch_from_record(entry, id_generator, context=f"branches[{index}]")
        if branch is None:
            continue
        if branch.id in branches:
            logger.warning("Duplicate branch id '%s' at branches[%d]; keeping the first.", branch.id, index)
            continue
        branches[branch.id] = branch
    root_branch_id = _str(content.get("rootBranchId"), ROOT_BRANCH_ID) or ROOT_BRANCH_ID
    return branches, root_branch_id


def branch_from_record(entry: object, id_generator: IdGenerator, *, context: str = "branch") -> Branch | None:
    if not isinstance(entry, Mapping):
        logger.warning("Dropping %s: expected an object.", context)
        return None
    branch_id = entry.get("id")
    if not isinstance(branch_id, str) or not branch_id:
        logger.warning("Dropping %s: branch id must be a non-empty string.", context)
        return None
    blocks: List[Block] = []
    seen_block_ids: set[str] = set()
    raw_blocks = entry.get("blocks")
    for index, raw_block in enumerate(raw_blocks if isinstance(raw_blocks, list) else []):
        block = block_from_record(raw_block, id_generator, context=f"{context}.blocks[{index}]")
        if block is None:
            continue
        if block.id in seen_block_ids:
            logger.warning("Duplicate block id '%s' in branch '%s'; keeping the first.", block.id, branch_id)
            continue
        seen_block_ids.add(block.id)
        blocks.append(block)
    return Branch(
        id=branch_id,
        name=_str(entry.get("name"), branch_id),
        parent_id=_optional_str(entry.get("parentId")),
        blocks=blocks,
        icon=_optional_str(entry.get("icon")),
    )


def block_from_record(entry: object, id_generator: IdGenerator, *, context: str = "block") -> Block | None:
    if not isinstance(entry, Mapping):
        logger.warning("Dropping %s: expected an object.", context)
        return None
    if entry.get("type") == LEGACY_BUTTON_TYPE:
        entry = translate_button_block(entry, id_generator)
    block_type = entry.get("type")
    if not is_block_type(block_type):
        logger.warning("Dropping %s: unknown block type %r.", context, block_type)
        return None
    block_id = entry.get("id")
    if not isinstance(block_id, str) or not block_id:
        block_id = id_generator.new_id()
        logger.warning("Block at %s had no id; assigned '%s'.", context, block_id)
    raw_content = entry.get("content")
    payload = raw_content if isinstance(raw_content, Mapping) else {}
    content = content_from_record(block_type, payload, id_generator)
    raw_settings = entry.get("settings")
    settings = settings_from_record(raw_settings) if isinstance(raw_settings, Mapping) else None
    return Block(id=block_id, type=block_type, content=content, settings=settings)


def content_from_record(block_type: str, payload: Mapping[str, Any], id_generator: IdGenerator) -> BlockContent:
    if block_type == "text":
        body = payload.get("body")
        legacy_body = body if isinstance(body, str) else None
        defaults = TextContent()
        return TextContent(
            title=_str(payload.get("title"), defaults.title),
            body_html=_str(payload.get("bodyHtml"), legacy_body if legacy_body is not None else defaults.body_html),
            body_text=_str(payload.get("bodyText"), legacy_body if legacy_body is not None else defaults.body_text),
            substantiation=_substantiation(payload.get("substantiation")),
        )
    if block_type == "video":
        return VideoContent(
            url=_str(payload.get("url"), ""),
            title=_str(payload.get("title"), _str(payload.get("caption"), "")),
            description=_str(payload.get("description"), ""),
            autoplay=_bool(payload.get("autoplay"), False),
            loop=_bool(payload.get("loop"), False),
            muted=_bool(payload.get("muted"), True),
            chapters=_chapters(payload.get("chapters")),
            hotspots=_hotspots(payload.get("hotspots")),
            substantiation=_substantiation(payload.get("substantiation")),
        )
    if block_type == "image":
        return ImageContent(
            url=_str(payload.get("url"), ""),
            alt=_str(payload.get("alt"), ""),
            caption=_optional_str(payload.get("caption")),
        )
    if block_type == "map":
        defaults = MapContent()
        return MapContent(
            label=_str(payload.get("label"), defaults.label),
            latitude=_number(payload.get("lat"), defaults.latitude),
            longitude=_number(payload.get("lng"), defaults.longitude),
        )
    if block_type == "branch_choice":
        return BranchChoiceContent(
            background_color=_str(payload.get("backgroundColor"), BranchChoiceContent().background_color),
            media=_media(payload.get("media")),
            background_media=_media(payload.get("backgroundMedia")),
            text=_str(payload.get("text"), ""),
            options=_options(payload.get("options"), id_generator),
        )
    raise ValueError(f"Unknown block type '{block_type}'.")


def settings_from_record(raw: Mapping[str, Any]) -> BlockSettings:
    settings = BlockSettings()
    appearance = raw.get("appearance")
    if isinstance(appearance, Mapping):
        settings.appearance = AppearanceSettings(
            background=_optional_str(appearance.get("background")),
            padding=_choice(appearance.get("padding"), _PADDINGS, "normal"),
            alignment=_choice(appearance.get("alignment"), _ALIGNMENTS, "center"),
        )
    animation = raw.get("animation")
    if isinstance(animation, Mapping):
        settings.animation = AnimationSettings(
            entrance=_choice(animation.get("entrance"), _ANIMATIONS, "fade"),
            exit=_choice(animation.get("exit"), _ANIMATIONS, "fade"),
            duration=_choice(animation.get("duration"), _DURATIONS, "normal"),
        )
    accessibility = raw.get("accessibility")
    if isinstance(accessibility, Mapping):
        settings.accessibility = AccessibilitySettings(
            screen_reader_text=_optional_str(accessibility.get("screenReaderText")),
            high_contrast=_bool(accessibility.get("highContrast"), False),
            reduced_motion=_bool(accessibility.get("reducedMotion"), False),
        )
    analytics = raw.get("analytics")
    if isinstance(analytics, Mapping):
        tags = analytics.get("tags")
        settings.analytics = AnalyticsSettings(
            tags=[tag for tag in tags if isinstance(tag, str)] if isinstance(tags, list) else [],
            is_critical_path=_bool(analytics.get("isCriticalPath"), False),
        )
    return settings


def _options(raw: object, id_generator: IdGenerator) -> List[Option]:
    options: List[Option] = []
    seen: set[str] = set()
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, Mapping):
            continue
        option_id = entry.get("id")
        if not isinstance(option_id, str) or not option_id or option_id in seen:
            option_id = id_generator.new_id()
        seen.add(option_id)
        options.append(
            Option(
                id=option_id,
                text=_str(entry.get("text"), ""),
                media=_media(entry.get("media")),
                target_branch_id=_str(entry.get("targetBranchId"), ""),
                target_branch_name=_str(entry.get("targetBranchName"), ""),
            )
        )
    return options


def _chapters(raw: object) -> List[VideoChapter]:
    chapters: List[VideoChapter] = []
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, Mapping):
            continue
        chapters.append(
            VideoChapter(
                time=_number(entry.get("time"), 0.0),
                title=_str(entry.get("title"), ""),
                description=_optional_str(entry.get("description")),
            )
        )
    return chapters


def _hotspots(raw: object) -> List[VideoHotspot]:
    hotspots: List[VideoHotspot] = []
    for entry in raw if isinstance(raw, list) else []:
        if not isinstance(entry, Mapping):
            continue
        hotspots.append(
            VideoHotspot(
                time=_number(entry.get("time"), 0.0),
                x=_number(entry.get("x"), 50.0),
                y=_number(entry.get("y"), 50.0),
                icon=_str(entry.get("icon"), "info"),
                action=_choice(entry.get("action"), _HOTSPOT_ACTIONS, "text"),
                content=_str(entry.get("content"), ""),
            )
        )
    return hotspots


def _media(raw: object) -> Media | None:
    if not isinstance(raw, Mapping):
        return None
    return Media(url=_str(raw.get("url"), ""), type=_optional_str(raw.get("type")))


def _substantiation(raw: object) -> Substantiation | None:
    if not isinstance(raw, Mapping):
        return None
    return Substantiation(
        claim=_str(raw.get("claim"), ""),
        evidence=_str(raw.get("evidence"), ""),
        source_url=_optional_str(raw.get("sourceUrl")),
    )


def _str(value: object, default: str) -> str:
    return value if isinstance(value, str) else default


def _optional_str(value: object) -> str | None:
    return value if isinstance(value, str) and value else None


def _bool(value: object, default: bool) -> bool:
    return value if isinstance(value, bool) else default


def _number(value: object, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    return float(value)


def _choice(value: object, allowed: Sequence[str], default: str) -> Any:
    return value if isinstance(value, str) and value in allowed else default


def _optional_datetime(value: object) -> datetime | None:
    if not isinstance(value, str):
        return None
    try:
        return datetime.fromisoformat(value)
    except ValueError:
        logger.warning("Ignoring unparseable timestamp %r.", value)
        return None


# --- encoding -----------------------------------------------------------------


def story_to_record(story: Story) -> Record:
    """Return the stored row for a story; content always in branch-tree form."""
    return {
        "id": story.id,
        "name": story.name,
        "status": story.status,
        "category": story.category,
        "content": story_content_to_record(story),
        "short_url": story.short_url,
        "qr_code_url": story.qr_code_url,
        "created_at": story.created_at.isoformat() if story.created_at else None,
        "updated_at": story.updated_at.isoformat() if story.updated_at else None,
    }


def story_content_to_record(story: Story) -> Record:
    return {
        "branches": [branch_to_record(branch) for branch in story.branches.values()],
        "rootBranchId": story.root_branch_id,
    }


def branch_to_record(branch: Branch) -> Record:
    record: Record = {
        "id": branch.id,
        "name": branch.name,
        "parentId": branch.parent_id,
        "blocks": [block_to_record(block) for block in branch.blocks],
    }
    if branch.icon:
        record["icon"] = branch.icon
    return record


def block_to_record(block: Block) -> Record:
    record: Record = {
        "id": block.id,
        "type": block.type,
        "content": content_to_record(block.content),
    }
    if block.settings is not None:
        record["settings"] = settings_to_record(block.settings)
    return record


def content_to_record(content: BlockContent) -> Record:
    if isinstance(content, TextContent):
        return {
            "title": content.title,
            "bodyHtml": content.body_html,
            "bodyText": content.body_text,
            "substantiation": _substantiation_record(content.substantiation),
        }
    if isinstance(content, VideoContent):
        return {
            "url": content.url,
            "title": content.title,
            "description": content.description,
            "autoplay": content.autoplay,
            "loop": content.loop,
            "muted": content.muted,
            "chapters": [
                {"time": chapter.time, "title": chapter.title, "description": chapter.description}
                for chapter in content.chapters
            ],
            "hotspots": [
                {
                    "time": hotspot.time,
                    "x": hotspot.x,
                    "y": hotspot.y,
                    "icon": hotspot.icon,
                    "action": hotspot.action,
                    "content": hotspot.content,
                }
                for hotspot in content.hotspots
            ],
            "substantiation": _substantiation_record(content.substantiation),
        }
    if isinstance(content, ImageContent):
        return {"url": content.url, "alt": content.alt, "caption": content.caption}
    if isinstance(content, MapContent):
        return {"label": content.label, "lat": content.latitude, "lng": content.longitude}
    if isinstance(content, BranchChoiceContent):
        return {
            "backgroundColor": content.background_color,
            "media": _media_record(content.media),
            "backgroundMedia": _media_record(content.background_media),
            "text": content.text,
            "options": [
                {
                    "id": option.id,
                    "text": option.text,
                    "media": _media_record(option.media),
                    "targetBranchId": option.target_branch_id,
                    "targetBranchName": option.target_branch_name,
                }
                for option in content.options
            ],
        }
    raise TypeError(f"Unsupported block content {type(content).__name__}.")


def settings_to_record(settings: BlockSettings) -> Record:
    record: Record = {}
    if settings.appearance is not None:
        record["appearance"] = {
            "background": settings.appearance.background,
            "padding": settings.appearance.padding,
            "alignment": settings.appearance.alignment,
        }
    if settings.animation is not None:
        record["animation"] = {
            "entrance": settings.animation.entrance,
            "exit": settings.animation.exit,
            "duration": settings.animation.duration,
        }
    if settings.accessibility is not None:
        record["accessibility"] = {
            "screenReaderText": settings.accessibility.screen_reader_text,
            "highContrast": settings.accessibility.high_contrast,
            "reducedMotion": settings.accessibility.reduced_motion,
        }
    if settings.analytics is not None:
        record["analytics"] = {
            "tags": list(settings.analytics.tags),
            "isCriticalPath": settings.analytics.is_critical_path,
        }
    return record


def _media_record(media: Media | None) -> Record | None:
    if media is None:
        return None
    record: Record = {"url": media.url}
    if media.type:
        record["type"] = media.type
    return record


def _substantiation_record(substantiation: Substantiation | None) -> Record | None:
    if substantiation is None:
        return None
    return {
        "claim": substantiation.claim,
        "evidence": substantiation.evidence,
        "sourceUrl": substantiation.source_url,
    }
