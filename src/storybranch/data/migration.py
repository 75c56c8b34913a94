"""Upgrade persisted story content to the branch-tree shape.

Stories saved before branching existed hold ``content`` as a flat list of
block records. Current stories hold ``{"branches": [...], "rootBranchId": ...}``.
The shape itself tells the two apart, so migrating already-migrated content
returns it unchanged.
"""
from __future__ import annotations

import logging
from typing import Any, Dict, List, Mapping

from storybranch.core.ids import IdGenerator
from storybranch.core.types import LEGACY_BUTTON_TYPE
from storybranch.domain.story import ROOT_BRANCH_ID, ROOT_BRANCH_NAME

logger = logging.getLogger(__name__)

LEGACY_BUTTON_DEFAULT_LABEL = "Learn More"

ContentRecord = Dict[str, Any]


def is_legacy_content(content: object) -> bool:
    """Return True when content is a pre-branching flat block list."""
    return isinstance(content, list)


def migrate_story_content(content: object, id_generator: IdGenerator | None = None) -> ContentRecord:
    """Return content in ``{branches, rootBranchId}`` form. Never raises."""
    if isinstance(content, list):
        return _migrate_legacy_blocks(content, id_generator or IdGenerator())
    if isinstance(content, Mapping):
        return _normalize_branch_content(content)
    logger.warning(
        "Story content has unexpected type %s; falling back to an empty story.",
        type(content).__name__,
    )
    return {"branches": [], "rootBranchId": ROOT_BRANCH_ID}


def translate_button_block(block: Mapping[str, Any], id_generator: IdGenerator) -> Dict[str, Any]:
    """Rewrite a deprecated ``button`` block record as a single-option ``branch_choice``."""
    raw_content = block.get("content")
    button = raw_content if isinstance(raw_content, Mapping) else {}
    label = button.get("label")
    target = button.get("targetBranchId")
    translated = dict(block)
    translated["type"] = "branch_choice"
    translated["content"] = {
        "media": {"url": ""},
        "text": "",
        "options": [
            {
                "id": id_generator.new_id(),
                "text": label if isinstance(label, str) and label else LEGACY_BUTTON_DEFAULT_LABEL,
                "targetBranchId": target if isinstance(target, str) else "",
                "targetBranchName": "",
                "media": {"url": ""},
            }
        ],
    }
    return translated


def _migrate_legacy_blocks(blocks: List[object], id_generator: IdGenerator) -> ContentRecord:
    migrated: List[Dict[str, Any]] = []
    for index, entry in enumerate(blocks):
        if not isinstance(entry, Mapping):
            logger.warning("Dropping legacy block %d: expected an object, got %s.", index, type(entry).__name__)
            continue
        if entry.get("type") == LEGACY_BUTTON_TYPE:
            migrated.append(translate_button_block(entry, id_generator))
        else:
            migrated.append(dict(entry))
    logger.info("Migrated legacy story content with %d blocks into a single root branch.", len(migrated))
    return {
        "branches": [
            {
                "id": ROOT_BRANCH_ID,
                "name": ROOT_BRANCH_NAME,
                "parentId": None,
                "blocks": migrated,
            }
        ],
        "rootBranchId": ROOT_BRANCH_ID,
    }


def _normalize_branch_content(content: Mapping[str, Any]) -> ContentRecord:
    normalized = dict(content)
    branches = content.get("branches")
    if not isinstance(branches, list):
        if branches is not None:
            logger.warning("Story content 'branches' is not a list; using an empty branch list.")
        branches = []
    root_branch_id = content.get("rootBranchId")
    if not isinstance(root_branch_id, str) or not root_branch_id:
        root_branch_id = ROOT_BRANCH_ID
    normalized["branches"] = list(branches)
    normalized["rootBranchId"] = root_branch_id
    return normalized
