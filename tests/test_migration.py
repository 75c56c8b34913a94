from storybranch.data.migration import (
    LEGACY_BUTTON_DEFAULT_LABEL,
    is_legacy_content,
    migrate_story_content,
    translate_button_block,
)
from tests.helpers.stories import make_ids


def _legacy_blocks() -> list[dict]:
    return [
        {"id": "b0", "type": "text", "content": {"title": "Intro"}},
        {"id": "b1", "type": "button", "content": {"label": "Learn More", "targetBranchId": "x"}},
    ]


def test_legacy_list_becomes_single_root_branch() -> None:
    content = migrate_story_content(_legacy_blocks(), make_ids())

    assert content["rootBranchId"] == "root"
    assert len(content["branches"]) == 1
    root = content["branches"][0]
    assert root["id"] == "root"
    assert root["name"] == "Main Story"
    assert root["parentId"] is None
    assert [block["id"] for block in root["blocks"]] == ["b0", "b1"]


def test_legacy_button_becomes_single_option_choice() -> None:
    content = migrate_story_content(_legacy_blocks(), make_ids())

    button = content["branches"][0]["blocks"][1]
    assert button["id"] == "b1"
    assert button["type"] == "branch_choice"
    options = button["content"]["options"]
    assert len(options) == 1
    assert options[0]["text"] == "Learn More"
    assert options[0]["targetBranchId"] == "x"
    assert options[0]["targetBranchName"] == ""
    assert options[0]["id"]


def test_button_without_label_uses_default_label() -> None:
    translated = translate_button_block({"id": "b9", "type": "button"}, make_ids())

    option = translated["content"]["options"][0]
    assert option["text"] == LEGACY_BUTTON_DEFAULT_LABEL
    assert option["targetBranchId"] == ""


def test_non_object_legacy_entries_are_dropped() -> None:
    content = migrate_story_content([{"id": "b0", "type": "text"}, "junk", 7], make_ids())

    assert [block["id"] for block in content["branches"][0]["blocks"]] == ["b0"]


def test_migration_is_idempotent() -> None:
    once = migrate_story_content(_legacy_blocks(), make_ids())
    assert migrate_story_content(once, make_ids()) == once

    modern = {"branches": [{"id": "root", "name": "Main Story", "blocks": []}], "rootBranchId": "root"}
    assert migrate_story_content(modern) == modern

    malformed = migrate_story_content(42)
    assert malformed == {"branches": [], "rootBranchId": "root"}
    assert migrate_story_content(malformed) == malformed


def test_branch_content_fields_are_normalized() -> None:
    content = migrate_story_content({"branches": "nope", "rootBranchId": "", "extra": 1})

    assert content == {"branches": [], "rootBranchId": "root", "extra": 1}


def test_is_legacy_content() -> None:
    assert is_legacy_content([])
    assert not is_legacy_content({"branches": []})
    assert not is_legacy_content(None)
