from storybranch.domain.blocks import Media, TextContent, VideoContent
from storybranch.domain.settings import BlockSettings
from storybranch.domain.story import Story, new_story
from storybranch.services.builder_service import StoryBuilderService, option_target_name
from tests.helpers.stories import make_ids


def _build_service() -> StoryBuilderService:
    return StoryBuilderService(make_ids())


def _session_with_choice(service: StoryBuilderService):
    session = service.start_session(new_story("Chair"))
    block = service.add_block(session, "branch_choice")
    assert block is not None
    return session, block


def test_start_session_creates_missing_root() -> None:
    service = _build_service()
    story = Story(id="s1", name="Empty")

    session = service.start_session(story)

    assert session.current_branch_id == "root"
    assert story.root_branch().name == "Main Story"
    assert story.root_branch().parent_id is None


def test_add_block_appends_and_selects() -> None:
    service = _build_service()
    session = service.start_session(new_story("Chair"))

    first = service.add_block(session, "text")
    second = service.add_block(session, "map")

    assert [block.id for block in session.current_branch().blocks] == [first.id, second.id]
    assert session.selected_block_id == second.id
    assert isinstance(first.content, TextContent)
    assert service.add_block(session, "button") is None
    assert len(session.current_branch().blocks) == 2


def test_update_block_ignores_unknown_ids_and_type_mismatch() -> None:
    service = _build_service()
    session = service.start_session(new_story("Chair"))
    block = service.add_block(session, "text")

    service.update_block(session, block.id, VideoContent(url="clip.mp4"))
    assert isinstance(block.content, TextContent)

    service.update_block(session, "missing", TextContent(title="Lost"))
    service.update_block(session, block.id, TextContent(title="Hello"))
    assert block.content.title == "Hello"

    service.update_block_settings(session, block.id, BlockSettings())
    assert block.settings == BlockSettings()


def test_move_and_delete_blocks() -> None:
    service = _build_service()
    session = service.start_session(new_story("Chair"))
    a = service.add_block(session, "text")
    b = service.add_block(session, "image")
    c = service.add_block(session, "map")

    service.move_block(session, c.id, -5)
    assert [block.id for block in session.current_branch().blocks] == [c.id, a.id, b.id]
    service.move_block(session, c.id, 99)
    assert [block.id for block in session.current_branch().blocks] == [a.id, b.id, c.id]

    service.select_block(session, b.id)
    service.delete_block(session, b.id)
    assert session.selected_block_id is None
    assert [block.id for block in session.current_branch().blocks] == [a.id, c.id]
    service.delete_block(session, "missing")
    assert len(session.current_branch().blocks) == 2


def test_add_option_creates_child_branch() -> None:
    service = _build_service()
    session, block = _session_with_choice(service)

    first = service.add_option(session, block.id)
    second = service.add_option(session, block.id)

    story = session.story
    assert first.text == "Option 1" and second.text == "Option 2"
    for option in (first, second):
        target = story.get_branch(option.target_branch_id)
        assert target is not None
        assert target.parent_id == "root"
        assert target.name == option.text
        assert option.target_branch_name == target.name
        assert option.media == Media()
    assert len(story.branches) == 3
    assert service.add_option(session, "missing") is None


def test_option_text_renames_target_and_syncs_every_cache() -> None:
    service = _build_service()
    session, block = _session_with_choice(service)
    first = service.add_option(session, block.id)
    second = service.add_option(session, block.id)
    orphan_id = second.target_branch_id
    service.update_option(session, block.id, second.id, target_branch_id=first.target_branch_id)
    assert second.target_branch_id == first.target_branch_id

    service.update_option(session, block.id, first.id, text="Renamed")

    target = session.story.get_branch(first.target_branch_id)
    assert target.name == "Renamed"
    assert first.target_branch_name == "Renamed"
    assert second.target_branch_name == "Renamed"
    assert session.story.get_branch(orphan_id) is not None


def test_rename_branch_syncs_option_cache() -> None:
    service = _build_service()
    session, block = _session_with_choice(service)
    option = service.add_option(session, block.id)

    service.rename_branch(session, option.target_branch_id, "Materials")

    assert option.target_branch_name == "Materials"
    assert option_target_name(session.story, option) == "Materials"


def test_self_and_ancestor_targets_are_rejected() -> None:
    service = _build_service()
    session, block = _session_with_choice(service)
    option = service.add_option(session, block.id)
    child_id = option.target_branch_id

    assert service.navigate_to_branch(session, child_id)
    nested_block = service.add_block(session, "branch_choice")
    nested = service.add_option(session, nested_block.id)
    grandchild_id = nested.target_branch_id

    service.update_option(session, nested_block.id, nested.id, target_branch_id=child_id)
    assert nested.target_branch_id == grandchild_id
    service.update_option(session, nested_block.id, nested.id, target_branch_id="root")
    assert nested.target_branch_id == grandchild_id
    service.update_option(session, nested_block.id, nested.id, target_branch_id="missing")
    assert nested.target_branch_id == grandchild_id

    service.update_option(session, nested_block.id, nested.id, target_branch_id="")
    assert nested.target_branch_id == "" and nested.target_branch_name == ""
    assert session.story.get_branch(grandchild_id).parent_id == child_id


def test_operations_on_dangling_ids_are_no_ops() -> None:
    service = _build_service()
    session, block = _session_with_choice(service)

    assert service.update_option(session, block.id, "missing", text="x") is None
    assert service.update_option(session, "missing", "missing", text="x") is None
    service.delete_option(session, block.id, "missing")
    service.rename_branch(session, "missing", "x")
    assert not service.navigate_to_branch(session, "missing")
    assert session.current_branch_id == "root"


def test_delete_option_keeps_target_branch() -> None:
    service = _build_service()
    session, block = _session_with_choice(service)
    option = service.add_option(session, block.id)

    service.delete_option(session, block.id, option.id)

    assert block.content.options == []
    assert session.story.get_branch(option.target_branch_id) is not None


def test_breadcrumb_children_and_available_targets() -> None:
    service = _build_service()
    session, block = _session_with_choice(service)
    first = service.add_option(session, block.id)
    second = service.add_option(session, block.id)

    assert [branch.id for branch in service.child_branches(session)] == [
        first.target_branch_id,
        second.target_branch_id,
    ]
    service.navigate_to_branch(session, first.target_branch_id)
    assert session.selected_block_id is None
    assert [branch.id for branch in service.breadcrumb(session)] == ["root", first.target_branch_id]
    assert [branch.id for branch in service.available_target_branches(session)] == [second.target_branch_id]
