from storybranch.domain.blocks import Option
from storybranch.domain.story import Branch
from storybranch.services.navigation_service import (
    BranchEnteredEvent,
    BranchReturnedEvent,
    NavigationService,
    OptionInertEvent,
)
from tests.helpers.stories import build_story, build_viewer_story, choice_block, text_block


def _build_jump_story():
    root = Branch(
        id="root",
        name="Main Story",
        blocks=[choice_block("pick", [Option(id="go", text="Go", target_branch_id="child")])],
    )
    child = Branch(
        id="child",
        name="Child",
        parent_id="root",
        blocks=[text_block("c1"), text_block("c2"), text_block("c3")],
    )
    return build_story(root, child)


def test_start_at_root_block_zero() -> None:
    service = NavigationService()
    state = service.start(build_viewer_story())

    assert state.current_branch_id == "root"
    assert state.current_block_index == 0
    assert state.navigation_stack == []


def test_next_rests_on_last_block() -> None:
    service = NavigationService()
    story = build_viewer_story()
    state = service.start(story)

    results = [service.next(story, state) for _ in range(4)]

    assert [result.moved for result in results] == [True, True, False, False]
    assert state.current_block_index == 2
    assert results[-1].view.block.id == "r3"


def test_previous_at_root_start_is_no_op() -> None:
    service = NavigationService()
    story = build_viewer_story()
    state = service.start(story)

    result = service.previous(story, state)

    assert not result.moved
    assert (state.current_branch_id, state.current_block_index) == ("root", 0)
    assert not service.back(story, state).moved


def test_select_option_then_previous_unwinds_stack() -> None:
    service = NavigationService()
    story = _build_jump_story()
    state = service.start(story)

    entered = service.select_option(story, state, "go")

    assert entered.moved
    assert (state.current_branch_id, state.current_block_index) == ("child", 0)
    assert [(snap.branch_id, snap.block_index) for snap in state.navigation_stack] == [("root", 0)]
    assert entered.events == [BranchEnteredEvent(from_branch_id="root", to_branch_id="child", option_id="go")]
    assert entered.view.can_go_back

    returned = service.previous(story, state)

    assert returned.moved
    assert (state.current_branch_id, state.current_block_index) == ("root", 0)
    assert state.navigation_stack == []
    assert returned.events == [BranchReturnedEvent(from_branch_id="child", to_branch_id="root", block_index=0)]


def test_previous_steps_within_branch_before_unwinding() -> None:
    service = NavigationService()
    story = build_viewer_story()
    state = service.start(story)
    service.next(story, state)
    service.next(story, state)
    service.select_option(story, state, "opt_child")
    service.next(story, state)
    service.next(story, state)

    service.previous(story, state)
    service.previous(story, state)
    assert (state.current_branch_id, state.current_block_index) == ("child", 0)

    service.previous(story, state)
    assert (state.current_branch_id, state.current_block_index) == ("root", 2)


def test_inert_options_do_not_move() -> None:
    service = NavigationService()
    story = build_viewer_story()
    state = service.start(story)
    service.next(story, state)
    service.next(story, state)

    unresolved = service.select_option(story, state, "opt_empty")
    missing = service.select_option(story, state, "opt_missing")
    unknown = service.select_option(story, state, "nope")

    assert not unresolved.moved and not missing.moved and not unknown.moved
    assert unresolved.events == [OptionInertEvent(option_id="opt_empty", reason="unresolved_target")]
    assert missing.events == [OptionInertEvent(option_id="opt_missing", reason="missing_branch")]
    assert unknown.events == []
    assert state.navigation_stack == []
    assert (state.current_branch_id, state.current_block_index) == ("root", 2)


def test_select_option_requires_choice_block() -> None:
    service = NavigationService()
    story = build_viewer_story()
    state = service.start(story)

    assert not service.select_option(story, state, "opt_child").moved
    assert state.current_branch_id == "root"


def test_revisiting_branch_starts_at_block_zero() -> None:
    service = NavigationService()
    story = _build_jump_story()
    state = service.start(story)
    service.select_option(story, state, "go")
    service.next(story, state)
    service.next(story, state)
    service.back(story, state)

    service.select_option(story, state, "go")

    assert (state.current_branch_id, state.current_block_index) == ("child", 0)


def test_progress_modes() -> None:
    story = build_viewer_story()
    current = NavigationService()
    state = current.start(story)
    current.next(story, state)

    view = current.get_current_view(story, state)
    assert view.progress.segment_count == 3
    assert view.progress.active == [False, True, False]
    assert view.branch_name == "Main Story"

    cumulative = NavigationService(progress_mode="cumulative")
    assert cumulative.progress(story, state).active == [True, True, False]
    assert current.progress(story, state, mode="cumulative").active == [True, True, False]
