from storybranch.domain.story import Branch, new_story
from tests.helpers.stories import build_chain_story, build_story, build_viewer_story


def _ids(branches) -> list[str]:
    return [branch.id for branch in branches]


def test_breadcrumb_walks_root_to_current() -> None:
    story = build_chain_story()

    assert _ids(story.breadcrumb("C")) == ["root", "A", "B", "C"]
    assert _ids(story.breadcrumb("root")) == ["root"]
    assert story.ancestor_ids("C") == ["root", "A", "B"]


def test_breadcrumb_unknown_branch_is_empty() -> None:
    assert build_chain_story().breadcrumb("nope") == []


def test_breadcrumb_is_cycle_safe() -> None:
    story = build_story(
        Branch(id="root", name="Main Story"),
        Branch(id="x", name="X", parent_id="y"),
        Branch(id="y", name="Y", parent_id="x"),
    )

    path = _ids(story.breadcrumb("x"))

    assert path == ["y", "x"]


def test_breadcrumb_stops_at_dangling_parent() -> None:
    story = build_story(
        Branch(id="root", name="Main Story"),
        Branch(id="lost", name="Lost", parent_id="deleted"),
    )

    assert _ids(story.breadcrumb("lost")) == ["lost"]


def test_child_branches_in_insertion_order() -> None:
    story = build_story(
        Branch(id="root", name="Main Story"),
        Branch(id="b2", name="Second", parent_id="root"),
        Branch(id="b1", name="First", parent_id="root"),
        Branch(id="nested", name="Nested", parent_id="b1"),
    )

    assert _ids(story.child_branches("root")) == ["b2", "b1"]
    assert _ids(story.child_branches("b1")) == ["nested"]
    assert story.child_branches("nested") == []


def test_lookup_and_option_queries() -> None:
    story = build_viewer_story()

    assert story.get_branch("child").name == "Child"
    assert story.get_branch("missing") is None
    assert story.root_branch().id == "root"
    branch, block = story.find_block("c2")
    assert branch.id == "child" and block.id == "c2"
    assert [option.id for option in story.options_targeting("child")] == ["opt_child"]


def test_new_story_has_root_branch() -> None:
    story = new_story("Chair")

    root = story.root_branch()
    assert root is not None and root.is_root
    assert root.name == "Main Story"
    assert story.status == "draft"
    assert story.created_at is not None
