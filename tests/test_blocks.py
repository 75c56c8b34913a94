import pytest

from storybranch.core.types import BLOCK_TYPES
from storybranch.domain.blocks import (
    Block,
    BranchChoiceContent,
    MapContent,
    TextContent,
    VideoContent,
    default_content,
)
from storybranch.domain.settings import (
    AnalyticsSettings,
    AnimationSettings,
    BlockSettings,
    apply_default_settings,
)


def test_default_content_matches_type_tag() -> None:
    for block_type in BLOCK_TYPES:
        assert default_content(block_type).type == block_type


def test_default_content_values() -> None:
    map_content = default_content("map")
    assert isinstance(map_content, MapContent)
    assert (map_content.latitude, map_content.longitude) == (52.3676, 4.9041)

    video = default_content("video")
    assert isinstance(video, VideoContent)
    assert video.muted and not video.autoplay
    assert video.chapters == [] and video.hotspots == []

    text = default_content("text")
    assert isinstance(text, TextContent)
    assert text.title == "New Section"
    assert text.body_text == "Tell your sustainability story..."
    assert text.body_html == "<p>Tell your sustainability story...</p>"

    choice = default_content("branch_choice")
    assert isinstance(choice, BranchChoiceContent)
    assert choice.options == []


def test_default_content_is_fresh_each_call() -> None:
    first = default_content("branch_choice")
    second = default_content("branch_choice")
    assert first.options is not second.options


def test_unknown_block_type_raises() -> None:
    with pytest.raises(ValueError):
        default_content("button")


def test_block_rejects_mismatched_content() -> None:
    with pytest.raises(ValueError):
        Block(id="b1", type="video", content=TextContent())


def test_apply_default_settings_fills_missing_sections() -> None:
    settings = apply_default_settings(None)

    assert settings.appearance is not None and settings.appearance.padding == "normal"
    assert settings.appearance.alignment == "center"
    assert settings.animation is not None and settings.animation.entrance == "fade"
    assert settings.animation.duration_seconds == pytest.approx(0.4)
    assert settings.accessibility is not None and not settings.accessibility.reduced_motion
    assert settings.analytics is not None and settings.analytics.tags == []


def test_apply_default_settings_keeps_given_values_without_mutating() -> None:
    original = BlockSettings(
        animation=AnimationSettings(entrance="zoom", duration="slow"),
        analytics=AnalyticsSettings(tags=["hero"], is_critical_path=True),
    )
    settings = apply_default_settings(original)

    assert settings.animation.entrance == "zoom"
    assert settings.animation.exit == "fade"
    assert settings.analytics.tags == ["hero"]
    settings.analytics.tags.append("extra")
    assert original.analytics.tags == ["hero"]
    assert original.appearance is None
