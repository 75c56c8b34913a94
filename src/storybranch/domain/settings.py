"""Per-block display, animation, accessibility and analytics settings."""
from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import List

from storybranch.core.types import Alignment, AnimationDuration, AnimationKind, Padding


ANIMATION_DURATION_SECONDS: dict[str, float] = {
    "fast": 0.2,
    "normal": 0.4,
    "slow": 0.6,
}


@dataclass(slots=True)
class AppearanceSettings:
    background: str | None = None
    padding: Padding = "normal"
    alignment: Alignment = "center"


@dataclass(slots=True)
class AnimationSettings:
    entrance: AnimationKind = "fade"
    exit: AnimationKind = "fade"
    duration: AnimationDuration = "normal"

    @property
    def duration_seconds(self) -> float:
        return ANIMATION_DURATION_SECONDS.get(self.duration, ANIMATION_DURATION_SECONDS["normal"])


@dataclass(slots=True)
class AccessibilitySettings:
    screen_reader_text: str | None = None
    high_contrast: bool = False
    reduced_motion: bool = False


@dataclass(slots=True)
class AnalyticsSettings:
    tags: List[str] = field(default_factory=list)
    is_critical_path: bool = False


@dataclass(slots=True)
class BlockSettings:
    """Settings sections; a ``None`` section falls back to its defaults."""

    appearance: AppearanceSettings | None = None
    animation: AnimationSettings | None = None
    accessibility: AccessibilitySettings | None = None
    analytics: AnalyticsSettings | None = None


def apply_default_settings(settings: BlockSettings | None) -> BlockSettings:
    """Return a new BlockSettings with every missing section defaulted.

    The input is never mutated; present sections are copied.
    """
    source = settings or BlockSettings()
    return BlockSettings(
        appearance=replace(source.appearance) if source.appearance else AppearanceSettings(),
        animation=replace(source.animation) if source.animation else AnimationSettings(),
        accessibility=(
            replace(source.accessibility) if source.accessibility else AccessibilitySettings()
        ),
        analytics=(
            replace(source.analytics, tags=list(source.analytics.tags))
            if source.analytics
            else AnalyticsSettings()
        ),
    )
