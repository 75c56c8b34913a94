"""Brand theme record supplied by the theming collaborator.

Themes are consumed by view rendering only; they never appear inside a
story, branch or block.
"""
from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Mapping


@dataclass(frozen=True, slots=True)
class BrandTheme:
    """Colors are HSL component strings, e.g. ``"217 91% 60%"``."""

    primary_color: str = "217 91% 60%"
    secondary_color: str = "142 76% 36%"
    text_color: str = "222.2 84% 4.9%"
    primary_font: str = "Inter"
    secondary_font: str = "Inter"
    favicon_url: str | None = None
    share_image_url: str | None = None


DEFAULT_THEME = BrandTheme()


@dataclass(frozen=True, slots=True)
class BrandPreset:
    name: str
    description: str
    theme: BrandTheme


BRAND_PRESETS: tuple[BrandPreset, ...] = (
    BrandPreset("Ocean", "Blues & Teals", BrandTheme("199 89% 48%", "217 91% 60%", "222.2 84% 4.9%", "Montserrat", "Open Sans")),
    BrandPreset("Forest", "Natural Greens", BrandTheme("142 76% 36%", "142 71% 45%", "215.3 25% 26.7%", "Poppins", "Inter")),
    BrandPreset("Sunset", "Warm tones", BrandTheme("20 90% 48%", "0 72% 51%", "24 9.8% 10%", "Playfair Display", "Lora")),
    BrandPreset("Lavender", "Purples", BrandTheme("271 81% 56%", "258 90% 66%", "244 47% 20%", "Raleway", "Nunito")),
    BrandPreset("Minimal", "Monochrome", BrandTheme("0 0% 9%", "0 0% 32%", "0 0% 4%", "Inter", "Inter")),
    BrandPreset("Eco-Friendly", "Natural tones", BrandTheme("82 78% 55%", "82 61% 50%", "83 78% 17%", "Quicksand", "Work Sans")),
)

_RECORD_KEYS = {
    "primaryColor": "primary_color",
    "secondaryColor": "secondary_color",
    "textColor": "text_color",
    "primaryFont": "primary_font",
    "secondaryFont": "secondary_font",
    "faviconUrl": "favicon_url",
    "shareImageUrl": "share_image_url",
}


def get_preset(name: str) -> BrandPreset | None:
    for preset in BRAND_PRESETS:
        if preset.name.lower() == name.lower():
            return preset
    return None


def theme_from_record(record: Mapping[str, object] | None) -> BrandTheme:
    """Build a theme from a camelCase record; missing or non-string fields use defaults."""
    if not isinstance(record, Mapping):
        return DEFAULT_THEME
    overrides: dict[str, str] = {}
    for key, attr in _RECORD_KEYS.items():
        value = record.get(key)
        if isinstance(value, str) and value:
            overrides[attr] = value
    return replace(DEFAULT_THEME, **overrides)
