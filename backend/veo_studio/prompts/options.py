"""Enumerated option tables for the prompt builder.

Every option is keyed by its canonical (English) value and carries a label per
locale. Form state always stores canonical values; labels are only looked up
when rendering.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Sequence

LOCALE_EN = "en"
LOCALE_ID = "id"

OTHER_ETHNICITY = "Other"


@dataclass(frozen=True)
class Option:
    value: str
    labels: dict[str, str] = field(default_factory=dict)

    def label(self, locale: str) -> str:
        return self.labels.get(locale) or self.value


def _options(pairs: Sequence[tuple[str, str]]) -> tuple[Option, ...]:
    return tuple(Option(value=value, labels={LOCALE_ID: local, LOCALE_EN: value}) for local, value in pairs)


def _untranslated(values: Sequence[str]) -> tuple[Option, ...]:
    # Film vocabulary stays in English in both locales.
    return tuple(Option(value=value, labels={LOCALE_ID: value, LOCALE_EN: value}) for value in values)


ETHNICITY_OPTIONS = _options(
    [
        ("Indonesia", "Indonesian"),
        ("Asia Timur", "East Asian"),
        ("Asia Tenggara", "Southeast Asian"),
        ("Asia Selatan", "South Asian"),
        ("Timur Tengah", "Middle Eastern"),
        ("Afrika", "African"),
        ("Eropa", "European"),
        ("Amerika Latin", "Latino/Hispanic"),
        ("Suku Asli Amerika", "Native American"),
        ("Pasifik", "Pacific Islander"),
        ("Campuran", "Mixed Race"),
        ("Lainnya", OTHER_ETHNICITY),
    ]
)

GENDER_OPTIONS = _options(
    [
        ("Laki-laki", "Male"),
        ("Perempuan", "Female"),
        ("Non-biner", "Non-binary"),
        ("Genderfluid", "Genderfluid"),
    ]
)

VOICE_OPTIONS = _options(
    [
        ("Normal", "Normal"),
        ("Berbisik", "Whispering"),
        ("Berteriak", "Shouting"),
        ("Lirih", "Soft"),
        ("Serak", "Raspy"),
        ("Rendah", "Deep"),
        ("Tinggi", "High-pitched"),
        ("Sarkastik", "Sarcastic"),
        ("Penuh Semangat", "Excited"),
        ("Monoton", "Monotone"),
    ]
)

LIGHTING_OPTIONS = _untranslated(
    [
        "Rembrandt lighting",
        "Butterfly lighting",
        "Split lighting",
        "Loop lighting",
        "Ambient lighting",
        "Rim lighting",
        "Softbox lighting",
        "Three-point lighting",
        "High-key lighting",
        "Low-key lighting",
        "Cinematic lighting",
        "Natural light",
        "Fluorescent light",
        "Neon light",
        "Candlelight",
    ]
)

CAMERA_ANGLE_OPTIONS = _untranslated(
    [
        "Wide Shot",
        "Full Shot",
        "Medium Shot",
        "Close-up",
        "Extreme Close-up",
        "Over-the-shoulder shot",
        "Point of view (POV) shot",
        "High angle shot",
        "Low angle shot",
        "Dutch angle shot",
        "Bird's-eye view shot",
        "Worm's-eye view shot",
    ]
)

SHOT_STYLE_OPTIONS = _untranslated(
    [
        "Single-camera setup",
        "Multi-camera setup",
        "Handheld camera",
        "Steadicam shot",
        "Dolly shot",
        "Crane shot",
        "Zoom shot",
        "Pan shot",
        "Tilt shot",
        "Tracking shot",
        "Arc shot",
        "Whip pan shot",
        "Slow motion",
        "Time-lapse",
        "Bullet time",
    ]
)


def option_values(options: Sequence[Option]) -> list[str]:
    return [option.value for option in options]


def option_label(options: Sequence[Option], value: str, locale: str) -> str:
    """Return the locale label for ``value``, or ``value`` itself when it is not in the table."""

    for option in options:
        if option.value == value:
            return option.label(locale)
    return value
