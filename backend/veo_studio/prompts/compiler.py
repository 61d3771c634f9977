"""Prompt compiler: PromptDocument -> narrative text and structured JSON.

Rendering is pure. Missing or dangling values degrade to omission or the
``UNKNOWN_SPEAKER`` label; nothing in this module raises on bad form state.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from .models import Character, PromptDocument
from .options import (
    ETHNICITY_OPTIONS,
    GENDER_OPTIONS,
    LOCALE_EN,
    LOCALE_ID,
    VOICE_OPTIONS,
    option_label,
)

GENERATOR_NAME = "VEO3 Prompt Generator"
SCHEMA_VERSION = "1.0"
UNKNOWN_SPEAKER = "Unknown"

_TEMPLATES: dict[str, dict[str, str]] = {
    LOCALE_EN: {
        "environment": "ENVIRONMENT",
        "character": "CHARACTER",
        "dialogue": "DIALOGUE",
        "speaker": "Character {index}",
        "lighting": "{}",
        "camera_angle": "{}",
        "shot_style": "{}",
        "age": "age {}",
        "clothing": "wearing {}",
        "hair": "{} hair",
        "voice": "{} voice",
        "action": "ACTION: {}",
    },
    LOCALE_ID: {
        "environment": "LINGKUNGAN",
        "character": "KARAKTER",
        "dialogue": "DIALOG",
        "speaker": "Karakter {index} ({gender})",
        "lighting": "Pencahayaan {}",
        "camera_angle": "Sudut kamera {}",
        "shot_style": "Gaya {}",
        "age": "usia {}",
        "clothing": "memakai {}",
        "hair": "rambut {}",
        "voice": "suara {}",
        "action": "AKSI: {}",
    },
}


@dataclass
class CompiledPrompts:
    """The three equivalent renderings shown side by side in the builder."""

    localized: str
    english: str
    structured_json: str


def _text(value: object) -> str:
    if value is None:
        return ""
    return str(value).strip()


def _templates(locale: str) -> dict[str, str]:
    return _TEMPLATES.get(locale, _TEMPLATES[LOCALE_EN])


def _environment_section(doc: PromptDocument, templates: dict[str, str]) -> str | None:
    env = doc.environment
    parts: list[str] = []
    if _text(env.description):
        parts.append(_text(env.description))
    for name in ("lighting", "camera_angle", "shot_style"):
        value = _text(getattr(env, name, ""))
        if value:
            parts.append(templates[name].format(value))
    if _text(env.extras):
        parts.append(_text(env.extras))
    if not parts:
        return None
    return f"{templates['environment']}: {', '.join(parts)}."


def _character_section(
    character: Character, index: int, locale: str, templates: dict[str, str]
) -> str | None:
    details: list[str] = []
    ethnicity = _text(character.resolved_ethnicity())
    if ethnicity:
        details.append(option_label(ETHNICITY_OPTIONS, ethnicity, locale))
    gender = _text(character.gender)
    if gender:
        details.append(option_label(GENDER_OPTIONS, gender, locale))
    if _text(character.age):
        details.append(templates["age"].format(_text(character.age)))
    if _text(character.description):
        details.append(_text(character.description))
    if _text(character.clothing):
        details.append(templates["clothing"].format(_text(character.clothing)))
    if _text(character.hair):
        details.append(templates["hair"].format(_text(character.hair)))
    voice = _text(character.voice)
    if voice:
        details.append(templates["voice"].format(option_label(VOICE_OPTIONS, voice, locale)))
    if _text(character.action):
        details.append(templates["action"].format(_text(character.action)))
    if not details:
        return None
    return f"{templates['character']} {index}: {', '.join(details)}."


def speaker_label(doc: PromptDocument, speaker_id: int | None, locale: str = LOCALE_EN) -> str:
    """Label for a dialogue speaker; dangling references yield ``UNKNOWN_SPEAKER``."""

    templates = _templates(locale)
    index = doc.display_index(speaker_id)
    character = doc.find_character(speaker_id)
    if index is None or character is None:
        return UNKNOWN_SPEAKER
    gender = _text(character.gender)
    gender_label = option_label(GENDER_OPTIONS, gender, locale) if gender else UNKNOWN_SPEAKER
    return templates["speaker"].format(index=index, gender=gender_label)


def _dialogue_section(doc: PromptDocument, locale: str, templates: dict[str, str]) -> str | None:
    if not doc.dialogue:
        return None
    lines = [
        f'{speaker_label(doc, line.speaker_id, locale)}: "{line.text or ""}"' for line in doc.dialogue
    ]
    return f"{templates['dialogue']}:\n" + "\n".join(lines)


def render_narrative(doc: PromptDocument, locale: str = LOCALE_EN) -> str:
    """Render ENVIRONMENT, CHARACTER n and DIALOGUE sections separated by blank lines."""

    templates = _templates(locale)
    sections = [_environment_section(doc, templates)]
    for index, character in enumerate(doc.characters, start=1):
        sections.append(_character_section(character, index, locale, templates))
    sections.append(_dialogue_section(doc, locale, templates))
    return "\n\n".join(section for section in sections if section)


def render_structured(doc: PromptDocument) -> dict[str, object]:
    """Canonical nested record; empty fields are kept as empty strings."""

    env = doc.environment
    characters = [
        {
            "id": character.id,
            "race": character.resolved_ethnicity(),
            "gender": _text(character.gender),
            "age": _text(character.age),
            "appearance": {
                "clothing": _text(character.clothing),
                "hair": _text(character.hair),
                "details": _text(character.description),
            },
            "voice": _text(character.voice),
            "action": _text(character.action),
        }
        for character in doc.characters
    ]
    dialogue = []
    for line in doc.dialogue:
        speaker = doc.find_character(line.speaker_id)
        dialogue.append(
            {
                "speaker_id": speaker.id if speaker else None,
                "speaker_gender": (_text(speaker.gender) or None) if speaker else None,
                "line": line.text or "",
            }
        )
    return {
        "meta": {"generator": GENERATOR_NAME, "version": SCHEMA_VERSION},
        "environment": {
            "description": _text(env.description),
            "lighting": _text(env.lighting),
            "camera": _text(env.camera_angle),
            "style": _text(env.shot_style),
            "additional": _text(env.extras),
        },
        "characters": characters,
        "dialogue": dialogue,
    }


def render_structured_json(doc: PromptDocument) -> str:
    return json.dumps(render_structured(doc), indent=2, ensure_ascii=False)


def compile_prompts(doc: PromptDocument) -> CompiledPrompts:
    return CompiledPrompts(
        localized=render_narrative(doc, LOCALE_ID),
        english=render_narrative(doc, LOCALE_EN),
        structured_json=render_structured_json(doc),
    )
