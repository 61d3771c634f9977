"""Best-effort import of pasted prompt text.

Pasted text is first decoded as JSON, then checked against the structured
prompt shape. Anything that fails either stage is plain text and is passed
through unchanged.
"""

from __future__ import annotations

import json
from dataclasses import dataclass
from typing import Any

from .compiler import render_narrative
from .models import Character, DialogueLine, Environment, PromptDocument
from .options import LOCALE_EN

_SECTION_KEYS = ("meta", "environment", "characters")


@dataclass(frozen=True)
class StructuredPrompt:
    data: dict[str, Any]
    source: str


@dataclass(frozen=True)
class PlainTextPrompt:
    text: str


ParsedPrompt = StructuredPrompt | PlainTextPrompt


def _has_expected_shape(data: Any) -> bool:
    if not isinstance(data, dict):
        return False
    if not any(key in data for key in _SECTION_KEYS):
        return False
    expected_types = {"meta": dict, "environment": dict, "characters": list, "dialogue": list}
    for key, expected in expected_types.items():
        if key in data and data[key] is not None and not isinstance(data[key], expected):
            return False
    return True


def parse_prompt_input(text: str) -> ParsedPrompt:
    """Classify pasted text as a structured prompt document or plain text."""

    trimmed = (text or "").strip()
    if not trimmed.startswith("{"):
        return PlainTextPrompt(trimmed)
    try:
        data = json.loads(trimmed)
    except ValueError:
        return PlainTextPrompt(trimmed)
    if not _has_expected_shape(data):
        return PlainTextPrompt(trimmed)
    return StructuredPrompt(data=data, source=trimmed)


def _field(mapping: Any, key: str) -> str:
    if not isinstance(mapping, dict):
        return ""
    value = mapping.get(key)
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _as_int(value: Any) -> int | None:
    if isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


def _character_ids(raw_characters: list[Any]) -> list[int]:
    declared = [_as_int(item.get("id")) if isinstance(item, dict) else None for item in raw_characters]
    if all(value is not None for value in declared) and len(set(declared)) == len(declared):
        return [value for value in declared if value is not None]
    # Exports without ids reference speakers by their 1-based position.
    return list(range(1, len(raw_characters) + 1))


def document_from_structured(data: dict[str, Any]) -> PromptDocument:
    env = data.get("environment") or {}
    environment = Environment(
        description=_field(env, "description"),
        lighting=_field(env, "lighting"),
        camera_angle=_field(env, "camera"),
        shot_style=_field(env, "style"),
        extras=_field(env, "additional"),
    )

    raw_characters = data.get("characters") or []
    characters: list[Character] = []
    for character_id, item in zip(_character_ids(raw_characters), raw_characters):
        appearance = item.get("appearance") if isinstance(item, dict) else None
        characters.append(
            Character(
                id=character_id,
                ethnicity=_field(item, "race"),
                gender=_field(item, "gender"),
                age=_field(item, "age"),
                clothing=_field(appearance, "clothing"),
                hair=_field(appearance, "hair"),
                description=_field(appearance, "details"),
                voice=_field(item, "voice"),
                action=_field(item, "action"),
            )
        )

    dialogue: list[DialogueLine] = []
    for position, item in enumerate(data.get("dialogue") or [], start=1):
        if not isinstance(item, dict):
            continue
        line = item.get("line")
        dialogue.append(
            DialogueLine(
                id=position,
                speaker_id=_as_int(item.get("speaker_id")),
                text="" if line is None else str(line),
            )
        )

    return PromptDocument(environment=environment, characters=characters, dialogue=dialogue)


def decompile(prompt: StructuredPrompt) -> str:
    """Narrative (English) text for a structured prompt, or its source when nothing renders."""

    narrative = render_narrative(document_from_structured(prompt.data), LOCALE_EN)
    return narrative or prompt.source


def resolve_prompt_text(text: str) -> str:
    parsed = parse_prompt_input(text)
    if isinstance(parsed, StructuredPrompt):
        return decompile(parsed)
    return parsed.text
