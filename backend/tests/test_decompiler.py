"""Tests for classifying and decompiling pasted prompt text."""

import json

from veo_studio.prompts.compiler import render_narrative, render_structured, render_structured_json
from veo_studio.prompts.decompiler import (
    PlainTextPrompt,
    StructuredPrompt,
    decompile,
    parse_prompt_input,
    resolve_prompt_text,
)
from veo_studio.prompts.models import Character, DialogueLine, Environment, PromptDocument
from veo_studio.prompts.options import LOCALE_EN


def _walking_scene() -> PromptDocument:
    return PromptDocument(
        environment=Environment(description="Quiet beach at dawn", lighting="Natural light"),
        characters=[
            Character(id=3, ethnicity="European", gender="Female", action="walks to camera"),
            Character(id=5, ethnicity="Other", ethnicity_custom="Android", voice="Monotone"),
        ],
        dialogue=[
            DialogueLine(id=10, speaker_id=3, text="Good morning."),
            DialogueLine(id=11, speaker_id=5, text="Systems online."),
        ],
    )


def test_plain_text_passes_through_trimmed():
    parsed = parse_prompt_input("  A cat surfing a wave at sunset.  ")

    assert parsed == PlainTextPrompt("A cat surfing a wave at sunset.")
    assert resolve_prompt_text("  A cat surfing a wave.\n") == "A cat surfing a wave."


def test_malformed_json_is_plain_text():
    text = '{"environment": {"description": "forest"'

    assert isinstance(parse_prompt_input(text), PlainTextPrompt)
    assert resolve_prompt_text(text) == text


def test_json_with_unexpected_shape_is_plain_text():
    for text in ('{"scene": "forest"}', '{"characters": "two people"}', '{"environment": ["forest"]}', "[1, 2]"):
        assert isinstance(parse_prompt_input(text), PlainTextPrompt)
        assert resolve_prompt_text(text) == text


def test_structured_output_decompiles_to_equivalent_narrative():
    doc = _walking_scene()

    decompiled = resolve_prompt_text(render_structured_json(doc))

    assert decompiled == render_narrative(doc, LOCALE_EN)
    for expected in ("European", "Female", "walks to camera", "Android", 'Character 2: "Systems online."'):
        assert expected in decompiled


def test_export_without_character_ids_resolves_speakers_by_position():
    data = {
        "characters": [{"race": "African", "gender": "Male"}, {"gender": "Female", "action": "laughs"}],
        "dialogue": [
            {"speaker_id": "2", "line": "That's funny"},
            {"speaker_id": "", "line": "Who's there?"},
        ],
    }

    text = resolve_prompt_text(json.dumps(data))

    assert text == (
        "CHARACTER 1: African, Male.\n\n"
        "CHARACTER 2: Female, ACTION: laughs.\n\n"
        'DIALOGUE:\nCharacter 2: "That\'s funny"\nUnknown: "Who\'s there?"'
    )


def test_structured_document_without_content_returns_source():
    source = json.dumps(render_structured(PromptDocument.new()))

    parsed = parse_prompt_input(source)

    assert isinstance(parsed, StructuredPrompt)
    assert decompile(parsed) == source


def test_tolerates_odd_field_types():
    data = {
        "meta": {"generator": "elsewhere"},
        "environment": {"description": None, "lighting": 7, "camera": {"nested": True}},
        "characters": ["not a character", {"appearance": "oops", "age": 40}],
        "dialogue": ["skip me", {"speaker_id": True, "line": None}],
    }

    text = resolve_prompt_text(json.dumps(data))

    assert text == 'ENVIRONMENT: 7.\n\nCHARACTER 2: age 40.\n\nDIALOGUE:\nUnknown: ""'
