"""Prompt builder and settings helper tests for the Streamlit app."""

from pathlib import Path
import sys

ROOT = Path(__file__).resolve().parents[2]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from streamlit_app import (  # noqa: E402
    PLACEHOLDER_CHOICE,
    _option_formatter,
    _select_index,
    _select_options,
    _settings_from_state,
    _speaker_choices,
)
from veo_studio.ai.models import GenerationSettings  # noqa: E402
from veo_studio.prompts.models import PromptDocument  # noqa: E402
from veo_studio.prompts.options import GENDER_OPTIONS, LIGHTING_OPTIONS  # noqa: E402


def test_select_options_start_with_blank_choice():
    choices = _select_options(GENDER_OPTIONS)

    assert choices == ["", "Male", "Female", "Non-binary", "Genderfluid"]
    assert _select_index(choices, "Female") == 2
    assert _select_index(choices, "Unlisted") == 0


def test_option_formatter_shows_local_labels():
    format_gender = _option_formatter(GENDER_OPTIONS)
    format_lighting = _option_formatter(LIGHTING_OPTIONS)

    assert format_gender("") == PLACEHOLDER_CHOICE
    assert format_gender("Male") == "Laki-laki"
    assert format_lighting("Rim lighting") == "Rim lighting"


def test_speaker_choices_follow_display_order():
    doc = PromptDocument.new()
    doc.update_character(1, gender="Female")
    doc.add_character()

    choices = _speaker_choices(doc)

    assert choices == [(None, "Pilih Pembicara..."), (1, "Karakter 1 (Perempuan)"), (2, "Karakter 2 (?)")]


def test_settings_from_state_uses_defaults_for_missing_values():
    assert _settings_from_state({}) == GenerationSettings()

    settings = _settings_from_state(
        {
            "vs_model": "veo-3.1-fast-generate-preview",
            "vs_aspect_ratio": "9:16",
            "vs_resolution": "720p",
            "vs_enable_sound": True,
        }
    )
    assert settings == GenerationSettings(
        model="veo-3.1-fast-generate-preview",
        aspect_ratio="9:16",
        resolution="720p",
        enable_sound=True,
    )
