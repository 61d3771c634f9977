"""Veo Studio: Streamlit front-end for the Veo video generation backend.

Two tabs: the Studio (prompt, reference image, settings, generate/preview/download)
and the Prompt Builder (characters, dialogue and environment compiled into
Indonesian, English and JSON prompts).
"""

from __future__ import annotations

import html
import os
import sys
from pathlib import Path
from typing import Any, Callable, Mapping, Sequence

import streamlit as st
from dotenv import load_dotenv

# Ensure backend package is importable when running `streamlit run streamlit_app.py`.
ROOT = Path(__file__).resolve().parent
BACKEND_ROOT = ROOT / "backend"
if str(BACKEND_ROOT) not in sys.path:
    sys.path.insert(0, str(BACKEND_ROOT))
load_dotenv(ROOT / ".env", override=False)

SECRET_ENV_KEYS = (
    "VEO_API_KEY",
    "GEMINI_API_KEY",
    "GOOGLE_API_KEY",
    "VEO_DEFAULT_MODEL",
    "VEO_POLL_INTERVAL_SECONDS",
    "VEO_DOWNLOAD_TIMEOUT_SECONDS",
    "VEO_ARTIFACT_DIR",
    "VEO_LOG_LEVEL",
)


def _hydrate_env_from_streamlit_secrets() -> None:
    """Load Veo config from Streamlit Secrets into env when not already set."""
    try:
        secrets = dict(st.secrets)
    except Exception:
        # No secrets.toml; env and .env are the only sources.
        return

    veo_block = secrets.get("veo")
    if isinstance(veo_block, Mapping):
        mapping = {
            "api_key": "VEO_API_KEY",
            "default_model": "VEO_DEFAULT_MODEL",
            "artifact_dir": "VEO_ARTIFACT_DIR",
        }
        for secret_key, env_key in mapping.items():
            value = veo_block.get(secret_key)
            if isinstance(value, str) and value.strip() and not os.getenv(env_key):
                os.environ[env_key] = value.strip()

    for key in SECRET_ENV_KEYS:
        value = secrets.get(key)
        if isinstance(value, str) and value.strip() and not os.getenv(key):
            os.environ[key] = value.strip()


_hydrate_env_from_streamlit_secrets()

from veo_studio.ai.models import (  # noqa: E402
    ASPECT_RATIOS,
    DEFAULT_MODEL,
    MODEL_CATALOG,
    RESOLUTIONS,
    GenerationSettings,
    JobState,
)
from veo_studio.app import create_app  # noqa: E402
from veo_studio.media import encode_upload  # noqa: E402
from veo_studio.ai.errors import ValidationError  # noqa: E402
from veo_studio.prompts.compiler import compile_prompts  # noqa: E402
from veo_studio.prompts.models import PromptDocument  # noqa: E402
from veo_studio.prompts.options import (  # noqa: E402
    CAMERA_ANGLE_OPTIONS,
    ETHNICITY_OPTIONS,
    GENDER_OPTIONS,
    LIGHTING_OPTIONS,
    LOCALE_ID,
    OTHER_ETHNICITY,
    SHOT_STYLE_OPTIONS,
    VOICE_OPTIONS,
    Option,
    option_label,
    option_values,
)

PLACEHOLDER_CHOICE = "Pilih..."
DOWNLOAD_FILE_NAME = "veo-generated-video.mp4"


def _read_session_key() -> str | None:
    return st.session_state.get("vs_api_key")


def _open_key_picker() -> None:
    st.session_state["vs_show_key_picker"] = True


@st.cache_resource
def _get_app() -> dict[str, Any]:
    return create_app(read_key=_read_session_key, open_picker=_open_key_picker)


def _select_options(options: Sequence[Option]) -> list[str]:
    return [""] + option_values(options)


def _option_formatter(options: Sequence[Option], locale: str = LOCALE_ID) -> Callable[[str], str]:
    def _format(value: str) -> str:
        if not value:
            return PLACEHOLDER_CHOICE
        return option_label(options, value, locale)

    return _format


def _select_index(choices: Sequence[str], value: str) -> int:
    return choices.index(value) if value in choices else 0


def _speaker_choices(doc: PromptDocument) -> list[tuple[int | None, str]]:
    choices: list[tuple[int | None, str]] = [(None, "Pilih Pembicara...")]
    for index, character in enumerate(doc.characters, start=1):
        gender = option_label(GENDER_OPTIONS, character.gender, LOCALE_ID) if character.gender else "?"
        choices.append((character.id, f"Karakter {index} ({gender})"))
    return choices


def _settings_from_state(state: Mapping[str, Any]) -> GenerationSettings:
    return GenerationSettings(
        model=state.get("vs_model") or DEFAULT_MODEL,
        aspect_ratio=state.get("vs_aspect_ratio") or ASPECT_RATIOS[0],
        resolution=state.get("vs_resolution") or RESOLUTIONS[-1],
        enable_sound=bool(state.get("vs_enable_sound")),
    )


def _init_state() -> None:
    app = _get_app()
    defaults = {
        "vs_prompt": "",
        "vs_model": app["config"].default_model,
        "vs_aspect_ratio": ASPECT_RATIOS[0],
        "vs_resolution": RESOLUTIONS[-1],
        "vs_enable_sound": False,
        "vs_image": None,
        "vs_api_key": None,
        "vs_show_key_picker": False,
        "vs_document": PromptDocument.new(),
        "vs_status_line": "Ready.",
    }
    for key, value in defaults.items():
        st.session_state.setdefault(key, value)
    if "vs_controller" not in st.session_state:
        controller = app["controllers"]["studio"]()
        controller.check_credential()
        st.session_state["vs_controller"] = controller


def _inject_styles() -> None:
    st.markdown(
        """
        <style>
        .stApp { font-family: 'Segoe UI', sans-serif; }
        .status-line { color: #9aa4b2; font-size: 0.85rem; }
        .prompt-card pre { white-space: pre-wrap; font-size: 0.78rem; }
        </style>
        """,
        unsafe_allow_html=True,
    )


def _sidebar_controls() -> None:
    controller = st.session_state["vs_controller"]
    st.sidebar.markdown("## Veo Studio")
    if controller.credential_ready:
        st.sidebar.success("Key Active")
        if st.sidebar.button("Change API Key", use_container_width=True):
            controller.connect_credential()
            st.rerun()
    else:
        st.sidebar.warning("No API key connected.")
        if st.sidebar.button("Connect API Key", use_container_width=True):
            controller.connect_credential()
            st.rerun()

    if st.session_state["vs_show_key_picker"]:
        entered = st.sidebar.text_input("Gemini API key", type="password", key="vs_api_key_input")
        if st.sidebar.button("Use this key", use_container_width=True):
            st.session_state["vs_api_key"] = entered.strip() or None
            st.session_state["vs_show_key_picker"] = False
            controller.check_credential()
            st.rerun()

    st.sidebar.markdown("---")
    st.sidebar.selectbox(
        "Model",
        list(MODEL_CATALOG),
        format_func=lambda model: MODEL_CATALOG[model],
        key="vs_model",
    )
    st.sidebar.radio("Resolution", RESOLUTIONS, key="vs_resolution", horizontal=True)
    st.sidebar.radio("Aspect ratio", ASPECT_RATIOS, key="vs_aspect_ratio", horizontal=True)
    st.sidebar.toggle("Enable sound", key="vs_enable_sound")
    st.sidebar.caption("Sound is requested through the prompt text; Veo has no native sound switch.")


def _reference_image_section() -> None:
    uploaded = st.file_uploader("Reference Image (Optional)", key="vs_image_upload")
    if uploaded is None:
        st.session_state["vs_image"] = None
        return
    try:
        st.session_state["vs_image"] = encode_upload(uploaded)
    except ValidationError as exc:
        st.session_state["vs_image"] = None
        st.error(str(exc))
        return
    st.image(st.session_state["vs_image"].data_url(), width=240)


def _render_job(job: Any) -> None:
    if job.error:
        st.error(job.error)
    if job.messages:
        with st.expander("Progress log", expanded=False):
            st.markdown("\n".join(f"- {message}" for message in job.messages))
    if job.state is JobState.READY and job.artifact is not None:
        video_bytes = job.artifact.read_bytes()
        st.video(video_bytes)
        cols = st.columns(2)
        cols[0].download_button(
            "Download Video",
            data=video_bytes,
            file_name=DOWNLOAD_FILE_NAME,
            mime=job.artifact.mime_type,
            use_container_width=True,
        )
        if cols[1].button("Clear Video", use_container_width=True):
            st.session_state["vs_controller"].clear_artifact()
            st.session_state["vs_status_line"] = "Video cleared."
            st.rerun()


def _studio_tab() -> None:
    controller = st.session_state["vs_controller"]
    st.subheader("Video Studio")
    st.caption("Describe the video you want to generate. You can paste a story description or a JSON object.")
    st.text_area("Video Description (Text or JSON)", key="vs_prompt", height=180)
    _reference_image_section()

    generate = st.button(
        "Generate Video",
        type="primary",
        use_container_width=True,
        disabled=controller.job.is_active or not controller.credential_ready,
    )
    if generate:
        settings = _settings_from_state(st.session_state)
        with st.status("Starting Veo session...", expanded=False) as status:
            for job in controller.run_iter(st.session_state["vs_prompt"], st.session_state["vs_image"], settings):
                status.update(label=job.progress_message or "Working...")
                if job.progress_message:
                    status.write(job.progress_message)
            final_state = "complete" if controller.job.state is JobState.READY else "error"
            status.update(state=final_state)
        st.session_state["vs_status_line"] = controller.job.error or controller.job.progress_message

    _render_job(controller.job)
    st.markdown(
        f"<div class='status-line'>Status: {html.escape(st.session_state['vs_status_line'])}</div>",
        unsafe_allow_html=True,
    )


def _character_editor(doc: PromptDocument) -> None:
    st.markdown("#### Kelompok 1: Karakter")
    for index, character in enumerate(list(doc.characters), start=1):
        prefix = f"vs_char_{character.id}"
        with st.container(border=True):
            head = st.columns([5, 1])
            head[0].markdown(f"**Karakter {index}**")
            if len(doc.characters) > 1 and head[1].button("Hapus", key=f"{prefix}_remove"):
                doc.remove_character(character.id)
                st.rerun()

            cols = st.columns(2)
            ethnicity_choices = _select_options(ETHNICITY_OPTIONS)
            values = {
                "ethnicity": cols[0].selectbox(
                    "Ras/Etnis",
                    ethnicity_choices,
                    index=_select_index(ethnicity_choices, character.ethnicity),
                    format_func=_option_formatter(ETHNICITY_OPTIONS),
                    key=f"{prefix}_ethnicity",
                ),
            }
            if values["ethnicity"] == OTHER_ETHNICITY:
                values["ethnicity_custom"] = cols[1].text_input(
                    "Sebutkan Ras/Etnis", value=character.ethnicity_custom, key=f"{prefix}_ethnicity_custom"
                )
            gender_choices = _select_options(GENDER_OPTIONS)
            values["gender"] = cols[0].selectbox(
                "Jenis Kelamin",
                gender_choices,
                index=_select_index(gender_choices, character.gender),
                format_func=_option_formatter(GENDER_OPTIONS),
                key=f"{prefix}_gender",
            )
            values["age"] = cols[1].text_input("Usia", value=character.age, key=f"{prefix}_age")
            values["clothing"] = cols[0].text_input("Pakaian", value=character.clothing, key=f"{prefix}_clothing")
            values["hair"] = cols[1].text_input("Gaya Rambut", value=character.hair, key=f"{prefix}_hair")
            voice_choices = _select_options(VOICE_OPTIONS)
            values["voice"] = cols[0].selectbox(
                "Suara Karakter",
                voice_choices,
                index=_select_index(voice_choices, character.voice),
                format_func=_option_formatter(VOICE_OPTIONS),
                key=f"{prefix}_voice",
            )
            values["description"] = st.text_input(
                "Deskripsi Fisik Tambahan", value=character.description, key=f"{prefix}_description"
            )
            values["action"] = st.text_area("Aksi / Gerakan", value=character.action, key=f"{prefix}_action")
            doc.update_character(character.id, **values)

    if st.button("Tambah Karakter", use_container_width=True):
        doc.add_character()
        st.rerun()


def _dialogue_editor(doc: PromptDocument) -> None:
    st.markdown("#### Kelompok 2: Dialog")
    if not doc.dialogue:
        st.caption("Belum ada dialog. Tambahkan dialog untuk membuat cerita.")
    speakers = _speaker_choices(doc)
    speaker_ids = [speaker_id for speaker_id, _ in speakers]
    labels = dict(speakers)
    for line in list(doc.dialogue):
        cols = st.columns([2, 5, 1])
        current = line.speaker_id if line.speaker_id in speaker_ids else None
        speaker_id = cols[0].selectbox(
            "Pembicara",
            speaker_ids,
            index=speaker_ids.index(current),
            format_func=lambda value: labels[value],
            key=f"vs_line_{line.id}_speaker",
            label_visibility="collapsed",
        )
        text = cols[1].text_input(
            "Dialog", value=line.text, key=f"vs_line_{line.id}_text", label_visibility="collapsed"
        )
        line.speaker_id = speaker_id
        line.text = text
        if cols[2].button("Hapus", key=f"vs_line_{line.id}_remove"):
            doc.remove_dialogue(line.id)
            st.rerun()

    if st.button("Tambah Baris Dialog"):
        doc.add_dialogue()
        st.rerun()


def _environment_editor(doc: PromptDocument) -> None:
    st.markdown("#### Kelompok 3: Lingkungan & Kamera")
    env = doc.environment
    env.description = st.text_area("Deskripsi Lingkungan", value=env.description, key="vs_env_description")
    cols = st.columns(2)
    for column, field_name, label, options in (
        (cols[0], "lighting", "Pencahayaan", LIGHTING_OPTIONS),
        (cols[1], "camera_angle", "Sudut Kamera", CAMERA_ANGLE_OPTIONS),
        (cols[0], "shot_style", "Gaya Pengambilan Gambar", SHOT_STYLE_OPTIONS),
    ):
        choices = _select_options(options)
        value = column.selectbox(
            label,
            choices,
            index=_select_index(choices, getattr(env, field_name)),
            format_func=_option_formatter(options),
            key=f"vs_env_{field_name}",
        )
        setattr(env, field_name, value)
    env.extras = cols[1].text_input("Opsi Lainnya (Film Stock/Ratio)", value=env.extras, key="vs_env_extras")


def _use_builder_prompt(prompt: str) -> None:
    st.session_state["vs_prompt"] = prompt
    st.session_state["vs_status_line"] = "Prompt loaded from the builder. Switch to the Studio tab."


def _prompt_builder_tab() -> None:
    doc: PromptDocument = st.session_state["vs_document"]
    inputs, outputs = st.columns([7, 5])
    with inputs:
        _character_editor(doc)
        _dialogue_editor(doc)
        _environment_editor(doc)

    compiled = compile_prompts(doc)
    with outputs:
        st.markdown("#### Hasil Prompt")
        st.markdown("**Prompt Bahasa Indonesia**")
        st.code(compiled.localized or "Isi formulir untuk melihat hasil...", language=None)
        st.markdown("**Prompt Bahasa Inggris**")
        st.code(compiled.english or "Isi formulir untuk melihat hasil...", language=None)
        if compiled.english:
            # The Studio text area is already rendered in this run, so its state changes in a callback.
            st.button(
                "Use this Prompt in Studio",
                type="primary",
                use_container_width=True,
                on_click=_use_builder_prompt,
                args=(compiled.english,),
            )
        st.markdown("**Prompt JSON**")
        st.code(compiled.structured_json, language="json")


def main() -> None:
    st.set_page_config(
        page_title="Veo Studio",
        page_icon="",
        layout="wide",
        initial_sidebar_state="expanded",
    )

    _init_state()
    _inject_styles()
    _sidebar_controls()

    tab_studio, tab_builder = st.tabs(["Studio", "Prompt Builder"])
    with tab_studio:
        _studio_tab()
    with tab_builder:
        _prompt_builder_tab()


if __name__ == "__main__":
    main()
