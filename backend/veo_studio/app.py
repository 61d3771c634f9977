"""Backend application factory.

This repo uses a lightweight "service container" style factory that returns a
dictionary of dependencies/controllers. The Streamlit layer builds it once per
process; the core modules only ever see the explicit config it passes in.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from functools import partial
from pathlib import Path
from typing import Any, Callable, Mapping

from .ai.credentials import build_credential_provider
from .ai.models import DEFAULT_MODEL, MODEL_CATALOG
from .ai.veo_client import (
    DEFAULT_DOWNLOAD_TIMEOUT_SECONDS,
    POLL_INTERVAL_SECONDS,
    GenaiVideoBackend,
    GenerationClient,
)
from .studio import StudioController

logger = logging.getLogger(__name__)

API_KEY_ENV_NAMES = ("VEO_API_KEY", "GEMINI_API_KEY", "GOOGLE_API_KEY")


@dataclass(frozen=True)
class StudioConfig:
    api_key: str | None = None
    default_model: str = DEFAULT_MODEL
    poll_interval_seconds: float = POLL_INTERVAL_SECONDS
    download_timeout_seconds: float = DEFAULT_DOWNLOAD_TIMEOUT_SECONDS
    artifact_dir: Path | None = None
    log_level: str = "INFO"


def _read_env(environ: Mapping[str, str], name: str) -> str | None:
    value = environ.get(name)
    if value is None:
        return None
    value = value.strip()
    return value or None


def _read_float(environ: Mapping[str, str], name: str, default: float) -> float:
    raw = _read_env(environ, name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        logger.warning("Ignoring %s=%r: not a number, using %s.", name, raw, default)
        return default
    if value <= 0:
        logger.warning("Ignoring %s=%r: must be positive, using %s.", name, raw, default)
        return default
    return value


def load_config(environ: Mapping[str, str]) -> StudioConfig:
    api_key = next((key for key in (_read_env(environ, name) for name in API_KEY_ENV_NAMES) if key), None)

    default_model = _read_env(environ, "VEO_DEFAULT_MODEL") or DEFAULT_MODEL
    if default_model not in MODEL_CATALOG:
        logger.warning("Unknown VEO_DEFAULT_MODEL %r, using %s.", default_model, DEFAULT_MODEL)
        default_model = DEFAULT_MODEL

    artifact_dir = _read_env(environ, "VEO_ARTIFACT_DIR")
    return StudioConfig(
        api_key=api_key,
        default_model=default_model,
        poll_interval_seconds=_read_float(environ, "VEO_POLL_INTERVAL_SECONDS", POLL_INTERVAL_SECONDS),
        download_timeout_seconds=_read_float(
            environ, "VEO_DOWNLOAD_TIMEOUT_SECONDS", DEFAULT_DOWNLOAD_TIMEOUT_SECONDS
        ),
        artifact_dir=Path(artifact_dir).expanduser() if artifact_dir else None,
        log_level=(_read_env(environ, "VEO_LOG_LEVEL") or "INFO").upper(),
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def create_app(
    environ: Mapping[str, str] | None = None,
    read_key: Callable[[], str | None] | None = None,
    open_picker: Callable[[], None] | None = None,
) -> dict[str, Any]:
    """Create the backend dependency container."""

    config = load_config(os.environ if environ is None else environ)
    configure_logging(config.log_level)

    credentials = build_credential_provider(config.api_key, read_key, open_picker)
    video_client = GenerationClient(
        credentials,
        backend=GenaiVideoBackend(download_timeout=config.download_timeout_seconds),
        poll_interval_seconds=config.poll_interval_seconds,
        artifact_dir=config.artifact_dir,
    )

    return {
        "config": config,
        "credentials": credentials,
        "video_client": video_client,
        "controllers": {
            "studio": partial(StudioController, video_client, credentials),
        },
    }
