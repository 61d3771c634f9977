"""Error taxonomy for prompt validation and video generation."""

from __future__ import annotations

ENTITY_NOT_FOUND_PHRASE = "Requested entity was not found"


class StudioError(Exception):
    """Base class for every error surfaced to the studio UI."""


class ValidationError(StudioError):
    """Input rejected before anything is sent to the backend."""


class CredentialError(StudioError):
    """No usable credential is configured; the user must connect one."""


class InvalidOrExpiredCredentialError(StudioError):
    """The backend rejected the credential; the user must reconnect."""


class GenerationFailedError(StudioError):
    """The backend finished the operation with an error payload."""


class MissingArtifactError(StudioError):
    """The operation succeeded but produced no downloadable video."""


class DownloadError(StudioError):
    """Fetching the generated video failed."""


def translate_backend_error(exc: Exception) -> Exception:
    """Map credential rejections to :class:`InvalidOrExpiredCredentialError`; keep everything else."""

    if ENTITY_NOT_FOUND_PHRASE in str(exc):
        return InvalidOrExpiredCredentialError("API Key session expired or invalid. Please check your key.")
    return exc
