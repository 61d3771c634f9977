"""Data models for video generation requests and their lifecycle."""

from __future__ import annotations

import base64
import enum
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ValidationError

DEFAULT_MODEL = "veo-3.1-generate-preview"
MODEL_CATALOG = {
    "veo-3.1-generate-preview": "Veo 3.1 (High Quality) - Recommended",
    "veo-3.1-fast-generate-preview": "Veo 3.1 Fast (General Speed)",
    "veo-3.0-generate-preview": "Veo 3.0 (Legacy)",
}
ASPECT_RATIOS = ("16:9", "9:16")
RESOLUTIONS = ("720p", "1080p")


class JobState(str, enum.Enum):
    IDLE = "idle"
    SUBMITTING = "submitting"
    POLLING = "polling"
    FETCHING = "fetching"
    READY = "ready"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.READY, JobState.FAILED)


@dataclass(frozen=True)
class GenerationSettings:
    model: str = DEFAULT_MODEL
    aspect_ratio: str = "16:9"
    resolution: str = "1080p"
    # The backend has no sound parameter; the client appends a prompt clause instead.
    enable_sound: bool = False

    def validate(self) -> None:
        if self.model not in MODEL_CATALOG:
            raise ValidationError(f"Unsupported model: {self.model}")
        if self.aspect_ratio not in ASPECT_RATIOS:
            raise ValidationError(f"Unsupported aspect ratio: {self.aspect_ratio}")
        if self.resolution not in RESOLUTIONS:
            raise ValidationError(f"Unsupported resolution: {self.resolution}")


@dataclass(frozen=True)
class ImageReference:
    """Reference image as a base64 payload plus its media type."""

    data: str
    mime_type: str

    def to_bytes(self) -> bytes:
        return base64.b64decode(self.data)

    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{self.data}"


@dataclass
class VideoArtifact:
    """A generated video materialized on local disk.

    The caller owns the file and must call :meth:`release` once it is no longer displayed.
    """

    path: Path
    mime_type: str = "video/mp4"
    size_bytes: int = 0
    released: bool = field(default=False, compare=False)

    def read_bytes(self) -> bytes:
        return self.path.read_bytes()

    def release(self) -> None:
        if self.released:
            return
        self.path.unlink(missing_ok=True)
        self.released = True

    def __enter__(self) -> "VideoArtifact":
        return self

    def __exit__(self, *_exc_info) -> None:
        self.release()


@dataclass(frozen=True)
class ProgressEvent:
    stage: JobState
    message: str
    artifact: VideoArtifact | None = None
