"""Veo video generation client: submit, poll, download, materialize."""

from __future__ import annotations

import logging
import tempfile
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Iterator, Protocol

import requests
from google import genai
from google.genai import types

from .credentials import CredentialProvider
from .errors import (
    CredentialError,
    DownloadError,
    GenerationFailedError,
    MissingArtifactError,
    translate_backend_error,
)
from .models import GenerationSettings, ImageReference, JobState, ProgressEvent, VideoArtifact

logger = logging.getLogger(__name__)

POLL_INTERVAL_SECONDS = 5.0
DEFAULT_DOWNLOAD_TIMEOUT_SECONDS = 120.0
# Veo has no audio switch in its request config, so sound is requested in the prompt itself.
SOUND_PROMPT_CLAUSE = " The video should include high quality sound design matching the visual content."

MESSAGE_SUBMITTING = "Initializing request with {model}..."
MESSAGE_SUBMITTED = "Video is generating. This may take a minute..."
MESSAGE_POLLING = "Still processing... ensuring high quality output..."
MESSAGE_FETCHING = "Generation complete. Downloading video..."
MESSAGE_READY = "Done!"


@dataclass(frozen=True)
class VideoRequest:
    model: str
    prompt: str
    resolution: str
    aspect_ratio: str
    image: ImageReference | None = None
    number_of_videos: int = 1


class VideoBackend(Protocol):
    def submit(self, api_key: str, request: VideoRequest) -> Any: ...

    def refresh(self, api_key: str, operation: Any) -> Any: ...

    def download(self, api_key: str, uri: str) -> bytes: ...


class GenaiVideoBackend:
    """google-genai adapter for the Veo long-running video operations."""

    def __init__(
        self,
        download_timeout: float = DEFAULT_DOWNLOAD_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self._download_timeout = download_timeout
        self._session = session or requests.Session()
        self._clients: dict[str, genai.Client] = {}

    def _client(self, api_key: str) -> genai.Client:
        client = self._clients.get(api_key)
        if not client:
            client = genai.Client(api_key=api_key)
            self._clients[api_key] = client
        return client

    def submit(self, api_key: str, request: VideoRequest) -> Any:
        kwargs: dict[str, Any] = {
            "model": request.model,
            "prompt": request.prompt,
            "config": types.GenerateVideosConfig(
                number_of_videos=request.number_of_videos,
                resolution=request.resolution,
                aspect_ratio=request.aspect_ratio,
            ),
        }
        if request.image is not None:
            kwargs["image"] = types.Image(
                image_bytes=request.image.to_bytes(),
                mime_type=request.image.mime_type,
            )
        return self._client(api_key).models.generate_videos(**kwargs)

    def refresh(self, api_key: str, operation: Any) -> Any:
        return self._client(api_key).operations.get(operation)

    def download(self, api_key: str, uri: str) -> bytes:
        try:
            response = self._session.get(uri, params={"key": api_key}, timeout=self._download_timeout)
        except requests.RequestException as exc:
            # requests puts the full URL, key included, into its messages.
            raise DownloadError(f"Failed to download video: {type(exc).__name__}") from None
        if not response.ok:
            raise DownloadError(f"Failed to download video: {response.reason or response.status_code}")
        return response.content


def apply_sound_clause(prompt: str, enable_sound: bool) -> str:
    if not enable_sound:
        return prompt
    return prompt + SOUND_PROMPT_CLAUSE


def _first_video_uri(operation: Any) -> str | None:
    response = getattr(operation, "response", None)
    videos = getattr(response, "generated_videos", None) or []
    if not videos:
        return None
    video = getattr(videos[0], "video", None)
    return getattr(video, "uri", None) or None


def _operation_error_message(operation: Any) -> str | None:
    error = getattr(operation, "error", None)
    if not error:
        return None
    if isinstance(error, dict):
        return str(error.get("message") or error)
    return str(getattr(error, "message", None) or error)


class GenerationClient:
    """Drives one generation request from submission to a local video file.

    The poll loop has no iteration cap or wall-clock timeout; it relies on the
    backend to eventually finish or fail the operation.
    """

    def __init__(
        self,
        credentials: CredentialProvider,
        backend: VideoBackend | None = None,
        poll_interval_seconds: float = POLL_INTERVAL_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
        artifact_dir: Path | None = None,
    ):
        self._credentials = credentials
        self._backend = backend or GenaiVideoBackend()
        self.poll_interval_seconds = poll_interval_seconds
        self._sleep = sleep
        self._artifact_dir = Path(artifact_dir) if artifact_dir else None

    def stream(
        self,
        prompt: str,
        image: ImageReference | None,
        settings: GenerationSettings,
    ) -> Iterator[ProgressEvent]:
        """Yield progress events; the last one is ``READY`` and carries the artifact."""

        api_key = self._credentials.token()
        if not api_key:
            raise CredentialError("API Key not found. Configure VEO_API_KEY or connect a key in the UI.")
        settings.validate()

        request = VideoRequest(
            model=settings.model,
            prompt=apply_sound_clause(prompt, settings.enable_sound),
            resolution=settings.resolution,
            aspect_ratio=settings.aspect_ratio,
            image=image,
        )
        yield ProgressEvent(JobState.SUBMITTING, MESSAGE_SUBMITTING.format(model=request.model))

        try:
            logger.info(
                "Submitting %s request: model=%s resolution=%s aspect_ratio=%s sound=%s",
                "image-to-video" if image else "text-to-video",
                request.model,
                request.resolution,
                request.aspect_ratio,
                settings.enable_sound,
            )
            operation = self._backend.submit(api_key, request)
            yield ProgressEvent(JobState.POLLING, MESSAGE_SUBMITTED)

            polls = 0
            while not getattr(operation, "done", False):
                self._sleep(self.poll_interval_seconds)
                yield ProgressEvent(JobState.POLLING, MESSAGE_POLLING)
                operation = self._backend.refresh(api_key, operation)
                polls += 1
                logger.debug("Operation poll %d: done=%s", polls, getattr(operation, "done", False))

            error_message = _operation_error_message(operation)
            if error_message:
                raise GenerationFailedError(error_message)

            yield ProgressEvent(JobState.FETCHING, MESSAGE_FETCHING)
            uri = _first_video_uri(operation)
            if not uri:
                raise MissingArtifactError("No video URI returned from the API.")
            data = self._backend.download(api_key, uri)
        except Exception as exc:
            logger.error("Veo generation error: %s", exc)
            translated = translate_backend_error(exc)
            if translated is exc:
                raise
            raise translated from exc

        logger.info("Generation finished after %d polls; downloaded %d bytes.", polls, len(data))
        yield ProgressEvent(JobState.READY, MESSAGE_READY, artifact=self._materialize(data))

    def generate(
        self,
        prompt: str,
        image: ImageReference | None,
        settings: GenerationSettings,
        on_progress: Callable[[str], None] | None = None,
    ) -> VideoArtifact:
        artifact: VideoArtifact | None = None
        for event in self.stream(prompt, image, settings):
            if on_progress is not None:
                on_progress(event.message)
            if event.artifact is not None:
                artifact = event.artifact
        if artifact is None:
            raise MissingArtifactError("No video URI returned from the API.")
        return artifact

    def _materialize(self, data: bytes) -> VideoArtifact:
        if self._artifact_dir is not None:
            self._artifact_dir.mkdir(parents=True, exist_ok=True)
        with tempfile.NamedTemporaryFile(
            prefix="veo-", suffix=".mp4", dir=self._artifact_dir, delete=False
        ) as handle:
            handle.write(data)
        return VideoArtifact(path=Path(handle.name), size_bytes=len(data))
