"""Session-level studio controller.

The controller validates a request, runs one generation job at a time and turns
every failure into a single user-facing message. It owns the current video
artifact and releases it when a new job starts or the user clears it.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Iterator

from .ai.credentials import CredentialProvider
from .ai.errors import InvalidOrExpiredCredentialError, StudioError, ValidationError
from .ai.models import GenerationSettings, ImageReference, JobState, VideoArtifact
from .ai.veo_client import GenerationClient
from .prompts.decompiler import resolve_prompt_text

logger = logging.getLogger(__name__)

MISSING_INPUT_MESSAGE = "Please provide a text prompt or an image."
NOT_CONNECTED_MESSAGE = "Please connect an API Key."
UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred."
STARTING_MESSAGE = "Starting Veo session..."


@dataclass
class GenerationJob:
    state: JobState = JobState.IDLE
    progress_message: str = ""
    error: str | None = None
    artifact: VideoArtifact | None = None
    prompt: str = ""
    messages: list[str] = field(default_factory=list)

    @property
    def is_active(self) -> bool:
        return self.state is not JobState.IDLE and not self.state.is_terminal

    def advance(self, state: JobState, message: str) -> None:
        self.state = state
        self.progress_message = message
        self.messages.append(message)

    def fail(self, message: str) -> None:
        self.state = JobState.FAILED
        self.error = message or UNEXPECTED_ERROR_MESSAGE


def validate_request(prompt: str, image: ImageReference | None) -> None:
    if not (prompt or "").strip() and image is None:
        raise ValidationError(MISSING_INPUT_MESSAGE)


class StudioController:
    def __init__(self, client: GenerationClient, credentials: CredentialProvider):
        self.client = client
        self.credentials = credentials
        self.credential_ready = False
        self.job = GenerationJob()

    def check_credential(self) -> bool:
        try:
            self.credential_ready = bool(self.credentials.has_credential())
        except Exception as exc:
            logger.warning("Credential check failed: %s", exc)
            self.credential_ready = False
        return self.credential_ready

    def connect_credential(self) -> None:
        self.credentials.select_credential()
        self.credential_ready = self.credentials.has_credential()

    def clear_artifact(self) -> None:
        if self.job.artifact is not None:
            self.job.artifact.release()
        self.job = GenerationJob()

    def run_iter(
        self,
        prompt: str,
        image: ImageReference | None,
        settings: GenerationSettings,
    ) -> Iterator[GenerationJob]:
        """Run one job, yielding the job record after every state or message change."""

        self.clear_artifact()
        job = self.job
        try:
            validate_request(prompt, image)
        except ValidationError as exc:
            job.fail(str(exc))
            yield job
            return
        if not self.credential_ready:
            job.fail(NOT_CONNECTED_MESSAGE)
            yield job
            return

        job.prompt = resolve_prompt_text(prompt)
        job.advance(JobState.SUBMITTING, STARTING_MESSAGE)
        yield job
        try:
            for event in self.client.stream(job.prompt, image, settings):
                job.advance(event.stage, event.message)
                if event.artifact is not None:
                    job.artifact = event.artifact
                yield job
        except InvalidOrExpiredCredentialError as exc:
            self.credential_ready = False
            job.fail(str(exc))
            yield job
        except StudioError as exc:
            job.fail(str(exc))
            yield job
        except Exception as exc:
            logger.exception("Unexpected generation failure")
            job.fail(str(exc))
            yield job

    def run(
        self,
        prompt: str,
        image: ImageReference | None,
        settings: GenerationSettings,
    ) -> GenerationJob:
        for _job in self.run_iter(prompt, image, settings):
            pass
        return self.job
