"""Shared fakes for the video backend."""

from types import SimpleNamespace

import pytest

VIDEO_URI = "https://generativelanguage.example/v1beta/files/abc:download?alt=media"


def make_operation(done: bool, uri: str | None = VIDEO_URI, error=None):
    videos = [SimpleNamespace(video=SimpleNamespace(uri=uri))] if uri else []
    response = SimpleNamespace(generated_videos=videos) if done else None
    return SimpleNamespace(done=done, response=response, error=error)


class FakeVideoBackend:
    """Replays a scripted sequence of operations and records every call."""

    def __init__(self, operations=None, payload: bytes = b"\x00\x00\x00\x18ftypmp42", submit_error=None):
        self.operations = list(operations or [make_operation(done=True)])
        self.payload = payload
        self.submit_error = submit_error
        self.calls: list[tuple] = []

    def submit(self, api_key, request):
        self.calls.append(("submit", api_key, request))
        if self.submit_error is not None:
            raise self.submit_error
        return self.operations.pop(0)

    def refresh(self, api_key, operation):
        self.calls.append(("refresh", api_key, operation))
        return self.operations.pop(0)

    def download(self, api_key, uri):
        self.calls.append(("download", api_key, uri))
        return self.payload

    def count(self, name: str) -> int:
        return sum(1 for call in self.calls if call[0] == name)


class RecordingSleep:
    def __init__(self):
        self.delays: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


@pytest.fixture
def fake_backend():
    return FakeVideoBackend()


@pytest.fixture
def recording_sleep():
    return RecordingSleep()
