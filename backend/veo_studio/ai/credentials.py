"""Credential sources for the video backend.

One provider is chosen when the app container is built: a static key from
configuration wins; otherwise the interactive picker exposed by the UI is used.
Credential material is an opaque token string.
"""

from __future__ import annotations

import logging
from typing import Callable, Protocol

logger = logging.getLogger(__name__)


class CredentialProvider(Protocol):
    def has_credential(self) -> bool: ...

    def select_credential(self) -> None: ...

    def token(self) -> str | None: ...


def _clean(value: str | None) -> str | None:
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None


class StaticCredentialProvider:
    """A fixed key from configuration. Selecting a credential is a no-op."""

    def __init__(self, api_key: str):
        self._api_key = _clean(api_key)

    def has_credential(self) -> bool:
        return self._api_key is not None

    def select_credential(self) -> None:
        return None

    def token(self) -> str | None:
        return self._api_key


class InteractiveCredentialProvider:
    """Key chosen by the user at runtime.

    ``read_key`` returns whatever the UI currently holds; ``open_picker`` asks
    the UI to show its key selection control.
    """

    def __init__(
        self,
        read_key: Callable[[], str | None],
        open_picker: Callable[[], None] | None = None,
    ):
        self._read_key = read_key
        self._open_picker = open_picker

    def has_credential(self) -> bool:
        return self.token() is not None

    def select_credential(self) -> None:
        if self._open_picker is None:
            logger.error("No interactive key picker is available in this environment.")
            return
        self._open_picker()

    def token(self) -> str | None:
        return _clean(self._read_key())


def build_credential_provider(
    static_key: str | None,
    read_key: Callable[[], str | None] | None = None,
    open_picker: Callable[[], None] | None = None,
) -> CredentialProvider:
    if _clean(static_key):
        logger.info("Using configured static API key.")
        return StaticCredentialProvider(static_key or "")
    logger.info("No static API key configured; using interactive key selection.")
    return InteractiveCredentialProvider(read_key or (lambda: None), open_picker)
