"""Reference image intake."""

from __future__ import annotations

import base64
from typing import Any

from .ai.errors import ValidationError
from .ai.models import ImageReference

INVALID_IMAGE_MESSAGE = "Please upload a valid image file."


def encode_image(data: bytes, mime_type: str | None) -> ImageReference:
    """Validate the declared media type and base64-encode the payload."""

    if not mime_type or not mime_type.lower().startswith("image/"):
        raise ValidationError(INVALID_IMAGE_MESSAGE)
    return ImageReference(data=base64.b64encode(data).decode("ascii"), mime_type=mime_type)


def encode_upload(uploaded: Any) -> ImageReference:
    """Encode a Streamlit ``UploadedFile`` (anything with ``type`` and ``getvalue()``)."""

    return encode_image(uploaded.getvalue(), getattr(uploaded, "type", None))
