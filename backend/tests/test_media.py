"""Tests for reference image intake."""

import base64

import pytest

from veo_studio.ai.errors import ValidationError
from veo_studio.media import INVALID_IMAGE_MESSAGE, encode_image, encode_upload

PNG_HEADER = b"\x89PNG\r\n\x1a\n"


class _FakeUpload:
    def __init__(self, data: bytes, type: str):
        self._data = data
        self.type = type

    def getvalue(self) -> bytes:
        return self._data


def test_image_is_encoded_as_base64_with_media_type():
    image = encode_image(PNG_HEADER, "image/png")

    assert image.mime_type == "image/png"
    assert base64.b64decode(image.data) == PNG_HEADER
    assert image.to_bytes() == PNG_HEADER
    assert image.data_url().startswith("data:image/png;base64,")


@pytest.mark.parametrize("mime_type", ["application/pdf", "video/mp4", "", None])
def test_non_image_media_types_are_rejected(mime_type):
    with pytest.raises(ValidationError, match=INVALID_IMAGE_MESSAGE):
        encode_image(b"%PDF-1.7", mime_type)


def test_streamlit_upload_is_encoded():
    image = encode_upload(_FakeUpload(PNG_HEADER, "image/webp"))

    assert image.mime_type == "image/webp"
    assert image.to_bytes() == PNG_HEADER
