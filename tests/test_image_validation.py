"""Unit tests for the listing photo allow-list."""

import pytest

from neighborswap.application.services.image_validation import validate_images
from neighborswap.domain.errors import UploadRejected
from neighborswap.domain.models import ImageUpload


def _upload(filename: str, content_type: str, size: int = 10) -> ImageUpload:
    return ImageUpload(filename=filename, content_type=content_type, data=b"\x00" * size)


@pytest.mark.parametrize(
    "filename,content_type",
    [
        ("a.jpg", "image/jpeg"),
        ("a.jpeg", "image/jpeg"),
        ("a.JPG", "image/jpg"),
        ("a.png", "image/png"),
        ("a.gif", "image/gif"),
    ],
)
def test_accepts_allowed_images(filename, content_type):
    validate_images([_upload(filename, content_type)])


@pytest.mark.parametrize(
    "filename,content_type",
    [
        ("a.pdf", "application/pdf"),
        ("a.png", "text/plain"),
        ("a.exe", "image/png"),
        ("a.svg", "image/svg+xml"),
        ("noextension", "image/png"),
        ("a.webp", "image/webp"),
    ],
)
def test_rejects_other_types(filename, content_type):
    with pytest.raises(UploadRejected):
        validate_images([_upload(filename, content_type)])


def test_size_ceiling_is_inclusive():
    validate_images([_upload("a.png", "image/png", size=100)], max_bytes=100)

    with pytest.raises(UploadRejected):
        validate_images([_upload("a.png", "image/png", size=101)], max_bytes=100)


def test_count_limit():
    validate_images([_upload(f"{i}.png", "image/png") for i in range(5)])

    with pytest.raises(UploadRejected) as exc_info:
        validate_images([_upload(f"{i}.png", "image/png") for i in range(6)])

    assert exc_info.value.fields == ["images"]


def test_empty_batch_is_fine():
    validate_images([])
