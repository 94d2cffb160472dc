"""Allow-list and size checks for listing photos."""

from __future__ import annotations

import logging
from pathlib import PurePosixPath
from typing import Sequence

from ...domain.errors import UploadRejected
from ...domain.models import ImageUpload

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = frozenset({"jpeg", "jpg", "png", "gif"})
DEFAULT_MAX_IMAGE_BYTES = 5_000_000
DEFAULT_MAX_IMAGES = 5


def validate_images(
    images: Sequence[ImageUpload],
    *,
    max_count: int = DEFAULT_MAX_IMAGES,
    max_bytes: int = DEFAULT_MAX_IMAGE_BYTES,
) -> None:
    """
    Reject the whole batch if any image breaks the upload rules.

    Both the declared content type and the file extension must name an
    allowed image format.

    Raises:
        UploadRejected: On too many files, a disallowed type or an oversized file
    """
    if len(images) > max_count:
        logger.info("Rejected upload of %d images", len(images))
        raise UploadRejected(f"At most {max_count} images are allowed", fields=["images"])

    for image in images:
        if not _is_allowed_type(image):
            logger.info("Rejected upload %r with content type %r", image.filename, image.content_type)
            raise UploadRejected("Only image files are allowed", fields=["images"])
        if image.size > max_bytes:
            logger.info("Rejected upload %r of %d bytes", image.filename, image.size)
            raise UploadRejected(
                f"Image {image.filename} exceeds the {max_bytes} byte limit", fields=["images"]
            )


def _is_allowed_type(image: ImageUpload) -> bool:
    content_type = (image.content_type or "").lower()
    major, _, subtype = content_type.partition("/")
    extension = PurePosixPath(image.filename or "").suffix.lower().lstrip(".")
    return major == "image" and subtype in ALLOWED_IMAGE_TYPES and extension in ALLOWED_IMAGE_TYPES
