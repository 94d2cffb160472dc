from __future__ import annotations

from typing import Protocol

from ..models import ImageUpload


class ImageStore(Protocol):
    """Blob storage for listing photos."""

    def save(self, upload: ImageUpload) -> str:
        ...

    def delete(self, reference: str) -> None:
        ...
