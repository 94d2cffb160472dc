"""Filesystem blob store for listing photos."""

import logging
import time
from pathlib import Path, PurePosixPath

from ...domain.models import ImageUpload

logger = logging.getLogger(__name__)


class LocalImageStorage:
    """Writes accepted uploads under a directory served at ``public_prefix``."""

    def __init__(self, root: Path, public_prefix: str = "/uploads") -> None:
        root.mkdir(parents=True, exist_ok=True)
        self.root = root
        self.public_prefix = public_prefix.rstrip("/")

    def save(self, upload: ImageUpload) -> str:
        """Persist ``upload`` and return the public reference to it."""
        suffix = PurePosixPath(upload.filename).suffix.lower()
        stamp = int(time.time() * 1000)
        while True:
            target = self.root / f"{stamp}{suffix}"
            try:
                with target.open("xb") as handle:
                    handle.write(upload.data)
            except FileExistsError:
                stamp += 1
                continue
            return f"{self.public_prefix}/{target.name}"

    def delete(self, reference: str) -> None:
        name = PurePosixPath(reference).name
        path = self.root / name
        try:
            path.unlink()
        except FileNotFoundError:
            logger.warning("Image %s already removed", reference)
