import logging
import uuid
from pathlib import Path
from typing import Protocol

from devevent.core.config import settings
from devevent.core.errors import ValidationError

logger = logging.getLogger(__name__)


class ImageHost(Protocol):
    """Stores an image blob and returns a publicly reachable URL."""

    def upload(self, data: bytes, filename: str) -> str:
        ...

    def remove(self, url: str) -> None:
        ...


class LocalImageHost:
    """Writes images into a directory served as static files."""

    def __init__(self, directory, base_url: str) -> None:
        self.directory = Path(directory)
        self.base_url = base_url.rstrip("/")

    def upload(self, data: bytes, filename: str) -> str:
        if not data:
            raise ValidationError("image", "Image is required")

        name = f"{uuid.uuid4().hex}{Path(filename).suffix.lower()}"
        self.directory.mkdir(parents=True, exist_ok=True)
        (self.directory / name).write_bytes(data)

        logger.info(f"Stored image {name} ({len(data)} bytes)")
        return f"{self.base_url}/{name}"

    def remove(self, url: str) -> None:
        """Delete an image previously returned by ``upload``."""
        if not url.startswith(f"{self.base_url}/"):
            return
        name = url[len(self.base_url) + 1:]
        (self.directory / Path(name).name).unlink(missing_ok=True)
        logger.info(f"Removed image {name}")


def get_image_host() -> ImageHost:
    return LocalImageHost(
        Path(settings.static_dir) / "events",
        f"{settings.public_base_url}/static/events",
    )
