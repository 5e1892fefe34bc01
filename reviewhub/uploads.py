"""Ingestion of review images into the upload directory."""
from __future__ import annotations

import logging
import os
import secrets
import time
from pathlib import Path
from typing import BinaryIO, List, Optional, Protocol, Tuple

from .errors import FieldError, UpstreamFailure

logger = logging.getLogger(__name__)


class Upload(Protocol):
    filename: Optional[str]
    content_type: Optional[str]
    file: BinaryIO


def generate_filename(original_filename: Optional[str]) -> str:
    """``<epoch ms>-<random token><original extension>``."""
    extension = os.path.splitext(original_filename or "")[1]
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}{extension}"


class ImageStorage:
    def __init__(self, directory: Path | str, max_bytes: int, url_prefix: str = "/uploads") -> None:
        self.directory = Path(directory)
        self.max_bytes = max_bytes
        self.url_prefix = url_prefix.rstrip("/")

    def check(self, upload: Upload) -> Tuple[bytes, List[FieldError]]:
        """Read an upload and report MIME or size violations as field errors."""
        errors: List[FieldError] = []
        content_type = upload.content_type or ""
        if not content_type.startswith("image/"):
            errors.append(FieldError("image", "Only image files are allowed"))
        data = upload.file.read(self.max_bytes + 1)
        if len(data) > self.max_bytes:
            limit_mb = self.max_bytes / (1024 * 1024)
            errors.append(FieldError("image", f"Image must be at most {limit_mb:g} MB"))
        return data, errors

    def save(self, data: bytes, original_filename: Optional[str]) -> str:
        name = generate_filename(original_filename)
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            (self.directory / name).write_bytes(data)
        except OSError as exc:
            logger.exception("Failed to store uploaded image %s", name)
            raise UpstreamFailure() from exc
        logger.info("Stored uploaded image %s (%d bytes)", name, len(data))
        return f"{self.url_prefix}/{name}"

    def discard(self, url: str) -> None:
        if not url.startswith(self.url_prefix + "/"):
            return
        path = self.directory / url[len(self.url_prefix) + 1 :]
        try:
            path.unlink(missing_ok=True)
        except OSError:
            logger.warning("Could not remove image %s", path)
