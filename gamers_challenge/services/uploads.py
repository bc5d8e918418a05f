"""
Local disk storage for uploaded images
Files are written under UPLOAD_DIR and served statically under UPLOAD_URL_PREFIX
"""

import logging
import random
import time
from pathlib import Path

from fastapi import UploadFile
from starlette.concurrency import run_in_threadpool

from gamers_challenge.core.config import Settings
from gamers_challenge.core.exceptions import FileUploadException, PayloadTooLargeException

logger = logging.getLogger(__name__)

CHUNK_SIZE = 1024 * 1024


class UploadStorage:
    """Stores uploads on local disk under generated unique filenames"""

    def __init__(self, upload_dir: str, url_prefix: str = "/uploads", max_size: int = 10 * 1024 * 1024):
        self.upload_dir = Path(upload_dir)
        self.url_prefix = url_prefix.rstrip("/")
        self.max_size = max_size

    @classmethod
    def from_settings(cls, settings: Settings) -> "UploadStorage":
        return cls(
            upload_dir=settings.UPLOAD_DIR,
            url_prefix=settings.UPLOAD_URL_PREFIX,
            max_size=settings.MAX_UPLOAD_SIZE,
        )

    def ensure_directory(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def generate_filename(field_name: str, original_filename: str) -> str:
        """Build '<field>-<epoch ms>-<random><ext>' keeping the original extension"""
        unique_suffix = f"{int(time.time() * 1000)}-{random.randint(0, 10**9)}"
        return f"{field_name}-{unique_suffix}{Path(original_filename or '').suffix}"

    async def save_image(self, file: UploadFile, field_name: str = "profilePicture") -> str:
        """
        Store an uploaded image

        Args:
            file: Uploaded file
            field_name: Form field the file came from, used as filename prefix

        Returns:
            URL path the stored file is served from

        Raises:
            FileUploadException: If the file is not an image
            PayloadTooLargeException: If the file exceeds the size limit
        """
        if not (file.content_type or "").startswith("image/"):
            raise FileUploadException("Only image uploads are allowed")

        chunks = []
        size = 0
        while True:
            chunk = await file.read(CHUNK_SIZE)
            if not chunk:
                break
            size += len(chunk)
            if size > self.max_size:
                raise PayloadTooLargeException("File too large")
            chunks.append(chunk)

        filename = self.generate_filename(field_name, file.filename)
        self.ensure_directory()
        await run_in_threadpool((self.upload_dir / filename).write_bytes, b"".join(chunks))

        logger.info(f"Stored upload {filename} ({size} bytes)")
        return f"{self.url_prefix}/{filename}"
