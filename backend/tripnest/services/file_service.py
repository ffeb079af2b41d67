"""
TripNest Backend - Image Storage Service
==========================================

What:  Validates and stores item images uploaded with POST /add.
How:   Checks the number of files, each extension and each size before any
       byte is written, then writes every file into the upload directory
       and returns its web path under the static prefix (default /uploads).
Who:   Called by the item routes; the paths end up in Item.images.

Naming:
    <epoch-millis>-<8 hex chars><ext>, e.g. 1700000000000-3fa85f64.jpg
    The timestamp keeps names sortable by upload time; the random suffix
    keeps two files written in the same millisecond apart. No part of the
    client's filename other than its extension is used.

Failure handling:
    If writing file N fails, files 1..N-1 of the same request are removed
    before the error propagates. The item route does the same when the
    database insert fails after all files were written.
"""

import logging
import os
import time
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Sequence

import aiofiles

from tripnest.config import Settings
from tripnest.exceptions import FileStorageError, ValidationError

logger = logging.getLogger(__name__)

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}


@dataclass(frozen=True)
class IncomingFile:
    """One uploaded file as read from the multipart body."""
    filename: str
    content: bytes
    content_length: Optional[int] = None


@dataclass(frozen=True)
class StoredFile:
    absolute_path: str
    url: str


class FileService:
    """
    Manages image validation, storage and cleanup.

    Directory layout:
        uploads/
        ├── 1700000000000-3fa85f64.jpg
        └── 1700000000001-9c1d2e7a.png
    """

    def __init__(
        self,
        upload_dir: str,
        url_prefix: str = "/uploads",
        max_file_size: int = 10_485_760,
        max_files: int = 7,
    ):
        self.upload_dir = Path(upload_dir).resolve()
        self.url_prefix = url_prefix.rstrip("/")
        self.max_file_size = max_file_size
        self.max_files = max_files

    @classmethod
    def from_settings(cls, settings: Settings) -> "FileService":
        return cls(
            upload_dir=settings.upload_dir,
            url_prefix=settings.upload_url_prefix,
            max_file_size=settings.max_file_size,
            max_files=settings.max_upload_files,
        )

    def ensure_upload_dir(self) -> None:
        self.upload_dir.mkdir(parents=True, exist_ok=True)

    # ── Validation ────────────────────────────────────────────────────────

    def validate_count(self, count: int) -> None:
        if count > self.max_files:
            raise ValidationError(
                message=f"At most {self.max_files} images can be uploaded per request.",
                field="images",
                context={"received": count, "max_files": self.max_files},
            )

    def validate_extension(self, filename: str) -> str:
        """
        Returns the normalized extension (lowercase with dot).

        Raises:  ValidationError if the extension is not an allowed image type.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext or filename}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="images",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Checks the declared size first, then the real byte count.

        Raises:
            ValidationError for empty files or files above max_file_size
        """
        max_mb = self.max_file_size / (1024 * 1024)

        if content_length and content_length > self.max_file_size:
            raise ValidationError(
                message=f"Image exceeds maximum size of {max_mb:.0f}MB.",
                field="images",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )
        if actual_size == 0:
            raise ValidationError(message="Uploaded image is empty.", field="images")
        if actual_size > self.max_file_size:
            raise ValidationError(
                message=(
                    f"Image size ({actual_size / (1024 * 1024):.1f}MB) exceeds "
                    f"maximum of {max_mb:.0f}MB."
                ),
                field="images",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    # ── Storage ───────────────────────────────────────────────────────────

    def _generate_storage_name(self, extension: str) -> str:
        millis = int(time.time() * 1000)
        return f"{millis}-{uuid.uuid4().hex[:8]}{extension}"

    async def store_file(self, content: bytes, extension: str) -> StoredFile:
        """
        Writes validated content into the upload directory.

        Raises:
            FileStorageError if the directory or the file cannot be written.
        """
        name = self._generate_storage_name(extension)
        absolute_path = self.upload_dir / name

        try:
            self.ensure_upload_dir()
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", name, len(content))
        return StoredFile(absolute_path=str(absolute_path), url=f"{self.url_prefix}/{name}")

    async def cleanup_file(self, file_path: str) -> None:
        """
        Best-effort removal of a stored file.

        Missing files are ignored; other OS errors are logged, not raised,
        so cleanup never masks the error that triggered it.
        """
        try:
            path = Path(file_path)
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", file_path, str(e))

    async def cleanup_files(self, stored: Sequence[StoredFile]) -> None:
        for item in stored:
            await self.cleanup_file(item.absolute_path)

    async def store_images(self, files: Sequence[IncomingFile]) -> List[StoredFile]:
        """
        Complete validation and storage pipeline for one request.

        Validation order:
            1. File count (no file is read or written when there are too many)
            2. Extension and size of every file
            3. Write each file

        Returns:
            StoredFile entries in upload order; `url` is the value kept on the item.
        """
        self.validate_count(len(files))

        extensions = []
        for incoming in files:
            ext = self.validate_extension(incoming.filename)
            self.validate_size(incoming.content_length, len(incoming.content))
            extensions.append(ext)

        stored: List[StoredFile] = []
        try:
            for incoming, ext in zip(files, extensions):
                stored.append(await self.store_file(incoming.content, ext))
        except FileStorageError:
            await self.cleanup_files(stored)
            raise

        return stored
