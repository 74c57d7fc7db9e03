"""
GeoCats Backend — Upload Storage Service
==========================================

What:  Validates uploaded cat images, stores them under a server-assigned
       name, serves them back, and removes them when a create fails.
How:   Validates extension, size and MIME type, then writes the bytes with
       aiofiles to ``<storage_root>/<uuid><ext>``.
Who:   Called by the cat create route (upload) and the uploads route (serve).

Filename rule:
    The stored name is generated here and is the only value that ever reaches
    ``Cat.filename``. The client's original filename is used solely to read
    its extension.

Checks, cheapest first:
    1. Extension check
    2. Size check (Content-Length header, then actual byte count)
    3. MIME type check via libmagic (python-magic)
    4. Store file
"""

import logging
import os
import uuid
from pathlib import Path
from typing import Optional

import aiofiles

from geocats.config import settings
from geocats.exceptions import FileStorageError, NotFoundError, ValidationError

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
ALLOWED_MIME_TYPES = {
    "image/png": ".png",
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
}

ALLOWED_EXTENSIONS = {".png", ".jpg", ".jpeg"}


class FileService:
    """
    Manages the upload lifecycle of cat images.

    Directory Structure:
        uploads/
        ├── a1b2c3d4-....jpg
        └── e5f6g7h8-....png
    """

    def __init__(self, storage_root: Optional[str] = None):
        """
        Args:
            storage_root: Override the default storage path (used in tests).
                          If None, uses settings.storage_root.
        """
        self.storage_root = Path(storage_root or settings.storage_root).resolve()
        self.storage_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with storage_root=%s", self.storage_root)

    def validate_extension(self, filename: str) -> str:
        """
        Returns: Normalized extension (lowercase with dot).
        Raises:  ValidationError if extension is not allowed.
        """
        ext = Path(filename).suffix.lower()
        if ext not in ALLOWED_EXTENSIONS:
            raise ValidationError(
                message=(
                    f"File type '{ext}' is not supported. "
                    f"Allowed types: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                field="file",
                context={"extension": ext, "allowed": sorted(ALLOWED_EXTENSIONS)},
            )
        return ext

    def validate_size(self, content_length: Optional[int], actual_size: int) -> None:
        """
        Checks Content-Length first, then the actual byte count, against
        ``settings.max_file_size``. Empty uploads are rejected.
        """
        max_mb = settings.max_file_size / (1024 * 1024)

        if actual_size == 0:
            raise ValidationError(
                message="Uploaded file is empty.",
                field="file",
            )

        if content_length and content_length > settings.max_file_size:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB. Please upload a smaller image.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > settings.max_file_size:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) is too large; maximum is {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

    def validate_mime_type(self, file_content: bytes, filename: str) -> str:
        """
        Validate actual MIME type by inspecting file content bytes.

        How:     python-magic reads the first few bytes and matches against known
                 file signatures (e.g., JPEG starts with FF D8 FF).

        Returns:
            Detected MIME type string (e.g., "image/jpeg")

        Raises:
            ValidationError if MIME type is not in the allowed list
        """
        try:
            import magic
            mime_type = magic.from_buffer(file_content, mime=True)
        except ImportError:
            # libmagic missing (e.g., in CI); trust the extension
            logger.warning(
                "python-magic not available; falling back to extension-based type detection. "
                "Install libmagic for production security."
            )
            ext = Path(filename).suffix.lower()
            mime_map = {".png": "image/png", ".jpg": "image/jpeg", ".jpeg": "image/jpeg"}
            mime_type = mime_map.get(ext, "application/octet-stream")
        except Exception as e:
            logger.error("MIME type detection failed: %s", str(e))
            raise FileStorageError(
                message="Could not verify file type. Please try again.",
                context={"error": str(e)},
            )

        if mime_type not in ALLOWED_MIME_TYPES:
            raise ValidationError(
                message=(
                    f"File content type '{mime_type}' is not supported. "
                    f"The file must be a valid image (PNG or JPEG)."
                ),
                field="file",
                context={"detected_mime": mime_type, "allowed": list(ALLOWED_MIME_TYPES.keys())},
            )

        return mime_type

    def generate_filename(self, extension: str) -> str:
        return f"{uuid.uuid4()}{extension}"

    async def store_file(self, content: bytes, extension: str) -> str:
        """
        Write validated file content to disk.

        Returns: The server-assigned filename.
        Raises:  FileStorageError if the write fails.
        """
        filename = self.generate_filename(extension)
        absolute_path = self.storage_root / filename

        try:
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)

            logger.info("File stored: %s (%d bytes)", filename, len(content))
            return filename

        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

    async def cleanup_file(self, filename: str) -> None:
        """
        Remove a stored upload; used when the cat record could not be created.

        Best-effort: missing files are ignored and OS errors are logged.
        """
        try:
            path = self.storage_root / filename
            if path.exists():
                os.remove(path)
                logger.info("Cleaned up file: %s", path.name)
            else:
                logger.debug("Cleanup: file already gone: %s", path.name)
        except OSError as e:
            logger.warning("Failed to clean up file %s: %s", filename, str(e))

    def resolve(self, filename: str) -> Path:
        """
        Absolute path of a stored upload.

        Raises:
            ValidationError: the name escapes the storage root
            NotFoundError:   no such file
        """
        full_path = (self.storage_root / filename).resolve()
        if full_path.parent != self.storage_root:
            raise ValidationError(message="Invalid file path", field="filename")
        if not full_path.is_file():
            raise NotFoundError(resource="file", resource_id=filename)
        return full_path

    async def validate_and_store(
        self,
        filename: str,
        content: bytes,
        content_length: Optional[int] = None,
    ) -> str:
        """
        Complete file validation and storage pipeline.

        Returns: The server-assigned filename for ``Cat.filename``.
        """
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        self.validate_mime_type(content, filename)
        return await self.store_file(content, ext)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
