"""
Journal Board Backend — File Storage Service
==============================================

What:  Validates, stores and serves images uploaded for a board.
Why:   Image elements reference uploaded files by URL; the upload path is
       the only place untrusted bytes reach the filesystem.
How:   Checks extension, size and decoded image format, then writes the file
       under a board-scoped directory with a UUID filename.
Who:   POST /api/v1/boards/{board_id}/upload and GET /uploads/boards/...
When:  After the access gate has confirmed the edit token.

Security Model:
    1. Extension check:   fast rejection of obviously wrong files
    2. Size check:        declared file size first, then the actual byte count
    3. Format check:      Pillow decodes the header; only JPEG, PNG and GIF pass,
                          so a renamed executable is rejected even as "x.png"
    4. UUID filename:     no user input ever reaches the stored path
    5. Path resolution:   served paths must resolve inside the upload root

Directory Structure:
    uploads/
    └── boards/
        └── 3f2b…-board-id/
            ├── a1b2c3d4-….png
            └── e5f6a7b8-….jpg
"""

import logging
import uuid
from io import BytesIO
from pathlib import Path
from typing import Optional, Tuple

import aiofiles
from PIL import Image, UnidentifiedImageError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.exceptions import FileStorageError, NotFoundError, ValidationError
from app.schemas.upload import UploadResponse
from app.services.access import TokenLike, access_gate

logger = logging.getLogger(__name__)

# ── Allowed File Types ────────────────────────────────────────────────────
ALLOWED_EXTENSIONS = {".jpg", ".jpeg", ".png", ".gif"}

# Pillow format name → MIME type
ALLOWED_FORMATS = {
    "JPEG": "image/jpeg",
    "PNG": "image/png",
    "GIF": "image/gif",
}

EXTENSION_MIME_TYPES = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
}


class FileService:
    """
    Manages the upload lifecycle for board images.

    Lifecycle of an uploaded file:
        1. Route reads the multipart body → FileService.upload_board_image()
        2. Access gate: edit token required
        3. validate_extension / validate_size / detect_image_type
        4. store_file writes to boards/{board_id}/{uuid}{ext}
        5. UploadResponse carries the public URL for the image element
    """

    def __init__(self, upload_root: Optional[str] = None):
        """
        Args:
            upload_root: Override the configured upload directory (used in tests).
        """
        self.upload_root = Path(upload_root or settings.upload_root).resolve()
        self.upload_root.mkdir(parents=True, exist_ok=True)
        logger.info("FileService initialized with upload_root=%s", self.upload_root)

    def validate_extension(self, filename: Optional[str]) -> str:
        """Returns the normalized extension (lowercase, with dot)."""
        ext = Path(filename or "").suffix.lower()
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
        Reject files above max_upload_size, and empty files.

        Args:
            content_length: Size declared by the multipart part (UploadFile.size, may be None)
            actual_size:    Byte count actually received
        """
        limit = settings.max_upload_size
        max_mb = limit / (1024 * 1024)

        if content_length and content_length > limit:
            raise ValidationError(
                message=f"File size exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "reported_size": content_length},
            )

        if actual_size > limit:
            raise ValidationError(
                message=f"File size ({actual_size / (1024 * 1024):.1f}MB) exceeds maximum of {max_mb:.0f}MB.",
                field="file",
                context={"max_size_mb": max_mb, "actual_size": actual_size},
            )

        if actual_size == 0:
            raise ValidationError(message="Uploaded file is empty.", field="file")

    def detect_image_type(self, content: bytes) -> str:
        """
        Decode the image header with Pillow and return its MIME type.

        Raises:
            ValidationError: the bytes are not a JPEG, PNG or GIF image
        """
        try:
            with Image.open(BytesIO(content)) as image:
                image_format = image.format
                image.verify()
        except (UnidentifiedImageError, OSError, SyntaxError, ValueError) as e:
            raise ValidationError(
                message="The file is not a valid image. Upload a JPEG, PNG or GIF.",
                field="file",
                context={"reason": type(e).__name__},
            )

        mime_type = ALLOWED_FORMATS.get(image_format or "")
        if mime_type is None:
            raise ValidationError(
                message=f"Image format '{image_format}' is not supported. Upload a JPEG, PNG or GIF.",
                field="file",
                context={"detected_format": image_format, "allowed": sorted(ALLOWED_FORMATS)},
            )
        return mime_type

    def get_mime_type(self, filename: str) -> str:
        """MIME type for a stored file, from its extension."""
        return EXTENSION_MIME_TYPES.get(Path(filename).suffix.lower(), "application/octet-stream")

    def _generate_storage_path(self, board_id: uuid.UUID, extension: str) -> Tuple[Path, str]:
        """Returns (absolute_path, path relative to the upload root)."""
        unique_name = f"{uuid.uuid4()}{extension}"
        relative_path = f"boards/{board_id}/{unique_name}"
        return self.upload_root / relative_path, relative_path

    async def store_file(self, board_id: uuid.UUID, content: bytes, extension: str) -> Tuple[str, str]:
        """
        Write validated content to disk without blocking the event loop.

        Raises:
            FileStorageError: directory creation or write failed
        """
        absolute_path, relative_path = self._generate_storage_path(board_id, extension)

        try:
            absolute_path.parent.mkdir(parents=True, exist_ok=True)
            async with aiofiles.open(absolute_path, "wb") as f:
                await f.write(content)
        except OSError as e:
            logger.error("Failed to store file at %s: %s", absolute_path, str(e))
            raise FileStorageError(
                message="Failed to save uploaded image. Please try again.",
                context={"path": str(absolute_path), "os_error": str(e)},
            )

        logger.info("File stored: %s (%d bytes)", relative_path, len(content))
        return str(absolute_path), relative_path

    def resolve_stored_file(self, board_id: uuid.UUID, filename: str) -> Path:
        """
        Map a requested board/filename onto disk, refusing anything that
        resolves outside the board's upload directory.

        Raises:
            ValidationError: path traversal attempt
            NotFoundError:   no such file
        """
        board_dir = (self.upload_root / "boards" / str(board_id)).resolve()
        full_path = (board_dir / filename).resolve()

        if full_path.parent != board_dir:
            raise ValidationError(message="Invalid file path", field="filename")
        if not full_path.is_file():
            raise NotFoundError(resource="file", resource_id=filename)
        return full_path

    async def validate_and_store(
        self,
        board_id: uuid.UUID,
        filename: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> UploadResponse:
        """Cheapest checks first: extension, size, decoded format, then the write."""
        ext = self.validate_extension(filename)
        self.validate_size(content_length, len(content))
        mime_type = self.detect_image_type(content)

        _, relative_path = await self.store_file(board_id, content, ext)

        return UploadResponse(
            url=f"{settings.backend_url}/uploads/{relative_path}",
            filename=Path(relative_path).name,
            size=len(content),
            mime_type=mime_type,
        )

    async def upload_board_image(
        self,
        db: AsyncSession,
        board_id: uuid.UUID,
        token: TokenLike,
        filename: Optional[str],
        content: bytes,
        content_length: Optional[int] = None,
    ) -> UploadResponse:
        """Edit-gated upload of one image for a board."""
        await access_gate.require_edit(db, board_id, token)
        return await self.validate_and_store(board_id, filename, content, content_length)


# ── Singleton Instance ────────────────────────────────────────────────────
file_service = FileService()
