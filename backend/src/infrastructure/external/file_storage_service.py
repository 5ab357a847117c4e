"""
LocalFileStorageService
Handles file upload, validation, and storage on local filesystem
"""
from pathlib import Path
from typing import Optional
from uuid import UUID, uuid4

import aiofiles
from fastapi import UploadFile
from loguru import logger

from core.config import settings
from core.exceptions import ValidationException, FileStorageException
from application.services.storage import IFileStorageService, FileKind


class LocalFileStorageService(IFileStorageService):
    """Local filesystem storage service"""

    def __init__(self, base_path: Optional[str] = None, url_prefix: Optional[str] = None):
        """
        Initialize file storage service

        Args:
            base_path: Base directory for file storage (default from settings)
            url_prefix: Public path the base directory is served under
        """
        self.base_path = Path(base_path or settings.UPLOAD_DIR)
        self.base_path.mkdir(parents=True, exist_ok=True)
        self.url_prefix = (url_prefix or settings.UPLOAD_URL_PREFIX).rstrip("/")

    def _allowed_extensions(self, kind: FileKind):
        if kind == FileKind.BUSINESS_LICENSE:
            return settings.ALLOWED_LICENSE_EXTENSIONS
        return settings.ALLOWED_RESUME_EXTENSIONS

    async def save_file(self, owner_id: UUID, file: UploadFile, kind: FileKind) -> str:
        """
        Save uploaded file to local storage

        Returns:
            Public reference, e.g. /uploads/resume/<owner>/resume_<hex>.pdf
        """
        extension = self._validate_file(file, kind)

        owner_dir = self.base_path / kind.value / str(owner_id)
        filename = f"{kind.value}_{uuid4().hex}{extension}"
        file_path = owner_dir / filename

        try:
            owner_dir.mkdir(parents=True, exist_ok=True)
            content = await file.read()
            async with aiofiles.open(file_path, 'wb') as f:
                await f.write(content)

        except OSError as e:
            logger.error(f"Error saving file {file_path}: {e}")
            raise FileStorageException(f"Failed to save file: {str(e)}")

        logger.info(f"File saved successfully: {file_path}")
        return f"{self.url_prefix}/{kind.value}/{owner_id}/{filename}"

    def _path_for(self, reference: str) -> Optional[Path]:
        if not reference or not reference.startswith(f"{self.url_prefix}/"):
            return None
        relative = reference[len(self.url_prefix) + 1:]
        base = self.base_path.resolve()
        candidate = (base / relative).resolve()
        if base not in candidate.parents:
            return None
        return candidate

    async def delete_file(self, reference: str) -> bool:
        """Delete file from storage"""
        file_path = self._path_for(reference)
        if not file_path or not file_path.exists():
            return False
        try:
            file_path.unlink()
            logger.info(f"File deleted: {file_path}")
            return True
        except OSError as e:
            logger.error(f"Error deleting file {file_path}: {e}")
            return False

    def _validate_file(self, file: UploadFile, kind: FileKind) -> str:
        """
        Validate uploaded file

        Returns:
            Lower-cased extension of the upload

        Raises:
            ValidationException if validation fails
        """
        if not file or not file.filename:
            raise ValidationException(kind.value, "No file uploaded")

        allowed_extensions = self._allowed_extensions(kind)
        extension = Path(file.filename).suffix.lower()
        if extension not in allowed_extensions:
            raise ValidationException(
                kind.value,
                f"Invalid file type. Only {', '.join(allowed_extensions)} allowed."
            )

        # Check file size
        file.file.seek(0, 2)
        file_size = file.file.tell()
        file.file.seek(0)

        if file_size == 0:
            raise ValidationException(kind.value, "Uploaded file is empty")

        max_size_bytes = settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024
        if file_size > max_size_bytes:
            raise ValidationException(
                kind.value,
                f"File too large. Maximum size is {settings.MAX_UPLOAD_SIZE_MB}MB."
            )
        return extension
