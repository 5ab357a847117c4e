"""
File Storage Service Interface
Stores uploaded documents and hands back an opaque reference
"""
from abc import ABC, abstractmethod
from enum import Enum
from uuid import UUID

from fastapi import UploadFile


class FileKind(str, Enum):
    """Kinds of uploaded documents"""
    RESUME = "resume"
    BUSINESS_LICENSE = "business_license"


class IFileStorageService(ABC):
    """File storage service interface"""

    @abstractmethod
    async def save_file(self, owner_id: UUID, file: UploadFile, kind: FileKind) -> str:
        """
        Validate and persist an upload

        Args:
            owner_id: Account the document belongs to
            file: Uploaded file
            kind: Document kind, decides the allowed extensions

        Returns:
            Public reference (URL path) of the stored file

        Raises:
            ValidationException: wrong extension, empty or too large
            FileStorageException: the file could not be written
        """
        pass

    @abstractmethod
    async def delete_file(self, reference: str) -> bool:
        """Remove a previously stored file by its reference"""
        pass


__all__ = ["FileKind", "IFileStorageService"]
