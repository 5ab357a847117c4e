"""
Profile Service
Self-service profile edits and resume replacement
"""
from dataclasses import replace
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from fastapi import UploadFile
from loguru import logger

from core.exceptions import ValidationException
from domain.entities import User
from application.repositories.interfaces import IUserRepository
from application.services.storage import IFileStorageService, FileKind


COMMON_FIELDS = {"full_name", "phone", "profile_picture_url"}
JOBSEEKER_FIELDS = COMMON_FIELDS | {"skills", "experience", "education"}
EMPLOYER_FIELDS = COMMON_FIELDS | {"company_name", "location", "company_description", "website"}


def _normalize_skills(skills: Union[str, List[str], None]) -> List[str]:
    if skills is None:
        return []
    if isinstance(skills, str):
        skills = skills.split(",")
    return [s.strip() for s in skills if s and s.strip()]


class ProfileService:
    """Profile of the signed-in user"""

    def __init__(self, user_repository: IUserRepository, file_storage: IFileStorageService):
        self.user_repo = user_repository
        self.file_storage = file_storage

    async def update_profile(self, user: User, changes: Dict[str, Any]) -> User:
        """Apply the role-appropriate subset of ``changes``; other keys are ignored"""
        allowed = EMPLOYER_FIELDS if user.is_employer() else JOBSEEKER_FIELDS
        updates = {k: v for k, v in changes.items() if k in allowed and v is not None}

        if "full_name" in updates:
            full_name = str(updates["full_name"]).strip()
            if len(full_name) < 2:
                raise ValidationException("full_name", "Full name must be at least 2 characters")
            updates["full_name"] = full_name

        if "skills" in updates:
            updates["skills"] = _normalize_skills(updates["skills"])

        if not updates:
            return user

        updated = await self.user_repo.update(
            replace(user, updated_at=datetime.utcnow(), **updates)
        )
        logger.info(f"Profile updated for user {user.id}: {sorted(updates)}")
        return updated

    async def update_resume(self, user: User, file: Optional[UploadFile]) -> User:
        if not user.is_jobseeker():
            raise ValidationException("resume", "Only jobseekers can upload a resume")
        if file is None or not file.filename:
            raise ValidationException("resume", "No file uploaded")

        previous = user.resume_url
        resume_url = await self.file_storage.save_file(user.id, file, FileKind.RESUME)
        try:
            updated = await self.user_repo.update(
                replace(user, resume_url=resume_url, updated_at=datetime.utcnow())
            )
        except Exception:
            logger.warning(f"Resume update failed for user {user.id}, removing {resume_url}")
            await self.file_storage.delete_file(resume_url)
            raise

        # Old file goes only once the new reference is stored
        if previous and previous != resume_url:
            await self.file_storage.delete_file(previous)
        logger.info(f"Resume updated for user {user.id}")
        return updated
