"""
User Repository Implementation
SQLAlchemy-based user repository
"""
from typing import Optional, List, Tuple
from uuid import UUID

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession
from loguru import logger

from domain.entities import User
from domain.enums import UserRole, UserStatus
from domain.value_objects import Email
from application.repositories.interfaces import IUserRepository
from infrastructure.persistence.models.user import UserModel
from core.exceptions import RepositoryException, DuplicateResourceException


class SQLAlchemyUserRepository(IUserRepository):
    """SQLAlchemy implementation of user repository"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _get_model(self, user_id: UUID) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.id == user_id)
        )
        return result.scalar_one_or_none()

    async def get_by_id(self, user_id: UUID) -> Optional[User]:
        """Get user by ID"""
        try:
            model = await self._get_model(user_id)
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get user by ID {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email"""
        try:
            result = await self.session.execute(
                select(UserModel).where(UserModel.email == email.lower())
            )
            model = result.scalar_one_or_none()
            return self._to_entity(model) if model else None

        except Exception as e:
            logger.error(f"Failed to get user by email {email}: {str(e)}")
            raise RepositoryException(f"Failed to get user: {str(e)}")

    async def exists_by_email(self, email: str) -> bool:
        try:
            result = await self.session.execute(
                select(UserModel.id).where(UserModel.email == email.lower())
            )
            return result.scalar_one_or_none() is not None

        except Exception as e:
            logger.error(f"Failed to check user existence {email}: {str(e)}")
            raise RepositoryException(f"Failed to check user existence: {str(e)}")

    async def create(self, user: User) -> User:
        """Create new user"""
        try:
            model = self._to_model(user)
            async with self.session.begin_nested():
                self.session.add(model)
                await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except IntegrityError:
            raise DuplicateResourceException(
                "User", "email", str(user.email), message="User already exists with this email"
            )
        except Exception as e:
            logger.error(f"Failed to create user {user.email}: {str(e)}")
            raise RepositoryException(f"Failed to create user: {str(e)}")

    async def update(self, user: User) -> User:
        """Update existing user"""
        try:
            model = await self._get_model(user.id)
            if not model:
                raise RepositoryException(f"User not found: {user.id}")

            self._apply(model, user)

            await self.session.flush()
            await self.session.refresh(model)

            return self._to_entity(model)

        except RepositoryException:
            raise
        except Exception as e:
            logger.error(f"Failed to update user {user.id}: {str(e)}")
            raise RepositoryException(f"Failed to update user: {str(e)}")

    async def delete(self, user_id: UUID) -> bool:
        try:
            model = await self._get_model(user_id)
            if model:
                await self.session.delete(model)
                await self.session.flush()
                return True
            return False

        except Exception as e:
            logger.error(f"Failed to delete user {user_id}: {str(e)}")
            raise RepositoryException(f"Failed to delete user: {str(e)}")

    def _filtered(self, query, role, status, search):
        if role:
            query = query.where(UserModel.role == role.value)
        if status:
            query = query.where(UserModel.status == status.value)
        if search:
            pattern = f"%{search}%"
            query = query.where(or_(
                UserModel.full_name.ilike(pattern),
                UserModel.email.ilike(pattern),
                UserModel.company_name.ilike(pattern),
            ))
        return query

    async def list(
        self,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
        search: Optional[str] = None,
        limit: int = 20,
        offset: int = 0,
    ) -> Tuple[List[User], int]:
        try:
            query = self._filtered(select(UserModel), role, status, search)
            result = await self.session.execute(
                query.order_by(UserModel.created_at.desc()).limit(limit).offset(offset)
            )
            users = [self._to_entity(m) for m in result.scalars().all()]

            total = await self.session.scalar(
                self._filtered(select(func.count(UserModel.id)), role, status, search)
            )
            return users, total or 0

        except Exception as e:
            logger.error(f"Failed to list users: {str(e)}")
            raise RepositoryException(f"Failed to list users: {str(e)}")

    async def count(
        self,
        role: Optional[UserRole] = None,
        status: Optional[UserStatus] = None,
    ) -> int:
        try:
            total = await self.session.scalar(
                self._filtered(select(func.count(UserModel.id)), role, status, None)
            )
            return total or 0

        except Exception as e:
            logger.error(f"Failed to count users: {str(e)}")
            raise RepositoryException(f"Failed to count users: {str(e)}")

    @staticmethod
    def _apply(model: UserModel, user: User) -> None:
        model.email = str(user.email)
        model.password_hash = user.password_hash
        model.full_name = user.full_name
        model.phone = user.phone
        model.role = user.role.value
        model.status = user.status.value
        model.profile_picture_url = user.profile_picture_url
        model.resume_url = user.resume_url
        model.skills = list(user.skills or [])
        model.experience = user.experience
        model.education = user.education
        model.company_name = user.company_name
        model.location = user.location
        model.business_license_url = user.business_license_url
        model.company_description = user.company_description
        model.website = user.website
        model.last_login = user.last_login
        if user.updated_at:
            model.updated_at = user.updated_at

    def _to_model(self, user: User) -> UserModel:
        model = UserModel(id=user.id)
        self._apply(model, user)
        if user.created_at:
            model.created_at = user.created_at
        return model

    def _to_entity(self, model: UserModel) -> User:
        return User(
            id=model.id,
            email=Email(model.email),
            password_hash=model.password_hash,
            full_name=model.full_name,
            role=UserRole(model.role),
            status=UserStatus(model.status),
            phone=model.phone,
            resume_url=model.resume_url,
            skills=list(model.skills or []),
            experience=model.experience,
            education=model.education,
            company_name=model.company_name,
            location=model.location,
            business_license_url=model.business_license_url,
            company_description=model.company_description,
            website=model.website,
            profile_picture_url=model.profile_picture_url,
            last_login=model.last_login,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
