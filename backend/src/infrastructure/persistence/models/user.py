"""
User ORM Model
SQLAlchemy model for persistence
"""
import uuid
from sqlalchemy import Column, String, DateTime, JSON, Text, Uuid
from sqlalchemy.sql import func

from core.database import Base


class UserModel(Base):
    """User table ORM model (all roles)"""

    __tablename__ = "users"

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Authentication
    email = Column(String(255), unique=True, nullable=False, index=True)
    password_hash = Column(String(255), nullable=False)
    role = Column(String(20), nullable=False, index=True)
    status = Column(String(20), nullable=False, index=True)

    # Personal Information
    full_name = Column(String(255), nullable=False)
    phone = Column(String(50), nullable=True)
    profile_picture_url = Column(String(500), nullable=True)

    # Jobseeker profile
    resume_url = Column(String(500), nullable=True)
    skills = Column(JSON, nullable=True)  # List[str]
    experience = Column(Text, nullable=True)
    education = Column(Text, nullable=True)

    # Employer profile
    company_name = Column(String(255), nullable=True)
    location = Column(String(255), nullable=True)
    business_license_url = Column(String(500), nullable=True)
    company_description = Column(Text, nullable=True)
    website = Column(String(500), nullable=True)

    last_login = Column(DateTime(timezone=True), nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<UserModel {self.email} ({self.role})>"
