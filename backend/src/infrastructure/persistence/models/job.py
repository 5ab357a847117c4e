"""
Job ORM Model
SQLAlchemy model for job postings
"""
import uuid
from sqlalchemy import Column, String, Integer, DateTime, JSON, Text, ForeignKey, Uuid
from sqlalchemy.sql import func

from core.database import Base


class JobModel(Base):
    """Job posting table ORM model"""

    __tablename__ = "jobs"

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Owner
    company_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Basic Info
    title = Column(String(200), nullable=False, index=True)
    description = Column(Text, nullable=False)
    requirements = Column(Text, nullable=False)
    location = Column(String(255), nullable=False, index=True)
    job_type = Column(String(50), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="active", index=True)

    # Salary
    salary_min = Column(Integer, nullable=True)
    salary_max = Column(Integer, nullable=True)
    salary_currency = Column(String(3), nullable=True)

    # Metadata
    skills = Column(JSON, nullable=True)  # List[str]
    benefits = Column(JSON, nullable=True)  # List[str]
    experience_level = Column(String(50), nullable=True)
    education_level = Column(String(50), nullable=True)
    application_deadline = Column(DateTime(timezone=True), nullable=True)

    # Counters
    applications_count = Column(Integer, nullable=False, default=0)
    views_count = Column(Integer, nullable=False, default=0)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<JobModel {self.title} ({self.status})>"
