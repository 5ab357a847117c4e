"""
Application ORM Model
SQLAlchemy model for job applications
"""
import uuid
from sqlalchemy import Column, String, DateTime, Text, ForeignKey, UniqueConstraint, Uuid
from sqlalchemy.sql import func

from core.database import Base


class ApplicationModel(Base):
    """Job application table ORM model"""

    __tablename__ = "applications"
    __table_args__ = (
        UniqueConstraint("job_id", "applicant_id", name="uq_applications_job_applicant"),
    )

    # Primary Key
    id = Column(Uuid, primary_key=True, default=uuid.uuid4, index=True)

    # Foreign Keys
    job_id = Column(Uuid, ForeignKey("jobs.id"), nullable=False, index=True)
    applicant_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)
    employer_id = Column(Uuid, ForeignKey("users.id"), nullable=False, index=True)

    # Application Details
    status = Column(String(20), nullable=False, default="applied", index=True)
    cover_letter = Column(Text, nullable=True)
    resume_url = Column(String(500), nullable=True)

    # Employer side
    notes = Column(Text, nullable=True)
    interview_date = Column(String(50), nullable=True)
    interview_time = Column(String(50), nullable=True)
    interview_location = Column(String(500), nullable=True)
    interview_notes = Column(Text, nullable=True)
    rejection_reason = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ApplicationModel {self.id} - {self.status}>"
