from sqlalchemy import JSON, Boolean, Column, DateTime, ForeignKey, Integer, String

from cutover.db.base import Base
from cutover.models.user import utcnow


class SavedResume(Base):
    __tablename__ = "saved_resumes"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    resume_slug = Column(String(255), unique=True, nullable=False)
    resume_title = Column(String(255), nullable=True)
    # raw data extracted from the uploaded file
    resume_data = Column(JSON, nullable=True)
    # AI improved version, produced separately
    generated_resume_data = Column(JSON, nullable=True)
    original_filename = Column(String(255), nullable=True)
    template_used = Column(String(100), nullable=True)
    is_primary = Column(Boolean, default=False)
    is_public = Column(Boolean, default=False)
    view_count = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
