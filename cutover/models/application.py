from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, UniqueConstraint

from cutover.db.base import Base
from cutover.models.user import utcnow


class Application(Base):
    __tablename__ = "applications"
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_applications_user_job"),)

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(String(36), ForeignKey("job_requests.id"), nullable=False, index=True)
    resume_id = Column(String(36), ForeignKey("saved_resumes.id"), nullable=True)
    status = Column(String(30), nullable=False, default="submitted")
    position = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
