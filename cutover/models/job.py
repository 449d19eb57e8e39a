from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String, Text

from cutover.db.base import Base
from cutover.models.user import utcnow


class JobRequest(Base):
    __tablename__ = "job_requests"

    id = Column(String(36), primary_key=True)
    company_id = Column(String(36), ForeignKey("members.company_id"), nullable=True)
    agency_id = Column(String(36), ForeignKey("agencies.id"), nullable=True)
    job_title = Column(String(255), nullable=False)
    job_description = Column(Text, nullable=True)
    requirements = Column(JSON, nullable=True)
    responsibilities = Column(JSON, nullable=True)
    benefits = Column(JSON, nullable=True)
    salary_min = Column(Float, nullable=True)
    salary_max = Column(Float, nullable=True)
    salary_type = Column(String(20), nullable=True)
    currency = Column(String(10), nullable=True)
    work_arrangement = Column(String(20), nullable=True)
    work_type = Column(String(20), nullable=True)
    shift = Column(String(20), nullable=True)
    experience_level = Column(String(30), nullable=True)
    status = Column(String(20), default="active")
    views = Column(Integer, default=0)
    applicants = Column(Integer, default=0)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
