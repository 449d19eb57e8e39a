from sqlalchemy import Column, DateTime, ForeignKey, String, Text

from cutover.db.base import Base
from cutover.models.user import utcnow


class Agency(Base):
    __tablename__ = "agencies"

    id = Column(String(36), primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(255), unique=True, nullable=False)
    logo_url = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class Member(Base):
    """Client company as recorded by the legacy recruiter module."""
    __tablename__ = "members"

    company_id = Column(String(36), primary_key=True)
    company = Column(String(255), nullable=False)
    agency_id = Column(String(36), ForeignKey("agencies.id"), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)
