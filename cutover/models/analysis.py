from sqlalchemy import JSON, Column, DateTime, ForeignKey, Integer, String, Text, UniqueConstraint

from cutover.db.base import Base
from cutover.models.user import utcnow


class AiAnalysisResult(Base):
    __tablename__ = "ai_analysis_results"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    original_resume_id = Column(String(36), ForeignKey("saved_resumes.id"), nullable=True)
    session_id = Column(String(100), nullable=True)
    overall_score = Column(Integer, nullable=False)
    ats_compatibility_score = Column(Integer, nullable=True)
    content_quality_score = Column(Integer, nullable=True)
    professional_presentation_score = Column(Integer, nullable=True)
    skills_alignment_score = Column(Integer, nullable=True)
    key_strengths = Column(JSON, nullable=True)
    strengths_analysis = Column(JSON, nullable=True)
    improvements = Column(JSON, nullable=True)
    recommendations = Column(JSON, nullable=True)
    section_analysis = Column(JSON, nullable=True)
    improved_summary = Column(Text, nullable=True)
    salary_analysis = Column(JSON, nullable=True)
    career_path = Column(JSON, nullable=True)
    candidate_profile = Column(JSON, nullable=True)
    skills_snapshot = Column(JSON, nullable=True)
    experience_snapshot = Column(JSON, nullable=True)
    education_snapshot = Column(JSON, nullable=True)
    portfolio_links = Column(JSON, nullable=True)
    files_analyzed = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)


class JobMatchResult(Base):
    __tablename__ = "job_match_results"
    __table_args__ = (UniqueConstraint("user_id", "job_id", name="uq_job_match_results_user_job"),)

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    job_id = Column(String(36), ForeignKey("job_requests.id"), nullable=False, index=True)
    score = Column(Integer, nullable=False)
    breakdown = Column(JSON, nullable=True)
    reasoning = Column(Text, nullable=True)
    analyzed_at = Column(DateTime(timezone=True), default=utcnow)
    created_at = Column(DateTime(timezone=True), default=utcnow)
