from sqlalchemy import JSON, Column, DateTime, Float, ForeignKey, Integer, String

from cutover.db.base import Base
from cutover.models.user import utcnow


class DiscPersonalitySession(Base):
    __tablename__ = "disc_personality_sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    session_status = Column(String(20), default="completed")
    started_at = Column(DateTime(timezone=True), nullable=True)
    finished_at = Column(DateTime(timezone=True), nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    total_questions = Column(Integer, default=30)
    d_score = Column(Float, nullable=True)
    i_score = Column(Float, nullable=True)
    s_score = Column(Float, nullable=True)
    c_score = Column(Float, nullable=True)
    primary_type = Column(String(10), nullable=True)
    secondary_type = Column(String(10), nullable=True)
    confidence_score = Column(Float, nullable=True)
    cultural_alignment = Column(Float, nullable=True)
    ai_assessment = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)


class TypingHeroSession(Base):
    __tablename__ = "typing_hero_sessions"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), nullable=False, index=True)
    session_status = Column(String(20), default="completed")
    difficulty_level = Column(String(20), nullable=True)
    elapsed_time = Column(Float, nullable=True)
    score = Column(Integer, nullable=True)
    wpm = Column(Float, nullable=True)
    overall_accuracy = Column(Float, nullable=True)
    longest_streak = Column(Integer, nullable=True)
    correct_words = Column(Integer, nullable=True)
    wrong_words = Column(Integer, nullable=True)
    words_correct = Column(JSON, nullable=True)
    words_incorrect = Column(JSON, nullable=True)
    ai_analysis = Column(JSON, nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow)
