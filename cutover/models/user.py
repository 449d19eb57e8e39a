from datetime import datetime, timezone

from sqlalchemy import Boolean, Column, Date, DateTime, Float, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship

from cutover.db.base import Base


def utcnow():
    return datetime.now(timezone.utc)


class User(Base):
    __tablename__ = "users"

    id = Column(String(36), primary_key=True)
    email = Column(String(255), unique=True, nullable=False, index=True)
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    full_name = Column(String(201), nullable=False, default="")
    phone = Column(String(50), nullable=True)
    avatar_url = Column(Text, nullable=True)
    username = Column(String(100), unique=True, nullable=True)
    slug = Column(String(150), unique=True, nullable=True)
    # admin rows live in the same table; they are not candidates
    admin_level = Column(String(20), nullable=True)

    bio = Column(Text, nullable=True)
    position = Column(String(255), nullable=True)
    birthday = Column(Date, nullable=True)
    gender = Column(String(30), nullable=True)
    gender_custom = Column(String(100), nullable=True)
    location = Column(String(255), nullable=False, default="")
    location_city = Column(String(100), nullable=True)
    location_province = Column(String(100), nullable=True)
    location_country = Column(String(100), nullable=True)
    location_region = Column(String(100), nullable=True)
    location_lat = Column(Float, nullable=True)
    location_lng = Column(Float, nullable=True)
    completed_data = Column(Boolean, default=False)

    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    work_status = relationship("UserWorkStatus", uselist=False, back_populates="user")
    privacy = relationship("PrivacySettings", uselist=False, back_populates="user")
    leaderboard = relationship("LeaderboardScore", uselist=False, back_populates="user")


class UserWorkStatus(Base):
    __tablename__ = "user_work_status"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    work_status = Column(String(50), nullable=True)
    # newer enum column, preferred over work_status when set
    work_status_new = Column(String(50), nullable=True)
    current_employer = Column(String(255), nullable=True)
    current_position = Column(String(255), nullable=True)
    current_salary = Column(Float, nullable=True)
    minimum_salary_range = Column(Float, nullable=True)
    maximum_salary_range = Column(Float, nullable=True)
    notice_period_days = Column(Integer, nullable=True)
    preferred_shift = Column(String(20), nullable=True)
    work_setup = Column(String(50), nullable=True)

    user = relationship("User", back_populates="work_status")


class PrivacySettings(Base):
    __tablename__ = "privacy_settings"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    username = Column(String(20), nullable=True)
    first_name = Column(String(20), nullable=True)
    last_name = Column(String(20), nullable=True)
    location = Column(String(20), nullable=True)
    job_title = Column(String(20), nullable=True)
    birthday = Column(String(20), nullable=True)
    age = Column(String(20), nullable=True)
    gender = Column(String(20), nullable=True)
    resume_score = Column(String(20), nullable=True)
    key_strengths = Column(String(20), nullable=True)

    user = relationship("User", back_populates="privacy")


class LeaderboardScore(Base):
    __tablename__ = "user_leaderboard_scores"

    id = Column(String(36), primary_key=True)
    user_id = Column(String(36), ForeignKey("users.id"), unique=True, nullable=False)
    overall_score = Column(Integer, default=0)
    tier = Column(String(20), nullable=True)
    rank_position = Column(Integer, nullable=True)

    user = relationship("User", back_populates="leaderboard")
