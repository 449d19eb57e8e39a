from datetime import date
from typing import Any, Dict, Optional

from pydantic import BaseModel, Field

from cutover.schemas.common import CanonicalModel, UtcDateTime

DEFAULT_PRIVACY = {
    "username": "public",
    "first_name": "public",
    "last_name": "only-me",
    "location": "public",
    "job_title": "public",
    "birthday": "only-me",
    "age": "only-me",
    "gender": "only-me",
    "resume_score": "public",
    "key_strengths": "only-me",
}


def default_gamification() -> Dict[str, Any]:
    return {"total_xp": 0, "tier": "Bronze", "badges": [], "rank_position": 0}


class Profile(CanonicalModel):
    # the owning candidate id doubles as the profile id
    id: str
    candidate_id: str
    bio: Optional[str] = None
    position: Optional[str] = None
    birthday: Optional[date] = None
    gender: Optional[str] = None
    gender_custom: Optional[str] = None
    location: Optional[str] = None
    location_city: Optional[str] = None
    location_province: Optional[str] = None
    location_country: Optional[str] = None
    location_region: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    work_status: Optional[str] = None
    current_employer: Optional[str] = None
    current_position: Optional[str] = None
    current_salary: Optional[float] = None
    expected_salary_min: Optional[float] = None
    expected_salary_max: Optional[float] = None
    notice_period_days: Optional[int] = None
    preferred_shift: Optional[str] = None
    preferred_work_setup: Optional[str] = None
    privacy_settings: Dict[str, str] = Field(default_factory=lambda: dict(DEFAULT_PRIVACY))
    gamification: Dict[str, Any] = Field(default_factory=default_gamification)
    profile_completed: bool = False
    profile_completion_percentage: int = 0
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class ProfileUpdate(BaseModel):
    bio: Optional[str] = None
    position: Optional[str] = None
    birthday: Optional[date] = None
    gender: Optional[str] = None
    gender_custom: Optional[str] = None
    location: Optional[str] = None
    location_city: Optional[str] = None
    location_province: Optional[str] = None
    location_country: Optional[str] = None
    location_region: Optional[str] = None
    location_lat: Optional[float] = None
    location_lng: Optional[float] = None
    work_status: Optional[str] = None
    current_employer: Optional[str] = None
    current_position: Optional[str] = None
    current_salary: Optional[float] = None
    expected_salary_min: Optional[float] = None
    expected_salary_max: Optional[float] = None
    notice_period_days: Optional[int] = None
    preferred_shift: Optional[str] = None
    preferred_work_setup: Optional[str] = None
    privacy_settings: Optional[Dict[str, str]] = None
    gamification: Optional[Dict[str, Any]] = None
    profile_completed: Optional[bool] = None
