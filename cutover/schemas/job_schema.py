from typing import Any, List, Optional

from pydantic import BaseModel, Field

from cutover.schemas.common import CanonicalModel, UtcDateTime


class Job(CanonicalModel):
    id: str
    agency_id: Optional[str] = None
    company_id: Optional[str] = None
    title: str
    slug: str
    description: Optional[str] = None
    requirements: List[Any] = Field(default_factory=list)
    responsibilities: List[Any] = Field(default_factory=list)
    benefits: List[Any] = Field(default_factory=list)
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_type: str = "monthly"
    currency: str = "PHP"
    work_arrangement: Optional[str] = None
    work_type: str = "full_time"
    shift: str = "day"
    experience_level: Optional[str] = None
    status: str = "active"
    views: int = 0
    applicants_count: int = 0
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class JobCreate(BaseModel):
    id: Optional[str] = None
    agency_id: Optional[str] = None
    company_id: Optional[str] = None
    title: str
    slug: Optional[str] = None
    description: Optional[str] = None
    requirements: List[Any] = Field(default_factory=list)
    responsibilities: List[Any] = Field(default_factory=list)
    benefits: List[Any] = Field(default_factory=list)
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_type: str = "monthly"
    currency: str = "PHP"
    work_arrangement: Optional[str] = None
    work_type: str = "full_time"
    shift: str = "day"
    experience_level: Optional[str] = None
    status: str = "active"


class JobUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    requirements: Optional[List[Any]] = None
    responsibilities: Optional[List[Any]] = None
    benefits: Optional[List[Any]] = None
    salary_min: Optional[float] = None
    salary_max: Optional[float] = None
    salary_type: Optional[str] = None
    currency: Optional[str] = None
    work_arrangement: Optional[str] = None
    work_type: Optional[str] = None
    shift: Optional[str] = None
    experience_level: Optional[str] = None
    status: Optional[str] = None
