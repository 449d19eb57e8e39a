from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

from cutover.schemas.common import CanonicalModel, UtcDateTime

AssessmentKind = Literal["disc", "typing"]


class Assessment(CanonicalModel):
    id: str
    candidate_id: str
    kind: AssessmentKind
    session_status: str = "completed"
    started_at: Optional[UtcDateTime] = None
    finished_at: Optional[UtcDateTime] = None
    duration_seconds: Optional[float] = None
    # headline number: DISC confidence, typing words per minute
    score: Optional[float] = None
    results: Dict[str, Any] = Field(default_factory=dict)
    xp_earned: int = 0
    created_at: Optional[UtcDateTime] = None


class AssessmentCreate(BaseModel):
    id: Optional[str] = None
    candidate_id: str
    kind: AssessmentKind
    session_status: str = "completed"
    started_at: Optional[UtcDateTime] = None
    finished_at: Optional[UtcDateTime] = None
    duration_seconds: Optional[float] = None
    score: Optional[float] = None
    results: Dict[str, Any] = Field(default_factory=dict)
    xp_earned: int = 0


class AssessmentProgress(BaseModel):
    candidate_id: str
    completed: Dict[str, int]
    total_xp: int
