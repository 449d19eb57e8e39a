from enum import Enum
from typing import Optional

from pydantic import BaseModel

from cutover.schemas.candidate_schema import Candidate
from cutover.schemas.common import CanonicalModel, UtcDateTime
from cutover.schemas.job_schema import Job


class ApplicationStatus(str, Enum):
    SUBMITTED = "submitted"
    UNDER_REVIEW = "under_review"
    OFFERED = "offered"
    HIRED = "hired"
    REJECTED = "rejected"
    WITHDRAWN = "withdrawn"


TERMINAL_STATUSES = frozenset({
    ApplicationStatus.WITHDRAWN,
    ApplicationStatus.HIRED,
    ApplicationStatus.REJECTED,
})

ALLOWED_TRANSITIONS = {
    ApplicationStatus.SUBMITTED: {ApplicationStatus.UNDER_REVIEW, ApplicationStatus.WITHDRAWN},
    ApplicationStatus.UNDER_REVIEW: {
        ApplicationStatus.OFFERED, ApplicationStatus.REJECTED, ApplicationStatus.WITHDRAWN,
    },
    ApplicationStatus.OFFERED: {
        ApplicationStatus.HIRED, ApplicationStatus.REJECTED, ApplicationStatus.WITHDRAWN,
    },
}


class Application(CanonicalModel):
    id: str
    candidate_id: str
    job_id: str
    resume_id: Optional[str] = None
    status: ApplicationStatus = ApplicationStatus.SUBMITTED
    cover_letter: Optional[str] = None
    notes: Optional[str] = None
    applied_at: Optional[UtcDateTime] = None
    created_at: Optional[UtcDateTime] = None
    updated_at: Optional[UtcDateTime] = None


class ApplicationCreate(BaseModel):
    id: Optional[str] = None
    candidate_id: str
    job_id: str
    resume_id: Optional[str] = None
    cover_letter: Optional[str] = None


class ApplicationWithJob(BaseModel):
    application: Application
    job: Optional[Job] = None


class ApplicationWithCandidate(BaseModel):
    application: Application
    candidate: Optional[Candidate] = None
