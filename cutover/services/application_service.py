import logging
from typing import List, Optional

from cutover.repositories.application_repo import ApplicationRepository
from cutover.repositories.candidate_repo import CandidateRepository
from cutover.repositories.job_repo import JobRepository
from cutover.repositories.resume_repo import ResumeRepository
from cutover.schemas.application_schema import (
    Application, ApplicationCreate, ApplicationWithCandidate, ApplicationWithJob,
)

logger = logging.getLogger(__name__)


class ApplicationService:
    """Application flows that need more than one family."""

    def __init__(self, applications: ApplicationRepository, jobs: JobRepository,
                 candidates: CandidateRepository, resumes: Optional[ResumeRepository] = None):
        self.applications = applications
        self.jobs = jobs
        self.candidates = candidates
        self.resumes = resumes

    @classmethod
    def from_repositories(cls, repositories) -> "ApplicationService":
        return cls(
            repositories["applications"],
            repositories["jobs"],
            repositories["candidates"],
            repositories.get("resumes"),
        )

    async def submit(self, candidate_id: str, job_id: str, acting_id: str, cover_letter: Optional[str] = None,
                     resume_id: Optional[str] = None) -> Optional[Application]:
        """Apply to an open job, attaching the primary resume unless one is given.

        Returns None when the job does not exist or is no longer active.
        """
        self.applications.ensure_owner(acting_id, candidate_id)
        job = await self.jobs.get_by_id(job_id)
        if job is None or job.status != "active":
            logger.info(f"Job {job_id} is not open for applications")
            return None
        if resume_id is None and self.resumes is not None:
            primary = await self.resumes.get_primary(candidate_id)
            resume_id = primary.id if primary else None
        return await self.applications.create(
            ApplicationCreate(candidate_id=candidate_id, job_id=job_id,
                              resume_id=resume_id, cover_letter=cover_letter),
            acting_id=acting_id,
        )

    async def list_for_candidate(self, candidate_id: str) -> List[ApplicationWithJob]:
        applications = await self.applications.list_for_candidate(candidate_id)
        jobs = await self.jobs.get_many(a.job_id for a in applications)
        return [ApplicationWithJob(application=a, job=jobs.get(a.job_id)) for a in applications]

    async def list_for_job(self, job_id: str) -> List[ApplicationWithCandidate]:
        applications = await self.applications.list_for_job(job_id)
        candidates = await self.candidates.get_many(a.candidate_id for a in applications)
        return [
            ApplicationWithCandidate(application=a, candidate=candidates.get(a.candidate_id))
            for a in applications
        ]
