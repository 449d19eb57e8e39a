from typing import Any, List, Optional

from cutover.models.job import JobRequest
from cutover.repositories.base import RoutedRepository, Store, as_changes, new_id
from cutover.schemas.job_schema import Job
from cutover.translators.job_translator import job_translator


class JobRepository(RoutedRepository):
    family = "jobs"
    stores = (Store(JobRequest, "jobs", job_translator),)
    legacy_tables = ("job_requests",)
    unique_keys = ("slug",)

    async def create(self, data: Any) -> Job:
        values = as_changes(data, exclude_unset=False)
        values["id"] = values.get("id") or new_id()
        values["slug"] = values.get("slug") or f"job-{values['id']}"
        return await super().create(values)

    async def soft_delete(self, job_id: str) -> Optional[Job]:
        """Close the job instead of deleting it; applications keep pointing at it."""
        return await self.update(job_id, {"status": "closed"})

    async def list_active(self) -> List[Job]:
        return await self.list_where(status="active")
