import logging
from typing import Any, List, Optional, Union

from cutover.core.errors import DuplicateApplication, IntegrityViolation, InvalidTransition
from cutover.models.application import Application as ApplicationRow
from cutover.models.user import utcnow
from cutover.repositories.base import RoutedRepository, Store, as_changes
from cutover.schemas.application_schema import (
    ALLOWED_TRANSITIONS, TERMINAL_STATUSES, Application, ApplicationStatus,
)
from cutover.translators.application_translator import application_translator

logger = logging.getLogger(__name__)


class ApplicationRepository(RoutedRepository):
    family = "applications"
    stores = (Store(ApplicationRow, "job_applications", application_translator),)
    owner_field = "candidate_id"
    legacy_tables = ("applications",)

    async def get_for_candidate_and_job(self, candidate_id: str, job_id: str) -> Optional[Application]:
        found = await self.list_where(candidate_id=candidate_id, job_id=job_id)
        return found[0] if found else None

    async def list_for_candidate(self, candidate_id: str) -> List[Application]:
        return await self.list_where(candidate_id=candidate_id)

    async def list_for_job(self, job_id: str) -> List[Application]:
        return await self.list_where(job_id=job_id)

    async def create(self, data: Any, acting_id: Optional[str] = None) -> Application:
        """Submit an application; a second one for the same candidate and job is refused."""
        values = as_changes(data, exclude_unset=False)
        candidate_id, job_id = values["candidate_id"], values["job_id"]
        self.ensure_owner(acting_id, candidate_id)
        if await self.get_for_candidate_and_job(candidate_id, job_id) is not None:
            logger.warning(f"Duplicate application: candidate {candidate_id}, job {job_id}")
            raise DuplicateApplication(candidate_id, job_id)
        values["status"] = ApplicationStatus.SUBMITTED
        values["applied_at"] = values.get("applied_at") or utcnow()
        try:
            application = await super().create(values)
        except IntegrityViolation as e:
            # lost a race with a concurrent submit of the same pair
            if await self.get_for_candidate_and_job(candidate_id, job_id) is not None:
                raise DuplicateApplication(candidate_id, job_id) from e
            raise
        logger.info(f"Application {application.id} submitted by {candidate_id} for job {job_id}")
        await self._audit("create_application", "success", user=acting_id,
                          entity=application.id, details=f"job {job_id}")
        return application

    async def update(self, entity_id: str, data: Any) -> Optional[Application]:
        changes = as_changes(data)
        if "status" in changes:
            raise ValueError("application status changes go through transition()")
        return await super().update(entity_id, changes)

    async def transition(self, application_id: str, new_status: Union[str, ApplicationStatus],
                         acting_id: str) -> Optional[Application]:
        application = await self.get_by_id(application_id)
        if application is None:
            return None
        # ownership is checked before the state machine
        self.ensure_owner(acting_id, application.candidate_id, application_id)
        current = application.status
        if current in TERMINAL_STATUSES:
            logger.warning(f"Application {application_id} is already {current.value}")
            raise InvalidTransition(current.value, str(getattr(new_status, "value", new_status)))
        try:
            requested = ApplicationStatus(new_status)
        except ValueError:
            raise InvalidTransition(current.value, str(new_status))
        if requested not in ALLOWED_TRANSITIONS.get(current, ()):
            logger.warning(f"Rejected transition {current.value} -> {requested.value} for {application_id}")
            raise InvalidTransition(current.value, requested.value)
        updated = await super().update(application_id, {"status": requested})
        logger.info(f"Application {application_id}: {current.value} -> {requested.value}")
        await self._audit("application_status", "success", user=acting_id, entity=application_id,
                          details=f"{current.value} -> {requested.value}")
        return updated

    async def withdraw(self, application_id: str, acting_id: str) -> Optional[Application]:
        return await self.transition(application_id, ApplicationStatus.WITHDRAWN, acting_id)
