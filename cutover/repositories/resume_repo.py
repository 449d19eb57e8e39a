import logging
import time
from typing import Any, Dict, List, Optional

from cutover.models.resume import SavedResume
from cutover.repositories.base import RoutedRepository, Store, as_changes
from cutover.schemas.resume_schema import Resume
from cutover.translators.resume_translator import resume_translator

logger = logging.getLogger(__name__)

_last_stamp = 0


def resume_slug(candidate_id: str) -> str:
    """Candidate id plus a strictly increasing millisecond stamp."""
    global _last_stamp
    stamp = max(int(time.time() * 1000), _last_stamp + 1)
    _last_stamp = stamp
    return f"{candidate_id}-{stamp}"


class ResumeRepository(RoutedRepository):
    family = "resumes"
    stores = (Store(SavedResume, "candidate_resumes", resume_translator),)
    owner_field = "candidate_id"
    legacy_tables = ("saved_resumes",)
    unique_keys = ("slug",)

    async def list_for_candidate(self, candidate_id: str) -> List[Resume]:
        return await self.list_where(candidate_id=candidate_id)

    async def get_primary(self, candidate_id: str) -> Optional[Resume]:
        found = await self.list_where(candidate_id=candidate_id, is_primary=True)
        return found[0] if found else None

    async def _demote_primary(self, candidate_id: str, keep: Optional[str] = None) -> None:
        """Clear the primary mark on every other resume of the candidate."""
        for resume in await self.list_where(candidate_id=candidate_id, is_primary=True):
            if resume.id == keep:
                continue
            logger.info(f"Resume {resume.id} is no longer primary for candidate {candidate_id}")
            await super().update(resume.id, {"is_primary": False})

    async def create(self, data: Any) -> Resume:
        values = as_changes(data, exclude_unset=False)
        if values.get("is_primary"):
            await self._demote_primary(values["candidate_id"])
        return await super().create(values)

    async def update(self, entity_id: str, data: Any) -> Optional[Resume]:
        changes = as_changes(data)
        if changes.get("is_primary"):
            current = await self.get_by_id(entity_id)
            if current is None:
                return None
            await self._demote_primary(current.candidate_id, keep=entity_id)
        return await super().update(entity_id, changes)

    async def save_for_candidate(
        self,
        candidate_id: str,
        acting_id: str,
        extracted_data: Optional[Dict[str, Any]] = None,
        generated_data: Optional[Dict[str, Any]] = None,
        original_filename: Optional[str] = None,
        title: Optional[str] = None,
        template_used: Optional[str] = None,
    ) -> Resume:
        """Write the candidate's primary resume in place, or insert it if there is none.

        Only the payloads passed in are written, so saving the generated version
        keeps the extracted one and the other way round.
        """
        self.ensure_owner(acting_id, candidate_id)
        changes = {
            name: value
            for name, value in (
                ("extracted_data", extracted_data),
                ("generated_data", generated_data),
                ("original_filename", original_filename),
                ("title", title),
                ("template_used", template_used),
            )
            if value is not None
        }
        primary = await self.get_primary(candidate_id)
        if primary is not None:
            resume = await self.update(primary.id, changes)
            action = "update_resume"
        else:
            resume = await self.create({
                **changes,
                "candidate_id": candidate_id,
                "slug": resume_slug(candidate_id),
                "is_primary": True,
            })
            action = "create_resume"
        logger.info(f"{action}: {resume.id} for candidate {candidate_id}")
        await self._audit(action, "success", user=acting_id, entity=resume.id)
        return resume
