import logging
from typing import Any, List, Optional

from cutover.core.errors import ImmutableRecord
from cutover.models.assessment import DiscPersonalitySession, TypingHeroSession
from cutover.repositories.base import RoutedRepository, Store
from cutover.schemas.assessment_schema import Assessment, AssessmentProgress
from cutover.translators.assessment_translator import disc_translator, typing_translator

logger = logging.getLogger(__name__)

COMPLETED = "completed"


class AssessmentRepository(RoutedRepository):
    """Append-only assessment sessions, one store per kind."""
    family = "assessments"
    stores = (
        Store(DiscPersonalitySession, "candidate_disc_assessments", disc_translator, kind="disc"),
        Store(TypingHeroSession, "candidate_typing_assessments", typing_translator, kind="typing"),
    )
    legacy_tables = ("disc_personality_sessions", "typing_hero_sessions")
    discriminator = "kind"

    async def update(self, entity_id: str, data: Any):
        raise ImmutableRecord(f"Assessment session {entity_id} is append-only")

    async def list_for_candidate(self, candidate_id: str, kind: Optional[str] = None) -> List[Assessment]:
        sessions = await self.list_where(candidate_id=candidate_id)
        if kind is not None:
            sessions = [s for s in sessions if s.kind == kind]
        return sessions

    async def progress(self, candidate_id: str) -> AssessmentProgress:
        completed = {store.kind: 0 for store in self.stores}
        total_xp = 0
        for session in await self.list_for_candidate(candidate_id):
            if session.session_status != COMPLETED:
                continue
            completed[session.kind] += 1
            total_xp += session.xp_earned
        return AssessmentProgress(candidate_id=candidate_id, completed=completed, total_xp=total_xp)
