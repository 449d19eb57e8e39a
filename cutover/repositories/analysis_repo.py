import logging
from typing import Any, Dict, List, Optional

from cutover.models.analysis import AiAnalysisResult, JobMatchResult
from cutover.models.user import utcnow
from cutover.repositories.base import RoutedRepository, Store
from cutover.schemas.analysis_schema import AiAnalysis, JobMatch
from cutover.translators.analysis_translator import analysis_translator, job_match_translator

logger = logging.getLogger(__name__)

DEFAULT_MATCH_THRESHOLD = 70


class AnalysisRepository(RoutedRepository):
    family = "ai_analyses"
    stores = (Store(AiAnalysisResult, "candidate_ai_analysis", analysis_translator),)
    owner_field = "candidate_id"
    legacy_tables = ("ai_analysis_results",)

    async def list_for_candidate(self, candidate_id: str) -> List[AiAnalysis]:
        return await self.list_where(candidate_id=candidate_id)

    async def latest_for_candidate(self, candidate_id: str) -> Optional[AiAnalysis]:
        analyses = await self.list_for_candidate(candidate_id)
        if not analyses:
            return None
        return max(analyses, key=lambda a: a.updated_at or a.created_at or utcnow())

    async def clear_for_candidate(self, candidate_id: str, acting_id: str) -> int:
        """Delete every analysis of the candidate; returns how many were removed."""
        self.ensure_owner(acting_id, candidate_id)
        removed = 0
        for analysis in await self.list_for_candidate(candidate_id):
            if await self.delete(analysis.id, acting_id=acting_id):
                removed += 1
        logger.info(f"Cleared {removed} analyses for candidate {candidate_id}")
        await self._audit("clear_analysis", "success", user=acting_id, entity=candidate_id,
                          details=f"{removed} removed")
        return removed


class JobMatchRepository(RoutedRepository):
    family = "job_matches"
    stores = (Store(JobMatchResult, "job_matches", job_match_translator),)
    owner_field = "candidate_id"
    legacy_tables = ("job_match_results",)

    async def get_for_candidate_and_job(self, candidate_id: str, job_id: str) -> Optional[JobMatch]:
        found = await self.list_where(candidate_id=candidate_id, job_id=job_id)
        return found[0] if found else None

    async def list_for_candidate(self, candidate_id: str) -> List[JobMatch]:
        return await self.list_where(candidate_id=candidate_id)

    async def count_for_candidate(self, candidate_id: str, threshold: int = DEFAULT_MATCH_THRESHOLD) -> int:
        """Matches scoring at least `threshold`, clamped to 0-100."""
        threshold = max(0, min(100, threshold))
        return sum(1 for match in await self.list_for_candidate(candidate_id) if match.overall_score >= threshold)

    async def record(self, candidate_id: str, job_id: str, overall_score: int,
                     breakdown: Optional[Dict[str, Any]] = None, reasoning: Optional[str] = None) -> JobMatch:
        """Store the match score for a candidate and job, replacing an earlier one."""
        values = {
            "overall_score": overall_score,
            "breakdown": breakdown or {},
            "reasoning": reasoning,
            "analyzed_at": utcnow(),
        }
        existing = await self.get_for_candidate_and_job(candidate_id, job_id)
        if existing is not None:
            logger.info(f"Rescoring match {existing.id}: {existing.overall_score} -> {overall_score}")
            return await self.update(existing.id, values)
        return await self.create({**values, "candidate_id": candidate_id, "job_id": job_id})
