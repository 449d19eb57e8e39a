import logging
from typing import Any, Iterable, List, Mapping, Optional

from cutover.core.concurrency import gather_bounded
from cutover.core.config import settings as default_settings
from cutover.core.errors import ShapeError
from cutover.repositories.base import LEGACY, SERVICE
from cutover.schemas.consistency_schema import DiffReport, FieldDiff

logger = logging.getLogger(__name__)


class ConsistencyService:
    """Reads one entity from both backends and diffs the canonical shapes.

    Cutover validation only; request paths never call this.
    """

    def __init__(self, repositories: Mapping[str, Any], settings=None):
        self.repositories = repositories
        self.settings = settings or default_settings

    async def _read(self, repo, entity_id: str, backend: str):
        """Read one side; a row that fails translation is reported, not raised."""
        try:
            return await repo.get_by_id(entity_id, backend=backend), None
        except ShapeError as e:
            logger.warning(f"{repo.family} {entity_id} on {backend} needs backfill: {e}")
            return None, str(e)

    async def compare(self, entity_id: str, family: str) -> DiffReport:
        repo = self.repositories[family]
        legacy, legacy_error = await self._read(repo, entity_id, LEGACY)
        service, service_error = await self._read(repo, entity_id, SERVICE)
        ignored = repo.lossy_fields
        report = DiffReport(
            family=family,
            entity_id=entity_id,
            legacy_found=legacy is not None or legacy_error is not None,
            service_found=service is not None or service_error is not None,
            ignored=ignored,
            legacy_error=legacy_error,
            service_error=service_error,
        )
        if legacy is None or service is None:
            return report

        left = legacy.model_dump(mode="json")
        right = service.model_dump(mode="json")
        for name, value in left.items():
            if name in ignored or value == right.get(name):
                continue
            report.differences.append(FieldDiff(field=name, legacy=value, service=right.get(name)))
        if report.differences:
            logger.info(f"{family} {entity_id}: {len(report.differences)} fields differ")
        return report

    async def compare_many(self, ids: Iterable[str], family: str,
                           concurrency: Optional[int] = None) -> List[DiffReport]:
        limit = concurrency or self.settings.FANOUT_CONCURRENCY
        return await gather_bounded((self.compare(entity_id, family) for entity_id in ids), limit)
