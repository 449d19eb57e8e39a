"""
Snapshot of every routed family into a timestamped backup directory.

Each family is read through its repository, so the snapshot comes from
whichever backend currently owns it. A family that fails to read is recorded
in the metadata errors with a zero count; the other families still land.
"""
import json
import logging
import os
from datetime import datetime
from typing import Any, Dict, Iterable, Mapping, Optional, Union

from cutover.core.config import settings as default_settings
from cutover.core.errors import DataAccessError
from cutover.models.user import utcnow
from cutover.repositories.registry import dependency_order
from cutover.schemas.backup_schema import BackupArtifact, BackupMetadata
from cutover.schemas.common import as_utc

logger = logging.getLogger(__name__)

DATA_FILE = "migrated-data-backup.json"
METADATA_FILE = "backup-metadata.json"


def parse_cutoff(value: Union[None, str, datetime]) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, str):
        value = datetime.fromisoformat(value)
    return as_utc(value)


def write_json(path: str, document: Any) -> None:
    """Write next to the target and rename, so readers never see a partial file."""
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as fh:
        json.dump(document, fh, indent=2, ensure_ascii=False)
    os.replace(tmp_path, path)


class BackupService:
    def __init__(self, repositories: Mapping[str, Any], settings=None, event_log=None):
        self.repositories = repositories
        self.settings = settings or default_settings
        self.event_log = event_log

    async def snapshot(self, families: Optional[Iterable[str]] = None,
                       cutoff_date: Union[None, str, datetime] = None,
                       directory: Optional[str] = None) -> BackupArtifact:
        started = utcnow()
        cutoff = parse_cutoff(cutoff_date if cutoff_date is not None else self.settings.BACKUP_CUTOFF_DATE)
        order = dependency_order(families or self.repositories.keys(), self.repositories)

        data: Dict[str, list] = {}
        counts: Dict[str, int] = {}
        errors: Dict[str, str] = {}
        for family in order:
            repo = self.repositories.get(family)
            data[family] = []
            counts[family] = 0
            if repo is None:
                errors[family] = f"no repository registered for '{family}'"
                logger.error(f"Backup {family}: {errors[family]}")
                continue
            try:
                entities = await repo.list_all(created_before=cutoff)
            except DataAccessError as e:
                errors[family] = str(e)
                logger.error(f"Backup {family} failed: {e}")
                continue
            data[family] = [entity.model_dump(mode="json") for entity in entities]
            counts[family] = len(entities)
            logger.info(f"Backup {family}: {counts[family]} records from {repo.route()}")

        metadata = BackupMetadata(
            backup_date=started.isoformat(),
            cutoff_date=cutoff.isoformat() if cutoff else None,
            tables=order,
            record_counts=counts,
            errors=errors,
        )
        directory = directory or os.path.join(
            self.settings.BACKUP_ROOT, started.strftime("%Y-%m-%d_%H%M%S")
        )
        os.makedirs(directory, exist_ok=True)
        data_path = os.path.join(directory, DATA_FILE)
        metadata_path = os.path.join(directory, METADATA_FILE)
        write_json(data_path, data)
        write_json(metadata_path, metadata.model_dump())

        total = sum(counts.values())
        logger.info(f"Backup written to {directory}: {total} records, {len(errors)} failed families")
        if self.event_log is not None:
            await self.event_log.log_major_event(
                "backup", "partial" if errors else "success", details=f"{total} records in {directory}",
                entity=directory, source=self.__class__.__name__,
            )
        return BackupArtifact(
            directory=directory, data_path=data_path, metadata_path=metadata_path,
            data=data, metadata=metadata,
        )
