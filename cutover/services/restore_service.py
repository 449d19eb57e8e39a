"""
Replay a backup directory into the hosted backend.

Families are written parents-first in foreign-key order, each as upserts on
id, so a restore can be re-run safely. One family failing does not stop the
rest; the report carries per-family counts and errors.
"""
import json
import logging
import os
from typing import Any, Mapping

from pydantic import ValidationError

from cutover.core.errors import BackupNotFound, DataAccessError
from cutover.repositories.registry import dependency_order
from cutover.schemas.backup_schema import BackupArtifact, BackupMetadata, RestoreReport
from cutover.services.backup_service import DATA_FILE, METADATA_FILE

logger = logging.getLogger(__name__)


def load_backup(directory: str) -> BackupArtifact:
    data_path = os.path.join(directory, DATA_FILE)
    metadata_path = os.path.join(directory, METADATA_FILE)
    if not os.path.isfile(data_path):
        raise BackupNotFound(data_path)
    with open(data_path, encoding="utf-8") as fh:
        data = json.load(fh)
    metadata = None
    if os.path.isfile(metadata_path):
        with open(metadata_path, encoding="utf-8") as fh:
            metadata = BackupMetadata.model_validate(json.load(fh))
    else:
        logger.warning(f"No metadata in {directory}; restoring without count checks")
    return BackupArtifact(
        directory=directory, data_path=data_path, metadata_path=metadata_path,
        data=data, metadata=metadata,
    )


class RestoreService:
    def __init__(self, repositories: Mapping[str, Any], event_log=None):
        self.repositories = repositories
        self.event_log = event_log

    async def restore_from(self, directory: str) -> RestoreReport:
        return await self.restore(load_backup(directory))

    async def restore(self, artifact: BackupArtifact) -> RestoreReport:
        order = dependency_order(artifact.data.keys(), self.repositories)
        report = RestoreReport(order=order)
        expected_counts = artifact.metadata.record_counts if artifact.metadata else {}
        backup_errors = artifact.metadata.errors if artifact.metadata else {}

        for family in order:
            rows = artifact.data.get(family) or []
            if family in backup_errors:
                # the family was written empty when its backup read failed
                report.errors[family] = f"backup incomplete: {backup_errors[family]}"
                logger.error(f"Restore {family}: {report.errors[family]}")
                continue
            repo = self.repositories.get(family)
            if repo is None:
                report.errors[family] = f"no repository registered for '{family}'"
                logger.error(f"Restore {family}: {report.errors[family]}")
                continue
            expected = expected_counts.get(family)
            if expected is not None and expected != len(rows):
                report.errors[family] = f"metadata lists {expected} records, data has {len(rows)}"
                logger.error(f"Restore {family}: {report.errors[family]}")
                continue
            if not rows:
                report.skipped.append(family)
                continue
            try:
                report.restored[family] = await repo.restore_batch(rows)
            except (DataAccessError, ValidationError) as e:
                report.errors[family] = str(e)
                logger.error(f"Restore {family} failed: {e}")
                continue
            logger.info(f"Restore {family}: {report.restored[family]} records")

        for family, message in backup_errors.items():
            if family not in report.errors:
                report.errors[family] = f"backup incomplete: {message}"
                logger.error(f"Restore {family}: {report.errors[family]}")

        logger.info(f"Restore finished: {report.total_restored} records, {len(report.errors)} failed families")
        if self.event_log is not None:
            await self.event_log.log_major_event(
                "restore", "partial" if report.errors else "success",
                details=f"{report.total_restored} records from {artifact.directory}",
                entity=artifact.directory, source=self.__class__.__name__,
            )
        return report
