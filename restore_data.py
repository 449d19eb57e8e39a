#!/usr/bin/env python3
"""
Restore a backup directory into the hosted backend.

Usage:
    python restore_data.py <backup-directory>

Exits 1 when the directory has no data document, 2 when any family failed
to restore or was missing from the backup.
"""
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from cutover.core.config import settings  # noqa: E402
from cutover.core.errors import BackupNotFound  # noqa: E402
from cutover.core.flags import get_feature_flags  # noqa: E402
from cutover.db.database import AsyncSessionLocal, engine  # noqa: E402
from cutover.db.service_client import create_service_backend  # noqa: E402
from cutover.repositories.registry import build_repositories  # noqa: E402
from cutover.services.logging import EventLog  # noqa: E402
from cutover.services.restore_service import RestoreService, load_backup  # noqa: E402


async def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    if len(sys.argv) < 2:
        print("Usage: python restore_data.py <backup-directory>")
        sys.exit(1)
    try:
        artifact = load_backup(sys.argv[1])
    except BackupNotFound as e:
        print(f"❌ {e}")
        sys.exit(1)

    service = await create_service_backend(settings)
    event_log = EventLog(AsyncSessionLocal)
    repositories = build_repositories(get_feature_flags(), AsyncSessionLocal, service, event_log)
    try:
        report = await RestoreService(repositories, event_log=event_log).restore(artifact)
    finally:
        await engine.dispose()

    print(f"Restore order: {', '.join(report.order)}")
    for family, count in report.restored.items():
        print(f"  ✓ {family}: {count}")
    for family in report.skipped:
        print(f"  - {family}: empty")
    for family, error in report.errors.items():
        print(f"  ❌ {family}: {error}")
    print(f"Total restored: {report.total_restored}")
    if report.errors:
        sys.exit(2)


if __name__ == "__main__":
    asyncio.run(main())
