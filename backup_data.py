#!/usr/bin/env python3
"""
Backup every routed family to a timestamped directory.

Usage:
    python backup_data.py [CUTOFF_DATE] [family ...]

CUTOFF_DATE (ISO date or datetime) limits the snapshot to records created on
or before it. Families default to all of them.
"""
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from cutover.core.config import settings  # noqa: E402
from cutover.core.flags import FAMILIES, get_feature_flags  # noqa: E402
from cutover.db.database import AsyncSessionLocal, engine  # noqa: E402
from cutover.db.service_client import create_service_backend  # noqa: E402
from cutover.repositories.registry import build_repositories  # noqa: E402
from cutover.services.backup_service import BackupService  # noqa: E402
from cutover.services.logging import EventLog  # noqa: E402


async def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    args = sys.argv[1:]
    cutoff = args.pop(0) if args and args[0] not in FAMILIES else None
    families = args or list(FAMILIES)

    service = await create_service_backend(settings) if settings.SUPABASE_URL else None
    event_log = EventLog(AsyncSessionLocal)
    repositories = build_repositories(get_feature_flags(), AsyncSessionLocal, service, event_log)
    try:
        artifact = await BackupService(repositories, event_log=event_log).snapshot(families, cutoff_date=cutoff)
    finally:
        await engine.dispose()

    print(f"Backup written to {artifact.directory}")
    for family, count in artifact.metadata.record_counts.items():
        print(f"  {family}: {count}")
    for family, error in artifact.metadata.errors.items():
        print(f"  {family} FAILED: {error}")


if __name__ == "__main__":
    asyncio.run(main())
