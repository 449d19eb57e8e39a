#!/usr/bin/env python3
"""
Compare entities between the legacy and hosted backends before cutover.

Usage:
    python check_consistency.py <family> <id> [<id> ...] [--as <access-token>]

With --as, the hosted side is read as the user behind the access token
(row-level security applies) instead of with the service-role key.
"""
import asyncio
import logging
import sys

from dotenv import load_dotenv

load_dotenv()

from cutover.core.config import settings  # noqa: E402
from cutover.core.flags import get_feature_flags  # noqa: E402
from cutover.db.database import AsyncSessionLocal, engine  # noqa: E402
from cutover.db.service_client import create_service_backend, create_session_backend  # noqa: E402
from cutover.repositories.registry import build_repositories  # noqa: E402
from cutover.services.consistency_service import ConsistencyService  # noqa: E402


async def main():
    logging.basicConfig(level=settings.LOG_LEVEL)
    args = sys.argv[1:]
    token = None
    if "--as" in args:
        index = args.index("--as")
        token = args[index + 1] if index + 1 < len(args) else None
        del args[index:index + 2]
    if len(args) < 2:
        print("Usage: python check_consistency.py <family> <id> [<id> ...] [--as <access-token>]")
        sys.exit(1)
    family, ids = args[0], args[1:]

    if token:
        service = await create_session_backend(settings, token)
    else:
        service = await create_service_backend(settings)
    repositories = build_repositories(get_feature_flags(), AsyncSessionLocal, service)
    if family not in repositories:
        print(f"Unknown family '{family}'. Choose from: {', '.join(repositories)}")
        sys.exit(1)
    try:
        reports = await ConsistencyService(repositories).compare_many(ids, family)
    finally:
        await engine.dispose()

    inconsistent = 0
    for report in reports:
        if report.is_consistent:
            print(f"✓ {family} {report.entity_id}")
            continue
        inconsistent += 1
        print(f"❌ {family} {report.entity_id} (legacy found: {report.legacy_found}, "
              f"hosted found: {report.service_found})")
        for side, error in (("legacy", report.legacy_error), ("hosted", report.service_error)):
            if error:
                print(f"    {side} row needs backfill: {error}")
        for diff in report.differences:
            print(f"    {diff.field}: legacy={diff.legacy!r} hosted={diff.service!r}")
    print(f"{len(reports) - inconsistent}/{len(reports)} consistent")
    sys.exit(1 if inconsistent else 0)


if __name__ == "__main__":
    asyncio.run(main())
