import asyncio
from datetime import datetime, timezone
from unittest.mock import AsyncMock, Mock

import pytest
from sqlalchemy import select

from cutover.core.errors import (
    BackendUnavailable, DuplicateApplication, IntegrityViolation, InvalidTransition, OwnershipViolation,
    ShapeError,
)
from cutover.models import Application as ApplicationRow, JobRequest, Log, SavedResume, User
from cutover.schemas.application_schema import ApplicationCreate, ApplicationStatus
from cutover.services.application_service import ApplicationService
from cutover.services.logging import EventLog


def legacy_people_and_jobs():
    return [
        User(id="c1", email="ana@example.com", first_name="Ana"),
        User(id="c2", email="ben@example.com", first_name="Ben"),
        JobRequest(id="j1", job_title="Chat Support", status="active"),
        JobRequest(id="j2", job_title="Team Lead", status="closed"),
    ]


def seed_service(fake_service):
    fake_service.tables["candidates"].extend([
        {"id": "c1", "email": "ana@example.com", "first_name": "Ana"},
        {"id": "c2", "email": "ben@example.com", "first_name": "Ben"},
    ])
    fake_service.tables["jobs"].append({"id": "j1", "title": "Chat Support", "slug": "job-j1"})


def test_duplicate_application_is_refused(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, *legacy_people_and_jobs())
        applications = make_repositories(session_factory)["applications"]
        first = await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        with pytest.raises(DuplicateApplication):
            await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        return first, await applications.list_for_candidate("c1")

    first, stored = run_legacy(scenario)
    assert first.status == ApplicationStatus.SUBMITTED
    assert first.applied_at == first.created_at
    assert [a.id for a in stored] == [first.id]


def test_concurrent_duplicate_caught_by_unique_constraint(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, *legacy_people_and_jobs())
        applications = make_repositories(session_factory)["applications"]
        existing = await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        # the pre-insert lookup misses the row written by the other request
        applications.get_for_candidate_and_job = AsyncMock(side_effect=[None, existing])
        with pytest.raises(DuplicateApplication):
            await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        async with session_factory() as session:
            return (await session.execute(select(ApplicationRow))).scalars().all()

    assert len(run_legacy(scenario)) == 1


def test_duplicate_application_on_service(fake_service, make_repositories):
    seed_service(fake_service)
    applications = make_repositories(service=fake_service, migrated=["applications"])["applications"]

    async def scenario():
        await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        with pytest.raises(DuplicateApplication):
            await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        applications.get_for_candidate_and_job = AsyncMock(return_value=None)
        with pytest.raises(IntegrityViolation) as exc:
            await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        return exc.value

    error = asyncio.run(scenario())
    assert error.code == "23505"
    assert len(fake_service.tables["job_applications"]) == 1


def test_transitions_follow_the_state_machine(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, *legacy_people_and_jobs())
        applications = make_repositories(session_factory)["applications"]
        app = await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        with pytest.raises(InvalidTransition):
            await applications.transition(app.id, "hired", acting_id="c1")
        await applications.transition(app.id, ApplicationStatus.UNDER_REVIEW, acting_id="c1")
        async with session_factory() as session:
            legacy_status = (await session.get(ApplicationRow, app.id)).status
        await applications.transition(app.id, "offered", acting_id="c1")
        hired = await applications.transition(app.id, "hired", acting_id="c1")
        with pytest.raises(InvalidTransition) as exc:
            await applications.transition(app.id, "withdrawn", acting_id="c1")
        after = await applications.get_by_id(app.id)
        return legacy_status, hired, exc.value, after

    legacy_status, hired, error, after = run_legacy(scenario)
    assert legacy_status == "for verification"
    assert hired.status == ApplicationStatus.HIRED
    assert (error.current, error.requested) == ("hired", "withdrawn")
    assert after.status == ApplicationStatus.HIRED


def test_ownership_is_checked_before_the_state_machine(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, *legacy_people_and_jobs())
        applications = make_repositories(session_factory)["applications"]
        app = await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        await applications.withdraw(app.id, acting_id="c1")
        with pytest.raises(OwnershipViolation):
            await applications.transition(app.id, "under_review", acting_id="c2")
        with pytest.raises(InvalidTransition):
            await applications.withdraw(app.id, acting_id="c1")
        with pytest.raises(InvalidTransition):
            await applications.transition(app.id, "interviewing", acting_id="c1")
        with pytest.raises(ValueError):
            await applications.update(app.id, {"status": "submitted"})
        missing = await applications.transition("nope", "withdrawn", acting_id="c1")
        return await applications.get_by_id(app.id), missing

    stored, missing = run_legacy(scenario)
    assert stored.status == ApplicationStatus.WITHDRAWN
    assert missing is None


def test_transitions_on_service(fake_service, make_repositories):
    seed_service(fake_service)
    applications = make_repositories(service=fake_service, migrated=["applications"])["applications"]

    async def scenario():
        app = await applications.create(ApplicationCreate(candidate_id="c2", job_id="j1"), acting_id="c2")
        await applications.transition(app.id, "under_review", acting_id="c2")
        return await applications.transition(app.id, "rejected", acting_id="c2")

    assert asyncio.run(scenario()).status == ApplicationStatus.REJECTED
    assert fake_service.tables["job_applications"][0]["status"] == "rejected"


def test_application_events_are_audited(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, *legacy_people_and_jobs())
        applications = make_repositories(session_factory, event_log=EventLog(session_factory))["applications"]
        app = await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"), acting_id="c1")
        await applications.transition(app.id, "under_review", acting_id="c1")
        async with session_factory() as session:
            logs = (await session.execute(select(Log).order_by(Log.id))).scalars().all()
        return app, logs

    app, logs = run_legacy(scenario)
    assert [log.action for log in logs] == ["create_application", "application_status"]
    assert logs[1].details == "submitted -> under_review"
    assert logs[1].entity == app.id
    assert logs[1].family == "applications"


def test_unreadable_service_row_is_flagged_for_backfill(fake_service, run_legacy, make_repositories):
    fake_service.tables["job_applications"].append(
        {"id": "a9", "candidate_id": "c1", "job_id": "j1", "status": "interview_scheduled"}
    )

    async def scenario(session_factory):
        applications = make_repositories(session_factory, service=fake_service, migrated=["applications"],
                                         event_log=EventLog(session_factory))["applications"]
        with pytest.raises(ShapeError) as exc:
            await applications.get_by_id("a9")
        async with session_factory() as session:
            log = (await session.execute(select(Log))).scalar_one()
        return exc.value, log

    error, log = run_legacy(scenario)
    assert error.field == "status"
    assert (log.status, log.entity) == ("backfill_required", "a9")


def test_backfill_audit_failure_keeps_the_shape_error(fake_service, make_repositories):
    fake_service.tables["job_applications"].append(
        {"id": "a9", "candidate_id": "c1", "job_id": "j1", "status": "interview_scheduled"}
    )
    event_log = Mock()
    event_log.log_major_event = AsyncMock(side_effect=BackendUnavailable("legacy", "audit log write failed"))
    applications = make_repositories(service=fake_service, migrated=["applications"],
                                     event_log=event_log)["applications"]

    with pytest.raises(ShapeError) as exc:
        asyncio.run(applications.get_by_id("a9"))
    assert exc.value.entity_id == "a9"
    event_log.log_major_event.assert_awaited_once()


def test_enrichment_uses_one_batched_lookup(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(
            session_factory,
            *legacy_people_and_jobs(),
            JobRequest(id="j3", job_title="QA", status="active"),
            SavedResume(id="r1", user_id="c1", resume_slug="c1-1", is_primary=True),
        )
        repos = make_repositories(session_factory)
        service = ApplicationService.from_repositories(repos)
        first = await service.submit("c1", "j1", acting_id="c1")
        await service.submit("c1", "j3", acting_id="c1")
        closed = await service.submit("c1", "j2", acting_id="c1")
        await service.submit("c2", "j1", acting_id="c2")
        repos["jobs"].get_many = AsyncMock(side_effect=repos["jobs"].get_many)
        for_candidate = await service.list_for_candidate("c1")
        for_job = await service.list_for_job("j1")
        return first, closed, for_candidate, for_job, repos["jobs"].get_many

    first, closed, for_candidate, for_job, get_many = run_legacy(scenario)
    assert first.resume_id == "r1"
    assert closed is None
    get_many.assert_awaited_once()
    assert sorted(item.job.title for item in for_candidate) == ["Chat Support", "QA"]
    assert sorted(item.candidate.first_name for item in for_job) == ["Ana", "Ben"]


def test_service_get_many_is_chunked(fake_service, make_repositories):
    created = datetime(2025, 1, 1, tzinfo=timezone.utc).isoformat()
    for i in range(5):
        fake_service.tables["candidates"].append({"id": f"c{i}", "email": f"{i}@example.com", "created_at": created})
    candidates = make_repositories(service=fake_service, migrated=["candidates"])["candidates"]

    found = asyncio.run(candidates.get_many(["c0", "c1", "c2", "c3", "c4", "missing", "c0"]))
    assert sorted(found) == ["c0", "c1", "c2", "c3", "c4"]
    # chunk size 2 over six distinct ids
    assert fake_service.calls.count(("candidates", "select")) == 3


def test_only_the_candidate_can_apply_or_delete(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, *legacy_people_and_jobs())
        repos = make_repositories(session_factory)
        applications = repos["applications"]
        service = ApplicationService.from_repositories(repos)
        with pytest.raises(OwnershipViolation):
            await service.submit("c1", "j1", acting_id="c2")
        with pytest.raises(OwnershipViolation):
            await applications.create(ApplicationCreate(candidate_id="c1", job_id="j1"))
        app = await service.submit("c1", "j1", acting_id="c1")
        with pytest.raises(OwnershipViolation):
            await applications.delete(app.id, acting_id="c2")
        kept = await applications.get_by_id(app.id)
        deleted = await applications.delete(app.id, acting_id="c1")
        return kept, deleted, await applications.delete(app.id, acting_id="c1")

    kept, deleted, again = run_legacy(scenario)
    assert kept is not None
    assert deleted is True
    assert again is False
