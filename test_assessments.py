import asyncio
from datetime import datetime, timezone

import pytest

from cutover.core.errors import ImmutableRecord
from cutover.models import DiscPersonalitySession, TypingHeroSession, User
from cutover.schemas.assessment_schema import AssessmentCreate

STARTED = datetime(2025, 4, 1, 10, 0, tzinfo=timezone.utc)


def test_sessions_are_written_to_their_kind_table(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, User(id="c1", email="ana@example.com"))
        assessments = make_repositories(session_factory)["assessments"]
        disc = await assessments.create(AssessmentCreate(
            candidate_id="c1", kind="disc", started_at=STARTED, duration_seconds=300, score=80.0,
            results={"primary_type": "D", "d_score": 45.0},
        ))
        typing = await assessments.create(AssessmentCreate(
            candidate_id="c1", kind="typing", duration_seconds=60.0, score=55.0,
            results={"points": 700, "difficulty_level": "pro"}, xp_earned=30,
        ))
        async with session_factory() as session:
            disc_row = await session.get(DiscPersonalitySession, disc.id)
            typing_row = await session.get(TypingHeroSession, typing.id)
        return disc, typing, disc_row, typing_row, await assessments.get_by_id(typing.id)

    disc, typing, disc_row, typing_row, fetched = run_legacy(scenario)
    assert (disc_row.primary_type, disc_row.confidence_score) == ("D", 80.0)
    assert (typing_row.score, typing_row.wpm, typing_row.elapsed_time) == (700, 55.0, 60.0)
    assert disc.kind == "disc"
    assert disc.started_at == STARTED
    assert fetched.kind == "typing"
    assert fetched.results["points"] == 700
    # the legacy tables keep no xp
    assert fetched.xp_earned == 0


def test_progress_on_legacy(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(
            session_factory,
            User(id="c1", email="ana@example.com"),
            DiscPersonalitySession(id="d1", user_id="c1"),
            TypingHeroSession(id="t1", user_id="c1"),
            TypingHeroSession(id="t2", user_id="c1"),
            TypingHeroSession(id="t3", user_id="c1", session_status="abandoned"),
        )
        assessments = make_repositories(session_factory)["assessments"]
        return await assessments.progress("c1"), await assessments.list_for_candidate("c1", kind="typing")

    progress, typing = run_legacy(scenario)
    assert progress.completed == {"disc": 1, "typing": 2}
    assert progress.total_xp == 0
    assert {s.id for s in typing} == {"t1", "t2", "t3"}


def test_progress_on_service(fake_service, make_repositories):
    fake_service.tables["candidates"].append({"id": "c1", "email": "ana@example.com"})
    fake_service.tables["candidate_disc_assessments"].append(
        {"id": "d1", "candidate_id": "c1", "session_status": "completed", "xp_earned": 50, "results": {}}
    )
    fake_service.tables["candidate_typing_assessments"].extend([
        {"id": "t1", "candidate_id": "c1", "session_status": "completed", "xp_earned": 30},
        {"id": "t2", "candidate_id": "c1", "session_status": "in_progress", "xp_earned": 25},
    ])
    assessments = make_repositories(service=fake_service, migrated=["assessments"])["assessments"]

    progress = asyncio.run(assessments.progress("c1"))
    assert progress.completed == {"disc": 1, "typing": 1}
    assert progress.total_xp == 80


def test_sessions_are_append_only(fake_service, make_repositories):
    fake_service.tables["candidates"].append({"id": "c1", "email": "ana@example.com"})
    assessments = make_repositories(service=fake_service, migrated=["assessments"])["assessments"]

    async def scenario():
        created = await assessments.create({"candidate_id": "c1", "kind": "disc", "score": 70.0})
        with pytest.raises(ImmutableRecord):
            await assessments.update(created.id, {"score": 99.0})
        with pytest.raises(ValueError):
            await assessments.create({"candidate_id": "c1", "kind": "memory"})
        return created, await assessments.get_by_id(created.id)

    created, fetched = asyncio.run(scenario())
    stored = fake_service.tables["candidate_disc_assessments"][0]
    assert "kind" not in stored
    assert stored["score"] == 70.0
    assert fetched == created
