import asyncio

import pytest

from cutover.core.errors import IntegrityViolation
from cutover.models import Agency, JobRequest
from cutover.schemas.job_schema import JobCreate, JobUpdate


def test_job_lifecycle_on_legacy(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, Agency(id="ag1", name="Shore", slug="shore"))
        jobs = make_repositories(session_factory)["jobs"]
        created = await jobs.create(JobCreate(agency_id="ag1", title="Chat Support", work_type="part_time"))
        other = await jobs.create(JobCreate(agency_id="ag1", title="QA Analyst"))
        updated = await jobs.update(created.id, JobUpdate(salary_min=18000, description="Nights"))
        closed = await jobs.soft_delete(other.id)
        async with session_factory() as session:
            row = await session.get(JobRequest, created.id)
        return created, updated, closed, await jobs.list_active(), row

    created, updated, closed, active, row = run_legacy(scenario)
    # the legacy table has no slug column
    assert created.slug == f"job-{created.id}"
    assert created.work_type == "part_time"
    assert row.work_type == "part-time"
    assert (updated.salary_min, updated.description, updated.title) == (18000, "Nights", "Chat Support")
    assert closed.status == "closed"
    assert [job.id for job in active] == [created.id]


def test_job_slug_is_unique_on_service(fake_service, make_repositories):
    fake_service.tables["agencies"].append({"id": "ag1", "name": "Shore", "slug": "shore"})
    jobs = make_repositories(service=fake_service, migrated=["jobs"])["jobs"]

    async def scenario():
        first = await jobs.create(JobCreate(agency_id="ag1", title="Chat Support", slug="chat-support"))
        with pytest.raises(IntegrityViolation) as exc:
            await jobs.create(JobCreate(agency_id="ag1", title="Chat Support II", slug="chat-support"))
        found = await jobs.get_by_unique_key("slug", "chat-support")
        return first, exc.value, found

    first, error, found = asyncio.run(scenario())
    assert error.code == "23505"
    assert found.id == first.id
    assert fake_service.tables["jobs"][0]["currency"] == "PHP"


def test_job_with_unknown_agency_is_rejected(fake_service, make_repositories):
    jobs = make_repositories(service=fake_service, migrated=["jobs"])["jobs"]

    with pytest.raises(IntegrityViolation) as exc:
        asyncio.run(jobs.create(JobCreate(agency_id="missing", title="Agent")))
    assert exc.value.code == "23503"


def test_companies_on_legacy(run_legacy, make_repositories, seed_rows):
    async def scenario(session_factory):
        await seed_rows(session_factory, Agency(id="ag1", name="Shore", slug="shore"))
        repos = make_repositories(session_factory)
        company = await repos["companies"].create({"name": "Acme", "agency_id": "ag1"})
        agency = await repos["agencies"].get_by_unique_key("slug", "shore")
        deleted = await repos["companies"].delete(company.id)
        return company, agency, deleted, await repos["companies"].get_by_id(company.id)

    company, agency, deleted, after = run_legacy(scenario)
    assert company.slug == f"company-{company.id}"
    assert company.agency_id == "ag1"
    assert agency.name == "Shore"
    assert deleted is True
    assert after is None


def test_agency_delete_is_refused_while_referenced(fake_service, make_repositories):
    fake_service.tables["agencies"].append({"id": "ag1", "name": "Shore", "slug": "shore"})
    fake_service.tables["jobs"].append({"id": "j1", "agency_id": "ag1", "title": "Agent", "slug": "agent"})
    agencies = make_repositories(service=fake_service, migrated=["agencies"])["agencies"]

    async def scenario():
        with pytest.raises(IntegrityViolation):
            await agencies.delete("ag1")
        return await agencies.delete("nope")

    assert asyncio.run(scenario()) is False
    assert len(fake_service.tables["agencies"]) == 1
