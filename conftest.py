"""
Shared fixtures: a throwaway SQLite legacy database and an in-memory stand-in
for the hosted backend's query builder.
"""
import asyncio
import copy
from datetime import datetime

import httpx
import pytest
from postgrest.exceptions import APIError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine

import cutover.models  # noqa: F401
from cutover.core.config import Settings
from cutover.core.flags import FeatureFlags
from cutover.db.base import Base
from cutover.db.service_client import ServiceBackend
from cutover.repositories.registry import build_repositories

# hosted tables: unique column groups, foreign keys, generated columns
SERVICE_SCHEMA = {
    "agencies": {"unique": [("slug",)], "fk": {}},
    "companies": {"unique": [("slug",)], "fk": {"agency_id": "agencies"}},
    "candidates": {
        "unique": [("email",), ("username",), ("slug",)],
        "fk": {},
        "generated": ("full_name",),
    },
    "jobs": {"unique": [("slug",)], "fk": {"agency_id": "agencies", "company_id": "companies"}},
    "candidate_profiles": {"unique": [("candidate_id",)], "fk": {"candidate_id": "candidates"}},
    "candidate_resumes": {"unique": [("slug",)], "fk": {"candidate_id": "candidates"}},
    "job_applications": {
        "unique": [("candidate_id", "job_id")],
        "fk": {"candidate_id": "candidates", "job_id": "jobs", "resume_id": "candidate_resumes"},
    },
    "candidate_disc_assessments": {"unique": [], "fk": {"candidate_id": "candidates"}},
    "candidate_typing_assessments": {"unique": [], "fk": {"candidate_id": "candidates"}},
    "job_matches": {"unique": [("candidate_id", "job_id")], "fk": {"candidate_id": "candidates", "job_id": "jobs"}},
    "candidate_ai_analysis": {
        "unique": [],
        "fk": {"candidate_id": "candidates", "resume_id": "candidate_resumes"},
    },
}


def _api_error(code, message):
    return APIError({"message": message, "code": code, "hint": None, "details": None})


def _comparable(value):
    if isinstance(value, str):
        try:
            return datetime.fromisoformat(value.replace("Z", "+00:00"))
        except ValueError:
            return value
    return value


class FakeResponse:
    def __init__(self, data):
        self.data = data


class FakeQuery:
    def __init__(self, db, table):
        self.db = db
        self.table = table
        self.action = "select"
        self.payload = None
        self.on_conflict = "id"
        self.filters = []
        self.order_by = None
        self.descending = False
        self.row_limit = None

    def select(self, *columns):
        return self

    def insert(self, row):
        self.action, self.payload = "insert", row
        return self

    def upsert(self, rows, on_conflict="id"):
        self.action, self.payload, self.on_conflict = "upsert", rows, on_conflict
        return self

    def update(self, values):
        self.action, self.payload = "update", values
        return self

    def delete(self):
        self.action = "delete"
        return self

    def eq(self, column, value):
        self.filters.append(lambda row: row.get(column) == value)
        return self

    def is_(self, column, value):
        self.filters.append(lambda row: row.get(column) is None)
        return self

    def in_(self, column, values):
        values = list(values)
        self.filters.append(lambda row: row.get(column) in values)
        return self

    def lte(self, column, value):
        self.filters.append(
            lambda row: row.get(column) is not None and _comparable(row[column]) <= _comparable(value)
        )
        return self

    def order(self, column, desc=False):
        self.order_by, self.descending = column, desc
        return self

    def limit(self, count):
        self.row_limit = count
        return self

    def matches(self, row):
        return all(check(row) for check in self.filters)

    async def execute(self):
        self.db.calls.append((self.table, self.action))
        if self.table in self.db.failing:
            raise httpx.ConnectError(f"connection to {self.table} refused")
        return getattr(self.db, f"_{self.action}")(self)


class FakeSupabase:
    """Just enough of the supabase async client for ServiceBackend."""

    def __init__(self):
        self.tables = {name: [] for name in SERVICE_SCHEMA}
        self.failing = set()
        self.calls = []

    def table(self, name):
        return FakeQuery(self, name)

    def rows(self, table):
        return [self._present(table, row) for row in self.tables[table]]

    # statement handlers

    def _select(self, query):
        rows = [row for row in self.tables[query.table] if query.matches(row)]
        if query.order_by:
            rows.sort(key=lambda r: (r.get(query.order_by) is None, str(r.get(query.order_by))),
                      reverse=query.descending)
        if query.row_limit is not None:
            rows = rows[:query.row_limit]
        return FakeResponse([self._present(query.table, r) for r in rows])

    def _insert(self, query):
        staged = copy.deepcopy(self.tables)
        row = self._checked(query.table, dict(query.payload), staged, None)
        staged[query.table].append(row)
        self.tables = staged
        return FakeResponse([self._present(query.table, row)])

    def _upsert(self, query):
        staged = copy.deepcopy(self.tables)
        written = []
        for incoming in query.payload:
            rows = staged[query.table]
            key = incoming.get(query.on_conflict)
            existing = next((r for r in rows if r.get(query.on_conflict) == key), None)
            if existing is None:
                row = self._checked(query.table, dict(incoming), staged, None)
                rows.append(row)
            else:
                row = self._checked(query.table, {**existing, **incoming}, staged, existing)
                rows[rows.index(existing)] = row
            written.append(row)
        self.tables = staged
        return FakeResponse([self._present(query.table, r) for r in written])

    def _update(self, query):
        staged = copy.deepcopy(self.tables)
        rows = staged[query.table]
        updated = []
        for index, row in enumerate(rows):
            if not query.matches(row):
                continue
            new_row = self._checked(query.table, {**row, **query.payload}, staged, row)
            rows[index] = new_row
            updated.append(new_row)
        self.tables = staged
        return FakeResponse([self._present(query.table, r) for r in updated])

    def _delete(self, query):
        doomed = [row for row in self.tables[query.table] if query.matches(row)]
        for row in doomed:
            for table, spec in SERVICE_SCHEMA.items():
                for column, parent in spec["fk"].items():
                    if parent == query.table and any(r.get(column) == row["id"] for r in self.tables[table]):
                        raise _api_error("23503", f"{table}.{column} still references {row['id']}")
        self.tables[query.table] = [row for row in self.tables[query.table] if row not in doomed]
        return FakeResponse([self._present(query.table, r) for r in doomed])

    # constraints

    def _checked(self, table, row, staged, replacing):
        spec = SERVICE_SCHEMA[table]
        for column in spec.get("generated", ()):
            if column in row and (replacing is None or row[column] != replacing.get(column)):
                raise _api_error("428C9", f'cannot insert a non-DEFAULT value into column "{column}"')
        for columns in spec["unique"]:
            values = tuple(row.get(c) for c in columns)
            if None in values:
                continue
            for other in staged[table]:
                if other is replacing:
                    continue
                if tuple(other.get(c) for c in columns) == values:
                    raise _api_error("23505", f"duplicate key value violates unique constraint on {columns}")
        for column, parent in spec["fk"].items():
            value = row.get(column)
            if value is not None and not any(r.get("id") == value for r in staged[parent]):
                raise _api_error("23503", f"{table}.{column} = {value} is not present in {parent}")
        return row

    def _present(self, table, row):
        row = copy.deepcopy(row)
        if table == "candidates":
            first, last = row.get("first_name") or "", row.get("last_name") or ""
            row["full_name"] = " ".join(p for p in (first.strip(), last.strip()) if p)
        return row


@pytest.fixture
def test_settings():
    return Settings(_env_file=None, QUERY_CHUNK_SIZE=2, FANOUT_CONCURRENCY=2, RESTORE_BATCH_SIZE=2)


@pytest.fixture
def fake_service():
    return FakeSupabase()


@pytest.fixture
def run_legacy(tmp_path):
    """Run an async scenario against a fresh SQLite legacy database.

    The scenario receives a session factory; the engine lives only for the
    duration of one asyncio.run.
    """
    db_path = tmp_path / "legacy.db"

    def run(scenario):
        async def main():
            engine = create_async_engine(f"sqlite+aiosqlite:///{db_path}")
            async with engine.begin() as conn:
                await conn.run_sync(Base.metadata.create_all)
            session_factory = async_sessionmaker(
                bind=engine, class_=AsyncSession, expire_on_commit=False, autoflush=False
            )
            try:
                return await scenario(session_factory)
            finally:
                await engine.dispose()
        return asyncio.run(main())

    return run


@pytest.fixture
def make_repositories(test_settings):
    def make(session_factory=None, service=None, migrated=(), event_log=None):
        flags = FeatureFlags.for_families(migrated)
        backend = ServiceBackend(service) if service is not None else None
        return build_repositories(flags, session_factory, backend, event_log, test_settings)
    return make


async def seed(session_factory, *rows):
    async with session_factory() as session:
        session.add_all(rows)
        await session.commit()


@pytest.fixture
def seed_rows():
    return seed
