"""
Routed repositories.

Every family repository exposes the same canonical CRUD surface. Each call asks
the feature flags which backend owns the family, runs against the legacy ORM
or the hosted service client, and passes rows through the family translator.
Absence is returned as None (False from delete); backend failures come out as
cutover.core.errors types.
"""
import functools
import logging
import uuid
from contextlib import asynccontextmanager
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, FrozenSet, Iterable, List, Mapping, Optional, Sequence, Tuple, Type

from pydantic import BaseModel
from pydantic_core import to_jsonable_python
from sqlalchemy import select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from cutover.core.concurrency import chunked, gather_bounded
from cutover.core.config import settings as default_settings
from cutover.core.errors import BackendUnavailable, IntegrityViolation, OwnershipViolation, ShapeError
from cutover.core.flags import FeatureFlags
from cutover.core.translator import EntityTranslator
from cutover.db.service_client import BACKEND_NAME, ServiceBackend
from cutover.models.user import utcnow

logger = logging.getLogger(__name__)

LEGACY = "legacy"
SERVICE = BACKEND_NAME


@dataclass(frozen=True)
class Store:
    """Where one kind of row lives: legacy ORM model and hosted table."""
    model: Type
    table: str
    translator: EntityTranslator
    kind: Optional[str] = None


def as_changes(data: Any, exclude_unset: bool = True) -> Dict[str, Any]:
    if data is None:
        return {}
    if isinstance(data, BaseModel):
        return data.model_dump(exclude_unset=exclude_unset)
    return dict(data)


def new_id() -> str:
    return str(uuid.uuid4())


def reports_shape_errors(method):
    """Log and audit rows that no longer fit the canonical contract."""
    @functools.wraps(method)
    async def wrapper(self, *args, **kwargs):
        try:
            return await method(self, *args, **kwargs)
        except ShapeError as e:
            logger.error(f"{e} (needs backfill)")
            try:
                await self._audit("translate_row", "backfill_required", details=str(e), entity=e.entity_id)
            except BackendUnavailable as audit_error:
                logger.error(f"Could not audit backfill for {e.entity_id}: {audit_error}")
            raise
    return wrapper


class RoutedRepository:
    family: str = ""
    stores: Tuple[Store, ...] = ()
    # legacy tables this family owns, used to derive restore order
    legacy_tables: Tuple[str, ...] = ()
    unique_keys: Tuple[str, ...] = ()
    # canonical field that selects the store when a family has several
    discriminator: Optional[str] = None
    # canonical field naming the candidate who owns a row; deletes check it
    owner_field: Optional[str] = None

    def __init__(self, flags: FeatureFlags, session_factory=None, service: Optional[ServiceBackend] = None,
                 event_log=None, settings=None):
        self.flags = flags
        self.session_factory = session_factory
        self._service = service
        self.event_log = event_log
        self.settings = settings or default_settings

    # routing

    def route(self) -> str:
        return SERVICE if self.flags.is_migrated(self.family) else LEGACY

    def _backend(self, backend: Optional[str]) -> str:
        return backend or self.route()

    @property
    def translator(self) -> EntityTranslator:
        return self.stores[0].translator

    @property
    def lossy_fields(self) -> FrozenSet[str]:
        lossy = frozenset()
        for store in self.stores:
            lossy |= store.translator.lossy_fields
        return lossy

    @property
    def service(self) -> ServiceBackend:
        if self._service is None:
            raise BackendUnavailable(SERVICE, "service client is not configured")
        return self._service

    @asynccontextmanager
    async def legacy_session(self):
        """Session on the legacy database with driver errors mapped to the taxonomy."""
        if self.session_factory is None:
            raise BackendUnavailable(LEGACY, "legacy session factory is not configured")
        try:
            async with self.session_factory() as session:
                yield session
        except IntegrityError as e:
            logger.error(f"{self.family}: legacy write rejected: {e.orig}")
            code = getattr(e.orig, "sqlstate", None) or getattr(e.orig, "pgcode", None)
            raise IntegrityViolation(LEGACY, str(e.orig), code=code) from e
        except (SQLAlchemyError, OSError) as e:
            logger.error(f"{self.family}: legacy backend error: {e}")
            raise BackendUnavailable(LEGACY, str(e)) from e

    def ensure_owner(self, acting_id: Optional[str], owner_id: str, entity_id: Optional[str] = None):
        if not acting_id or acting_id != owner_id:
            logger.warning(f"{self.family}: {acting_id} tried to modify {entity_id or owner_id}")
            raise OwnershipViolation(acting_id, entity_id or owner_id)

    # legacy hooks, overridden where a family spans several rows

    def legacy_options(self, store: Store) -> Sequence[Any]:
        return ()

    def legacy_scope(self, store: Store) -> Sequence[Any]:
        return ()

    def _legacy_select(self, store: Store):
        stmt = select(store.model)
        for option in self.legacy_options(store):
            stmt = stmt.options(option)
        for clause in self.legacy_scope(store):
            stmt = stmt.where(clause)
        return stmt

    def _legacy_pk(self, store: Store):
        return getattr(store.model, store.translator.legacy_column("id"))

    async def _legacy_fetch(self, session, store: Store, entity_id: str, fresh: bool = False):
        stmt = self._legacy_select(store).where(self._legacy_pk(store) == entity_id)
        if fresh:
            stmt = stmt.execution_options(populate_existing=True)
        result = await session.execute(stmt)
        return result.scalar_one_or_none()

    def _apply_legacy(self, session, obj, payload: Dict[str, Any]) -> None:
        for key, value in payload.items():
            setattr(obj, key, value)

    async def _legacy_insert(self, session, store: Store, values: Dict[str, Any]):
        obj = store.model()
        self._apply_legacy(session, obj, store.translator.to_legacy_write(values))
        session.add(obj)
        return obj

    async def _legacy_remove(self, session, store: Store, obj) -> None:
        await session.delete(obj)

    # translation

    def _to_canonical(self, store: Store, legacy_row):
        return store.translator.to_canonical(legacy_row)

    def _from_service(self, store: Store, row: Mapping[str, Any]):
        return store.translator.from_service_row(row)

    def _store_for(self, values: Mapping[str, Any]) -> Store:
        if self.discriminator is None:
            return self.stores[0]
        kind = values.get(self.discriminator)
        for store in self.stores:
            if store.kind == kind:
                return store
        raise ValueError(f"{self.family}: unknown {self.discriminator} {kind!r}")

    # reads

    @reports_shape_errors
    async def get_by_id(self, entity_id: str, backend: Optional[str] = None):
        if not entity_id:
            return None
        if self._backend(backend) == LEGACY:
            async with self.legacy_session() as session:
                for store in self.stores:
                    row = await self._legacy_fetch(session, store, entity_id)
                    if row is not None:
                        return self._to_canonical(store, row)
            return None
        for store in self.stores:
            rows = await self.service.select(store.table, eq={"id": entity_id}, limit=1)
            if rows:
                return self._from_service(store, rows[0])
        return None

    async def get_by_unique_key(self, key: str, value: Any, backend: Optional[str] = None):
        if key not in self.unique_keys:
            raise ValueError(f"{self.family}: '{key}' is not a unique key")
        if value is None:
            return None
        found = await self.list_where(backend=backend, **{key: value})
        return found[0] if found else None

    @reports_shape_errors
    async def list_where(self, backend: Optional[str] = None, **filters) -> List[Any]:
        """Equality filters on canonical field names."""
        if self._backend(backend) == LEGACY:
            return await self._legacy_list(filters)
        entities = []
        for store in self.stores:
            eq = {
                store.translator.service_column(name): to_jsonable_python(value)
                for name, value in filters.items()
            }
            rows = await self.service.select(store.table, eq=eq, order="created_at")
            entities.extend(self._from_service(store, row) for row in rows)
        return entities

    @reports_shape_errors
    async def list_all(self, created_before: Optional[datetime] = None, backend: Optional[str] = None) -> List[Any]:
        if self._backend(backend) == LEGACY:
            return await self._legacy_list({}, created_before=created_before)
        lte = {"created_at": created_before.isoformat()} if created_before else None
        entities = []
        for store in self.stores:
            rows = await self.service.select(store.table, lte=lte, order="created_at")
            entities.extend(self._from_service(store, row) for row in rows)
        return entities

    async def _legacy_list(self, filters: Mapping[str, Any], created_before: Optional[datetime] = None) -> List[Any]:
        entities = []
        async with self.legacy_session() as session:
            for store in self.stores:
                stmt = self._legacy_select(store)
                # fields stored through a converter are compared after translation
                post = {}
                for name, value in filters.items():
                    field = store.translator.fields.get(name)
                    if field is None:
                        raise ValueError(f"{self.family}: unknown field '{name}'")
                    try:
                        column = store.translator.legacy_column(name)
                    except KeyError:
                        column = None
                    if column is None or field.read or field.write or name in store.translator.derive:
                        post[name] = value
                    else:
                        stmt = stmt.where(getattr(store.model, column) == value)
                if created_before is not None and hasattr(store.model, "created_at"):
                    stmt = stmt.where(store.model.created_at <= created_before)
                if hasattr(store.model, "created_at"):
                    stmt = stmt.order_by(store.model.created_at)
                result = await session.execute(stmt)
                for row in result.scalars().all():
                    entity = self._to_canonical(store, row)
                    if all(_same(getattr(entity, name), value) for name, value in post.items()):
                        entities.append(entity)
        return entities

    @reports_shape_errors
    async def get_many(self, ids: Iterable[str], backend: Optional[str] = None) -> Dict[str, Any]:
        """Batched lookup by id; missing ids are simply absent from the result."""
        ids = list(dict.fromkeys(i for i in ids if i))
        if not ids:
            return {}
        chunks = chunked(ids, self.settings.QUERY_CHUNK_SIZE)
        found: Dict[str, Any] = {}
        if self._backend(backend) == LEGACY:
            # one session cannot run statements concurrently
            async with self.legacy_session() as session:
                for store in self.stores:
                    for chunk in chunks:
                        stmt = self._legacy_select(store).where(self._legacy_pk(store).in_(chunk))
                        result = await session.execute(stmt)
                        for row in result.scalars().all():
                            entity = self._to_canonical(store, row)
                            found[entity.id] = entity
            return found
        for store in self.stores:
            batches = await gather_bounded(
                (self.service.select(store.table, in_={"id": chunk}) for chunk in chunks),
                self.settings.FANOUT_CONCURRENCY,
            )
            for rows in batches:
                for row in rows:
                    entity = self._from_service(store, row)
                    found[entity.id] = entity
        return found

    # writes

    def _prepare_create(self, values: Dict[str, Any]) -> Dict[str, Any]:
        values = dict(values)
        if not values.get("id"):
            values["id"] = new_id()
        now = utcnow()
        for stamp in ("created_at", "updated_at"):
            if stamp in self.translator.fields and not values.get(stamp):
                values[stamp] = now
        return values

    @reports_shape_errors
    async def create(self, data: Any):
        values = self._prepare_create(as_changes(data, exclude_unset=False))
        store = self._store_for(values)
        if self.route() == LEGACY:
            async with self.legacy_session() as session:
                obj = await self._legacy_insert(session, store, values)
                if obj is None:
                    return None
                await session.commit()
                row = await self._legacy_fetch(session, store, values["id"], fresh=True)
                return self._to_canonical(store, row)
        row = await self.service.insert(store.table, store.translator.to_service_write(values))
        return self._from_service(store, row)

    @reports_shape_errors
    async def update(self, entity_id: str, data: Any):
        changes = as_changes(data)
        changes.pop("id", None)
        if "updated_at" in self.translator.fields:
            changes["updated_at"] = utcnow()
        if self.route() == LEGACY:
            async with self.legacy_session() as session:
                for store in self.stores:
                    obj = await self._legacy_fetch(session, store, entity_id)
                    if obj is None:
                        continue
                    self._apply_legacy(session, obj, store.translator.to_legacy_write(changes))
                    await session.commit()
                    row = await self._legacy_fetch(session, store, entity_id, fresh=True)
                    return self._to_canonical(store, row)
            return None
        for store in self.stores:
            rows = await self.service.update(
                store.table, store.translator.to_service_write(changes), eq={"id": entity_id}
            )
            if rows:
                return self._from_service(store, rows[0])
        return None

    async def delete(self, entity_id: str, acting_id: Optional[str] = None) -> bool:
        if self.owner_field is not None:
            entity = await self.get_by_id(entity_id)
            if entity is None:
                return False
            self.ensure_owner(acting_id, getattr(entity, self.owner_field), entity_id)
        if self.route() == LEGACY:
            async with self.legacy_session() as session:
                for store in self.stores:
                    obj = await self._legacy_fetch(session, store, entity_id)
                    if obj is None:
                        continue
                    await self._legacy_remove(session, store, obj)
                    await session.commit()
                    return True
            return False
        for store in self.stores:
            if await self.service.delete(store.table, eq={"id": entity_id}):
                return True
        return False

    async def restore_batch(self, entities: Iterable[Any]) -> int:
        """Upsert canonical entities into the hosted backend, keyed on id."""
        grouped: Dict[str, List[Dict[str, Any]]] = {}
        stores: Dict[str, Store] = {}
        for entity in entities:
            values = as_changes(entity, exclude_unset=False)
            store = self._store_for(values)
            canonical = store.translator.schema.model_validate(values)
            stores[store.table] = store
            grouped.setdefault(store.table, []).append(
                store.translator.to_service_write(canonical.model_dump())
            )
        restored = 0
        for table, rows in grouped.items():
            for batch in chunked(rows, self.settings.RESTORE_BATCH_SIZE):
                await self.service.upsert(table, batch, on_conflict="id")
                restored += len(batch)
        return restored

    async def _audit(self, action: str, status: str, user: Optional[str] = None,
                     details: Optional[str] = None, entity: Optional[str] = None):
        if self.event_log is None:
            return
        await self.event_log.log_major_event(
            action, status, user, details=details, entity=entity,
            source=self.__class__.__name__, family=self.family,
        )


def _same(actual: Any, expected: Any) -> bool:
    return to_jsonable_python(actual) == to_jsonable_python(expected)
