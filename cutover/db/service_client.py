"""
Hosted backend access.

ServiceBackend is the only place that talks to the supabase query builder. It
exposes table-addressed CRUD and turns postgrest/httpx failures into the
layer's own error types.
"""
import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

import httpx
from postgrest.exceptions import APIError
from supabase import AsyncClient, AsyncClientOptions, acreate_client

from cutover.core.config import Settings
from cutover.core.errors import BackendUnavailable, IntegrityViolation

logger = logging.getLogger(__name__)

BACKEND_NAME = "supabase"

# unique, foreign key, not null, check, generated column
INTEGRITY_CODES = {"23505", "23503", "23502", "23514", "428C9"}


class ServiceBackend:
    def __init__(self, client: AsyncClient):
        self.client = client

    async def select(
        self,
        table: str,
        eq: Optional[Mapping[str, Any]] = None,
        in_: Optional[Mapping[str, Iterable[Any]]] = None,
        lte: Optional[Mapping[str, Any]] = None,
        order: Optional[str] = None,
        descending: bool = False,
        limit: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        query = self.client.table(table).select("*")
        query = self._filter(query, eq)
        for column, values in (in_ or {}).items():
            query = query.in_(column, list(values))
        for column, value in (lte or {}).items():
            query = query.lte(column, value)
        if order:
            query = query.order(order, desc=descending)
        if limit is not None:
            query = query.limit(limit)
        response = await self._execute(table, "select", query)
        return response.data or []

    async def insert(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._execute(table, "insert", self.client.table(table).insert(row))
        if not response.data:
            # row-level security can hide the row it just accepted
            logger.error(f"{BACKEND_NAME} insert on {table} returned no row")
            raise BackendUnavailable(BACKEND_NAME, f"insert on {table} returned no row")
        return response.data[0]

    async def upsert(self, table: str, rows: List[Dict[str, Any]], on_conflict: str = "id") -> List[Dict[str, Any]]:
        query = self.client.table(table).upsert(rows, on_conflict=on_conflict)
        response = await self._execute(table, "upsert", query)
        return response.data or []

    async def update(self, table: str, values: Dict[str, Any], eq: Mapping[str, Any]) -> List[Dict[str, Any]]:
        query = self._filter(self.client.table(table).update(values), eq)
        response = await self._execute(table, "update", query)
        return response.data or []

    async def delete(self, table: str, eq: Mapping[str, Any]) -> List[Dict[str, Any]]:
        query = self._filter(self.client.table(table).delete(), eq)
        response = await self._execute(table, "delete", query)
        return response.data or []

    @staticmethod
    def _filter(query, eq: Optional[Mapping[str, Any]]):
        for column, value in (eq or {}).items():
            if value is None:
                query = query.is_(column, "null")
            else:
                query = query.eq(column, value)
        return query

    async def _execute(self, table: str, action: str, query):
        try:
            return await query.execute()
        except APIError as e:
            logger.error(f"{BACKEND_NAME} {action} on {table} failed: {e.code} {e.message}")
            if e.code in INTEGRITY_CODES:
                raise IntegrityViolation(BACKEND_NAME, e.message or str(e), code=e.code) from e
            raise BackendUnavailable(BACKEND_NAME, f"{e.code}: {e.message}") from e
        except (httpx.HTTPError, OSError) as e:
            logger.error(f"{BACKEND_NAME} {action} on {table} failed: {e}")
            raise BackendUnavailable(BACKEND_NAME, str(e)) from e


def _client_options() -> AsyncClientOptions:
    return AsyncClientOptions(auto_refresh_token=False, persist_session=False)


async def create_service_backend(settings: Settings) -> ServiceBackend:
    """Admin client on the service-role key; bypasses row-level security."""
    client = await acreate_client(
        settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY, options=_client_options()
    )
    return ServiceBackend(client)


async def create_session_backend(settings: Settings, access_token: str) -> ServiceBackend:
    """Client acting as the user behind `access_token`, subject to row-level security."""
    client = await acreate_client(
        settings.SUPABASE_URL, settings.SUPABASE_ANON_KEY, options=_client_options()
    )
    client.postgrest.auth(access_token)
    return ServiceBackend(client)
