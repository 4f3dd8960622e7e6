# apps/api/src/core/database.py
import logging
from typing import Any, Mapping, Optional

import httpx
from supabase import AsyncClient, PostgrestAPIError, acreate_client

from src.core.settings import settings

logger = logging.getLogger(__name__)

Record = dict[str, Any]
Where = Mapping[str, Any]


class StoreError(Exception):
    """Raised when the backing store rejects a query or mutation."""

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code


def transport_error(error: httpx.HTTPError) -> StoreError:
    """Network failures and timeouts carry no Postgres error code."""
    logger.warning(f"Supabase request failed: {type(error).__name__}: {error}")
    return StoreError(str(error) or type(error).__name__)


def _apply_where(query: Any, where: Optional[Where]) -> Any:
    """Translate a column -> value mapping into PostgREST filters."""
    for column, value in (where or {}).items():
        if value is None:
            query = query.is_(column, "null")
        elif isinstance(value, (list, tuple, set, frozenset)):
            query = query.in_(column, list(value))
        else:
            query = query.eq(column, value)
    return query


def _apply_exclude(query: Any, exclude: Optional[Where]) -> Any:
    """
    Translate a column -> value mapping into negated PostgREST filters.

    Booleans use IS NOT so NULL rows are kept; None keeps non-null rows.
    """
    for column, value in (exclude or {}).items():
        if value is None:
            query = query.not_.is_(column, "null")
        elif isinstance(value, bool):
            query = query.not_.is_(column, str(value).lower())
        elif isinstance(value, (list, tuple, set, frozenset)):
            query = query.not_.in_(column, list(value))
        else:
            query = query.neq(column, value)
    return query


class Database:
    """
    Async table repository over the Supabase client.

    Every method maps PostgREST and transport failures to StoreError so
    services only ever deal with one error type. Transport failures carry no
    Postgres error code.
    """

    def __init__(self, client: AsyncClient) -> None:
        self.client = client

    async def find_many(
        self,
        table: str,
        where: Optional[Where] = None,
        *,
        exclude: Optional[Where] = None,
        columns: str = "*",
        order_by: Optional[str] = None,
        descending: bool = False,
    ) -> list[Record]:
        try:
            query = _apply_where(self.client.table(table).select(columns), where)
            query = _apply_exclude(query, exclude)
            if order_by:
                query = query.order(order_by, desc=descending)
            response = await query.execute()
        except PostgrestAPIError as e:
            raise StoreError(str(e.message), e.code) from e
        except httpx.HTTPError as e:
            raise transport_error(e) from e
        return list(response.data or [])

    async def find_first(
        self, table: str, where: Where, *, columns: str = "*"
    ) -> Optional[Record]:
        try:
            query = _apply_where(self.client.table(table).select(columns), where)
            response = await query.limit(1).execute()
        except PostgrestAPIError as e:
            raise StoreError(str(e.message), e.code) from e
        except httpx.HTTPError as e:
            raise transport_error(e) from e
        rows = response.data or []
        return rows[0] if rows else None

    async def create(self, table: str, data: Mapping[str, Any]) -> Record:
        try:
            response = await self.client.table(table).insert(dict(data)).execute()
        except PostgrestAPIError as e:
            raise StoreError(str(e.message), e.code) from e
        except httpx.HTTPError as e:
            raise transport_error(e) from e
        rows = response.data or []
        return rows[0] if rows else dict(data)

    async def upsert(
        self, table: str, data: Mapping[str, Any], on_conflict: str
    ) -> Record:
        try:
            response = (
                await self.client.table(table)
                .upsert(dict(data), on_conflict=on_conflict)
                .execute()
            )
        except PostgrestAPIError as e:
            raise StoreError(str(e.message), e.code) from e
        except httpx.HTTPError as e:
            raise transport_error(e) from e
        rows = response.data or []
        return rows[0] if rows else dict(data)

    async def update(
        self, table: str, where: Where, data: Mapping[str, Any]
    ) -> list[Record]:
        try:
            query = _apply_where(self.client.table(table).update(dict(data)), where)
            response = await query.execute()
        except PostgrestAPIError as e:
            raise StoreError(str(e.message), e.code) from e
        except httpx.HTTPError as e:
            raise transport_error(e) from e
        return list(response.data or [])

    async def delete(self, table: str, where: Where) -> None:
        if not where:
            raise ValueError("Refusing to delete without a filter")
        try:
            await _apply_where(self.client.table(table).delete(), where).execute()
        except PostgrestAPIError as e:
            raise StoreError(str(e.message), e.code) from e
        except httpx.HTTPError as e:
            raise transport_error(e) from e

    async def rpc(self, function: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        try:
            response = await self.client.rpc(function, dict(params or {})).execute()
        except PostgrestAPIError as e:
            raise StoreError(str(e.message), e.code) from e
        except httpx.HTTPError as e:
            raise transport_error(e) from e
        return response.data


class SupabaseConnection:
    """Holds the service-role client for the lifetime of the application."""

    def __init__(self) -> None:
        self._client: Optional[AsyncClient] = None

    @property
    def is_connected(self) -> bool:
        return self._client is not None

    async def connect(self) -> None:
        if not settings.SUPABASE_URL or not settings.SUPABASE_SERVICE_ROLE_KEY:
            logger.warning("Supabase is not configured; database calls will fail")
            return
        self._client = await acreate_client(
            settings.SUPABASE_URL, settings.SUPABASE_SERVICE_ROLE_KEY
        )

    async def disconnect(self) -> None:
        self._client = None

    @property
    def client(self) -> AsyncClient:
        if self._client is None:
            raise RuntimeError("Supabase client is not connected")
        return self._client


# Global connection shared by request dependencies
supabase_connection = SupabaseConnection()


async def get_db() -> Database:
    """Database dependency for FastAPI dependency injection."""
    return Database(supabase_connection.client)


def is_unique_violation(error: StoreError) -> bool:
    """Postgres reports unique constraint violations as SQLSTATE 23505."""
    return error.code == "23505" or "unique" in (error.message or "").lower()
