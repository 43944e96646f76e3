# drkleen/database.py
"""
Async client for the hosted row store.

The store speaks the PostgREST dialect: tables live under ``/rest/v1/<table>``,
filters are query parameters (``email=eq.x``), ``Prefer`` headers ask for the
written rows back or for an exact count, and stored functions are called via
``/rest/v1/rpc/<name>``.
"""
from typing import Any, Dict, List, Mapping, Optional
import logging

import httpx
from fastapi import Depends

from drkleen.config import Settings, get_settings
from drkleen.errors import ErrorCode, UpstreamError, ConflictError

logger = logging.getLogger(__name__)


class StoreError(UpstreamError):
    """The row store answered with a non-2xx status."""

    def __init__(self, message: str, upstream_status: Optional[int] = None):
        super().__init__(
            ErrorCode.DATABASE_ERROR,
            message,
            details=f"HTTP {upstream_status}" if upstream_status else None,
        )
        self.upstream_status = upstream_status


class StoreUnavailable(StoreError):
    """The row store could not be reached at all."""


class StoreConflict(ConflictError):
    """A write violated a uniqueness constraint in the store."""

    def __init__(self, message: str = "Row already exists"):
        super().__init__(ErrorCode.CONFLICT, message)


def eq(value: Any) -> str:
    if isinstance(value, bool):
        return f"eq.{str(value).lower()}"
    return f"eq.{value}"


class RowStore:
    """Thin async wrapper around the row store's REST interface."""

    def __init__(
        self,
        base_url: str,
        service_key: str,
        timeout: float = 15.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.base_url = base_url.rstrip("/")
        self.client = httpx.AsyncClient(
            base_url=f"{self.base_url}/rest/v1",
            timeout=timeout,
            transport=transport,
            headers={
                "Authorization": f"Bearer {service_key}",
                "apikey": service_key,
                "Content-Type": "application/json",
                "Accept": "application/json",
            },
        )

    async def close(self):
        await self.client.aclose()

    async def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Mapping[str, Any]] = None,
        json: Any = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        try:
            response = await self.client.request(
                method, path, params=params, json=json, headers=headers
            )
        except httpx.RequestError as e:
            logger.error(f"Row store unreachable ({method} {path}): {e.__class__.__name__}")
            raise StoreUnavailable("Unable to connect to database")

        if response.status_code == 409:
            logger.warning(f"Row store conflict on {method} {path}")
            raise StoreConflict()
        if response.is_error:
            logger.error(f"Row store error {response.status_code} on {method} {path}: {response.text[:200]}")
            raise StoreError(
                f"Database request failed: {response.reason_phrase}",
                upstream_status=response.status_code,
            )
        return response

    @staticmethod
    def _rows(response: httpx.Response) -> List[Dict[str, Any]]:
        if not response.content:
            return []
        data = response.json()
        if isinstance(data, list):
            return data
        return [data] if data else []

    async def select(
        self,
        table: str,
        filters: Optional[Mapping[str, Any]] = None,
        *,
        columns: str = "*",
        order: Optional[str] = None,
        limit: Optional[int] = None,
        offset: Optional[int] = None,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"select": columns}
        params.update(filters or {})
        if order:
            params["order"] = order
        if limit is not None:
            params["limit"] = limit
        if offset is not None:
            params["offset"] = offset
        response = await self._request("GET", f"/{table}", params=params)
        return self._rows(response)

    async def select_one(self, table: str, filters: Mapping[str, Any]) -> Optional[Dict[str, Any]]:
        rows = await self.select(table, filters, limit=1)
        return rows[0] if rows else None

    async def insert(self, table: str, values: Dict[str, Any]) -> Dict[str, Any]:
        response = await self._request(
            "POST", f"/{table}", json=values,
            headers={"Prefer": "return=representation"},
        )
        rows = self._rows(response)
        if not rows:
            raise StoreError(f"Insert into {table} returned no row")
        return rows[0]

    async def update(
        self, table: str, filters: Mapping[str, Any], values: Dict[str, Any]
    ) -> List[Dict[str, Any]]:
        response = await self._request(
            "PATCH", f"/{table}", params=filters, json=values,
            headers={"Prefer": "return=representation"},
        )
        return self._rows(response)

    async def delete(self, table: str, filters: Mapping[str, Any]) -> None:
        if not filters:
            raise ValueError("Refusing to delete without a filter")
        await self._request("DELETE", f"/{table}", params=filters)

    async def count(self, table: str, filters: Optional[Mapping[str, Any]] = None) -> int:
        params: Dict[str, Any] = {"select": "id"}
        params.update(filters or {})
        response = await self._request(
            "HEAD", f"/{table}", params=params,
            headers={"Prefer": "count=exact"},
        )
        content_range = response.headers.get("content-range", "")
        _, _, total = content_range.partition("/")
        try:
            return int(total)
        except ValueError:
            logger.error(f"Row store count on {table} returned an unreadable Content-Range: {content_range!r}")
            raise StoreError(f"Could not read row count for {table}", upstream_status=response.status_code)

    async def rpc(self, function: str, args: Dict[str, Any]) -> List[Dict[str, Any]]:
        response = await self._request("POST", f"/rpc/{function}", json=args)
        return self._rows(response)

    async def ping(self) -> bool:
        try:
            await self._request("GET", "/")
            return True
        except StoreError:
            return False


async def get_store(settings: Settings = Depends(get_settings)):
    store = RowStore(
        settings.STORE_URL,
        settings.STORE_SERVICE_KEY,
        timeout=settings.STORE_TIMEOUT,
    )
    try:
        yield store
    finally:
        await store.close()
