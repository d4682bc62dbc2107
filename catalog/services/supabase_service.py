"""Client for the Supabase table API (PostgREST dialect).

Every method is a single request/response round trip. Nothing is cached and
failed calls are not retried; callers surface the error to the user.
"""

import logging
from typing import Any, Dict, List, Optional

import httpx

from catalog.services.http_client import create_async_client

logger = logging.getLogger(__name__)

REST_PATH = "/rest/v1"
RETURN_REPRESENTATION = {"Prefer": "return=representation"}
# PostgreSQL "invalid input syntax", e.g. a non-numeric value in a bigint filter
INVALID_TEXT_REPRESENTATION = "22P02"


class SupabaseError(Exception):
    """Error reported by the Supabase REST API."""

    def __init__(self, message: str, *, status_code: Optional[int] = None, code: Optional[str] = None,
                 details: Optional[str] = None, hint: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.code = code
        self.details = details
        self.hint = hint

    @property
    def is_invalid_input(self) -> bool:
        """True when the backend rejected a filter value, e.g. a non-numeric id."""
        return self.code == INVALID_TEXT_REPRESENTATION


class SupabaseRequestError(SupabaseError):
    """The request never got a response (DNS, connection, timeout...)."""


def _error_from_response(response: httpx.Response) -> SupabaseError:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message") or body.get("error") or body.get("msg") or response.reason_phrase
        return SupabaseError(
            str(message),
            status_code=response.status_code,
            code=body.get("code"),
            details=body.get("details"),
            hint=body.get("hint"),
        )
    text = response.text.strip() or response.reason_phrase
    return SupabaseError(text, status_code=response.status_code)


class SupabaseTable:
    """Row-level operations on one table."""

    def __init__(self, client: httpx.AsyncClient, name: str) -> None:
        self._client = client
        self.name = name

    @property
    def path(self) -> str:
        return f"{REST_PATH}/{self.name}"

    async def _request(self, method: str, *, params: Optional[Dict[str, Any]] = None,
                       json: Any = None, headers: Optional[Dict[str, str]] = None) -> Any:
        try:
            response = await self._client.request(method, self.path, params=params, json=json, headers=headers)
        except httpx.RequestError as e:
            raise SupabaseRequestError(f"Request to '{self.name}' failed: {e}") from e

        if response.is_error:
            raise _error_from_response(response)
        if not response.content:
            return []
        try:
            return response.json()
        except ValueError as e:
            raise SupabaseError("Invalid JSON in response", status_code=response.status_code) from e

    @staticmethod
    def _eq_filters(eq: Optional[Dict[str, Any]]) -> Dict[str, str]:
        return {column: f"eq.{value}" for column, value in (eq or {}).items()}

    async def select(self, eq: Optional[Dict[str, Any]] = None, columns: str = "*",
                     limit: Optional[int] = None) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"select": columns, **self._eq_filters(eq)}
        if limit is not None:
            params["limit"] = limit
        return await self._request("GET", params=params)

    async def select_one(self, id: Any) -> Optional[Dict[str, Any]]:
        rows = await self.select(eq={"id": id}, limit=1)
        return rows[0] if rows else None

    async def insert(self, rows: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
        return await self._request("POST", json=rows, headers=RETURN_REPRESENTATION)

    async def update(self, values: Dict[str, Any], id: Any) -> List[Dict[str, Any]]:
        return await self._request("PATCH", params=self._eq_filters({"id": id}), json=values,
                                   headers=RETURN_REPRESENTATION)

    async def delete(self, id: Any) -> List[Dict[str, Any]]:
        return await self._request("DELETE", params=self._eq_filters({"id": id}), headers=RETURN_REPRESENTATION)

    async def ping(self) -> bool:
        """Cheap reachability check used by the health endpoint."""
        try:
            await self.select(columns="id", limit=1)
            return True
        except SupabaseError as e:
            logger.warning("Supabase health check failed: %s", e.message)
            return False


class SupabaseClient:
    """Holds the HTTP connection to one Supabase project."""

    def __init__(self, url: str, key: str, timeout: float = 10.0,
                 transport: Optional[httpx.AsyncBaseTransport] = None) -> None:
        self.url = url.rstrip("/")
        headers = {
            "apikey": key,
            "Authorization": f"Bearer {key}",
            "Accept": "application/json",
        }
        self._http = create_async_client(self.url, headers=headers, timeout=timeout, transport=transport)

    @classmethod
    def from_settings(cls, settings, transport: Optional[httpx.AsyncBaseTransport] = None) -> "SupabaseClient":
        settings.require_backend()
        return cls(settings.supabase_url, settings.supabase_anon_key,
                   timeout=settings.supabase_timeout, transport=transport)

    def table(self, name: str) -> SupabaseTable:
        return SupabaseTable(self._http, name)

    async def close(self) -> None:
        await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
