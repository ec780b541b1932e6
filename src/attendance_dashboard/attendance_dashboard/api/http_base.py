from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date, datetime
from typing import Any, AsyncIterator, Mapping, Optional

import httpx

from ..core.exceptions import RemoteServiceError
from .connection import ApiConnection


@asynccontextmanager
async def api_client(conn_factory: ApiConnection) -> AsyncIterator[httpx.AsyncClient]:
    async with conn_factory.connect() as client:
        yield client


def _clean_params(params: Optional[Mapping[str, Any]]) -> dict:
    return {k: v for k, v in (params or {}).items() if v is not None}


async def get_json(conn_factory: ApiConnection, path: str, params: Optional[Mapping[str, Any]] = None) -> Any:
    """GET ``path`` and return the decoded JSON body.

    Transport failures, non-2xx statuses and undecodable bodies all surface
    as ``RemoteServiceError``.
    """

    async with api_client(conn_factory) as client:
        try:
            response = await client.get(path, params=_clean_params(params))
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteServiceError(
                f"GET {path} failed with HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except httpx.HTTPError as e:
            raise RemoteServiceError(f"GET {path} failed: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise RemoteServiceError(f"GET {path} returned a non-JSON body") from e


def normalize_api_date(value: Any) -> Optional[date]:
    """Normalize date values from the API.

    The service can return:
    - ``YYYY-MM-DD``
    - a full ISO timestamp (``2024-06-07T10:15:00.000Z``)
    - null
    """

    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        return value.date()

    if isinstance(value, date):
        return value

    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            return None

    return None
