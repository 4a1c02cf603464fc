"""Remote document store: asynchronous, possibly unavailable mirror of the local cache.

Documents live at ``projects/{projectId}/users/{userId}/{page}/{date}``.
"""
import logging
from typing import Any, Dict, Optional

import httpx

from planner.utilities.config import REMOTE_API_KEY, REMOTE_TIMEOUT_SECONDS

logger = logging.getLogger(__name__)


class RemoteStoreError(Exception):
    """Base class for remote store failures."""


class RemoteUnavailableError(RemoteStoreError):
    """Network failure or timeout: the store could not be reached."""


class RemoteRejectedError(RemoteStoreError):
    """The store answered but refused the request or sent an unusable body."""


def document_path(project_id: str, user_id: str, page: str, date_key: str) -> str:
    return f"projects/{project_id}/users/{user_id}/{page}/{date_key}"


class RemoteStore:
    """Interface of the remote key-value backend."""

    async def read(self, user_id: str, project_id: str, page: str, date_key: str) -> Optional[Dict[str, Any]]:
        """Return the stored document or None when it does not exist."""
        raise NotImplementedError

    async def write(self, user_id: str, project_id: str, page: str, date_key: str, payload: Dict[str, Any]) -> None:
        raise NotImplementedError

    async def aclose(self) -> None:
        return None


class HttpRemoteStore(RemoteStore):
    """RemoteStore over a JSON document REST endpoint (GET / PUT per document)."""

    def __init__(self, base_url: str, api_key: str = REMOTE_API_KEY, timeout: float = REMOTE_TIMEOUT_SECONDS,
                 client: Optional[httpx.AsyncClient] = None):
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = client or httpx.AsyncClient(base_url=base_url.rstrip("/"), headers=headers, timeout=timeout)

    async def _request(self, method: str, path: str, **kwargs) -> httpx.Response:
        try:
            response = await self._client.request(method, path, **kwargs)
        except httpx.TransportError as e:
            raise RemoteUnavailableError(f"{method} {path}: {e}") from e
        return response

    async def read(self, user_id, project_id, page, date_key):
        path = "/" + document_path(project_id, user_id, page, date_key)
        response = await self._request("GET", path)
        if response.status_code == 404:
            return None
        try:
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            raise RemoteRejectedError(f"GET {path}: HTTP {response.status_code}") from e
        except ValueError as e:
            raise RemoteRejectedError(f"GET {path}: invalid JSON body") from e
        if not isinstance(data, dict):
            raise RemoteRejectedError(f"GET {path}: expected a JSON object")
        return data

    async def write(self, user_id, project_id, page, date_key, payload):
        path = "/" + document_path(project_id, user_id, page, date_key)
        response = await self._request("PUT", path, json=payload)
        try:
            response.raise_for_status()
        except httpx.HTTPStatusError as e:
            raise RemoteRejectedError(f"PUT {path}: HTTP {response.status_code}") from e
        logger.debug(f"Remote document written: {path}")

    async def aclose(self):
        await self._client.aclose()
