"""
HTTP adapter for the desktop's remote file-storage backend.
"""

import logging
from datetime import datetime
from typing import Any, Optional

import httpx
from typing_extensions import override

from webterm.entities.entry import Entry, EntryKind
from webterm.exceptions import (
    EntryExistsError,
    EntryNotFoundError,
    FileRepositoryError,
    NotATextFileError,
)
from webterm.ports.files.file_repository_port import FileRepositoryPort

_DIRECTORY_TYPES = {"folder", "directory", "dir"}


def _parse_timestamp(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def entry_from_payload(item: dict[str, Any], parent_path: str) -> Entry:
    """Build an Entry from a backend item.

    Accepts the desktop ``FileItem`` shape (``type``/``modifiedAt``) and the
    backend DTO shape (``contentType``/``updatedAt``).
    """
    name = str(item.get("name") or "")
    kind_raw = str(item.get("type") or "").lower()
    kind = EntryKind.DIRECTORY if kind_raw in _DIRECTORY_TYPES else EntryKind.FILE
    path = item.get("path") or (f"/{name}" if parent_path == "/" else f"{parent_path}/{name}")
    return Entry(
        name=name,
        kind=kind,
        path=str(path),
        size=int(item.get("size") or 0),
        created_at=_parse_timestamp(item.get("createdAt")),
        modified_at=_parse_timestamp(item.get("modifiedAt") or item.get("updatedAt")),
        extension=item.get("extension") or None,
        id=str(item["id"]) if item.get("id") is not None else None,
    )


class HttpFileSystemAdapter(FileRepositoryPort):
    """Remote storage implementation of the file repository port."""

    def __init__(
        self,
        base_url: str,
        user: str,
        timeout: float = 30.0,
        logger: Optional[logging.Logger] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the adapter.

        Args:
            base_url: Backend API root, e.g. http://localhost:8080/api/v2
            user: Opaque caller identity forwarded as ``userId`` on every request
            timeout: Request timeout in seconds
            logger: Logger instance to use for logging
            transport: Optional httpx transport (tests use httpx.MockTransport)
        """
        self._user = user
        self._logger = logger or logging.getLogger(__name__)
        self._client = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            timeout=httpx.Timeout(timeout),
            headers={"Accept": "application/json"},
            transport=transport,
        )

    async def _request(
        self,
        method: str,
        url: str,
        *,
        params: Optional[dict[str, Any]] = None,
        json: Optional[dict[str, Any]] = None,
        what: str,
    ) -> httpx.Response:
        query = {"userId": self._user, **(params or {})}
        try:
            response = await self._client.request(method, url, params=query, json=json)
        except httpx.TimeoutException:
            raise FileRepositoryError(f"Storage backend timed out while trying to {what}")
        except httpx.RequestError as e:
            raise FileRepositoryError(f"Storage backend unreachable: {e}")

        if response.is_success:
            return response
        detail = self._error_detail(response)
        self._logger.warning(f"{method} {url} failed ({response.status_code}): {detail}")
        if response.status_code == 404:
            raise EntryNotFoundError(f"Cannot {what}: {detail or 'not found'}")
        if response.status_code == 409:
            raise EntryExistsError(f"Cannot {what}: {detail or 'already exists'}")
        if response.status_code == 415:
            raise NotATextFileError(f"Cannot {what}: {detail or 'not a text file'}")
        raise FileRepositoryError(
            f"Cannot {what}: HTTP {response.status_code}{' - ' + detail if detail else ''}"
        )

    def _error_detail(self, response: httpx.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text.strip()[:200]
        if isinstance(body, dict):
            return str(body.get("message") or body.get("detail") or body.get("error") or "")
        return ""

    @override
    async def list_entries(self, path: str) -> list[Entry]:
        response = await self._request(
            "GET", "/files/list", params={"path": path}, what=f"list {path}"
        )
        try:
            payload = response.json()
        except ValueError:
            raise FileRepositoryError(f"Invalid listing payload for {path}")
        if isinstance(payload, dict):
            # some endpoints wrap the listing
            payload = payload.get("items") or payload.get("files") or []
        if not isinstance(payload, list):
            raise FileRepositoryError(f"Invalid listing payload for {path}")
        entries: list[Entry] = []
        for item in payload:
            try:
                entries.append(entry_from_payload(item, path))
            except (ValueError, TypeError, AttributeError) as e:
                self._logger.warning(f"Skipping malformed entry in {path}: {e}")
        return entries

    @override
    async def read_text(self, path: str) -> str:
        response = await self._request(
            "GET", "/files/files/content", params={"path": path}, what=f"read {path}"
        )
        content_type = response.headers.get("Content-Type", "")
        if content_type and not (
            content_type.startswith("text/") or "json" in content_type or "xml" in content_type
        ):
            raise NotATextFileError(f"Not a text file: {path}")
        return response.text

    @override
    async def write_new_file(self, parent_path: str, name: str, content: str = "") -> None:
        await self._request(
            "POST",
            "/files",
            json={"name": name, "path": parent_path, "content": content, "userId": self._user},
            what=f"create file {name}",
        )

    @override
    async def create_directory(self, parent_path: str, name: str) -> None:
        await self._request(
            "POST",
            "/folders",
            json={"name": name, "path": parent_path, "userId": self._user},
            what=f"create directory {name}",
        )

    @override
    async def delete_entry(self, path: str, is_directory: bool = False) -> None:
        await self._request(
            "DELETE",
            "/folders" if is_directory else "/files",
            params={"path": path},
            what=f"delete {path}",
        )

    @override
    async def rename_entry(self, path: str, new_name: str, is_directory: bool = False) -> None:
        await self._request(
            "PUT",
            "/folders/rename" if is_directory else "/files/rename",
            json={"path": path, "newName": new_name, "userId": self._user},
            what=f"rename {path}",
        )

    @override
    async def aclose(self) -> None:
        await self._client.aclose()
