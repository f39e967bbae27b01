# tools/project_client.py
from __future__ import annotations

from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx

from workspace_builder.config import Settings
from workspace_builder.errors import ArchiveFetchError, ProjectServerUnavailableError
from workspace_builder.logsink import Logger, writeln
from workspace_builder.models import ProjectData


# ---------------------
# Row parsing
# ---------------------

def _parse_project(row: Any) -> Optional[ProjectData]:
    if not isinstance(row, dict) or row.get("id") in (None, ""):
        return None
    files = row.get("files") or []
    if not isinstance(files, list):
        return None
    return ProjectData(id=str(row["id"]), files=[str(f) for f in files])


# ---------------------
# Client
# ---------------------

class ProjectClient:
    """
    Async client for the remote project service:

      GET {base}/projects/                          -> [{"id": ..., "files": [...]}]
      GET {base}/projects/{id}/download/{filename}  -> zip bytes

    No retries: a failed call is repeated only when the user asks again.
    Pass `transport` to substitute the network (tests use httpx.MockTransport).
    """

    def __init__(
        self,
        base_url: str,
        timeout: float = 60.0,
        headers: Optional[Dict[str, str]] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
        logger: Logger = writeln,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers = dict(headers or {})
        self._transport = transport
        self._log = logger

    @classmethod
    def from_settings(cls, settings: Settings, **kwargs: Any) -> "ProjectClient":
        return cls(settings.api_base, timeout=settings.http_timeout, headers=settings.request_headers(), **kwargs)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self.timeout, headers=self._headers, transport=self._transport)

    async def list_projects(self) -> List[ProjectData]:
        """
        Non-success responses degrade to an empty list (the UI always renders a list);
        an unreachable host raises ProjectServerUnavailableError.
        """
        url = f"{self.base_url}/projects/"
        self._log(f"[client:req] GET {url}")
        try:
            async with self._client() as client:
                r = await client.get(url)
        except httpx.RequestError as e:
            self._log(f"[client:exc] {type(e).__name__}: {e}")
            raise ProjectServerUnavailableError(
                "Could not connect to the projects server. Ensure the tunnel is active."
            ) from e

        if not r.is_success:
            self._log(f"[client:warn] listing returned status {r.status_code}")
            return []

        try:
            rows = r.json()
        except ValueError:
            self._log("[client:warn] listing body is not JSON")
            return []
        if not isinstance(rows, list):
            self._log(f"[client:warn] listing body is {type(rows).__name__}, expected list")
            return []

        projects: List[ProjectData] = []
        for row in rows:
            proj = _parse_project(row)
            if proj is None:
                self._log(f"[client:warn] skipping malformed row: {row!r}"[:300])
                continue
            projects.append(proj)
        self._log(f"[client:ok] {len(projects)} project(s)")
        return projects

    async def download_archive(self, project_id: str, archive_name: str) -> bytes:
        url = f"{self.base_url}/projects/{quote(project_id, safe='')}/download/{quote(archive_name, safe='')}"
        self._log(f"[client:req] GET {url}")
        try:
            async with self._client() as client:
                r = await client.get(url)
        except httpx.RequestError as e:
            self._log(f"[client:exc] {type(e).__name__}: {e}")
            raise ArchiveFetchError(f"Error downloading ZIP: {e}") from e

        if not r.is_success:
            self._log(f"[client:err] download status={r.status_code}")
            raise ArchiveFetchError(f"Error downloading ZIP ({r.status_code})", status=r.status_code)
        return r.content
