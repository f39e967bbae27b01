from __future__ import annotations

import asyncio

import httpx
import pytest

from tools.project_client import ProjectClient
from workspace_builder.config import Settings
from workspace_builder.errors import ArchiveFetchError, ProjectServerUnavailableError
from workspace_builder.models import ProjectData


def _client(handler, **kwargs) -> ProjectClient:
    return ProjectClient(
        "http://projects.test/",
        headers=Settings().request_headers(),
        transport=httpx.MockTransport(handler),
        logger=lambda m: None,
        **kwargs,
    )


def test_list_projects_parses_rows():
    seen = []

    def handler(request: httpx.Request) -> httpx.Response:
        seen.append(request)
        return httpx.Response(200, json=[
            {"id": "abc", "files": ["abc.zip", "old.zip"]},
            {"id": 42, "files": []},
        ])

    projects = asyncio.run(_client(handler).list_projects())

    assert projects == [ProjectData(id="abc", files=["abc.zip", "old.zip"]), ProjectData(id="42", files=[])]
    assert projects[0].archive_name == "abc.zip"
    assert projects[1].archive_name == "project.zip"
    assert str(seen[0].url) == "http://projects.test/projects/"
    assert seen[0].headers["ngrok-skip-browser-warning"] == "true"
    assert seen[0].headers["accept"] == "application/json"


def test_empty_listing_is_empty():
    projects = asyncio.run(_client(lambda r: httpx.Response(200, json=[])).list_projects())
    assert projects == []


@pytest.mark.parametrize("status", [404, 500, 503])
def test_non_success_listing_degrades_to_empty(status):
    projects = asyncio.run(_client(lambda r: httpx.Response(status, text="nope")).list_projects())
    assert projects == []


def test_malformed_listing_rows_are_skipped():
    def handler(request):
        return httpx.Response(200, json=[{"files": ["x.zip"]}, "junk", {"id": "ok", "files": ["ok.zip"]}])

    assert asyncio.run(_client(handler).list_projects()) == [ProjectData(id="ok", files=["ok.zip"])]


def test_listing_body_not_json():
    projects = asyncio.run(_client(lambda r: httpx.Response(200, text="<html>tunnel</html>")).list_projects())
    assert projects == []


def test_unreachable_host_raises_connectivity_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(ProjectServerUnavailableError):
        asyncio.run(_client(handler).list_projects())


def test_download_archive_returns_bytes():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, content=b"PK\x05\x06" + b"\x00" * 18)

    data = asyncio.run(_client(handler).download_archive("p 1", "my app.zip"))
    assert data.startswith(b"PK")
    assert seen == ["http://projects.test/projects/p%201/download/my%20app.zip"]


def test_download_non_success_raises_fetch_error():
    with pytest.raises(ArchiveFetchError) as ei:
        asyncio.run(_client(lambda r: httpx.Response(404)).download_archive("p1", "x.zip"))
    assert ei.value.status == 404
    assert "404" in str(ei.value)


def test_download_transport_error_raises_fetch_error():
    def handler(request):
        raise httpx.ReadTimeout("slow", request=request)

    with pytest.raises(ArchiveFetchError) as ei:
        asyncio.run(_client(handler).download_archive("p1", "x.zip"))
    assert ei.value.status is None


def test_from_settings():
    s = Settings(api_base="http://svc:9000", http_timeout=5, skip_ngrok_warning=False)
    c = ProjectClient.from_settings(s)
    assert c.base_url == "http://svc:9000"
    assert c.timeout == 5
    assert "ngrok-skip-browser-warning" not in c._headers


def _bad_gzip(request):
    return httpx.Response(200, headers={"Content-Encoding": "gzip"}, content=b"not gzip at all")


def test_undecodable_listing_body_raises_connectivity_error():
    with pytest.raises(ProjectServerUnavailableError):
        asyncio.run(_client(_bad_gzip).list_projects())


def test_undecodable_download_body_raises_fetch_error():
    with pytest.raises(ArchiveFetchError) as ei:
        asyncio.run(_client(_bad_gzip).download_archive("p1", "x.zip"))
    assert isinstance(ei.value.__cause__, httpx.DecodingError)
