"""
Tests for the triage HTTP endpoint.
"""

from datetime import datetime, timezone
from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient

from conftest import FakeGateway, make_zip
from repotriage.errors import UpstreamError
from repotriage.main import app
from repotriage.models.triage import ContentFinding
from repotriage.services.account_triage import AccountTriageOrchestrator
from repotriage.utils.hashing import sha256_hex


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def fake_gateway():
    return FakeGateway()


@pytest.fixture
def use_gateway(fake_gateway, settings):
    orchestrator = AccountTriageOrchestrator(settings=settings, gateway=fake_gateway)
    with patch("repotriage.api.routes.triage.get_orchestrator", return_value=orchestrator):
        yield fake_gateway


def test_missing_url_parameter(client):
    response = client.get("/api")

    assert response.status_code == 400
    assert response.json() == {"url": "", "error": "a url parameter must be provided"}


def test_unsupported_host(client, use_gateway):
    response = client.get("/api", params={"url": "example.com/someuser"})

    assert response.status_code == 400
    assert response.json() == {
        "url": "https://example.com/someuser",
        "error": "unsupported host, only GitHub is supported for now",
    }


def test_account_not_found(client, use_gateway):
    response = client.get("/api/", params={"url": "https://github.com/ghost"})

    assert response.status_code == 404
    assert response.json() == {"url": "https://github.com/ghost", "error": "username not found"}


def test_no_repositories(client, use_gateway):
    use_gateway.add_account("quiet")

    response = client.get("/api", params={"url": "github.com/quiet"})

    assert response.status_code == 200
    assert response.json() == {
        "verdict": "benign",
        "url": "https://github.com/quiet",
        "username": "quiet",
        "reason": "quiet has no repos",
    }


def test_full_report_shape(client, use_gateway):
    use_gateway.add_account("dropper", created_at=datetime(2024, 5, 1, tzinfo=timezone.utc))
    first = make_zip({"loader.exe": b"payload one"})
    empty = make_zip({})
    contents = [
        use_gateway.add_object("loader.zip", first),
        ContentFinding(name="README.md", size=12),
        use_gateway.add_object("empty.zip", empty),
    ]
    use_gateway.add_repository("dropper", "release", contents=contents, emails=["d@example.com"])

    response = client.get("/api", params={"url": "https://github.com/dropper"})

    assert response.status_code == 200
    body = response.json()
    assert body["verdict"] == "suspicious"
    assert body["platform"] == "GitHub"
    assert body["username"] == "dropper"
    assert body["user_created"] == "2024-05-01T00:00:00.000Z"

    repo = body["repositories"][0]
    assert repo["name"] == "release"
    assert repo["verdict"] == "suspicious"
    assert repo["commit_emails"] == ["d@example.com"]
    assert "api_url" not in repo
    assert repo["contents"] == [
        {
            "name": "loader.zip",
            "size": len(first),
            "sha256": sha256_hex(first),
            "first_content_name": "loader.exe",
            "first_content_sha256": sha256_hex(b"payload one"),
        },
        {"name": "README.md", "size": 12},
        {
            "name": "empty.zip",
            "size": len(empty),
            "sha256": sha256_hex(empty),
            "first_content_name": "",
            "first_content_sha256": "",
        },
    ]


def test_upstream_failure_is_server_error(client, use_gateway):
    use_gateway.add_account("someuser")
    item = use_gateway.add_object("x.zip", b"")
    use_gateway.failing_urls[item.download_url] = UpstreamError("error retrieving x.zip: boom")
    use_gateway.add_repository("someuser", "x", contents=[item])

    response = client.get("/api", params={"url": "github.com/someuser"})

    assert response.status_code == 500
    assert response.json()["error"] == "error retrieving x.zip: boom"


def test_gateway_is_closed_after_request(client, use_gateway):
    client.get("/api", params={"url": "github.com/ghost"})
    assert use_gateway.closed


def test_unknown_path(client):
    response = client.get("/does-not-exist")

    assert response.status_code == 404
    assert response.json() == {"error": "404 not found"}


def test_health(client):
    response = client.get("/health")

    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_unexpected_gateway_error_is_structured(client, use_gateway):
    async def broken_listing(account):
        raise ValueError("malformed repository payload")

    use_gateway.add_account("someuser")
    use_gateway.list_repositories = broken_listing

    response = client.get("/api", params={"url": "github.com/someuser"})

    assert response.status_code == 500
    body = response.json()
    assert body["url"] == "https://github.com/someuser"
    assert "malformed repository payload" in body["error"]
