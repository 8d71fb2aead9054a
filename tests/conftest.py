"""
Shared test fixtures: an in-memory GitHub gateway and archive builders.
"""

import io
import tarfile
import zipfile
from datetime import datetime, timezone
from typing import Dict, List, Optional

import pytest

from repotriage.config import Settings
from repotriage.errors import AccountNotFoundError, UpstreamError
from repotriage.models.triage import Account, ContentFinding, RepositoryRecord


def make_zip(entries: Dict[str, bytes]) -> bytes:
    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", zipfile.ZIP_DEFLATED) as archive:
        for name, data in entries.items():
            archive.writestr(name, data)
    return buffer.getvalue()


def make_tar(entries: Dict[str, bytes], mode: str = "w") -> bytes:
    buffer = io.BytesIO()
    with tarfile.open(fileobj=buffer, mode=mode) as archive:
        for name, data in entries.items():
            info = tarfile.TarInfo(name)
            info.size = len(data)
            archive.addfile(info, io.BytesIO(data))
    return buffer.getvalue()


class FakeGateway:
    """In-memory stand-in for GitHubGateway."""

    def __init__(self):
        self.accounts: Dict[str, datetime] = {}
        self.repositories: Dict[str, List[RepositoryRecord]] = {}
        self.contents: Dict[str, Optional[List[ContentFinding]]] = {}
        self.commit_emails: Dict[str, List[str]] = {}
        self.objects: Dict[str, bytes] = {}
        self.failing_urls: Dict[str, UpstreamError] = {}
        self.downloads: List[str] = []
        self.closed = False

    def add_account(self, username: str, created_at: Optional[datetime] = None):
        self.accounts[username] = created_at or datetime(2024, 5, 1, tzinfo=timezone.utc)
        self.repositories.setdefault(username, [])

    def add_repository(
        self,
        username: str,
        name: str,
        contents: Optional[List[ContentFinding]] = None,
        emails: Optional[List[str]] = None,
    ) -> RepositoryRecord:
        api_url = f"https://api.github.com/repos/{username}/{name}"
        record = RepositoryRecord(
            name=name,
            description=f"{name} description",
            created=datetime(2024, 5, 2, tzinfo=timezone.utc),
            api_url=api_url,
        )
        self.repositories.setdefault(username, []).append(record)
        self.contents[api_url] = contents
        self.commit_emails[api_url] = emails or []
        return record

    def add_object(self, name: str, payload: bytes) -> ContentFinding:
        url = f"https://raw.githubusercontent.com/files/{name}"
        self.objects[url] = payload
        return ContentFinding(name=name, size=len(payload), download_url=url)

    async def resolve_account(self, username: str) -> Account:
        if username not in self.accounts:
            raise AccountNotFoundError(username)
        return Account(
            platform="GitHub",
            username=username,
            created_at=self.accounts[username],
            repos_url=f"https://api.github.com/users/{username}/repos",
        )

    async def list_repositories(self, account: Account) -> List[RepositoryRecord]:
        return list(self.repositories.get(account.username, []))

    async def fetch_root_contents(self, api_url: str) -> Optional[List[ContentFinding]]:
        return self.contents.get(api_url)

    async def fetch_commit_emails(self, api_url: str) -> List[str]:
        return list(self.commit_emails.get(api_url, []))

    async def download_object(self, download_url: str) -> bytes:
        self.downloads.append(download_url)
        if download_url in self.failing_urls:
            raise self.failing_urls[download_url]
        return self.objects[download_url]

    def close(self) -> None:
        self.closed = True


@pytest.fixture
def settings() -> Settings:
    return Settings(_env_file=None)


@pytest.fixture
def gateway() -> FakeGateway:
    return FakeGateway()
