"""
GitHub API Gateway

Responsibilities:
- Account lookup
- Repository listing (all pages)
- Repository root contents
- Distinct commit emails
- Raw object download

Pure I/O boundary. Upstream failures are converted to the triage error
taxonomy here; the only statuses tolerated are the ones listed per method.
"""

import asyncio
import logging
import urllib.parse
from datetime import datetime
from typing import Any, Dict, List, Optional

import requests
from github import Auth, Github
from github.GithubException import GithubException

from repotriage.config import Settings, get_settings
from repotriage.errors import AccountNotFoundError, UpstreamError
from repotriage.models.triage import Account, ContentFinding, RepositoryRecord

logger = logging.getLogger(__name__)

PLATFORM_NAME = "GitHub"

# Placeholder committer address used for commits made through the web UI
NOREPLY_EMAIL = "noreply@github.com"


class GitHubGateway:
    """GitHub REST API client wrapper."""

    def __init__(self, settings: Optional[Settings] = None):
        self.settings = settings or get_settings()
        auth = Auth.Token(self.settings.github_token) if self.settings.github_token else None
        self.client = Github(
            auth=auth,
            base_url=self.settings.github_api_url,
            user_agent=self.settings.github_user_agent,
            timeout=self.settings.request_timeout,
            retry=None,
        )
        self.headers = {
            "Accept": self.settings.github_accept,
            "User-Agent": self.settings.github_user_agent,
        }

    def _get_json(self, url: str, parameters: Optional[Dict[str, Any]] = None):
        """GET a JSON endpoint, returning (response headers, decoded body)."""
        logger.debug(f"GET {url}")
        try:
            return self.client.requester.requestJsonAndCheck(
                "GET", url, parameters=parameters, headers=self.headers
            )
        except requests.RequestException as e:
            raise UpstreamError(f"error contacting github: {e}") from e

    async def resolve_account(self, username: str) -> Account:
        """
        Look up an account by username.

        Raises:
            AccountNotFoundError: If GitHub returns 404
            UpstreamError: For any other failure
        """
        try:
            path = f"/users/{urllib.parse.quote(username, safe='')}"
            _, data = await asyncio.to_thread(self._get_json, path)
        except GithubException as e:
            if e.status == 404:
                raise AccountNotFoundError(username) from e
            raise _upstream_error("error retrieving user data from github", e) from e

        account = Account(
            platform=PLATFORM_NAME,
            username=username,
            created_at=_parse_timestamp(data["created_at"]),
            repos_url=data.get("repos_url") or f"/users/{username}/repos",
        )
        logger.info(f"Resolved GitHub account {username} (created {account.created_at.isoformat()})")
        return account

    async def list_repositories(self, account: Account) -> List[RepositoryRecord]:
        """
        List the account's repositories in the order GitHub returns them.

        An empty list is a valid result.

        Raises:
            UpstreamError: On any non-success response
        """
        try:
            items = await asyncio.to_thread(self._list_repositories_sync, account.repos_url)
        except GithubException as e:
            raise _upstream_error("error retrieving repository data from github", e) from e

        repositories = [
            RepositoryRecord(
                name=item["name"],
                description=item.get("description"),
                created=_parse_timestamp(item.get("created_at")),
                api_url=item["url"],
            )
            for item in items
        ]
        logger.info(f"Found {len(repositories)} repositories for {account.username}")
        return repositories

    def _list_repositories_sync(self, repos_url: str) -> List[Dict[str, Any]]:
        items: List[Dict[str, Any]] = []
        url: Optional[str] = repos_url
        parameters: Optional[Dict[str, Any]] = {"per_page": self.settings.repos_per_page}

        while url:
            headers, data = self._get_json(url, parameters)
            items.extend(data or [])
            url = _next_page_url(headers)
            parameters = None  # Next-page links already carry the query string

        return items

    async def fetch_root_contents(self, api_url: str) -> Optional[List[ContentFinding]]:
        """
        List the root directory of a repository.

        Returns:
            Content items in listing order, or None when GitHub reports 404
            (empty repository)

        Raises:
            UpstreamError: On any other non-success response
        """
        try:
            _, data = await asyncio.to_thread(self._get_json, f"{api_url}/contents")
        except GithubException as e:
            if e.status == 404:
                logger.warning(f"No contents for {api_url} (repository is empty)")
                return None
            raise _upstream_error(f"error retrieving contents for repo {api_url}", e) from e

        # A file path returns a single object rather than a listing
        items = data if isinstance(data, list) else [data]
        return [
            ContentFinding(
                name=item.get("name", ""),
                size=item.get("size") or 0,
                download_url=item.get("download_url"),
            )
            for item in items
        ]

    async def fetch_commit_emails(self, api_url: str) -> List[str]:
        """
        Collect distinct author and committer emails from the latest commits.

        Client errors (e.g. 409 for a repository with no commits) mean no
        commit data and yield an empty list. The web-flow committer address
        is skipped; the same address as an author is kept.

        Raises:
            UpstreamError: On any other non-success response
        """
        try:
            _, data = await asyncio.to_thread(self._get_json, f"{api_url}/commits")
        except GithubException as e:
            if 400 < e.status < 499:
                logger.warning(f"No commit data for {api_url} (status {e.status})")
                return []
            raise _upstream_error("error retrieving commit data from github", e) from e

        emails: List[str] = []
        for item in data or []:
            commit = item.get("commit") or {}
            author_email = (commit.get("author") or {}).get("email")
            committer_email = (commit.get("committer") or {}).get("email")

            if author_email and author_email not in emails:
                emails.append(author_email)
            if (
                committer_email
                and committer_email not in emails
                and committer_email != NOREPLY_EMAIL
            ):
                emails.append(committer_email)

        return emails

    async def download_object(self, download_url: str) -> bytes:
        """
        Download a raw object.

        Raises:
            UpstreamError: On a transport failure or non-success response
        """
        logger.debug(f"Downloading {download_url}")
        try:
            response = await asyncio.to_thread(
                requests.get,
                download_url,
                headers={"User-Agent": self.settings.github_user_agent},
                timeout=self.settings.request_timeout,
            )
        except requests.RequestException as e:
            raise UpstreamError(f"error retrieving {download_url}: {e}") from e

        if not response.ok:
            raise UpstreamError(
                f"error retrieving {download_url}: {response.text}",
                status=response.status_code,
                body=response.text,
            )
        return response.content

    def close(self) -> None:
        self.client.close()


def _upstream_error(message: str, error: GithubException) -> UpstreamError:
    return UpstreamError(f"{message}: {error.data}", status=error.status, body=error.data)


def _parse_timestamp(value: Optional[str]) -> Optional[datetime]:
    """Parse GitHub's ISO-8601 timestamps (``2024-01-01T00:00:00Z``)."""
    if not value:
        return None
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _next_page_url(headers: Dict[str, Any]) -> Optional[str]:
    link_header = headers.get("link") or headers.get("Link")
    if not link_header:
        return None
    for link in requests.utils.parse_header_links(link_header):
        if link.get("rel") == "next":
            return link.get("url")
    return None
