"""
Account Triage Orchestrator

Runs one triage request end to end:
URL -> platform/username -> account -> repositories -> per-repository triage
-> account verdict

Every exit path is returned as a value (TriageReport, BenignDetermination or
TriageFailure); expected failures are never raised to the caller.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Callable, List, Optional

from repotriage.config import Settings, get_settings
from repotriage.errors import (
    AccountNotFoundError,
    InspectionError,
    InvalidTargetError,
    TriageError,
    UnsupportedHostError,
)
from repotriage.integrations.github import GitHubGateway
from repotriage.integrations.url_parser import normalize_url, parse_target_url
from repotriage.models.triage import (
    Account,
    BenignDetermination,
    FailureKind,
    RepositoryRecord,
    TriageFailure,
    TriageOutcome,
    TriageReport,
    TriageRequest,
    Verdict,
)
from repotriage.services.repository_triage import RepositoryTriageEngine

logger = logging.getLogger(__name__)


def aggregate_verdict(repositories: List[RepositoryRecord]) -> Verdict:
    """Suspicious if any repository is suspicious, otherwise undetermined."""
    if any(repo.verdict == Verdict.SUSPICIOUS for repo in repositories):
        return Verdict.SUSPICIOUS
    return Verdict.UNDETERMINED


def failure_kind(error: TriageError) -> FailureKind:
    if isinstance(error, UnsupportedHostError):
        return FailureKind.UNSUPPORTED_HOST
    if isinstance(error, InvalidTargetError):
        return FailureKind.INVALID_REQUEST
    if isinstance(error, AccountNotFoundError):
        return FailureKind.ACCOUNT_NOT_FOUND
    if isinstance(error, InspectionError):
        return FailureKind.INSPECTION
    return FailureKind.UPSTREAM


class AccountTriageOrchestrator:
    """
    Orchestrates the triage of one account.

    A new gateway is created per orchestrator, so no client state is shared
    between requests.
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        gateway: Optional[GitHubGateway] = None,
        now: Optional[Callable[[], datetime]] = None,
    ):
        self.settings = settings or get_settings()
        self.gateway = gateway or GitHubGateway(self.settings)
        self.engine = RepositoryTriageEngine(self.gateway, self.settings)
        self._now = now or (lambda: datetime.now(timezone.utc))

    async def triage(self, request: TriageRequest) -> TriageOutcome:
        """
        Triage the account behind a profile or repository URL.

        Args:
            request: The inbound request carrying the URL

        Returns:
            TriageReport, BenignDetermination or TriageFailure
        """
        url = normalize_url(request.url)
        username = ""

        try:
            target = parse_target_url(url)
            username = target.username
            logger.info(f"Triaging {target.platform} account {username} from {url}")

            account = await self.gateway.resolve_account(username)

            age_reason = self._age_gate_reason(account)
            if age_reason:
                logger.info(f"Account {username} skipped: {age_reason}")
                return BenignDetermination(url=url, username=username, reason=age_reason)

            repositories = await self.gateway.list_repositories(account)
            if not repositories:
                logger.info(f"Account {username} has no repositories")
                return BenignDetermination(
                    url=url, username=username, reason=f"{username} has no repos"
                )

            triaged: List[RepositoryRecord] = []
            for repository in repositories:
                triaged.append(await self.engine.triage(repository))

        except TriageError as e:
            logger.error(f"Triage of {url} failed: {e}")
            return TriageFailure(url=url, error=str(e), kind=failure_kind(e))
        except Exception as e:
            logger.exception(f"Unexpected error while triaging {url}")
            return TriageFailure(
                url=url, error=f"unexpected error: {e!r}", kind=FailureKind.UPSTREAM
            )

        account = account.model_copy(update={"repositories": triaged})
        verdict = aggregate_verdict(account.repositories)
        logger.info(f"Account {username}: verdict {verdict.value}")

        return TriageReport(
            verdict=verdict,
            url=url,
            username=account.username,
            platform=account.platform,
            user_created=account.created_at,
            repositories=account.repositories,
        )

    def _age_gate_reason(self, account: Account) -> Optional[str]:
        """Reason to skip an account older than the configured age, if enabled."""
        if not self.settings.account_age_gate_enabled:
            return None

        max_days = self.settings.max_account_age_days
        cutoff = self._now() - timedelta(days=max_days)
        if account.created_at >= cutoff:
            return None

        return (
            f"Users older than {max_days} days are not processed as this does not "
            f"match known TTPs. User created at {account.created_at.isoformat()}"
        )

    def close(self) -> None:
        self.gateway.close()
