"""
Triage Data Models

Account, repository and content records plus the three possible outcomes of
a triage run (full report, benign determination, failure).
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer, model_serializer


class Verdict(str, Enum):
    """Repository or account verdict."""

    SUSPICIOUS = "suspicious"
    BENIGN = "benign"
    UNDETERMINED = "undetermined"


class FailureKind(str, Enum):
    """Category of a failed triage run, used to pick the response status."""

    INVALID_REQUEST = "invalid_request"
    UNSUPPORTED_HOST = "unsupported_host"
    ACCOUNT_NOT_FOUND = "account_not_found"
    UPSTREAM = "upstream"
    INSPECTION = "inspection"


class TriageRequest(BaseModel):
    """Inbound triage request."""

    model_config = ConfigDict(frozen=True)

    url: str


class ContentFinding(BaseModel):
    """
    One root-level item of a repository.

    Lightweight listings carry only name and size. Escalated archives carry
    the archive digest and the first entry's name and digest; those are empty
    strings (never missing) when the archive holds no entries.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    size: int = 0
    sha256: Optional[str] = None
    first_content_name: Optional[str] = None
    first_content_sha256: Optional[str] = None
    download_url: Optional[str] = Field(None, exclude=True)  # Internal locator

    @model_serializer(mode="wrap")
    def _drop_unset_fields(self, handler) -> Dict[str, Any]:
        data = handler(self)
        return {key: value for key, value in data.items() if value is not None}


class RepositoryRecord(BaseModel):
    """A repository owned by the triaged account."""

    model_config = ConfigDict(frozen=True)

    name: str
    description: Optional[str] = None
    created: Optional[datetime] = None
    api_url: str = Field("", exclude=True)  # Internal API locator
    verdict: Verdict = Verdict.UNDETERMINED
    commit_emails: List[str] = Field(default_factory=list)
    contents: List[ContentFinding] = Field(default_factory=list)


class Account(BaseModel):
    """A platform account resolved from the input URL."""

    model_config = ConfigDict(frozen=True)

    platform: str
    username: str = Field(..., min_length=1)
    created_at: datetime
    repos_url: str = Field("", exclude=True)  # Internal API locator
    repositories: List[RepositoryRecord] = Field(default_factory=list)


class TriageReport(BaseModel):
    """Full report for an account whose repositories were all triaged."""

    model_config = ConfigDict(frozen=True)

    verdict: Verdict
    url: str
    username: str
    platform: str
    user_created: datetime
    repositories: List[RepositoryRecord] = Field(default_factory=list)

    @field_serializer("user_created")
    def _serialize_user_created(self, value: datetime) -> str:
        # Millisecond precision UTC, e.g. 2024-05-01T00:00:00.000Z
        value = value.astimezone(timezone.utc)
        return value.strftime("%Y-%m-%dT%H:%M:%S.") + f"{value.microsecond // 1000:03d}Z"


class BenignDetermination(BaseModel):
    """Early exit: the input does not meet the suspicion criteria."""

    model_config = ConfigDict(frozen=True)

    verdict: Verdict = Verdict.BENIGN
    url: str
    username: str
    reason: str


class TriageFailure(BaseModel):
    """Early exit: the triage run could not be completed."""

    model_config = ConfigDict(frozen=True)

    url: str
    error: str
    kind: FailureKind = Field(FailureKind.UPSTREAM, exclude=True)


TriageOutcome = Union[TriageReport, BenignDetermination, TriageFailure]
