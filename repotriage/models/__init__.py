# Shared data models
from repotriage.models.triage import (
    Verdict,
    FailureKind,
    TriageRequest,
    ContentFinding,
    RepositoryRecord,
    Account,
    TriageReport,
    BenignDetermination,
    TriageFailure,
    TriageOutcome,
)

__all__ = [
    "Verdict",
    "FailureKind",
    "TriageRequest",
    "ContentFinding",
    "RepositoryRecord",
    "Account",
    "TriageReport",
    "BenignDetermination",
    "TriageFailure",
    "TriageOutcome",
]
