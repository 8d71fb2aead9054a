# Triage services
from repotriage.services.repository_triage import RepositoryTriageEngine, archive_ratio
from repotriage.services.account_triage import AccountTriageOrchestrator, aggregate_verdict

__all__ = [
    "RepositoryTriageEngine",
    "AccountTriageOrchestrator",
    "archive_ratio",
    "aggregate_verdict",
]
