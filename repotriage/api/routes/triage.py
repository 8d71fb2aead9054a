"""
Triage API Routes

GET /api?url=<profile or repository url>
"""

import logging
from typing import Optional

from fastapi import APIRouter, Query
from fastapi.responses import JSONResponse

from repotriage.models.triage import (
    FailureKind,
    TriageFailure,
    TriageOutcome,
    TriageRequest,
)
from repotriage.services.account_triage import AccountTriageOrchestrator

logger = logging.getLogger(__name__)

router = APIRouter()

FAILURE_STATUS = {
    FailureKind.INVALID_REQUEST: 400,
    FailureKind.UNSUPPORTED_HOST: 400,
    FailureKind.ACCOUNT_NOT_FOUND: 404,
    FailureKind.UPSTREAM: 500,
    FailureKind.INSPECTION: 500,
}


def get_orchestrator() -> AccountTriageOrchestrator:
    """Build a fresh orchestrator per request; nothing is shared between runs."""
    return AccountTriageOrchestrator()


def render_outcome(outcome: TriageOutcome) -> JSONResponse:
    """Render a triage outcome as a JSON response with a matching status."""
    status_code = 200
    if isinstance(outcome, TriageFailure):
        status_code = FAILURE_STATUS[outcome.kind]
    return JSONResponse(status_code=status_code, content=outcome.model_dump(mode="json"))


@router.get("/api")
@router.get("/api/", include_in_schema=False)
async def triage_url(
    url: Optional[str] = Query(None, description="GitHub profile or repository URL"),
):
    """
    Triage the account behind a GitHub profile or repository URL.

    Returns a full report, a benign determination, or an error payload.
    """
    if not url:
        return render_outcome(
            TriageFailure(
                url="",
                error="a url parameter must be provided",
                kind=FailureKind.INVALID_REQUEST,
            )
        )

    orchestrator = get_orchestrator()
    try:
        outcome = await orchestrator.triage(TriageRequest(url=url))
    finally:
        orchestrator.close()

    return render_outcome(outcome)
