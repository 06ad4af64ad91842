"""
Journaling API Routes

Submit entries for analysis, retry the last failed one, and read back the
session's entries and dashboard aggregates.
"""

import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from mindflow.api.dependencies import get_controller
from mindflow.api.models import EntryListResponse, EntryRequest, SessionResponse
from mindflow.features.journaling import (
    RequestLifecycleController,
    Submission,
    SubmissionStatus,
    build_dashboard,
)
from mindflow.features.journaling.models import Dashboard
from mindflow.shared.errors import (
    conflict_error,
    get_correlation_id,
    not_found_error,
    service_unavailable_error,
    validation_error,
)

router = APIRouter(tags=["Journaling"])
logger = logging.getLogger("Mindflow.API.Journaling")


def _submission_response(submission: Submission, request: Request) -> JSONResponse:
    """Translate a controller outcome into the HTTP response."""
    correlation_id = get_correlation_id(request)

    if submission.status is SubmissionStatus.CREATED:
        return JSONResponse(
            status_code=201,
            content=submission.entry.model_dump(mode="json"),
        )
    if submission.status is SubmissionStatus.IGNORED_EMPTY:
        return validation_error(
            "Journal entry text must not be empty",
            details={"field": "text"},
            correlation_id=correlation_id,
        )
    if submission.status is SubmissionStatus.IGNORED_BUSY:
        return conflict_error(
            "An entry is already being analyzed. Please wait for it to finish.",
            correlation_id=correlation_id,
        )
    if submission.status is SubmissionStatus.NOTHING_TO_RETRY:
        return not_found_error(
            "There is no failed entry to retry",
            resource_type="error",
            correlation_id=correlation_id,
        )
    return service_unavailable_error(
        submission.error.message,
        details={"original_text": submission.error.original_text},
        correlation_id=correlation_id,
    )


@router.post("/journal/entries", status_code=201)
async def submit_entry(
    payload: EntryRequest,
    request: Request,
    controller: RequestLifecycleController = Depends(get_controller),
) -> JSONResponse:
    """Analyze a new journal entry and add it to the session."""
    submission = await controller.submit(payload.text.strip())
    return _submission_response(submission, request)


@router.post("/journal/retry", status_code=201)
async def retry_entry(
    request: Request,
    controller: RequestLifecycleController = Depends(get_controller),
) -> JSONResponse:
    """Try the last failed entry again."""
    submission = await controller.retry()
    return _submission_response(submission, request)


@router.get("/journal/entries", response_model=EntryListResponse)
async def list_entries(
    controller: RequestLifecycleController = Depends(get_controller),
) -> EntryListResponse:
    """List the session's entries (latest first)."""
    entries = controller.store.all()
    return EntryListResponse(entries=list(entries), count=len(entries))


@router.get("/journal/session", response_model=SessionResponse)
async def get_session(
    controller: RequestLifecycleController = Depends(get_controller),
) -> SessionResponse:
    """Whether an analysis is running, and the last error if any."""
    return SessionResponse(
        state=controller.state.value,
        is_busy=controller.is_busy,
        entry_count=len(controller.store),
        error=controller.error,
    )


@router.get("/journal/dashboard", response_model=Dashboard)
async def get_dashboard(
    controller: RequestLifecycleController = Depends(get_controller),
) -> Dashboard:
    """Emotion frequency and sentiment distribution over all entries."""
    return build_dashboard(controller.store.all())
