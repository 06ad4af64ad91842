"""
==============================================================================
JOURNAL ENTRY REQUEST LIFECYCLE
==============================================================================

Owns the session state of the journal: the entry store, the busy flag and
the last error. One analysis may be in flight at a time:

    Idle --submit(text)--> InFlight --success--> Idle  (entry prepended)
                                    --failure--> Idle  (AppError recorded)

A submit while InFlight, or with blank text, is ignored rather than queued.
After a failure the user may retry, which re-submits the original text.
Nothing is retried automatically.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Awaitable, Optional, Protocol

from mindflow.core.logging_utils import sanitize_entry_text
from mindflow.features.journaling.models import AnalysisResult, AppError, JournalEntry
from mindflow.features.journaling.store import EntryStore
from mindflow.shared.errors import InvalidCredentialsError, NetworkFailureError

logger = logging.getLogger("Mindflow.Journaling.Controller")

INVALID_CREDENTIALS_MESSAGE = "API key is invalid or missing. Please check your configuration."
NETWORK_ERROR_MESSAGE = "Network error. Please check your internet connection and try again."
UNAVAILABLE_MESSAGE = "Failed to analyze the entry. The AI service may be temporarily unavailable."


class Analyzer(Protocol):
    def analyze(self, text: str) -> Awaitable[AnalysisResult]:
        ...


class LifecycleState(str, Enum):
    IDLE = "idle"
    IN_FLIGHT = "in_flight"


class SubmissionStatus(str, Enum):
    CREATED = "created"
    FAILED = "failed"
    IGNORED_EMPTY = "ignored_empty"
    IGNORED_BUSY = "ignored_busy"
    NOTHING_TO_RETRY = "nothing_to_retry"


@dataclass(frozen=True)
class Submission:
    """Outcome of a submit or retry call."""

    status: SubmissionStatus
    entry: Optional[JournalEntry] = None
    error: Optional[AppError] = None


def classify_error(exc: BaseException) -> str:
    """Map an analysis failure to the message shown to the user."""
    if isinstance(exc, InvalidCredentialsError):
        return INVALID_CREDENTIALS_MESSAGE
    if isinstance(exc, (NetworkFailureError, asyncio.TimeoutError)):
        return NETWORK_ERROR_MESSAGE
    return UNAVAILABLE_MESSAGE


class RequestLifecycleController:
    """Single-flight orchestration of journal entry analysis."""

    def __init__(
        self,
        analyzer: Analyzer,
        store: Optional[EntryStore] = None,
        analysis_timeout: Optional[float] = None,
    ) -> None:
        self.analyzer = analyzer
        self.store = store if store is not None else EntryStore()
        self.analysis_timeout = analysis_timeout
        self._state = LifecycleState.IDLE
        self._error: Optional[AppError] = None

    @property
    def state(self) -> LifecycleState:
        return self._state

    @property
    def is_busy(self) -> bool:
        return self._state is LifecycleState.IN_FLIGHT

    @property
    def error(self) -> Optional[AppError]:
        return self._error

    async def submit(self, text: str) -> Submission:
        """
        Analyze ``text`` and, on success, prepend it to the store as a new entry.

        The guard and the switch to InFlight run before the first await, so
        on a single event loop no second submission can slip in between them.
        """
        if not text.strip():
            return Submission(SubmissionStatus.IGNORED_EMPTY)
        if self.is_busy:
            logger.info("Submission ignored: an analysis is already in flight")
            return Submission(SubmissionStatus.IGNORED_BUSY)

        self._state = LifecycleState.IN_FLIGHT
        self._error = None
        try:
            analysis = await self._analyze(text)
        except Exception as exc:  # pylint: disable=broad-except
            self._error = AppError(message=classify_error(exc), original_text=text)
            logger.warning(
                "Journal entry analysis failed (%s): %s",
                type(exc).__name__,
                sanitize_entry_text(text),
            )
            return Submission(SubmissionStatus.FAILED, error=self._error)
        finally:
            self._state = LifecycleState.IDLE

        entry = JournalEntry.create(text=text, analysis=analysis)
        self.store.prepend(entry)
        logger.info(
            "Journal entry stored",
            extra={"entry_id": entry.id, "entry_count": len(self.store)},
        )
        return Submission(SubmissionStatus.CREATED, entry=entry)

    async def retry(self) -> Submission:
        """Re-submit the text of the last failed attempt, if there is one."""
        if self._error is None:
            return Submission(SubmissionStatus.NOTHING_TO_RETRY)

        text_to_retry = self._error.original_text
        self._error = None
        logger.info("Retrying failed journal entry")
        return await self.submit(text_to_retry)

    async def _analyze(self, text: str) -> AnalysisResult:
        if self.analysis_timeout is None:
            return await self.analyzer.analyze(text)
        return await asyncio.wait_for(self.analyzer.analyze(text), timeout=self.analysis_timeout)
