"""
Journaling feature module.

- Entry and analysis models
- In-memory session store
- Request lifecycle (submit / retry) for entry analysis
- Dashboard aggregation
"""

from mindflow.features.journaling.aggregation import (
    build_dashboard,
    emotion_frequency,
    sentiment_distribution,
)
from mindflow.features.journaling.controller import (
    LifecycleState,
    RequestLifecycleController,
    Submission,
    SubmissionStatus,
    classify_error,
)
from mindflow.features.journaling.models import (
    AnalysisResult,
    AppError,
    JournalEntry,
    Sentiment,
)
from mindflow.features.journaling.store import EntryStore

__all__ = [
    "AnalysisResult",
    "AppError",
    "EntryStore",
    "JournalEntry",
    "LifecycleState",
    "RequestLifecycleController",
    "Sentiment",
    "Submission",
    "SubmissionStatus",
    "build_dashboard",
    "classify_error",
    "emotion_frequency",
    "sentiment_distribution",
]
