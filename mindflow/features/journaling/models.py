"""Pydantic models for journal entries and their analyses."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field


class Sentiment(str, Enum):
    """Overall sentiment of an entry. Declaration order is the dashboard order."""

    POSITIVE = "Positive"
    NEGATIVE = "Negative"
    NEUTRAL = "Neutral"


class AnalysisResult(BaseModel):
    """Structured analysis of a single journal entry."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    sentiment: Sentiment
    emotions: Tuple[str, ...]
    triggers: Tuple[str, ...]
    suggestions: Tuple[str, ...]
    summary: str


class JournalEntry(BaseModel):
    """A submitted journal text together with its completed analysis."""

    model_config = ConfigDict(frozen=True)

    id: str
    date: str
    created_at: datetime
    text: str
    analysis: Optional[AnalysisResult] = None

    @classmethod
    def create(cls, text: str, analysis: Optional[AnalysisResult]) -> "JournalEntry":
        """Stamp a new entry with its id and creation time."""
        now = datetime.now(timezone.utc)
        return cls(
            id=f"{now.strftime('%Y%m%dT%H%M%S%f')}-{uuid.uuid4().hex[:6]}",
            date=now.astimezone().strftime("%Y-%m-%d %H:%M:%S"),
            created_at=now,
            text=text,
            analysis=analysis,
        )


class AppError(BaseModel):
    """The last failed submission: what to tell the user and what to retry."""

    model_config = ConfigDict(frozen=True)

    message: str
    original_text: str


# =============================================================================
# DASHBOARD MODELS
# =============================================================================

class EmotionCount(BaseModel):
    name: str
    count: int


class SentimentCount(BaseModel):
    name: Sentiment
    count: int
    color: str = ""


class Dashboard(BaseModel):
    """Aggregates shown on the wellness dashboard."""
    total_entries: int
    analyzed_entries: int
    is_empty: bool
    emotion_frequency: list[EmotionCount] = Field(default_factory=list)
    sentiment_distribution: list[SentimentCount] = Field(default_factory=list)
