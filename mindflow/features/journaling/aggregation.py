"""
Dashboard aggregation over journal entries.

Every function here is pure: it takes a snapshot of entries and derives
the counts from scratch, so calling it after each change is always
consistent with the store.
"""

from collections import Counter
from typing import Dict, Iterable, List

from mindflow.features.journaling.models import (
    Dashboard,
    EmotionCount,
    JournalEntry,
    Sentiment,
    SentimentCount,
)

SENTIMENT_COLORS: Dict[Sentiment, str] = {
    Sentiment.POSITIVE: "#14b8a6",  # teal-500
    Sentiment.NEGATIVE: "#f43f5e",  # rose-500
    Sentiment.NEUTRAL: "#94a3b8",   # slate-400
}


def emotion_frequency(entries: Iterable[JournalEntry]) -> List[EmotionCount]:
    """
    Count emotion labels across all analysed entries.

    Sorted by count descending. Counter keeps first-seen order and
    ``sorted`` is stable, so equal counts stay in first-seen order.
    """
    counts: Counter = Counter()
    for entry in entries:
        if entry.analysis is None:
            continue
        counts.update(entry.analysis.emotions)

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)
    return [EmotionCount(name=name, count=count) for name, count in ranked]


def sentiment_distribution(entries: Iterable[JournalEntry]) -> List[SentimentCount]:
    """Count entries per sentiment; always Positive, Negative, Neutral."""
    counts = {sentiment: 0 for sentiment in Sentiment}
    for entry in entries:
        if entry.analysis is not None:
            counts[entry.analysis.sentiment] += 1

    return [
        SentimentCount(name=sentiment, count=count, color=SENTIMENT_COLORS[sentiment])
        for sentiment, count in counts.items()
    ]


def build_dashboard(entries: Iterable[JournalEntry]) -> Dashboard:
    snapshot = list(entries)
    analyzed = sum(1 for entry in snapshot if entry.analysis is not None)
    return Dashboard(
        total_entries=len(snapshot),
        analyzed_entries=analyzed,
        is_empty=not snapshot,
        emotion_frequency=emotion_frequency(snapshot),
        sentiment_distribution=sentiment_distribution(snapshot),
    )
