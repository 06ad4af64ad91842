from typing import Any, Dict, List

import pytest

from fakes import FakeAnalyzer, make_analysis
from mindflow.features.journaling import JournalEntry, RequestLifecycleController


@pytest.fixture
def analysis_payload() -> Dict[str, Any]:
    return {
        "sentiment": "Negative",
        "emotions": ["Anxiety", "Frustration"],
        "triggers": ["Work stress"],
        "suggestions": ["Take short breaks", "Write down tomorrow's priorities"],
        "summary": "A stressful day dominated by an approaching deadline.",
    }


@pytest.fixture
def fake_analyzer() -> FakeAnalyzer:
    return FakeAnalyzer([make_analysis()])


@pytest.fixture
def controller(fake_analyzer) -> RequestLifecycleController:
    return RequestLifecycleController(analyzer=fake_analyzer)


@pytest.fixture
def sample_entries() -> List[JournalEntry]:
    """Three entries as the store would hold them, newest first."""
    return [
        JournalEntry.create("Had a great chat with an old friend.", make_analysis("Positive", ["Joy", "Calm"])),
        JournalEntry.create("Finished the project early.", make_analysis("Positive", ["Joy"])),
        JournalEntry.create("Not sure about tomorrow's interview.", make_analysis("Neutral", ["Anxiety"])),
    ]
