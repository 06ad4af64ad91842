from functools import lru_cache

from mindflow.core.config import settings
from mindflow.features.journaling import RequestLifecycleController
from mindflow.services.llm import EntryAnalyzer


@lru_cache(maxsize=1)
def get_analyzer() -> EntryAnalyzer:
    """Provide a singleton Claude analyzer; raises MissingCredentialsError without a key."""
    return EntryAnalyzer()


@lru_cache(maxsize=1)
def get_controller() -> RequestLifecycleController:
    """Provide the session's journal controller for request handlers."""
    return RequestLifecycleController(
        analyzer=get_analyzer(),
        analysis_timeout=settings.ANALYSIS_TIMEOUT_SECONDS,
    )
