import os
from typing import Optional

from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _optional_float(name: str) -> Optional[float]:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return None
    return float(raw)


_ANTHROPIC_API_KEY = os.getenv('ANTHROPIC_API_KEY') or os.getenv('CLAUDE_API_KEY')

_MINDFLOW_MODEL = os.getenv('MINDFLOW_MODEL') or os.getenv('CLAUDE_MODEL', 'claude-haiku-4-5-20251001')
_MINDFLOW_TEMPERATURE = float(os.getenv('MINDFLOW_TEMPERATURE', '0.5'))
_MINDFLOW_MAX_TOKENS = int(os.getenv('MINDFLOW_MAX_TOKENS', '1024'))

# Unset means the controller waits for the SDK's own transport timeout.
_ANALYSIS_TIMEOUT_SECONDS = _optional_float('ANALYSIS_TIMEOUT_SECONDS')


class Config:
    """Central configuration for the journaling service."""

    ANTHROPIC_API_KEY = _ANTHROPIC_API_KEY

    MINDFLOW_MODEL = _MINDFLOW_MODEL
    MINDFLOW_TEMPERATURE = _MINDFLOW_TEMPERATURE
    MINDFLOW_MAX_TOKENS = _MINDFLOW_MAX_TOKENS

    ANALYSIS_TIMEOUT_SECONDS = _ANALYSIS_TIMEOUT_SECONDS

    SERVICE_NAME = os.getenv('SERVICE_NAME', 'mindflow-journal-service')


settings = Config()
