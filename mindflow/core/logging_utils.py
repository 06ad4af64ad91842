"""
Logging utilities for journal text and LLM usage.

Includes:
- Redaction of user-written text before it reaches the logs
- Structured cost logging for analysis calls
"""
import json
import logging
import re
from typing import Optional


_CONTROL_CHARS = re.compile(r'[\x00-\x1F\x7F]')
_EMAIL_PATTERN = re.compile(r'\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b')
_PHONE_PATTERN = re.compile(r'\+?\(?\d{1,4}\)?[-.\s]?\d{3,4}[-.\s]?\d{3,4}\b')


def sanitize_entry_text(text: str, max_len: int = 60) -> str:
    """
    Make a journal entry safe to log.

    Emails and phone numbers are redacted, control characters removed and
    the result truncated to ``max_len`` characters.
    """
    cleaned = _EMAIL_PATTERN.sub('[EMAIL_REDACTED]', text)
    cleaned = _PHONE_PATTERN.sub('[PHONE_REDACTED]', cleaned)
    cleaned = _CONTROL_CHARS.sub(' ', cleaned).strip()
    if len(cleaned) > max_len:
        return cleaned[:max_len] + "..."
    return cleaned


# =============================================================================
# STRUCTURED COST LOGGING
# =============================================================================

_cost_logger = logging.getLogger("Mindflow.Cost")


def log_llm_usage(
    model: str,
    input_tokens: int,
    output_tokens: int,
    duration_ms: Optional[int] = None,
    endpoint: str = "journal.analyze",
) -> None:
    """
    Log a structured usage event for one analysis call.

    Produces a single ``LLM_COST {json}`` line that log aggregation can
    pick up for cost dashboards.
    """
    event = {
        "event": "llm_cost",
        "model": model,
        "input_tokens": input_tokens,
        "output_tokens": output_tokens,
        "total_tokens": input_tokens + output_tokens,
        "endpoint": endpoint,
    }

    if duration_ms is not None:
        event["duration_ms"] = duration_ms

    _cost_logger.info("LLM_COST %s", json.dumps(event))
