from pydantic import BaseModel, Field
from typing import Optional, List

from mindflow.features.journaling.models import AppError, JournalEntry


class EntryRequest(BaseModel):
    text: str = Field(description="Free-text journal entry")


class EntryListResponse(BaseModel):
    entries: List[JournalEntry] = Field(default_factory=list)
    count: int = 0


class SessionResponse(BaseModel):
    state: str
    is_busy: bool
    entry_count: int
    error: Optional[AppError] = None
