"""History data models"""

from __future__ import annotations

from pydantic import BaseModel


class HistoryEntry(BaseModel):
    """A single recorded optimization"""

    id: str
    language: str
    originalCode: str
    optimizedCode: str
    improvements: list[str] = []
    createdAt: str  # ISO 8601, UTC


class HistoryListResponse(BaseModel):
    """History entries, newest first"""

    entries: list[HistoryEntry]
    maxEntries: int
