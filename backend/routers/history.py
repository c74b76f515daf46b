"""History API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from fastapi.responses import PlainTextResponse

from models.history import HistoryEntry, HistoryListResponse
from services.highlighter import resolve_language
from services.history_store import HistoryStore

router = APIRouter()


def _get_entry(entry_id: str) -> HistoryEntry:
    entry = HistoryStore.get_instance().get(entry_id)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"History entry not found: {entry_id}")
    return entry


@router.get("", response_model=HistoryListResponse)
async def list_history() -> HistoryListResponse:
    """Recent optimizations, newest first"""
    store = HistoryStore.get_instance()
    return HistoryListResponse(entries=store.list_entries(), maxEntries=store.max_entries)


@router.get("/{entry_id}", response_model=HistoryEntry)
async def get_history_entry(entry_id: str) -> HistoryEntry:
    return _get_entry(entry_id)


@router.get("/{entry_id}/download")
async def download_optimized(entry_id: str) -> PlainTextResponse:
    """Optimized code of an entry as a file attachment"""
    entry = _get_entry(entry_id)
    extension = resolve_language(entry.language).extension
    return PlainTextResponse(
        entry.optimizedCode,
        headers={"Content-Disposition": f'attachment; filename="optimized.{extension}"'},
    )


@router.delete("")
async def clear_history() -> dict[str, Any]:
    HistoryStore.get_instance().clear()
    return {"status": "success", "message": "History cleared"}
