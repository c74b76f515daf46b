"""Models module - Pydantic data models"""

from .diff import DiffKind, DiffLine, DiffResult, DiffStats, NumberedDiffLine
from .history import HistoryEntry, HistoryListResponse
from .optimize import (
    DiffRequest,
    HighlightRequest,
    HighlightResponse,
    LanguageInfo,
    OptimizeRequest,
    OptimizeResponse,
    Token,
)

__all__ = [
    # Diff models
    "DiffKind",
    "DiffLine",
    "NumberedDiffLine",
    "DiffStats",
    "DiffResult",
    # Optimize models
    "OptimizeRequest",
    "OptimizeResponse",
    "DiffRequest",
    "HighlightRequest",
    "HighlightResponse",
    "LanguageInfo",
    "Token",
    # History models
    "HistoryEntry",
    "HistoryListResponse",
]
