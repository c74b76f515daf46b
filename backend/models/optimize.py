"""Optimize mode data models"""

from __future__ import annotations

from pydantic import BaseModel

from .diff import DiffResult


class OptimizeRequest(BaseModel):
    """Request to optimize a piece of source code"""

    code: str = ""
    language: str = ""


class OptimizeResponse(BaseModel):
    """Optimized code with the list of improvements applied"""

    optimizedCode: str
    improvements: list[str] = []
    language: str
    diff: DiffResult | None = None
    historyId: str | None = None


class DiffRequest(BaseModel):
    """Request for a line diff of two texts"""

    original: str
    modified: str


class HighlightRequest(BaseModel):
    """Request for syntax highlighting"""

    code: str
    language: str = "javascript"


class Token(BaseModel):
    """A highlighted token"""

    type: str  # "keyword", "string", "comment", "number", "plain"
    text: str


class HighlightResponse(BaseModel):
    """Highlighted code as tokens and as HTML"""

    language: str
    tokens: list[Token]
    html: str


class LanguageInfo(BaseModel):
    """Supported language description"""

    id: str
    name: str
    extension: str
