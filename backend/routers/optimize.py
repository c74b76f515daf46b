"""Optimize mode API endpoints"""

from __future__ import annotations

from fastapi import APIRouter, HTTPException

from models.diff import DiffResult
from models.optimize import (
    DiffRequest,
    HighlightRequest,
    HighlightResponse,
    LanguageInfo,
    OptimizeRequest,
    OptimizeResponse,
)
from services.config_manager import ConfigManager
from services.diff_generator import DiffGenerator
from services.highlighter import highlight_html, resolve_language, supported_languages, tokenize
from services.history_store import HistoryStore
from services.llm_service import LLMServiceError
from services.optimizer import CodeOptimizer

router = APIRouter()
diff_generator = DiffGenerator()


@router.post("", response_model=OptimizeResponse)
async def optimize_code(request: OptimizeRequest) -> OptimizeResponse:
    """Optimize code through the LLM and diff it against the original"""
    if not request.code.strip() or not request.language.strip():
        raise HTTPException(status_code=400, detail="Code and language are required")

    config = ConfigManager.get_instance().get_config()
    optimizer = CodeOptimizer(config)

    try:
        result = await optimizer.optimize(request.code, request.language)
    except LLMServiceError as e:
        print(f"[Backend] Error in optimize-code: {e}")
        raise HTTPException(status_code=e.status_code, detail=e.public_message)

    # Diff only when both sides have content
    diff = None
    if request.code and result.optimized_code:
        diff = diff_generator.generate_diff(request.code, result.optimized_code)

    history_id = None
    try:
        entry = HistoryStore.get_instance().record(
            request.language,
            request.code,
            result.optimized_code,
            result.improvements,
        )
        history_id = entry.id
    except RuntimeError as e:
        print(f"[HistoryStore] Optimization not recorded: {e}")

    return OptimizeResponse(
        optimizedCode=result.optimized_code,
        improvements=result.improvements,
        language=request.language,
        diff=diff,
        historyId=history_id,
    )


@router.post("/diff", response_model=DiffResult)
async def diff_code(request: DiffRequest) -> DiffResult:
    """Line diff of two texts, no LLM involved"""
    return diff_generator.generate_diff(request.original, request.modified)


@router.post("/highlight", response_model=HighlightResponse)
async def highlight_code(request: HighlightRequest) -> HighlightResponse:
    """Token-colored rendering for the plain code view"""
    return HighlightResponse(
        language=resolve_language(request.language).id,
        tokens=tokenize(request.code, request.language),
        html=highlight_html(request.code, request.language),
    )


@router.get("/languages", response_model=list[LanguageInfo])
async def list_languages() -> list[LanguageInfo]:
    return supported_languages()
