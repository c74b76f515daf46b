"""Configuration API endpoints"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from services.config_manager import ConfigManager
from services.history_store import HistoryStore
from services.llm_service import LLMServiceError, call_llm

router = APIRouter()

PROVIDERS = ("gateway", "openai", "gemini")


class HistorySettings(BaseModel):
    """History log settings"""

    maxEntries: int = Field(default=20, ge=1, le=1000)


class ConfigUpdateRequest(BaseModel):
    """Request to update configuration"""

    provider: str | None = None
    gateway: dict | None = None
    openai: dict | None = None
    gemini: dict | None = None
    maxRetries: int | None = None
    timeoutSeconds: int | None = None
    history: HistorySettings | None = None


class ConfigResponse(BaseModel):
    """Configuration response"""

    provider: str
    gateway: dict
    openai: dict
    gemini: dict
    maxRetries: int
    timeoutSeconds: int
    history: dict


class ValidateResponse(BaseModel):
    """Validation response"""

    valid: bool
    message: str
    provider: str


def mask_key(key: str) -> str:
    """Mask API keys for display"""
    if not key:
        return ""
    if len(key) <= 8:
        return "*" * len(key)
    return key[:4] + "*" * (len(key) - 8) + key[-4:]


@router.get("", response_model=ConfigResponse)
async def get_config() -> ConfigResponse:
    """Get current configuration"""
    config = ConfigManager.get_instance().get_config()

    blocks = {}
    for provider in PROVIDERS:
        block = dict(config.get(provider, {}))
        block["apiKey"] = mask_key(block.get("apiKey", ""))
        blocks[provider] = block

    return ConfigResponse(
        provider=config.get("provider", "gateway"),
        maxRetries=config.get("maxRetries", 2),
        timeoutSeconds=config.get("timeoutSeconds", 60),
        history=config.get("history", {}),
        **blocks,
    )


@router.put("")
async def update_config(request: ConfigUpdateRequest) -> dict[str, Any]:
    """Update configuration"""
    if request.provider and request.provider not in PROVIDERS:
        raise HTTPException(status_code=400, detail=f"Unsupported provider: {request.provider}")

    config_manager = ConfigManager.get_instance()
    current_config = config_manager.get_stored_config()

    # Update only provided fields
    if request.provider:
        current_config["provider"] = request.provider
    for key in PROVIDERS:
        block = getattr(request, key)
        if block:
            # A masked key echoed back from GET must not replace the real one
            if "*" in str(block.get("apiKey", "")):
                block = {k: v for k, v in block.items() if k != "apiKey"}
            current_config[key] = {**current_config.get(key, {}), **block}
    if request.history is not None:
        current_config["history"] = {
            **current_config.get("history", {}),
            **request.history.model_dump(),
        }
    if request.maxRetries is not None:
        current_config["maxRetries"] = max(0, request.maxRetries)
    if request.timeoutSeconds is not None:
        current_config["timeoutSeconds"] = max(1, request.timeoutSeconds)

    config_manager.save_config(current_config)

    if request.history is not None:
        HistoryStore.get_instance().resize(request.history.maxEntries)

    return {"status": "success", "message": "Configuration updated"}


@router.post("/validate", response_model=ValidateResponse)
async def validate_config() -> ValidateResponse:
    """Validate current configuration by testing LLM connection"""
    config = ConfigManager.get_instance().get_config()
    provider = config.get("provider", "gateway")

    try:
        response = await call_llm(
            "You are a connectivity check.", "Say 'OK' if you can hear me.", config
        )
    except LLMServiceError as e:
        return ValidateResponse(
            valid=False,
            message=f"Connection failed: {e}",
            provider=provider,
        )

    if response:
        return ValidateResponse(
            valid=True,
            message=f"Successfully connected to {provider}",
            provider=provider,
        )
    return ValidateResponse(
        valid=False,
        message="Received empty response from LLM",
        provider=provider,
    )
