"""
LLM Service - Handles interactions with the code optimization providers
"""

from __future__ import annotations

import asyncio
from typing import Any

import aiohttp


class LLMServiceError(Exception):
    """Upstream LLM call failed"""

    status_code = 500
    public_message = "Failed to optimize code"

    def __init__(self, message: str | None = None):
        super().__init__(message or self.public_message)


class ServiceNotConfiguredError(LLMServiceError):
    public_message = "AI service not configured"


class RateLimitError(LLMServiceError):
    status_code = 429
    public_message = "Rate limit exceeded. Please try again later."


class CreditsExhaustedError(LLMServiceError):
    status_code = 402
    public_message = "AI credits exhausted. Please add credits to continue."


class UpstreamUnavailableError(LLMServiceError):
    """Retryable upstream failure (timeout, 503, connection reset)"""

    status_code = 503
    public_message = "AI service temporarily unavailable"


class LLMService:
    """Service for interacting with the configured LLM provider"""

    def __init__(self, config: dict[str, Any]):
        self.config = config
        self.provider = config.get("provider", "gateway")
        self.max_retries = int(config.get("maxRetries", 2))
        self.timeout_seconds = int(config.get("timeoutSeconds", 60))

    # ========== Config Helpers ==========

    def _get_chat_config(self, provider: str) -> tuple[str, str, dict[str, str]]:
        """Get OpenAI-compatible config: (model, url, headers). Raises if api_key missing."""
        cfg = self.config.get(provider, {})
        api_key = cfg.get("apiKey")
        if not api_key:
            print(f"[LLMService] {provider} API key is not configured")
            raise ServiceNotConfiguredError()
        url = cfg.get("endpoint") or "https://ai.gateway.lovable.dev/v1/chat/completions"
        model = cfg.get("model", "google/gemini-2.5-flash")
        headers = {"Authorization": f"Bearer {api_key}", "Content-Type": "application/json"}
        return model, url, headers

    def _get_gemini_config(self) -> tuple[str, str]:
        """Get Gemini config: (model, url). Raises if api_key missing."""
        cfg = self.config.get("gemini", {})
        api_key = cfg.get("apiKey")
        if not api_key:
            print("[LLMService] gemini API key is not configured")
            raise ServiceNotConfiguredError()
        model = cfg.get("model", "gemini-2.5-flash")
        url = (
            f"https://generativelanguage.googleapis.com/v1beta/models/{model}"
            f":generateContent?key={api_key}"
        )
        return model, url

    # ========== Payload Builders ==========

    def _build_chat_payload(
        self,
        model: str,
        system_prompt: str,
        user_prompt: str,
        temperature: float = 0.2,
    ) -> dict[str, Any]:
        """Build OpenAI-compatible request payload"""
        return {
            "model": model,
            "messages": [
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            "temperature": temperature,
        }

    def _build_gemini_payload(self, system_prompt: str, user_prompt: str) -> dict[str, Any]:
        """Build Gemini API request payload"""
        return {
            "systemInstruction": {"parts": [{"text": system_prompt}]},
            "contents": [{"role": "user", "parts": [{"text": user_prompt}]}],
            "generationConfig": {
                "temperature": 0.2,
                "responseMimeType": "application/json",
            },
        }

    # ========== Response Parsers ==========

    def _parse_chat_response(self, data: dict[str, Any]) -> str:
        """Parse OpenAI-compatible response format"""
        try:
            choice = data["choices"][0]
            message = choice.get("message") or {}
            if isinstance(message.get("content"), str):
                return message["content"]
            if isinstance(choice.get("text"), str):
                return choice["text"]
        except (AttributeError, TypeError, IndexError, KeyError):
            pass
        raise LLMServiceError("No valid response from API")

    def _parse_gemini_response(self, data: dict[str, Any]) -> str:
        """Parse Gemini API response format"""
        try:
            text = data["candidates"][0]["content"]["parts"][0]["text"]
        except (AttributeError, TypeError, IndexError, KeyError):
            text = None
        if isinstance(text, str):
            return text
        raise LLMServiceError("No valid response from Gemini API")

    # ========== HTTP ==========

    def _raise_for_status(self, status: int, error_text: str, provider: str):
        """Map an upstream HTTP status to the matching service error"""
        if status == 200:
            return
        print(f"[LLMService] {provider} API error: {status} {error_text[:500]}")
        if status == 429:
            raise RateLimitError()
        if status == 402:
            raise CreditsExhaustedError()
        if status in (502, 503, 504):
            raise UpstreamUnavailableError(f"{provider} API unavailable ({status})")
        raise LLMServiceError()

    async def _request_json(
        self,
        url: str,
        payload: dict[str, Any],
        headers: dict[str, str] | None = None,
        provider: str = "API",
    ) -> dict[str, Any]:
        """POST payload and return the JSON body"""
        timeout = aiohttp.ClientTimeout(total=self.timeout_seconds)
        try:
            async with aiohttp.ClientSession(timeout=timeout) as session:
                async with session.post(url, json=payload, headers=headers) as response:
                    if response.status != 200:
                        self._raise_for_status(response.status, await response.text(), provider)
                    try:
                        return await response.json(content_type=None)
                    except ValueError as e:
                        raise LLMServiceError(f"{provider} returned a non-JSON body: {e}")
        except asyncio.TimeoutError:
            raise UpstreamUnavailableError(f"{provider} request timed out")
        except aiohttp.ClientError as e:
            raise UpstreamUnavailableError(f"{provider} network error: {e}")

    async def _retry_with_backoff(self, operation, provider: str = "API"):
        """Execute operation, retrying transient failures with exponential backoff"""
        attempts = self.max_retries + 1
        for attempt in range(attempts):
            try:
                return await operation()
            except UpstreamUnavailableError as e:
                if attempt >= attempts - 1:
                    raise
                wait_time = 2**attempt
                print(
                    f"[LLMService] {e}. Retrying {provider} in {wait_time}s... "
                    f"(attempt {attempt + 1}/{attempts})"
                )
                await asyncio.sleep(wait_time)

    # ========== Public API ==========

    async def generate_response(self, system_prompt: str, user_prompt: str) -> str:
        """Generate a response from the configured LLM provider"""
        if self.provider in ("gateway", "openai"):
            return await self._call_chat(self.provider, system_prompt, user_prompt)
        elif self.provider == "gemini":
            return await self._call_gemini(system_prompt, user_prompt)
        else:
            raise ServiceNotConfiguredError(f"Unsupported provider: {self.provider}")

    async def _call_chat(self, provider: str, system_prompt: str, user_prompt: str) -> str:
        """Call an OpenAI-compatible chat completions endpoint"""
        model, url, headers = self._get_chat_config(provider)
        payload = self._build_chat_payload(model, system_prompt, user_prompt)
        print(f"[LLMService] Calling {provider} with model: {model}")

        async def _execute_request():
            data = await self._request_json(url, payload, headers, provider=provider)
            return self._parse_chat_response(data)

        response_text = await self._retry_with_backoff(_execute_request, provider)
        print(f"[LLMService] Received response from {model} (length: {len(response_text)} chars)")
        return response_text

    async def _call_gemini(self, system_prompt: str, user_prompt: str) -> str:
        """Call Google Gemini API"""
        model, url = self._get_gemini_config()
        payload = self._build_gemini_payload(system_prompt, user_prompt)
        print(f"[LLMService] Calling Gemini API with model: {model}")

        async def _execute_request():
            data = await self._request_json(url, payload, provider="Gemini")
            return self._parse_gemini_response(data)

        response_text = await self._retry_with_backoff(_execute_request, "Gemini")
        print(f"[LLMService] Received response from {model} (length: {len(response_text)} chars)")
        return response_text


async def call_llm(system_prompt: str, user_prompt: str, config: dict[str, Any]) -> str:
    """Convenience function to call LLM with the given config."""
    service = LLMService(config)
    return await service.generate_response(system_prompt, user_prompt)
