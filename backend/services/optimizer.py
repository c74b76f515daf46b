"""
Code Optimizer Service - Prompt the LLM and reshape its JSON reply
"""

from __future__ import annotations

import json
import re
from dataclasses import dataclass, field
from typing import Any

from .llm_service import LLMService, LLMServiceError

SYSTEM_PROMPT = """You are a code optimization expert. Analyze the provided code and return an optimized version along with a list of improvements made.

IMPORTANT: Return ONLY valid JSON in this exact format:
{
  "optimizedCode": "the optimized code here",
  "improvements": [
    "improvement 1",
    "improvement 2",
    "improvement 3"
  ]
}

Focus on:
- Modern syntax and best practices
- Performance improvements
- Code readability
- Removing redundancy
- Better structure

Do not include any markdown formatting, explanations, or text outside the JSON structure."""


class InvalidResponseError(LLMServiceError):
    """LLM reply could not be turned into optimized code"""

    status_code = 502
    public_message = "Invalid AI response format"


@dataclass
class OptimizationResult:
    optimized_code: str
    improvements: list[str] = field(default_factory=list)


def build_user_prompt(code: str, language: str) -> str:
    return f"Language: {language}\n\nCode to optimize:\n{code}"


def _outermost_object(text: str) -> str | None:
    brace_start = text.find("{")
    brace_end = text.rfind("}") + 1
    if brace_start < 0 or brace_end <= brace_start:
        return None
    return text[brace_start:brace_end]


def parse_json_reply(reply: str) -> dict[str, Any]:
    """Parse JSON from LLM reply, tolerating code fences and surrounding text"""
    text = reply.strip()
    candidates = [text, _outermost_object(text)]
    fence = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if fence:
        candidates.append(_outermost_object(fence.group(1)))

    for candidate in candidates:
        if not candidate:
            continue
        try:
            data = json.loads(candidate)
        except json.JSONDecodeError:
            continue
        if isinstance(data, dict):
            return data

    print(f"[Optimizer] Failed to parse AI response ({len(text)} chars)")
    raise InvalidResponseError()


def to_result(data: dict[str, Any]) -> OptimizationResult:
    """Validate the parsed reply and coerce improvements to a list of strings"""
    optimized = data.get("optimizedCode")
    if not isinstance(optimized, str):
        raise InvalidResponseError()

    improvements = data.get("improvements") or []
    if isinstance(improvements, str):
        improvements = [improvements]
    elif not isinstance(improvements, list):
        improvements = []

    return OptimizationResult(
        optimized_code=optimized,
        improvements=[str(item).strip() for item in improvements if str(item).strip()],
    )


class CodeOptimizer:
    """Send code to the optimization collaborator and return its suggestion"""

    def __init__(self, config: dict[str, Any], llm_service: LLMService | None = None):
        self.llm_service = llm_service or LLMService(config)

    async def optimize(self, code: str, language: str) -> OptimizationResult:
        print(f"[Optimizer] Optimizing {language} code ({len(code)} chars)...")
        reply = await self.llm_service.generate_response(
            SYSTEM_PROMPT, build_user_prompt(code, language)
        )
        result = to_result(parse_json_reply(reply))
        print(f"[Optimizer] Got {len(result.improvements)} improvements")
        return result
