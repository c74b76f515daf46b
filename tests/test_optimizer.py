import asyncio
import json

import pytest

from services.optimizer import (
    SYSTEM_PROMPT,
    CodeOptimizer,
    InvalidResponseError,
    build_user_prompt,
    parse_json_reply,
    to_result,
)


class FakeLLM:
    def __init__(self, reply):
        self.reply = reply
        self.calls = []

    async def generate_response(self, system_prompt, user_prompt):
        self.calls.append((system_prompt, user_prompt))
        return self.reply


def test_parse_plain_json():
    assert parse_json_reply('{"optimizedCode": "x", "improvements": []}')["optimizedCode"] == "x"


def test_parse_fenced_json():
    reply = 'Here you go:\n```json\n{"optimizedCode": "y = 1", "improvements": ["a"]}\n```'
    assert parse_json_reply(reply) == {"optimizedCode": "y = 1", "improvements": ["a"]}


def test_parse_json_embedded_in_text():
    reply = 'Sure! {"optimizedCode": "z", "improvements": ["b"]} Hope that helps.'
    assert parse_json_reply(reply)["improvements"] == ["b"]


@pytest.mark.parametrize("reply", ["not json at all", "{broken", "[1, 2]"])
def test_parse_rejects_garbage(reply):
    with pytest.raises(InvalidResponseError):
        parse_json_reply(reply)


def test_to_result_requires_code_string():
    with pytest.raises(InvalidResponseError):
        to_result({"improvements": ["a"]})


def test_to_result_coerces_improvements():
    assert to_result({"optimizedCode": "x", "improvements": "one"}).improvements == ["one"]
    assert to_result({"optimizedCode": "x", "improvements": ["a", "", "  ", 3]}).improvements == ["a", "3"]
    assert to_result({"optimizedCode": "x", "improvements": None}).improvements == []


def test_optimize_sends_prompts_and_returns_result():
    fake = FakeLLM(json.dumps({"optimizedCode": "const a = 1;", "improvements": ["Used const"]}))
    optimizer = CodeOptimizer({}, llm_service=fake)

    result = asyncio.run(optimizer.optimize("var a = 1;", "javascript"))

    assert result.optimized_code == "const a = 1;"
    assert result.improvements == ["Used const"]
    assert fake.calls == [(SYSTEM_PROMPT, build_user_prompt("var a = 1;", "javascript"))]
    assert fake.calls[0][1] == "Language: javascript\n\nCode to optimize:\nvar a = 1;"


def test_parse_unfenced_json_with_backticks_inside_strings():
    reply = (
        'Result: {"optimizedCode": "x = 1", '
        '"improvements": ["Wrapped the ```sql``` snippet in a helper"]}'
    )
    assert parse_json_reply(reply)["improvements"] == ["Wrapped the ```sql``` snippet in a helper"]
