import json

import pytest

from services.history_store import HistoryStore
from services.llm_service import CreditsExhaustedError, LLMService, RateLimitError

ORIGINAL = """function calculateTotal(items) {
  var total = 0;
  for (var i = 0; i < items.length; i++) {
    total = total + items[i].price;
  }
  return total;
}"""

OPTIMIZED = """const calculateTotal = (items) => {
  return items.reduce((sum, item) => sum + item.price, 0);
};"""


@pytest.fixture
def llm_reply(monkeypatch):
    """Replace the upstream call with a canned reply or error"""
    state = {"reply": json.dumps({"optimizedCode": OPTIMIZED, "improvements": ["Used reduce"]})}

    async def fake_generate(self, system_prompt, user_prompt):
        if isinstance(state["reply"], Exception):
            raise state["reply"]
        return state["reply"]

    monkeypatch.setattr(LLMService, "generate_response", fake_generate)
    return state


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "service": "six-eyes-backend"}


def test_optimize_returns_code_improvements_and_diff(client, llm_reply):
    response = client.post("/api/optimize", json={"code": ORIGINAL, "language": "javascript"})
    assert response.status_code == 200
    data = response.json()

    assert data["optimizedCode"] == OPTIMIZED
    assert data["improvements"] == ["Used reduce"]
    assert data["diff"]["lines"][0] == {
        "kind": "remove",
        "content": "function calculateTotal(items) {",
        "old_line": 1,
        "new_line": None,
    }
    assert data["diff"]["stats"] == {"added": 3, "removed": 7, "unchanged": 0}


def test_optimize_records_history_and_download(client, llm_reply):
    history_id = client.post(
        "/api/optimize", json={"code": ORIGINAL, "language": "python"}
    ).json()["historyId"]

    entries = client.get("/api/history").json()["entries"]
    assert [e["id"] for e in entries] == [history_id]

    download = client.get(f"/api/history/{history_id}/download")
    assert download.status_code == 200
    assert download.text == OPTIMIZED
    assert download.headers["content-disposition"] == 'attachment; filename="optimized.py"'

    assert client.delete("/api/history").status_code == 200
    assert client.get(f"/api/history/{history_id}").status_code == 404


@pytest.mark.parametrize("body", [{"code": "", "language": "python"}, {"code": "x = 1"}, {}])
def test_optimize_requires_code_and_language(client, body):
    response = client.post("/api/optimize", json=body)
    assert response.status_code == 400
    assert response.json()["detail"] == "Code and language are required"


def test_optimize_without_api_key(client):
    response = client.post("/api/optimize", json={"code": "x = 1", "language": "python"})
    assert response.status_code == 500
    assert response.json()["detail"] == "AI service not configured"


@pytest.mark.parametrize(
    "error, status, detail",
    [
        (RateLimitError(), 429, "Rate limit exceeded. Please try again later."),
        (CreditsExhaustedError(), 402, "AI credits exhausted. Please add credits to continue."),
    ],
)
def test_optimize_upstream_errors(client, llm_reply, error, status, detail):
    llm_reply["reply"] = error
    response = client.post("/api/optimize", json={"code": "x = 1", "language": "python"})
    assert response.status_code == status
    assert response.json()["detail"] == detail


def test_optimize_malformed_reply(client, llm_reply):
    llm_reply["reply"] = "I could not do that"
    response = client.post("/api/optimize", json={"code": "x = 1", "language": "python"})
    assert response.status_code == 502
    assert response.json()["detail"] == "Invalid AI response format"


def test_optimize_empty_result_has_no_diff(client, llm_reply):
    llm_reply["reply"] = json.dumps({"optimizedCode": "", "improvements": []})
    response = client.post("/api/optimize", json={"code": "x = 1", "language": "python"})
    assert response.status_code == 200
    assert response.json()["diff"] is None


def test_diff_endpoint(client):
    response = client.post("/api/optimize/diff", json={"original": "x", "modified": "y"})
    assert response.status_code == 200
    assert [(l["kind"], l["content"]) for l in response.json()["lines"]] == [
        ("remove", "x"),
        ("add", "y"),
    ]


def test_highlight_endpoint(client):
    response = client.post("/api/optimize/highlight", json={"code": "let a = 'b';", "language": "js"})
    data = response.json()
    assert data["language"] == "javascript"
    assert data["html"] == (
        '<span class="token-keyword">let</span> a = '
        "<span class=\"token-string\">&#x27;b&#x27;</span>;"
    )


def test_languages_endpoint(client):
    ids = [lang["id"] for lang in client.get("/api/optimize/languages").json()]
    assert "typescript" in ids


def test_config_masks_keys_and_updates(client, monkeypatch):
    monkeypatch.setenv("LOVABLE_API_KEY", "sk-test-1234567890")
    config = client.get("/api/config").json()
    assert config["gateway"]["apiKey"] == "sk-t**********7890"

    response = client.put("/api/config", json={"provider": "openai", "history": {"maxEntries": 5}})
    assert response.status_code == 200
    config = client.get("/api/config").json()
    assert config["provider"] == "openai"
    assert config["history"]["maxEntries"] == 5
    assert client.get("/api/history").json()["maxEntries"] == 5


def test_config_rejects_unknown_provider(client):
    assert client.put("/api/config", json={"provider": "bogus"}).status_code == 400


def test_validate_reports_failure_without_key(client):
    data = client.post("/api/config/validate").json()
    assert data["valid"] is False
    assert data["provider"] == "gateway"


def test_optimize_malformed_upstream_payload(client, monkeypatch):
    monkeypatch.setenv("LOVABLE_API_KEY", "key")

    async def fake_request_json(self, *args, **kwargs):
        return {"choices": ["oops"]}

    monkeypatch.setattr(LLMService, "_request_json", fake_request_json)
    response = client.post("/api/optimize", json={"code": "x = 1", "language": "python"})
    assert response.status_code == 500
    assert response.json()["detail"] == "Failed to optimize code"


@pytest.mark.parametrize("max_entries", ["lots", 0, -3])
def test_config_rejects_bad_history_limit(client, isolated_config, max_entries):
    response = client.put("/api/config", json={"history": {"maxEntries": max_entries}})
    assert response.status_code == 422
    assert not (isolated_config / "config.json").exists()


def test_history_limit_change_trims_running_store(client, llm_reply):
    for n in range(3):
        client.post("/api/optimize", json={"code": f"x = {n}", "language": "python"})

    assert client.put("/api/config", json={"history": {"maxEntries": 2}}).status_code == 200

    data = client.get("/api/history").json()
    assert data["maxEntries"] == 2
    assert [e["originalCode"] for e in data["entries"]] == ["x = 2", "x = 1"]


def test_masked_key_sent_back_keeps_real_key(client, isolated_config):
    client.put("/api/config", json={"gateway": {"apiKey": "real-key-123456"}})
    masked = client.get("/api/config").json()["gateway"]

    masked["model"] = "google/gemini-2.5-pro"
    assert client.put("/api/config", json={"gateway": masked}).status_code == 200

    stored = json.loads((isolated_config / "config.json").read_text())
    assert stored["gateway"]["apiKey"] == "real-key-123456"
    assert stored["gateway"]["model"] == "google/gemini-2.5-pro"


def test_optimize_still_answers_when_history_save_fails(client, llm_reply, monkeypatch):
    def failing_save(self):
        raise RuntimeError("Failed to save history: disk full")

    monkeypatch.setattr(HistoryStore, "_save", failing_save)
    response = client.post("/api/optimize", json={"code": ORIGINAL, "language": "javascript"})

    assert response.status_code == 200
    assert response.json()["optimizedCode"] == OPTIMIZED
    assert response.json()["historyId"] is None
    assert client.get("/api/history").json()["entries"] == []
