import pytest
from fastapi.testclient import TestClient

from services.config_manager import ConfigManager
from services.history_store import HistoryStore


@pytest.fixture(autouse=True)
def isolated_config(tmp_path, monkeypatch):
    """Point the config directory at tmp_path and drop cached singletons"""
    monkeypatch.setenv("SIX_EYES_CONFIG_DIR", str(tmp_path))
    for name in ("LOVABLE_API_KEY", "OPENAI_API_KEY", "GEMINI_API_KEY", "SIX_EYES_PROVIDER"):
        monkeypatch.delenv(name, raising=False)
    ConfigManager.reset_instance()
    HistoryStore.reset_instance()
    yield tmp_path
    ConfigManager.reset_instance()
    HistoryStore.reset_instance()


@pytest.fixture
def client():
    from main import create_app

    with TestClient(create_app()) as test_client:
        yield test_client
