import json

from services.config_manager import ConfigManager


def test_defaults_without_file(isolated_config):
    config = ConfigManager.get_instance().get_config()
    assert config["provider"] == "gateway"
    assert config["gateway"]["model"] == "google/gemini-2.5-flash"
    assert config["history"]["maxEntries"] == 20


def test_env_fills_empty_key_but_is_not_saved(isolated_config, monkeypatch):
    monkeypatch.setenv("LOVABLE_API_KEY", "secret-key")
    manager = ConfigManager.get_instance()

    assert manager.get_config()["gateway"]["apiKey"] == "secret-key"
    manager.save_config(manager.get_stored_config())

    stored = json.loads((isolated_config / "config.json").read_text())
    assert stored["gateway"]["apiKey"] == ""


def test_stored_values_merge_over_defaults(isolated_config):
    (isolated_config / "config.json").write_text(json.dumps({"gateway": {"model": "other"}}))
    config = ConfigManager.get_instance().get_config()

    assert config["gateway"]["model"] == "other"
    assert config["gateway"]["endpoint"].startswith("https://")


def test_corrupt_file_falls_back_to_defaults(isolated_config):
    (isolated_config / "config.json").write_text("{")
    assert ConfigManager.get_instance().get_config()["provider"] == "gateway"


def test_provider_override(monkeypatch):
    monkeypatch.setenv("SIX_EYES_PROVIDER", "gemini")
    assert ConfigManager.get_instance().get_config()["provider"] == "gemini"
