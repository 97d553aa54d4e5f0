"""
Unit tests for Config and ConfigManager.

Run with:
    pytest tests/test_config.py -v
"""

import json

import pytest

from committor.config import Config, ConfigManager


# ---------------------------------------------------------------------------
# Config
# ---------------------------------------------------------------------------

class TestConfig:

    def test_defaults(self):
        config = Config()
        assert config.provider == "auto"
        assert config.model is None
        assert config.count == 3
        assert config.timeout == 60
        assert config.ollama_url == "http://localhost:11434"
        assert config.auto_commit is False
        assert config.show_diff is False
        assert config.max_diff_bytes == 12000
        assert config.retries == 1
        assert config.max_subject_length == 72
        assert config.ticket_prefix == "Refs"

    def test_to_dict_excludes_none(self):
        d = Config().to_dict()
        assert "model" not in d
        assert "provider" in d

    def test_from_dict_ignores_unknown_keys(self):
        config = Config.from_dict({"provider": "openai", "style": "simple"})
        assert config.provider == "openai"
        assert not hasattr(config, "style")

    def test_validate_valid_config_no_warnings(self):
        assert Config().validate() == []

    def test_validate_invalid_provider(self):
        config = Config(provider="gpt4")
        warnings = config.validate()
        assert len(warnings) == 1
        assert config.provider == "auto"

    @pytest.mark.parametrize("field, bad", [
        ("count", 0),
        ("count", "three"),
        ("timeout", -5),
        ("max_diff_bytes", 0),
        ("max_subject_length", True),
    ])
    def test_validate_positive_ints(self, field, bad):
        config = Config(**{field: bad})
        warnings = config.validate()
        assert any(field in w for w in warnings)
        assert getattr(config, field) == getattr(Config(), field)

    def test_zero_retries_allowed(self):
        config = Config(retries=0)
        assert config.validate() == []
        assert config.retries == 0

    def test_negative_retries_reset(self):
        config = Config(retries=-1)
        assert config.validate()
        assert config.retries == 1

    def test_validate_flags(self):
        config = Config(auto_commit="yes")
        assert config.validate()
        assert config.auto_commit is False

    def test_validate_ollama_url(self):
        config = Config(ollama_url="localhost:11434")
        assert config.validate()
        assert config.ollama_url == "http://localhost:11434"

    def test_from_dict_triggers_validation(self, capsys):
        Config.from_dict({"provider": "invalid"})
        assert "Config warning" in capsys.readouterr().err


# ---------------------------------------------------------------------------
# ConfigManager
# ---------------------------------------------------------------------------

@pytest.fixture
def home(tmp_path, monkeypatch):
    """Isolated cwd and home directory."""
    fake_home = tmp_path / "home"
    fake_home.mkdir()
    work = tmp_path / "work"
    work.mkdir()
    monkeypatch.chdir(work)
    monkeypatch.setattr("pathlib.Path.home", lambda: fake_home)
    return fake_home


class TestConfigManager:

    def test_load_returns_defaults_when_no_file(self, home):
        manager = ConfigManager()
        assert manager.load() == Config()
        assert manager.get_config_path() is None

    def test_load_reads_local_file(self, home, tmp_path):
        local = tmp_path / "work" / ".committorrc"
        local.write_text(json.dumps({"provider": "claude", "count": 5}))

        manager = ConfigManager()
        config = manager.load()
        assert config.provider == "claude"
        assert config.count == 5
        assert manager.get_config_path() == local

    def test_local_file_wins_over_home(self, home, tmp_path):
        (home / ".committorrc").write_text(json.dumps({"provider": "ollama"}))
        (tmp_path / "work" / ".committorrc").write_text(json.dumps({"provider": "openai"}))
        assert ConfigManager().load().provider == "openai"

    def test_falls_back_to_home(self, home):
        (home / ".committorrc").write_text(json.dumps({"model": "llama3.2:3b"}))
        assert ConfigManager().load().model == "llama3.2:3b"

    def test_save_and_load_roundtrip(self, home):
        path = ConfigManager().save(Config(provider="ollama", retries=2), global_config=True)
        assert path == home / ".committorrc"

        loaded = ConfigManager().load()
        assert loaded.provider == "ollama"
        assert loaded.retries == 2

    def test_save_local(self, home, tmp_path):
        path = ConfigManager().save(Config(count=1), global_config=False)
        assert path == tmp_path / "work" / ".committorrc"

    def test_malformed_json_returns_defaults(self, home, tmp_path, capsys):
        (tmp_path / "work" / ".committorrc").write_text("not valid json {{{")
        assert ConfigManager().load() == Config()
        assert "Could not load" in capsys.readouterr().err

    def test_non_object_json_returns_defaults(self, home, tmp_path):
        (tmp_path / "work" / ".committorrc").write_text("[1, 2, 3]")
        assert ConfigManager().load() == Config()

    def test_load_is_cached(self, home, tmp_path):
        manager = ConfigManager()
        first = manager.load()
        (tmp_path / "work" / ".committorrc").write_text(json.dumps({"provider": "claude"}))
        assert manager.load() is first
