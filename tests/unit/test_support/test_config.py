"""Tests for configuration loading."""

import pytest

from wayfinder.config import WayfinderConfig, create_default_config, load_config


def test_defaults():
    config = WayfinderConfig()

    assert config.provider.name == "openai"
    assert config.provider.max_retries == 3
    assert config.provider.backoff_seconds == 2.0
    assert config.rate_limit.max_requests == 10
    assert config.rate_limit.window_seconds == 60.0
    assert config.execution.context_size == "high"
    assert config.execution.max_sources == 20


def test_default_config_round_trips(tmp_path):
    path = tmp_path / "wayfinder.toml"
    create_default_config(path, provider="tavily")

    config = load_config(path)

    assert config.provider.name == "tavily"
    assert config.execution.context_digest_results == 3
    assert config.logging.level == "INFO"


def test_partial_config_keeps_defaults(tmp_path):
    path = tmp_path / "wayfinder.toml"
    path.write_text('[rate_limit]\nmax_requests = 2\nwindow_seconds = 1\n')

    config = load_config(str(path))

    assert config.rate_limit.max_requests == 2
    assert config.provider.search_model == "gpt-4o-search-preview"


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_config(tmp_path / "nope.toml")


def test_invalid_values(tmp_path):
    path = tmp_path / "wayfinder.toml"
    path.write_text('[provider]\nname = "anthropic"\n')

    with pytest.raises(ValueError, match="Invalid configuration"):
        load_config(path)


def test_log_level_is_normalized(tmp_path):
    path = tmp_path / "wayfinder.toml"
    path.write_text('[logging]\nlevel = "debug"\n')

    assert load_config(path).logging.level == "DEBUG"


def test_get_api_key(monkeypatch):
    config = WayfinderConfig()

    monkeypatch.delenv("OPENAI_API_KEY", raising=False)
    with pytest.raises(ValueError, match="OPENAI_API_KEY"):
        config.get_api_key()

    monkeypatch.setenv("OPENAI_API_KEY", "sk-abc")
    assert config.get_api_key() == "sk-abc"
    assert config.get_search_api_key() is None
