"""Unit tests for environment-driven settings."""

import pytest

from java_code_analyzer.config.settings import (
    AnalyzerSettings,
    is_usable_api_key,
    load_settings,
)
from java_code_analyzer.core.exceptions import ConfigError

ENV_VARS = (
    "DEEPSEEK_API_KEY",
    "DEEPSEEK_API_URL",
    "DEEPSEEK_MODEL",
    "DEEPSEEK_MAX_TOKENS",
    "DEEPSEEK_TEMPERATURE",
    "DEEPSEEK_MAX_RETRIES",
    "ANALYZER_DEMO_FALLBACK",
    "ANALYZER_ENV",
    "HOST",
    "PORT",
    "LOG_LEVEL",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for name in ENV_VARS:
        # recorded first so teardown also removes values load_dotenv sets
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    return tmp_path


class TestLoadFromMapping:
    def test_defaults(self):
        settings = load_settings({})

        assert settings == AnalyzerSettings()
        assert settings.api_key is None
        assert settings.model == "deepseek-coder"
        assert settings.max_tokens == 2000
        assert settings.temperature == 0.1
        assert settings.max_retries == 3
        assert settings.demo_fallback is True
        assert settings.port == 3000
        assert not settings.api_key_configured
        assert not settings.is_development

    def test_overrides(self):
        settings = load_settings(
            {
                "DEEPSEEK_API_KEY": "  sk-live  ",
                "DEEPSEEK_MODEL": "deepseek-chat",
                "DEEPSEEK_MAX_TOKENS": "4000",
                "DEEPSEEK_TEMPERATURE": "0.5",
                "DEEPSEEK_MAX_RETRIES": "5",
                "ANALYZER_DEMO_FALLBACK": "off",
                "ANALYZER_ENV": "Development",
                "PORT": "8080",
                "LOG_LEVEL": "debug",
            }
        )

        assert settings.api_key == "sk-live"
        assert settings.api_key_configured
        assert settings.model == "deepseek-chat"
        assert settings.max_tokens == 4000
        assert settings.temperature == 0.5
        assert settings.max_retries == 5
        assert settings.demo_fallback is False
        assert settings.is_development
        assert settings.port == 8080
        assert settings.log_level == "DEBUG"

    @pytest.mark.parametrize(
        "env",
        [
            {"DEEPSEEK_MAX_RETRIES": "three"},
            {"DEEPSEEK_MAX_RETRIES": "0"},
            {"DEEPSEEK_TEMPERATURE": "hot"},
            {"DEEPSEEK_TEMPERATURE": "3.5"},
            {"ANALYZER_DEMO_FALLBACK": "maybe"},
            {"PORT": "-1"},
        ],
    )
    def test_invalid_values(self, env):
        with pytest.raises(ConfigError):
            load_settings(env)

    def test_blank_values_use_defaults(self):
        settings = load_settings({"DEEPSEEK_MAX_RETRIES": "  ", "DEEPSEEK_API_KEY": ""})

        assert settings.max_retries == 3
        assert settings.api_key is None


class TestApiKeyCheck:
    @pytest.mark.parametrize(
        ("key", "usable"),
        [
            (None, False),
            ("", False),
            ("   ", False),
            ("your_api_key_here", False),
            ("YOUR_API_KEY_HERE", False),
            ("sk-abc123", True),
        ],
    )
    def test_is_usable_api_key(self, key, usable):
        assert is_usable_api_key(key) is usable


class TestEnvFiles:
    def test_env_local_overrides_env(self, clean_env):
        (clean_env / ".env").write_text("DEEPSEEK_API_KEY=sk-base\nPORT=4000\n")
        (clean_env / ".env.local").write_text("DEEPSEEK_API_KEY=sk-local\n")

        settings = load_settings()

        assert settings.api_key == "sk-local"
        assert settings.port == 4000

    def test_no_env_files(self, clean_env):
        settings = load_settings(project_root=clean_env)

        assert settings.api_key is None
