"""Unit tests for environment-driven settings."""

from pathlib import Path

import pytest

from invoice_analytics.config import LLMSettings, Settings, get_settings, reset_settings


@pytest.fixture(autouse=True)
def isolated_env(monkeypatch: pytest.MonkeyPatch, tmp_path: Path):
    for name in ("LLM_API_KEY", "GROQ_API_KEY", "LLM_PROVIDER", "QUERY_MAX_PER_PAGE"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("STORAGE_DATA_DIR", str(tmp_path / "data"))
    reset_settings()
    yield
    reset_settings()


class TestSettings:
    def test_defaults(self, tmp_path: Path):
        settings = Settings()

        assert settings.llm.provider == "openai_compatible"
        assert settings.llm.max_retries == 1
        assert settings.query.default_per_page == 20
        assert settings.query.max_per_page == 100
        assert settings.storage.db_path == tmp_path / "data" / "invoice_analytics.db"

    def test_data_dir_created(self, tmp_path: Path):
        Settings()
        assert (tmp_path / "data").is_dir()

    def test_query_env_prefix(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("QUERY_MAX_PER_PAGE", "250")
        assert Settings().query.max_per_page == 250

    @pytest.mark.parametrize("variable", ["LLM_API_KEY", "GROQ_API_KEY"])
    def test_api_key_aliases(self, monkeypatch: pytest.MonkeyPatch, variable: str):
        monkeypatch.setenv(variable, "gsk-test")
        assert LLMSettings().api_key == "gsk-test"

    def test_api_key_by_field_name(self):
        assert LLMSettings(api_key="direct").api_key == "direct"

    def test_get_settings_is_cached(self):
        assert get_settings() is get_settings()
