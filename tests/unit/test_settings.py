import pytest
from pydantic import ValidationError

from metadata_ingest.config.settings import Settings


class TestSettingsDefaults:
    def test_default_app_env(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app_env == "dev"

    def test_default_ai_provider(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.ai_provider == "openai"
        assert s.ai_openai_model_name == "gpt-4o-mini"

    def test_default_limits(self) -> None:
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.max_pdf_pages == 10
        assert s.max_pdf_size_bytes == 20 * 1024 * 1024
        assert s.max_download_bytes == 25 * 1024 * 1024
        assert s.max_html_bytes == 2 * 1024 * 1024
        assert s.min_text_for_multimodal == 50
        assert s.embedding_dimension == 1536
        assert s.require_auth is False


class TestSettingsFromEnv:
    def test_loads_ai_provider(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("AI_PROVIDER", "groq")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.ai_provider == "groq"

    def test_loads_require_auth(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("REQUIRE_AUTH", "true")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.require_auth is True


class TestSettingsValidation:
    def test_invalid_port_raises(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HTTP_PORT", "not_a_number")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]
