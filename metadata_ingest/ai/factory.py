from typing import Any, ClassVar

from metadata_ingest.ai.analysis import AiAnalysis
from metadata_ingest.ai.example_client_adapter import ExampleClientAdapter
from metadata_ingest.ai.openai_client_adapter import OpenAIClientAdapter
from metadata_ingest.config.settings import Settings


class AiAnalysisFactory:
    """Creates the configured AI analysis service.

    Every non-example provider reads its key, model and timeout from the
    ``ai_<provider>_*`` settings fields.
    """

    OPENAI_COMPATIBLE_BASE_URLS: ClassVar[dict[str, str]] = {
        "openrouter": "https://openrouter.ai/api/v1",
        "groq": "https://api.groq.com/openai/v1",
        "together": "https://api.together.xyz/v1",
        "deepseek": "https://api.deepseek.com/v1",
        "ollama": "http://localhost:11434/v1",
    }
    DEFAULT_TIMEOUT_SECONDS: ClassVar[int] = 60
    DEFAULT_TEMPERATURE: ClassVar[float] = 0.2

    @classmethod
    def create(cls, settings: Settings) -> AiAnalysis:
        """Create a configured analysis service from application settings."""
        provider = settings.ai_provider.lower()
        if provider == "example":
            return AiAnalysis(client=ExampleClientAdapter(), model="example", temperature=0.0)
        if provider not in cls._providers():
            raise ValueError(
                f"Unknown AI provider '{provider}'. Choose from: {['example', *cls._providers()]}"
            )

        client = OpenAIClientAdapter(
            api_key=cls._provider_setting(settings, provider, "api_key") or "",
            timeout_seconds=(
                cls._provider_setting(settings, provider, "timeout_seconds")
                or cls.DEFAULT_TIMEOUT_SECONDS
            ),
            base_url=cls._resolve_base_url(provider, settings),
        )
        temperature = cls._provider_setting(settings, provider, "temperature")
        return AiAnalysis(
            client=client,
            model=cls._provider_setting(settings, provider, "model_name") or "",
            temperature=cls.DEFAULT_TEMPERATURE if temperature is None else temperature,
        )

    @classmethod
    def _providers(cls) -> list[str]:
        return ["openai", "openai_compatible", *sorted(cls.OPENAI_COMPATIBLE_BASE_URLS)]

    @staticmethod
    def _provider_setting(settings: Settings, provider: str, name: str) -> Any:
        return getattr(settings, f"ai_{provider}_{name}", None)

    @classmethod
    def _resolve_base_url(cls, provider: str, settings: Settings) -> str | None:
        if provider == "openai":
            return None
        if provider == "openai_compatible":
            url = settings.ai_openai_compatible_base_url.strip()
            if not url:
                raise ValueError(
                    "ai_openai_compatible_base_url is required for ai_provider=openai_compatible"
                )
            return url
        return cls.OPENAI_COMPATIBLE_BASE_URLS[provider]
