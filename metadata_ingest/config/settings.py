from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    http_host: str = "0.0.0.0"
    http_port: int = 8000
    require_auth: bool = False

    ai_provider: str = "openai"

    ai_openai_api_key: str = ""
    ai_openai_model_name: str = "gpt-4o-mini"
    ai_openai_timeout_seconds: int = 60
    ai_openai_temperature: float = 0.2

    ai_openai_compatible_base_url: str = ""
    ai_openai_compatible_api_key: str = ""
    ai_openai_compatible_model_name: str = "google/gemini-2.5-flash"
    ai_openai_compatible_timeout_seconds: int = 60

    ai_openrouter_api_key: str = ""
    ai_openrouter_model_name: str = ""
    ai_openrouter_timeout_seconds: int = 60

    ai_groq_api_key: str = ""
    ai_groq_model_name: str = ""
    ai_groq_timeout_seconds: int = 60

    ai_together_api_key: str = ""
    ai_together_model_name: str = ""
    ai_together_timeout_seconds: int = 60

    ai_deepseek_api_key: str = ""
    ai_deepseek_model_name: str = ""
    ai_deepseek_timeout_seconds: int = 60

    ai_ollama_api_key: str = "ollama"
    ai_ollama_model_name: str = ""
    ai_ollama_timeout_seconds: int = 120

    embedding_api_key: str = ""
    embedding_base_url: str = ""
    embedding_model_name: str = "text-embedding-3-small"
    embedding_timeout_seconds: int = 30
    embedding_dimension: int = 1536

    firecrawl_api_key: str = ""
    firecrawl_base_url: str = "https://api.firecrawl.dev/v1"
    firecrawl_timeout_seconds: float = 30.0

    oembed_timeout_seconds: float = 5.0
    fetch_timeout_seconds: float = 10.0
    fetch_max_redirects: int = 5
    max_download_bytes: int = 25 * 1024 * 1024
    max_html_bytes: int = 2 * 1024 * 1024

    pdf_engine: str = "pdfplumber"

    max_pdf_pages: int = 10
    max_pdf_size_bytes: int = 20 * 1024 * 1024
    max_text_chars: int = 50_000
    max_ai_input_chars: int = 3_000
    short_sample_chars: int = 2_500
    long_text_threshold: int = 15_000
    text_sample_chars: int = 2_000
    min_text_for_multimodal: int = 50
    web_content_chars: int = 3_000
