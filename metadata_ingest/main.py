import uvicorn

from metadata_ingest.api.server import create_app
from metadata_ingest.config.settings import Settings
from metadata_ingest.logging.logger import Log
from metadata_ingest.processor.processor import build_processor


def main() -> None:
    """Entry point: settings -> logging -> dependencies -> HTTP server."""
    settings = Settings()
    Log.configure(settings.log_level)
    Log.info(f"Starting metadata-ingest ({settings.app_env}) with AI provider {settings.ai_provider}")

    processor = build_processor(settings)
    app = create_app(processor, settings)
    uvicorn.run(app, host=settings.http_host, port=settings.http_port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
