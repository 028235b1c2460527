from collections.abc import Callable
from typing import Any, Protocol

from metadata_ingest.ai.factory import AiAnalysisFactory
from metadata_ingest.ai.prompt_builder import PromptBuilder
from metadata_ingest.analyzers.docx_analyzer import DocxAnalyzer
from metadata_ingest.analyzers.image_analyzer import ImageAnalyzer
from metadata_ingest.analyzers.media_analyzer import AUDIO, GENERIC, VIDEO, FilenameAnalyzer
from metadata_ingest.analyzers.pdf_analyzer import PdfAnalyzer
from metadata_ingest.analyzers.presentation_analyzer import PresentationAnalyzer
from metadata_ingest.analyzers.spreadsheet_analyzer import SpreadsheetAnalyzer
from metadata_ingest.analyzers.text_analyzer import TextAnalyzer
from metadata_ingest.config.settings import Settings
from metadata_ingest.embedding.factory import EmbeddingGeneratorFactory
from metadata_ingest.embedding.generator import EmbeddingGenerator
from metadata_ingest.extractors.docx import DocxExtractor
from metadata_ingest.extractors.presentation import PresentationExtractor
from metadata_ingest.extractors.spreadsheet import SpreadsheetExtractor
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.normalization.normalizer import MetadataNormalizer
from metadata_ingest.pdf.factory import PdfExtractorFactory
from metadata_ingest.processor.models import FileAnalysisRequest
from metadata_ingest.processor.validation import (
    validate_embedding_request,
    validate_file_request,
    validate_url_request,
)
from metadata_ingest.security.ssrf_guard import validate_target_url
from metadata_ingest.web.firecrawl import FirecrawlClient
from metadata_ingest.web.oembed import OEmbedClient
from metadata_ingest.web.url_analyzer import UrlAnalyzer

DOCX_TYPES = frozenset(
    {
        "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
        "application/msword",
    }
)
SPREADSHEET_TYPES = frozenset(
    {
        "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
        "application/vnd.ms-excel",
        "text/csv",
        "application/csv",
    }
)
PRESENTATION_TYPES = frozenset(
    {
        "application/vnd.openxmlformats-officedocument.presentationml.presentation",
        "application/vnd.ms-powerpoint",
    }
)
TEXT_TYPES = frozenset({"text/plain", "text/markdown", "text/x-markdown"})


class FileAnalyzer(Protocol):
    def analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult: ...


def route_file_type(file_type: str) -> str:
    """Map a declared MIME type to the analyzer key that handles it."""
    mime = file_type.lower().split(";", 1)[0].strip()
    if mime.startswith("image/"):
        return "image"
    if mime == "application/pdf":
        return "pdf"
    if mime in DOCX_TYPES:
        return "docx"
    if mime in SPREADSHEET_TYPES:
        return "spreadsheet"
    if mime in PRESENTATION_TYPES:
        return "presentation"
    if mime in TEXT_TYPES:
        return "text"
    if mime.startswith("video/"):
        return "video"
    if mime.startswith("audio/"):
        return "audio"
    return "generic"


class Processor:
    """Validates request envelopes, routes them and assembles the response body.

    URL: guard -> oEmbed / page / scrape -> prompt -> AI -> normalize.
    File: guard -> fetch -> extract -> prompt -> AI -> normalize.
    Each call owns its own fetcher, closed when the call returns.
    """

    def __init__(
        self,
        *,
        file_analyzers: dict[str, FileAnalyzer],
        url_analyzer: UrlAnalyzer,
        embedding_generator: EmbeddingGenerator,
        fetcher_factory: Callable[[], SafeFetcher],
    ) -> None:
        self._file_analyzers = file_analyzers
        self._url_analyzer = url_analyzer
        self._embedding_generator = embedding_generator
        self._fetcher_factory = fetcher_factory

    def analyze_url(self, body: Any) -> dict[str, object]:
        request = validate_url_request(body)
        validate_target_url(request.url)
        Log.info(f"Analyzing URL: {request.url}")

        with self._fetcher_factory() as fetcher:
            result = self._url_analyzer.analyze(request, fetcher)

        Log.info(
            f"URL analysis complete: platform={result.platform}, "
            f"{len(result.tags)} tags, confidence={result.confidence}"
        )
        return result.to_dict()

    def analyze_file(self, body: Any) -> dict[str, object]:
        request = validate_file_request(body)
        validate_target_url(request.file_url)

        kind = route_file_type(request.file_type)
        analyzer = self._file_analyzers.get(kind) or self._file_analyzers["generic"]
        Log.info(f"Analyzing file {request.file_name} ({request.file_type}) as {kind}")

        with self._fetcher_factory() as fetcher:
            result = analyzer.analyze(request, fetcher)

        Log.info(
            f"File analysis complete: {len(result.title)} char title, "
            f"{len(result.tags)} tags, category={result.category}"
        )
        return result.to_dict()

    def generate_embedding(self, body: Any) -> dict[str, object]:
        request = validate_embedding_request(body)
        return self._embedding_generator.generate(request).to_dict()


def build_processor(settings: Settings) -> Processor:
    """Build a Processor with all required adapters."""
    ai = AiAnalysisFactory.create(settings)
    prompts = PromptBuilder()
    normalizer = MetadataNormalizer()
    shared: dict[str, Any] = {
        "ai": ai,
        "prompts": prompts,
        "normalizer": normalizer,
        "settings": settings,
    }

    file_analyzers: dict[str, FileAnalyzer] = {
        "pdf": PdfAnalyzer(pdf_extractor=PdfExtractorFactory.create(settings), **shared),
        "docx": DocxAnalyzer(
            docx_extractor=DocxExtractor(max_chars=settings.max_text_chars), **shared
        ),
        "spreadsheet": SpreadsheetAnalyzer(
            spreadsheet_extractor=SpreadsheetExtractor(), **shared
        ),
        "presentation": PresentationAnalyzer(
            presentation_extractor=PresentationExtractor(), **shared
        ),
        "text": TextAnalyzer(**shared),
        "image": ImageAnalyzer(**shared),
        "video": FilenameAnalyzer(VIDEO),
        "audio": FilenameAnalyzer(AUDIO),
        "generic": FilenameAnalyzer(GENERIC),
    }

    firecrawl = None
    if settings.firecrawl_api_key:
        firecrawl = FirecrawlClient(
            api_key=settings.firecrawl_api_key,
            base_url=settings.firecrawl_base_url,
            timeout_seconds=settings.firecrawl_timeout_seconds,
        )
    url_analyzer = UrlAnalyzer(
        oembed_client=OEmbedClient(timeout_seconds=settings.oembed_timeout_seconds),
        firecrawl_client=firecrawl,
        **shared,
    )

    def fetcher_factory() -> SafeFetcher:
        return SafeFetcher(
            timeout_seconds=settings.fetch_timeout_seconds,
            max_redirects=settings.fetch_max_redirects,
            max_download_bytes=settings.max_download_bytes,
            max_html_bytes=settings.max_html_bytes,
        )

    return Processor(
        file_analyzers=file_analyzers,
        url_analyzer=url_analyzer,
        embedding_generator=EmbeddingGeneratorFactory.create(settings),
        fetcher_factory=fetcher_factory,
    )
