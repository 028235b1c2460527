from typing import Any

from metadata_ingest.analyzers.base import BaseFileAnalyzer
from metadata_ingest.extractors.models import PresentationContent
from metadata_ingest.extractors.presentation import PresentationExtractor
from metadata_ingest.extractors.titles import strip_extension
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.processor.models import FileAnalysisRequest

PROMPT_TITLES = 10
PROMPT_BULLETS = 10


def content_sample(content: PresentationContent) -> str:
    lines = [f"Total slides: {content.slide_count}", "", "Slide titles:"]
    lines.extend(
        f"{i}. {title}" for i, title in enumerate(content.slide_titles[:PROMPT_TITLES], start=1)
    )
    lines.extend(["", "Key bullet points:"])
    lines.extend(f"• {bullet}" for bullet in content.bullet_points[:PROMPT_BULLETS])
    return "\n".join(lines)


class PresentationAnalyzer(BaseFileAnalyzer):
    def __init__(self, *, presentation_extractor: PresentationExtractor, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._extractor = presentation_extractor

    def _analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        content = self._extractor.extract(fetcher.fetch_bytes(request.file_url))
        sample = content_sample(content)
        prompt = self._prompts.file_analysis(
            request.file_name,
            text_sample=sample,
            slide_count=content.slide_count,
        )
        fallback = {
            "title": strip_extension(request.file_name),
            "description": f"Presentation with {content.slide_count} slides",
            "tags": ["presentation", "slides", "powerpoint"],
            "category": "business",
        }
        outcome = self._complete(prompt, fallback)
        return AnalysisResult.from_metadata(
            {**outcome.metadata, "extractedText": sample},
            slide_count=content.slide_count,
        )

    def _failure_metadata(self, request: FileAnalysisRequest) -> dict[str, Any]:
        return {
            "title": strip_extension(request.file_name),
            "description": "Presentation slides",
            "tags": ["presentation", "slides"],
            "category": "business",
        }
