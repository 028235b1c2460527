from typing import Any

from metadata_ingest.analyzers.base import BaseFileAnalyzer
from metadata_ingest.extractors.models import SpreadsheetContent
from metadata_ingest.extractors.spreadsheet import SAMPLE_ROWS, SpreadsheetExtractor
from metadata_ingest.extractors.titles import strip_extension
from metadata_ingest.fetch.fetcher import SafeFetcher
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.processor.models import FileAnalysisRequest

CSV_TYPES = frozenset({"text/csv", "application/csv"})


def is_csv(request: FileAnalysisRequest) -> bool:
    return request.file_type.lower() in CSV_TYPES or request.file_name.lower().endswith(".csv")


def data_sample(content: SpreadsheetContent) -> str:
    rows = content.first_rows[:SAMPLE_ROWS]
    lines = [
        f"Headers: {', '.join(content.headers)}",
        f"Sample rows (first {len(rows)}):",
    ]
    lines.extend(f"Row {i}: {', '.join(row)}" for i, row in enumerate(rows, start=1))
    return "\n".join(lines)


class SpreadsheetAnalyzer(BaseFileAnalyzer):
    """CSV and XLSX analysis from headers, a row sample and dimensions."""

    def __init__(self, *, spreadsheet_extractor: SpreadsheetExtractor, **kwargs: Any) -> None:
        super().__init__(**kwargs)
        self._extractor = spreadsheet_extractor

    def _analyze(self, request: FileAnalysisRequest, fetcher: SafeFetcher) -> AnalysisResult:
        if is_csv(request):
            content = self._extractor.extract_csv(fetcher.fetch_text(request.file_url))
        else:
            content = self._extractor.extract_xlsx(fetcher.fetch_bytes(request.file_url))

        sample = data_sample(content)
        prompt = self._prompts.file_analysis(
            request.file_name,
            text_sample=sample,
            row_count=content.row_count,
            column_count=content.column_count,
        )
        fallback = {
            "title": strip_extension(request.file_name),
            "description": (
                f"Spreadsheet with {content.row_count} rows and {content.column_count} columns"
            ),
            "tags": ["spreadsheet", "data", "csv" if is_csv(request) else "excel"],
            "category": "business",
        }
        outcome = self._complete(prompt, fallback)
        return AnalysisResult.from_metadata(
            {**outcome.metadata, "extractedText": sample},
            headers=list(content.headers),
            row_count=content.row_count,
            column_count=content.column_count,
        )

    def _failure_metadata(self, request: FileAnalysisRequest) -> dict[str, Any]:
        return {
            "title": strip_extension(request.file_name),
            "description": "Spreadsheet containing data tables",
            "tags": ["spreadsheet", "data"],
            "category": "business",
        }
