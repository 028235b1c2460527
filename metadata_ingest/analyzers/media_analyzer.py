"""Formats that are never downloaded: metadata comes from the filename only."""

from dataclasses import dataclass

from metadata_ingest.extractors.titles import clean_title
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.cleaner import normalize_tags
from metadata_ingest.normalization.models import AnalysisResult
from metadata_ingest.processor.models import FileAnalysisRequest


@dataclass(frozen=True)
class FilenameProfile:
    default_name: str
    description: str
    tags: tuple[str, ...]
    summary_prefix: str = ""


VIDEO = FilenameProfile("Video", "Video file", ("video", "media", "watch later"), "Video file")
AUDIO = FilenameProfile("Audio", "Audio file", ("audio", "media"), "Audio file")
GENERIC = FilenameProfile("File", "File uploaded", ("file",))


class FilenameAnalyzer:
    """Builds metadata for video, audio and unrecognized files from the filename."""

    def __init__(self, profile: FilenameProfile) -> None:
        self._profile = profile

    def analyze(self, request: FileAnalysisRequest, fetcher: object = None) -> AnalysisResult:
        _ = fetcher
        profile = self._profile
        name = request.file_name or profile.default_name
        summary = f"{profile.summary_prefix}: {name}" if profile.summary_prefix else ""
        Log.info(f"{profile.description} processed from filename")
        return AnalysisResult(
            title=clean_title(name),
            description=profile.description,
            tags=normalize_tags(list(profile.tags)),
            category="other",
            summary=summary,
            preview_image_url=None,
        )
