from dataclasses import dataclass, field
from typing import Any

CATEGORIES = (
    "academic",
    "business",
    "personal",
    "technical",
    "medical",
    "financial",
    "legal",
    "creative",
    "other",
)
DEFAULT_CATEGORY = "other"
MAX_TAGS = 6


@dataclass(frozen=True)
class Parsed:
    """The model's answer was decoded and merged over the fallback."""

    metadata: dict[str, Any]
    source: str


@dataclass(frozen=True)
class FallbackUsed:
    """Nothing usable came back; ``metadata`` is the cleaned fallback."""

    metadata: dict[str, Any]
    reason: str


NormalizationOutcome = Parsed | FallbackUsed


@dataclass(frozen=True)
class AnalysisResult:
    """Output envelope shared by file and URL analysis."""

    title: str
    description: str
    tags: list[str]
    category: str = DEFAULT_CATEGORY
    extracted_text: str = ""
    summary: str = ""
    key_points: list[str] = field(default_factory=list)
    preview_image_url: str | None = None
    author: str | None = None
    platform: str | None = None
    content_type: str | None = None
    site_name: str | None = None
    published_time: str | None = None
    confidence: float | None = None
    page_count: int | None = None
    slide_count: int | None = None
    headers: list[str] | None = None
    row_count: int | None = None
    column_count: int | None = None

    @classmethod
    def from_metadata(cls, metadata: dict[str, Any], **extra: Any) -> "AnalysisResult":
        """Build from a normalized metadata map; ``extra`` sets the optional fields."""
        return cls(
            title=metadata.get("title", ""),
            description=metadata.get("description", ""),
            tags=list(metadata.get("tags", [])),
            category=metadata.get("category", DEFAULT_CATEGORY),
            extracted_text=metadata.get("extractedText", ""),
            summary=metadata.get("summary", ""),
            key_points=list(metadata.get("keyPoints", [])),
            **extra,
        )

    def to_dict(self) -> dict[str, object]:
        data: dict[str, object] = {
            "title": self.title,
            "description": self.description,
            "tags": list(self.tags),
            "category": self.category,
            "extractedText": self.extracted_text,
            "summary": self.summary,
            "keyPoints": list(self.key_points),
            "previewImageUrl": self.preview_image_url,
        }
        optional = {
            "author": self.author,
            "platform": self.platform,
            "contentType": self.content_type,
            "siteName": self.site_name,
            "publishedTime": self.published_time,
            "confidence": self.confidence,
            "pageCount": self.page_count,
            "slideCount": self.slide_count,
            "headers": list(self.headers) if self.headers is not None else None,
            "rowCount": self.row_count,
            "columnCount": self.column_count,
        }
        for key, value in optional.items():
            if value is not None:
                data[key] = value
        return data
