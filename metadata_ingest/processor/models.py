from dataclasses import dataclass, field


@dataclass(frozen=True, slots=True)
class UrlAnalysisRequest:
    url: str


@dataclass(frozen=True, slots=True)
class FileAnalysisRequest:
    file_url: str
    file_type: str
    file_name: str


@dataclass(frozen=True, slots=True)
class EmbeddingRequest:
    title: str = ""
    summary: str = ""
    tags: list[str] = field(default_factory=list)
    extracted_text: str = ""
