from dataclasses import dataclass, field


@dataclass(frozen=True)
class DocumentMetadata:
    """Document-level properties embedded in PDF info or OOXML core properties."""

    title: str = ""
    author: str = ""
    subject: str = ""
    keywords: list[str] = field(default_factory=list)

    def as_dict(self) -> dict[str, object]:
        """Non-empty fields only, for prompt context."""
        data: dict[str, object] = {}
        if self.title:
            data["title"] = self.title
        if self.author:
            data["author"] = self.author
        if self.subject:
            data["subject"] = self.subject
        if self.keywords:
            data["keywords"] = list(self.keywords)
        return data


@dataclass(frozen=True)
class PdfContent:
    text: str = ""
    page_count: int = 0
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)


@dataclass(frozen=True)
class DocxContent:
    text: str = ""
    metadata: DocumentMetadata = field(default_factory=DocumentMetadata)


@dataclass(frozen=True)
class SpreadsheetContent:
    headers: list[str] = field(default_factory=list)
    first_rows: list[list[str]] = field(default_factory=list)
    row_count: int = 0
    column_count: int = 0


@dataclass(frozen=True)
class PresentationContent:
    slide_count: int = 0
    slide_titles: list[str] = field(default_factory=list)
    bullet_points: list[str] = field(default_factory=list)
