"""Builds the prompts sent to the analysis model from extracted context."""

import json
from pathlib import Path

from metadata_ingest.ai.prompt_loader import load_prompt_template

SUPPLEMENTARY_TEXT_CHARS = 1_000


class PromptBuilder:
    """Fills the bundled prompt templates with per-request context sections."""

    def __init__(self, prompt_dir: Path | None = None) -> None:
        self._analysis = load_prompt_template("analysis_prompt.txt", prompt_dir)
        self._pdf_multimodal = load_prompt_template("pdf_multimodal_prompt.txt", prompt_dir)
        self._image = load_prompt_template("image_prompt.txt", prompt_dir)
        self._web = load_prompt_template("web_prompt.txt", prompt_dir)

    def file_analysis(
        self,
        file_name: str,
        *,
        text_sample: str = "",
        metadata: dict[str, object] | None = None,
        page_count: int = 0,
        row_count: int = 0,
        column_count: int = 0,
        slide_count: int = 0,
    ) -> str:
        sections: list[str] = []
        if metadata:
            sections.append(f"**Metadata**: {json.dumps(metadata, ensure_ascii=False)}")
        if page_count:
            sections.append(f"**Pages**: {page_count}")
        if row_count and column_count:
            sections.append(f"**Structure**: {row_count} rows, {column_count} columns")
        if slide_count:
            sections.append(f"**Total slides**: {slide_count}")
        if text_sample:
            sections.append(f"**Content Sample**:\n{text_sample}")
        return self._analysis.format(file_name=file_name, context=_join_sections(sections))

    def pdf_multimodal(
        self,
        file_name: str,
        *,
        metadata: dict[str, object] | None = None,
        extracted_text: str = "",
    ) -> str:
        """Prompt that accompanies an inline PDF attachment."""
        sections: list[str] = []
        if metadata:
            lines = ["**PDF Metadata**:"]
            for key in ("title", "author", "subject"):
                value = metadata.get(key)
                if value:
                    lines.append(f"- {key.capitalize()}: {value}")
            if len(lines) > 1:
                sections.append("\n".join(lines))
        stripped = extracted_text.strip()
        if stripped:
            sample = stripped[:SUPPLEMENTARY_TEXT_CHARS]
            sections.append(
                f"**Supplementary extracted text** (first {len(sample)} chars):\n{sample}"
            )
        return self._pdf_multimodal.format(file_name=file_name, context=_join_sections(sections))

    def image(self, file_name: str) -> str:
        return self._image.format(file_name=file_name)

    def web(
        self,
        url: str,
        *,
        title: str = "",
        description: str = "",
        site_name: str = "",
        author: str = "",
        content: str = "",
    ) -> str:
        sections: list[str] = []
        for label, value in (
            ("Title", title),
            ("Description", description),
            ("Site", site_name),
            ("Author", author),
        ):
            if value:
                sections.append(f"**{label}**: {value}")
        if content:
            sections.append(f"**Content Sample**:\n{content}")
        return self._web.format(url=url, context=_join_sections(sections))


def _join_sections(sections: list[str]) -> str:
    if not sections:
        return ""
    return "\n\n".join(sections) + "\n\n"
