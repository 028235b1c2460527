CONTENT_CHARS = 500


def compose_embedding_text(
    title: str = "",
    summary: str = "",
    tags: list[str] | None = None,
    extracted_text: str = "",
) -> str:
    """Labelled sections in priority order: tags, title, summary, content.

    Returns an empty string when there is nothing to embed.
    """
    sections: list[str] = []
    clean_tags = [tag.strip() for tag in tags or [] if tag.strip()]
    if clean_tags:
        sections.append(f"Tags: {', '.join(clean_tags)}")
    if title.strip():
        sections.append(f"Title: {title.strip()}")
    if summary.strip():
        sections.append(f"Summary: {summary.strip()}")
    content = extracted_text.strip()[:CONTENT_CHARS]
    if content:
        sections.append(f"Content: {content}")
    return "\n\n".join(sections)
