"""Main-content text for AI prompts: readability first, tag stripping second."""

import re

from bs4 import BeautifulSoup
from lxml.etree import ParserError
from readability import Document
from readability.readability import Unparseable

from metadata_ingest.logging.logger import Log

NON_CONTENT_TAGS = ("script", "style", "noscript", "template", "svg", "iframe")

_WHITESPACE_RE = re.compile(r"\s+")


def extract_main_text(html: str, max_chars: int = 3_000, url: str | None = None) -> str:
    if not html.strip():
        return ""
    try:
        summary_html = Document(html, url=url).summary(html_partial=True)
        text = strip_tags(summary_html)
    except (Unparseable, ParserError, ValueError) as exc:
        Log.warning(f"Readability extraction failed, stripping tags instead: {exc}")
        text = ""
    if not text:
        text = strip_tags(html)
    return text[:max_chars]


def strip_tags(html: str) -> str:
    soup = BeautifulSoup(html, "html.parser")
    for tag in soup.find_all(NON_CONTENT_TAGS):
        tag.decompose()
    return _WHITESPACE_RE.sub(" ", soup.get_text(" ")).strip()
