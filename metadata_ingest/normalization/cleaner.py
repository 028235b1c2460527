"""Field-level cleaning applied to every merged metadata map."""

import re
from typing import Any

from metadata_ingest.normalization.models import MAX_TAGS

TEXT_FIELDS = ("title", "description", "category", "summary", "extractedText")

_WHITESPACE_RE = re.compile(r"\s+")


def clean_metadata_fields(metadata: dict[str, Any]) -> dict[str, Any]:
    """Trim text fields, normalize tags and key points, and drop empties.

    Tags are lowercased, whitespace runs become ``-``, duplicates are removed
    keeping the first occurrence, and at most six are kept. Key points are
    trimmed with no cap. Keys not listed here are not carried over.
    """
    cleaned: dict[str, Any] = {}

    for name in TEXT_FIELDS:
        value = metadata.get(name)
        if isinstance(value, str) and value.strip():
            cleaned[name] = value.strip()

    tags = metadata.get("tags")
    if isinstance(tags, list):
        cleaned["tags"] = normalize_tags(tags)

    key_points = metadata.get("keyPoints")
    if isinstance(key_points, list):
        points = [p.strip() for p in key_points if isinstance(p, str) and p.strip()]
        if points:
            cleaned["keyPoints"] = points

    return cleaned


def normalize_tags(tags: list[Any]) -> list[str]:
    normalized: list[str] = []
    for tag in tags:
        if not isinstance(tag, str):
            continue
        value = _WHITESPACE_RE.sub("-", tag.lower().strip())
        if value and value not in normalized:
            normalized.append(value)
    return normalized[:MAX_TAGS]
