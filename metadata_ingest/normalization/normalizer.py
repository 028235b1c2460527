"""Turns a classified AI answer into clean metadata merged over a fallback."""

import json
import re
from typing import Any

from metadata_ingest.ai.models import AiResponse, ContentJson, ContentText, NoContent, ToolCall
from metadata_ingest.logging.logger import Log
from metadata_ingest.normalization.cleaner import clean_metadata_fields
from metadata_ingest.normalization.exceptions import NormalizationError
from metadata_ingest.normalization.models import (
    CATEGORIES,
    DEFAULT_CATEGORY,
    FallbackUsed,
    NormalizationOutcome,
    Parsed,
)

# Fields that are filled from the fallback when the model leaves them empty.
REQUIRED_FIELDS = ("title", "description", "tags", "category")

_TITLE_RE = re.compile(r"title[:\s]*[\"']?([^\"'\n]+)[\"']?", re.IGNORECASE)
_SUMMARY_RE = re.compile(r"summary[:\s]*[\"']?([^\"'\n]+(?:\n[^\"'\n]+)?)[\"']?", re.IGNORECASE)
_DESCRIPTION_RE = re.compile(r"description[:\s]*[\"']?([^\"'\n]+)[\"']?", re.IGNORECASE)
_CATEGORY_RE = re.compile(r"category[:\s]*[\"']?(\w+)[\"']?", re.IGNORECASE)
_TAGS_RE = re.compile(r"tags[:\s]*\[?[\"']?([^\]\n]+)[\"']?\]?", re.IGNORECASE)


class MetadataNormalizer:
    """Merges the model's answer over extractor-derived fallback values.

    Never raises on a bad answer: undecodable or empty responses come back as
    ``FallbackUsed`` carrying the cleaned fallback.
    """

    def normalize(self, response: AiResponse, fallback: dict[str, Any]) -> NormalizationOutcome:
        if isinstance(response, ToolCall):
            return self._from_json(response.arguments, fallback, "tool_calls")
        if isinstance(response, ContentJson):
            return self._from_json(response.raw, fallback, "content_json")
        if isinstance(response, ContentText):
            extracted = extract_text_fields(response.text)
            if not extracted:
                return self._fallback(fallback, "no metadata fields found in text response")
            Log.info(f"Extracted {sorted(extracted)} from text response")
            return Parsed(metadata=finalize({**fallback, **extracted}, fallback), source="content_text")
        if isinstance(response, NoContent):
            return self._fallback(fallback, "empty AI response")
        raise TypeError(f"Unsupported AI response: {response!r}")

    def _from_json(self, raw: str, fallback: dict[str, Any], source: str) -> NormalizationOutcome:
        try:
            parsed = parse_json_object(raw)
        except NormalizationError as exc:
            return self._fallback(fallback, str(exc))
        return Parsed(metadata=finalize({**fallback, **parsed}, fallback), source=source)

    @staticmethod
    def _fallback(fallback: dict[str, Any], reason: str) -> FallbackUsed:
        Log.warning(f"Using fallback metadata: {reason}")
        return FallbackUsed(metadata=finalize(fallback, fallback), reason=reason)


def parse_json_object(raw: str) -> dict[str, Any]:
    """Decode a JSON object, tolerating a surrounding markdown code fence.

    Raises:
        NormalizationError: if the text is not JSON or not an object.
    """
    cleaned = raw.strip()
    if cleaned.startswith("```"):
        lines = cleaned.splitlines()
        if lines and lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        cleaned = "\n".join(lines)

    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise NormalizationError(f"Invalid JSON response: {exc}") from exc

    if not isinstance(parsed, dict):
        raise NormalizationError("JSON response must be an object")
    return parsed


def extract_text_fields(text: str) -> dict[str, Any]:
    """Best-effort ``key: value`` extraction from a prose answer."""
    extracted: dict[str, Any] = {}
    for name, pattern in (
        ("title", _TITLE_RE),
        ("summary", _SUMMARY_RE),
        ("description", _DESCRIPTION_RE),
    ):
        match = pattern.search(text)
        if match and match.group(1).strip():
            extracted[name] = match.group(1).strip()

    match = _CATEGORY_RE.search(text)
    if match:
        extracted["category"] = match.group(1).strip().lower()

    match = _TAGS_RE.search(text)
    if match:
        raw_tags = re.sub(r"[\"'\[\]]", "", match.group(1))
        tags = [tag.strip() for tag in re.split(r"[,;]", raw_tags) if tag.strip()]
        if tags:
            extracted["tags"] = tags
    return extracted


def finalize(merged: dict[str, Any], fallback: dict[str, Any]) -> dict[str, Any]:
    """Clean ``merged`` and backfill required fields from the cleaned fallback."""
    cleaned = clean_metadata_fields(merged)
    cleaned_fallback = clean_metadata_fields(fallback)
    for name in REQUIRED_FIELDS:
        if not cleaned.get(name) and cleaned_fallback.get(name):
            cleaned[name] = cleaned_fallback[name]

    category = str(cleaned.get("category", "")).lower()
    cleaned["category"] = category if category in CATEGORIES else DEFAULT_CATEGORY
    cleaned.setdefault("title", "")
    cleaned.setdefault("description", "")
    cleaned.setdefault("tags", [])
    return cleaned
