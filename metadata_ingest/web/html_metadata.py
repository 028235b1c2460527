"""Page metadata from Open Graph, Twitter Card, JSON-LD and plain HTML meta.

Each layer yields a partial field map; ``merge_layers`` keeps the first
non-empty value per field, in layer order.
"""

import json
from dataclasses import replace
from typing import Any
from urllib.parse import urljoin

from bs4 import BeautifulSoup, Tag

from metadata_ingest.logging.logger import Log
from metadata_ingest.web.models import WEB_METADATA_FIELDS, WebMetadata

Layer = dict[str, Any]


def parse_html_metadata(html: str, base_url: str = "") -> WebMetadata:
    soup = BeautifulSoup(html, "html.parser")
    metadata = merge_layers(
        [
            open_graph_layer(soup),
            twitter_card_layer(soup),
            json_ld_layer(soup),
            html_meta_layer(soup),
        ]
    )
    if metadata.image and base_url:
        return replace(metadata, image=urljoin(base_url, metadata.image))
    return metadata


def merge_layers(layers: list[Layer]) -> WebMetadata:
    merged: Layer = {}
    for layer in layers:
        for name in WEB_METADATA_FIELDS:
            if merged.get(name):
                continue
            value = layer.get(name)
            if value:
                merged[name] = value
    return WebMetadata(**merged)


def open_graph_layer(soup: BeautifulSoup) -> Layer:
    return {
        "title": _meta(soup, "og:title"),
        "description": _meta(soup, "og:description"),
        "image": _meta(soup, "og:image") or _meta(soup, "og:image:url"),
        "site_name": _meta(soup, "og:site_name"),
        "type": _meta(soup, "og:type"),
        "author": _meta(soup, "article:author"),
        "published_time": _meta(soup, "article:published_time"),
        "modified_time": _meta(soup, "article:modified_time") or _meta(soup, "og:updated_time"),
        "tags": _meta_all(soup, "article:tag"),
    }


def twitter_card_layer(soup: BeautifulSoup) -> Layer:
    return {
        "title": _meta(soup, "twitter:title"),
        "description": _meta(soup, "twitter:description"),
        "image": _meta(soup, "twitter:image") or _meta(soup, "twitter:image:src"),
        "author": _meta(soup, "twitter:creator"),
        "site_name": _meta(soup, "twitter:site"),
    }


def json_ld_layer(soup: BeautifulSoup) -> Layer:
    """First JSON-LD object carrying a headline or name."""
    for item in _json_ld_items(soup):
        title = _ld_text(item.get("headline")) or _ld_text(item.get("name"))
        if not title:
            continue
        item_type = item.get("@type")
        if isinstance(item_type, list):
            item_type = item_type[0] if item_type else ""
        return {
            "title": title,
            "description": _ld_text(item.get("description")),
            "image": _ld_url(item.get("image")),
            "author": _ld_name(item.get("author")),
            "site_name": _ld_name(item.get("publisher")),
            "type": item_type if isinstance(item_type, str) else "",
            "published_time": _ld_text(item.get("datePublished")),
            "modified_time": _ld_text(item.get("dateModified")),
            "tags": _ld_keywords(item.get("keywords")),
        }
    return {}


def html_meta_layer(soup: BeautifulSoup) -> Layer:
    title = soup.title.get_text(strip=True) if soup.title else ""
    keywords = _meta(soup, "keywords")
    image = ""
    link = soup.find("link", rel="image_src")
    if isinstance(link, Tag):
        href = link.get("href")
        image = href.strip() if isinstance(href, str) else ""
    return {
        "title": title,
        "description": _meta(soup, "description"),
        "author": _meta(soup, "author"),
        "image": image,
        "tags": [k.strip() for k in keywords.split(",") if k.strip()],
    }


def _meta(soup: BeautifulSoup, key: str) -> str:
    for attr in ("property", "name"):
        tag = soup.find("meta", attrs={attr: key})
        if isinstance(tag, Tag):
            content = tag.get("content")
            if isinstance(content, str) and content.strip():
                return content.strip()
    return ""


def _meta_all(soup: BeautifulSoup, key: str) -> list[str]:
    values: list[str] = []
    for tag in soup.find_all("meta", attrs={"property": key}):
        content = tag.get("content")
        if isinstance(content, str) and content.strip():
            values.append(content.strip())
    return values


def _json_ld_items(soup: BeautifulSoup) -> list[dict[str, Any]]:
    items: list[dict[str, Any]] = []
    for script in soup.find_all("script", type="application/ld+json"):
        raw = script.string
        if not raw:
            continue
        try:
            data = json.loads(str(raw).strip())
        except json.JSONDecodeError as exc:
            Log.warning(f"Invalid JSON-LD: {exc}")
            continue
        for item in data if isinstance(data, list) else [data]:
            if not isinstance(item, dict):
                continue
            graph = item.get("@graph")
            if isinstance(graph, list):
                items.extend(node for node in graph if isinstance(node, dict))
            else:
                items.append(item)
    return items


def _ld_text(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def _ld_url(value: Any) -> str:
    if isinstance(value, list):
        value = value[0] if value else ""
    if isinstance(value, dict):
        value = value.get("url", "")
    return _ld_text(value)


def _ld_name(value: Any) -> str:
    if isinstance(value, list):
        value = value[0] if value else ""
    if isinstance(value, dict):
        value = value.get("name", "")
    return _ld_text(value)


def _ld_keywords(value: Any) -> list[str]:
    if isinstance(value, str):
        return [k.strip() for k in value.split(",") if k.strip()]
    if isinstance(value, list):
        return [k.strip() for k in value if isinstance(k, str) and k.strip()]
    return []
