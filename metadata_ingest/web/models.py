from dataclasses import dataclass, field, fields

VIDEO = "video"
SOCIAL = "social"
AUDIO = "audio"
RICH = "rich"


@dataclass(frozen=True)
class Platform:
    """A site with known embedding behaviour."""

    name: str
    kind: str
    domains: tuple[str, ...]
    oembed_endpoint: str | None = None

    @property
    def is_video(self) -> bool:
        return self.kind == VIDEO


@dataclass(frozen=True)
class WebMetadata:
    title: str = ""
    description: str = ""
    image: str = ""
    author: str = ""
    site_name: str = ""
    type: str = ""
    published_time: str = ""
    modified_time: str = ""
    tags: list[str] = field(default_factory=list)


WEB_METADATA_FIELDS = tuple(f.name for f in fields(WebMetadata))


@dataclass(frozen=True)
class OEmbedData:
    title: str = ""
    author_name: str = ""
    thumbnail_url: str = ""
    provider_name: str = ""
    type: str = ""


@dataclass(frozen=True)
class PageContent:
    """What a page fetch produced, and how it was obtained."""

    url: str
    metadata: WebMetadata
    text: str = ""
    source: str = "html"
