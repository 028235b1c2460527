"""Known platforms, oEmbed endpoints and thumbnail upgrades."""

import re
from urllib.parse import urlsplit

from metadata_ingest.web.models import AUDIO, RICH, SOCIAL, VIDEO, Platform

PLATFORMS: tuple[Platform, ...] = (
    Platform("youtube", VIDEO, ("youtube.com", "youtu.be"), "https://www.youtube.com/oembed"),
    Platform("vimeo", VIDEO, ("vimeo.com",), "https://vimeo.com/api/oembed.json"),
    Platform(
        "dailymotion",
        VIDEO,
        ("dailymotion.com", "dai.ly"),
        "https://www.dailymotion.com/services/oembed",
    ),
    Platform("twitch", VIDEO, ("twitch.tv",)),
    Platform("tiktok", VIDEO, ("tiktok.com",), "https://www.tiktok.com/oembed"),
    Platform("twitter", SOCIAL, ("twitter.com", "x.com"), "https://publish.twitter.com/oembed"),
    Platform("instagram", SOCIAL, ("instagram.com",)),
    Platform("facebook", SOCIAL, ("facebook.com", "fb.watch")),
    Platform("reddit", SOCIAL, ("reddit.com",), "https://www.reddit.com/oembed"),
    Platform("spotify", AUDIO, ("spotify.com",), "https://open.spotify.com/oembed"),
    Platform("soundcloud", AUDIO, ("soundcloud.com",), "https://soundcloud.com/oembed"),
    Platform("flickr", RICH, ("flickr.com", "flic.kr"), "https://www.flickr.com/services/oembed"),
    Platform("pinterest", SOCIAL, ("pinterest.com",)),
    Platform("linkedin", SOCIAL, ("linkedin.com",)),
    Platform("medium", RICH, ("medium.com",)),
    Platform("github", RICH, ("github.com",)),
    Platform("codepen", RICH, ("codepen.io",), "https://codepen.io/api/oembed"),
    Platform("figma", RICH, ("figma.com",), "https://www.figma.com/api/oembed"),
    Platform(
        "slideshare",
        RICH,
        ("slideshare.net",),
        "https://www.slideshare.net/api/oembed/2",
    ),
)

YOUTUBE_THUMBNAIL = "https://img.youtube.com/vi/{video_id}/maxresdefault.jpg"

_YOUTUBE_ID_RES = (
    re.compile(r"youtube\.com/watch\?(?:[^#]*&)?v=([A-Za-z0-9_-]{11})"),
    re.compile(r"youtu\.be/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/embed/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/v/([A-Za-z0-9_-]{11})"),
    re.compile(r"youtube\.com/shorts/([A-Za-z0-9_-]{11})"),
)
_VIMEO_SIZE_RE = re.compile(r"_\d+x\d+")

_OG_TYPE_CONTENT_TYPES = {
    "article": "article",
    "blog": "article",
    "video": "video",
    "music": "audio",
    "website": "website",
}


def detect_platform(url: str) -> Platform | None:
    """Match the URL host against each platform's domains (subdomains included)."""
    host = (urlsplit(url).hostname or "").lower()
    if not host:
        return None
    for platform in PLATFORMS:
        for domain in platform.domains:
            if host == domain or host.endswith("." + domain):
                return platform
    return None


def youtube_video_id(url: str) -> str | None:
    for pattern in _YOUTUBE_ID_RES:
        match = pattern.search(url)
        if match:
            return match.group(1)
    return None


def upgrade_thumbnail(platform: Platform | None, url: str, thumbnail: str) -> str:
    """Swap a video thumbnail for its highest-resolution variant when possible."""
    if platform is None or not platform.is_video:
        return thumbnail
    if platform.name == "youtube":
        video_id = youtube_video_id(url)
        if video_id:
            return YOUTUBE_THUMBNAIL.format(video_id=video_id)
        return thumbnail
    if platform.name == "vimeo" and thumbnail:
        return _VIMEO_SIZE_RE.sub("_1280", thumbnail)
    return thumbnail


def content_type(platform: Platform | None, og_type: str = "") -> str:
    if platform is not None and platform.kind in (VIDEO, SOCIAL, AUDIO):
        return platform.kind
    prefix = og_type.lower().split(".", 1)[0].split(":", 1)[0]
    return _OG_TYPE_CONTENT_TYPES.get(prefix, "website")
