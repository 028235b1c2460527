import pytest

from metadata_ingest.web.platforms import (
    content_type,
    detect_platform,
    upgrade_thumbnail,
    youtube_video_id,
)


class TestDetectPlatform:
    @pytest.mark.parametrize(
        ("url", "name"),
        [
            ("https://www.youtube.com/watch?v=dQw4w9WgXcQ", "youtube"),
            ("https://youtu.be/dQw4w9WgXcQ", "youtube"),
            ("https://m.youtube.com/shorts/dQw4w9WgXcQ", "youtube"),
            ("https://vimeo.com/76979871", "vimeo"),
            ("https://x.com/user/status/1", "twitter"),
            ("https://open.spotify.com/track/abc", "spotify"),
            ("https://github.com/org/repo", "github"),
        ],
    )
    def test_known_hosts(self, url: str, name: str) -> None:
        platform = detect_platform(url)
        assert platform is not None
        assert platform.name == name

    @pytest.mark.parametrize(
        "url",
        ["https://notyoutube.com/watch", "https://example.com/x.com", "https://box.com/"],
    )
    def test_matches_on_host_boundaries_only(self, url: str) -> None:
        assert detect_platform(url) is None


class TestYoutubeVideoId:
    @pytest.mark.parametrize(
        "url",
        [
            "https://www.youtube.com/watch?v=dQw4w9WgXcQ",
            "https://www.youtube.com/watch?feature=share&v=dQw4w9WgXcQ",
            "https://youtu.be/dQw4w9WgXcQ?t=10",
            "https://www.youtube.com/embed/dQw4w9WgXcQ",
            "https://www.youtube.com/v/dQw4w9WgXcQ",
            "https://www.youtube.com/shorts/dQw4w9WgXcQ",
        ],
    )
    def test_extracts_id(self, url: str) -> None:
        assert youtube_video_id(url) == "dQw4w9WgXcQ"

    def test_no_id(self) -> None:
        assert youtube_video_id("https://www.youtube.com/channel/abc") is None


class TestUpgradeThumbnail:
    def test_youtube_uses_maxres(self) -> None:
        url = "https://www.youtube.com/watch?v=dQw4w9WgXcQ"
        upgraded = upgrade_thumbnail(detect_platform(url), url, "https://i.ytimg.com/hq.jpg")
        assert upgraded == "https://img.youtube.com/vi/dQw4w9WgXcQ/maxresdefault.jpg"

    def test_vimeo_size_suffix(self) -> None:
        url = "https://vimeo.com/76979871"
        thumbnail = "https://i.vimeocdn.com/video/452001751_295x166.jpg"
        assert upgrade_thumbnail(detect_platform(url), url, thumbnail) == (
            "https://i.vimeocdn.com/video/452001751_1280.jpg"
        )

    def test_non_video_unchanged(self) -> None:
        url = "https://open.spotify.com/track/abc"
        assert upgrade_thumbnail(detect_platform(url), url, "t.jpg") == "t.jpg"


class TestContentType:
    def test_platform_kind_wins(self) -> None:
        assert content_type(detect_platform("https://youtu.be/dQw4w9WgXcQ"), "article") == "video"
        assert content_type(detect_platform("https://reddit.com/r/x")) == "social"
        assert content_type(detect_platform("https://soundcloud.com/a/b")) == "audio"

    @pytest.mark.parametrize(
        ("og_type", "expected"),
        [("article", "article"), ("video.other", "video"), ("music.song", "audio"), ("", "website")],
    )
    def test_og_type_mapping(self, og_type: str, expected: str) -> None:
        assert content_type(None, og_type) == expected
