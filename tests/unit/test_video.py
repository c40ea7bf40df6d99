"""Tests for video resolution."""

import pytest

from conftest import TALK_URL, YOUTUBE_ID, make_fetcher, talk_page
from talk_migration.extractors.fetch import parse_html
from talk_migration.extractors.video import (
    VIDEO_TITLE,
    VideoResolver,
    find_video_url,
    find_youtube_url,
)

WATCH_URL = f"https://www.youtube.com/watch?v={YOUTUBE_ID}"
EMBED_URL = "https://notist.ninja/embed/ckxyz123"


class TestFindYoutubeUrl:
    """Tests for YouTube URL detection."""

    @pytest.mark.parametrize("text", [
        f"https://www.youtube.com/watch?v={YOUTUBE_ID}&t=42",
        f"see https://youtu.be/{YOUTUBE_ID} for the recording",
        f'<iframe src="https://www.youtube.com/embed/{YOUTUBE_ID}?rel=0"></iframe>',
        f'<iframe src="https://www.youtube-nocookie.com/embed/{YOUTUBE_ID}"></iframe>',
    ])
    def test_canonical_watch_url(self, text: str):
        assert find_youtube_url(text) == WATCH_URL

    def test_earliest_reference_wins(self):
        text = "https://youtu.be/AAAAAAAAAAA then https://www.youtube.com/watch?v=BBBBBBBBBBB"
        assert find_youtube_url(text) == "https://www.youtube.com/watch?v=AAAAAAAAAAA"

    def test_no_match(self):
        assert find_youtube_url("nothing here") is None

    def test_vimeo(self):
        assert find_video_url('<iframe src="https://player.vimeo.com/video/123456"></iframe>') == (
            "https://vimeo.com/123456"
        )


class TestVideoResolver:
    """Tests for VideoResolver."""

    def test_indirect_embed_is_resolved(self):
        fetcher = make_fetcher({
            EMBED_URL: f'<html><body><iframe src="https://www.youtube.com/embed/{YOUTUBE_ID}"></iframe></body></html>',
        })
        html = talk_page(video_html=f'<iframe src="{EMBED_URL}"></iframe>')
        video, status = VideoResolver(fetcher).resolve(parse_html(TALK_URL, html))
        assert status == "completed"
        assert video.url == WATCH_URL
        assert video.type == "video"
        assert video.title == VIDEO_TITLE

    def test_protocol_relative_embed(self):
        fetcher = make_fetcher({
            EMBED_URL: f"<html><body>https://youtu.be/{YOUTUBE_ID}</body></html>",
        })
        html = talk_page(video_html='<iframe src="//notist.ninja/embed/ckxyz123"></iframe>')
        video, _ = VideoResolver(fetcher).resolve(parse_html(TALK_URL, html))
        assert video.url == WATCH_URL

    def test_unreachable_embed_falls_back_to_embed_url(self):
        fetcher = make_fetcher({})
        html = talk_page(video_html=f'<iframe src="{EMBED_URL}"></iframe>')
        video, status = VideoResolver(fetcher).resolve(parse_html(TALK_URL, html))
        assert status == "completed"
        assert video.url == EMBED_URL

    def test_direct_youtube_in_page(self):
        html = talk_page(video_html=f'<iframe src="https://www.youtube.com/embed/{YOUTUBE_ID}"></iframe>')
        video, status = VideoResolver(make_fetcher({})).resolve(parse_html(TALK_URL, html))
        assert status == "completed"
        assert video.url == WATCH_URL

    def test_embed_mentioned_outside_video_container(self):
        fetcher = make_fetcher({EMBED_URL: f"<html><body>{WATCH_URL}</body></html>"})
        html = talk_page().replace("</body>", f'<script>var player = "{EMBED_URL}";</script></body>')
        video, _ = VideoResolver(fetcher).resolve(parse_html(TALK_URL, html))
        assert video.url == WATCH_URL

    def test_no_video(self):
        video, status = VideoResolver(make_fetcher({})).resolve(parse_html(TALK_URL, talk_page()))
        assert video is None
        assert status == "video-pending"
