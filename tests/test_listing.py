"""
Tests for channel listing and its table/JSON rendering.
"""

import json

import pytest

from conftest import FakeYouTube, make_video
from yt_shorts.errors import NotFoundError
from yt_shorts.listing import (
    ListResult,
    VideoListItem,
    format_count,
    format_date,
    format_table,
    list_videos,
    parse_duration,
    to_json,
)


class TestFormatting:

    @pytest.mark.parametrize("iso,expected", [
        ("PT45S", "0:45"),
        ("PT1M30S", "1:30"),
        ("PT1H2M3S", "1:02:03"),
        ("PT2H", "2:00:00"),
        ("P1D", "0:00"),
        ("", "0:00"),
    ])
    def test_parse_duration(self, iso, expected):
        assert parse_duration(iso) == expected

    @pytest.mark.parametrize("count,expected", [
        ("0", "0"),
        ("999", "999"),
        ("1500", "1.5K"),
        ("2500000", "2.5M"),
        ("n/a", "n/a"),
    ])
    def test_format_count(self, count, expected):
        assert format_count(count) == expected

    def test_format_date(self):
        assert format_date("2024-03-05T10:20:30Z") == "2024-03-05"
        assert format_date("") == ""
        assert format_date("not a date") == "not a date"


class TestListVideos:

    def test_default_max_and_total(self):
        yt = FakeYouTube({"v%d" % i: make_video("v%d" % i) for i in range(12)})
        result = list_videos(yt)
        assert len(result.videos) == 10
        assert result.total_results == 12
        assert ("playlistItems.list", "UU123", 10) in yt.calls

    def test_max_is_capped_at_page_size(self):
        yt = FakeYouTube({"a": make_video("a")})
        list_videos(yt, max_results=200)
        assert ("playlistItems.list", "UU123", 50) in yt.calls

    def test_privacy_filter(self):
        yt = FakeYouTube({
            "a": make_video("a", privacy="public"),
            "b": make_video("b", privacy="private"),
            "c": make_video("c", privacy="public"),
        })
        result = list_videos(yt, privacy="public")
        assert [v.video_id for v in result.videos] == ["a", "c"]
        assert result.total_results == 3

    def test_item_fields(self):
        yt = FakeYouTube({"a": make_video("a", title="Hello", views="1234", duration="PT1M5S")})
        item = list_videos(yt).videos[0]
        assert item.title == "Hello"
        assert item.view_count == "1234"
        assert item.duration == "PT1M5S"
        assert item.url == "https://youtube.com/watch?v=a"

    def test_empty_channel(self):
        yt = FakeYouTube()
        result = list_videos(yt)
        assert result == ListResult(videos=[], total_results=0)
        assert not [c for c in yt.calls if c[0] == "videos.list"]

    def test_no_channel(self):
        yt = FakeYouTube()
        yt.uploads_playlist = None
        with pytest.raises(NotFoundError):
            list_videos(yt)


def _item(title, privacy="public"):
    return VideoListItem(
        video_id="id1",
        title=title,
        published_at="2024-03-05T10:20:30Z",
        privacy_status=privacy,
        view_count="1500",
        like_count="3",
        duration="PT45S",
        url="https://youtube.com/watch?v=id1",
    )


class TestRendering:

    def test_empty_table(self):
        assert format_table(ListResult(videos=[], total_results=0))[-1] == "No videos found."

    def test_table_rows(self):
        lines = format_table(ListResult(videos=[_item("Short one")], total_results=7))
        assert "Your Videos (showing 1 of 7)" in lines
        row = lines[5]
        assert row.startswith("   1  Short one")
        assert "1.5K" in row
        assert "0:45" in row
        assert row.endswith("2024-03-05")

    def test_long_title_truncated(self):
        lines = format_table(ListResult(videos=[_item("x" * 60)], total_results=1))
        assert "x" * 37 + "..." in lines[5]
        assert "x" * 38 not in lines[5]

    def test_json_shape(self):
        out = json.loads(to_json(ListResult(videos=[_item("T", privacy="unlisted")], total_results=1)))
        assert out == [{
            "videoId": "id1",
            "title": "T",
            "url": "https://youtube.com/watch?v=id1",
            "publishedAt": "2024-03-05T10:20:30Z",
            "privacyStatus": "unlisted",
            "viewCount": "1500",
            "likeCount": "3",
            "duration": "0:45",
        }]
