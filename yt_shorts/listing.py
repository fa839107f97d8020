# ASCII-only. No ellipses.

from __future__ import annotations

import json
import re
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

from dateutil import parser as dtparser

from .youtube_api import get_videos, list_playlist_video_ids, uploads_playlist_id, youtube_url


DEFAULT_MAX_RESULTS = 10
MAX_TITLE_COL = 40

_DURATION_RE = re.compile(r"PT(?:(\d+)H)?(?:(\d+)M)?(?:(\d+)S)?")


@dataclass(frozen=True)
class VideoListItem:
    video_id: str
    title: str
    published_at: str
    privacy_status: str
    view_count: str
    like_count: str
    duration: str
    url: str


@dataclass(frozen=True)
class ListResult:
    videos: List[VideoListItem]
    total_results: int


def parse_duration(iso: str) -> str:
    """ISO 8601 duration to clock form: PT1M30S -> 1:30, PT1H2M3S -> 1:02:03."""
    m = _DURATION_RE.match(iso or "")
    if not m:
        return "0:00"
    hours = int(m.group(1) or 0)
    minutes = int(m.group(2) or 0)
    seconds = int(m.group(3) or 0)
    if hours > 0:
        return "%d:%02d:%02d" % (hours, minutes, seconds)
    return "%d:%02d" % (minutes, seconds)


def format_count(count: str) -> str:
    try:
        n = int(count)
    except (TypeError, ValueError):
        return str(count)
    if n >= 1000000:
        return "%.1fM" % (n / 1000000.0)
    if n >= 1000:
        return "%.1fK" % (n / 1000.0)
    return str(count)


def format_date(iso: str) -> str:
    if not iso:
        return ""
    try:
        return dtparser.isoparse(iso).date().isoformat()
    except (ValueError, OverflowError):
        return iso


def _to_item(video: Dict[str, Any]) -> VideoListItem:
    vid = str(video.get("id") or "")
    snippet = video.get("snippet") or {}
    stats = video.get("statistics") or {}
    return VideoListItem(
        video_id=vid,
        title=str(snippet.get("title") or "Untitled"),
        published_at=str(snippet.get("publishedAt") or ""),
        privacy_status=str((video.get("status") or {}).get("privacyStatus") or "unknown"),
        view_count=str(stats.get("viewCount") or "0"),
        like_count=str(stats.get("likeCount") or "0"),
        duration=str((video.get("contentDetails") or {}).get("duration") or "PT0S"),
        url=youtube_url(vid),
    )


def list_videos(service: Any, max_results: Optional[int] = None, privacy: Optional[str] = None) -> ListResult:
    n = max_results if max_results and max_results > 0 else DEFAULT_MAX_RESULTS

    playlist = uploads_playlist_id(service)
    page = list_playlist_video_ids(service, playlist, n)
    if not page["ids"]:
        return ListResult(videos=[], total_results=0)

    videos: List[VideoListItem] = []
    for v in get_videos(service, page["ids"]):
        item = _to_item(v)
        if privacy and item.privacy_status != privacy:
            continue
        videos.append(item)
    return ListResult(videos=videos, total_results=page["total"])


def format_table(result: ListResult) -> List[str]:
    videos = result.videos
    if not videos:
        return ["", "No videos found."]

    width = min(MAX_TITLE_COL, max(len(v.title) for v in videos))
    header = "  #  %s  Privacy    Views    Duration  Published" % "Title".ljust(width)
    lines = [
        "",
        "Your Videos (showing %d of %d)" % (len(videos), result.total_results),
        "",
        header,
        "  " + "-" * (len(header) - 2),
    ]
    for i, v in enumerate(videos, start=1):
        title = v.title
        if len(title) > width:
            title = title[: width - 3] + "..."
        lines.append("  %s  %s  %s%s  %s  %s" % (
            str(i).rjust(2),
            title.ljust(width),
            v.privacy_status.ljust(10),
            format_count(v.view_count).rjust(8),
            parse_duration(v.duration).rjust(8),
            format_date(v.published_at),
        ))
    lines.append("")
    return lines


def to_json(result: ListResult) -> str:
    out = [
        {
            "videoId": v.video_id,
            "title": v.title,
            "url": v.url,
            "publishedAt": v.published_at,
            "privacyStatus": v.privacy_status,
            "viewCount": v.view_count,
            "likeCount": v.like_count,
            "duration": parse_duration(v.duration),
        }
        for v in result.videos
    ]
    return json.dumps(out, indent=2)


def print_videos_table(result: ListResult) -> None:
    for ln in format_table(result):
        print(ln)


def print_videos_json(result: ListResult) -> None:
    print(to_json(result))
