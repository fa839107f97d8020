# ASCII-only. No ellipses.

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import NetworkError, NotFoundError, ShortsError, TokenRefreshError
from .merge import VideoMetadata


def youtube_err_text(exc: Exception) -> str:
    content = getattr(exc, "content", None)
    if content:
        if isinstance(content, (bytes, bytearray)):
            return content.decode("utf-8", errors="replace")
        return str(content)
    return str(exc)


def youtube_url(video_id: str) -> str:
    return "https://youtube.com/watch?v=%s" % video_id


def shorts_url(video_id: str) -> str:
    return "https://youtube.com/shorts/%s" % video_id


def build_service(credentials: Any) -> Any:
    from googleapiclient.discovery import build

    return build("youtube", "v3", credentials=credentials, cache_discovery=False)


def _client_errors() -> tuple:
    """Exceptions the API client stack raises for one request."""
    import httplib2
    from google.auth.exceptions import RefreshError, TransportError
    from googleapiclient.errors import HttpError

    return (HttpError, RefreshError, TransportError, httplib2.HttpLib2Error, OSError)


def api_error(what: str, exc: Exception) -> ShortsError:
    """Map a client library exception to the project error it stands for."""
    from google.auth.exceptions import RefreshError
    from googleapiclient.errors import HttpError

    if isinstance(exc, HttpError):
        status = getattr(getattr(exc, "resp", None), "status", None)
        if status == 404:
            return NotFoundError("%s: not found" % what)
        return NetworkError("%s failed: %s" % (what, youtube_err_text(exc).replace("\n", " ")))
    if isinstance(exc, RefreshError):
        # The authorized transport refreshes mid-call when the access token lapses.
        return TokenRefreshError("%s failed: token refresh was rejected (%s). Run: yt-shorts auth --reauth" % (what, exc))
    return NetworkError("%s failed: %s: %s" % (what, type(exc).__name__, exc))


def execute(request: Any, what: str) -> Dict[str, Any]:
    """Run an API request, translating client library errors."""
    try:
        return request.execute()
    except _client_errors() as e:
        raise api_error(what, e) from e


def get_video(service: Any, video_id: str, parts: str = "snippet,status") -> Dict[str, Any]:
    resp = execute(service.videos().list(id=video_id, part=parts), "videos.list")
    items = resp.get("items") or []
    if not items:
        raise NotFoundError("Video not found: %s" % video_id)
    return items[0]


def get_video_metadata(service: Any, video_id: str) -> VideoMetadata:
    return VideoMetadata.from_api(get_video(service, video_id))


def update_video_metadata(service: Any, video_id: str, metadata: VideoMetadata) -> Dict[str, Any]:
    body = metadata.to_api_body()
    body["id"] = video_id
    return execute(service.videos().update(part="snippet,status", body=body), "videos.update")


def insert_video(service: Any, video_path: Path, body: Dict[str, Any], chunk_progress_step: int = 10) -> Dict[str, Any]:
    """Resumable upload. Prints progress every chunk_progress_step percent."""
    from googleapiclient.http import MediaFileUpload

    mimetype = mimetypes.guess_type(str(video_path))[0] or "video/mp4"
    response: Optional[Dict[str, Any]] = None
    last_pct = -1
    try:
        media = MediaFileUpload(str(video_path), mimetype=mimetype, resumable=True)
        req = service.videos().insert(part=",".join(body.keys()), body=body, media_body=media)
        while response is None:
            status, response = req.next_chunk()
            if status:
                pct = int(status.progress() * 100)
                if pct != last_pct and pct % chunk_progress_step == 0:
                    print("[youtube] upload_progress=%d" % pct)
                    last_pct = pct
    except _client_errors() as e:
        raise api_error("videos.insert", e) from e
    return response


def uploads_playlist_id(service: Any) -> str:
    resp = execute(service.channels().list(mine=True, part="contentDetails"), "channels.list")
    items = resp.get("items") or []
    if not items:
        raise NotFoundError("No channel found for authenticated user")
    pid = ((items[0].get("contentDetails") or {}).get("relatedPlaylists") or {}).get("uploads")
    if not pid:
        raise NotFoundError("Could not find uploads playlist")
    return str(pid)


def list_playlist_video_ids(service: Any, playlist_id: str, max_results: int) -> Dict[str, Any]:
    resp = execute(
        service.playlistItems().list(playlistId=playlist_id, part="snippet", maxResults=min(max_results, 50)),
        "playlistItems.list",
    )
    ids: List[str] = []
    for item in resp.get("items") or []:
        vid = ((item.get("snippet") or {}).get("resourceId") or {}).get("videoId")
        if vid:
            ids.append(str(vid))
    total = int((resp.get("pageInfo") or {}).get("totalResults") or 0)
    return {"ids": ids, "total": total}


def get_videos(service: Any, video_ids: List[str]) -> List[Dict[str, Any]]:
    if not video_ids:
        return []
    resp = execute(
        service.videos().list(id=",".join(video_ids), part="snippet,status,statistics,contentDetails"),
        "videos.list",
    )
    return list(resp.get("items") or [])
