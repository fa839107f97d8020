"""Pytest configuration and fixtures."""

from typing import Any, Dict, List, Optional

import pytest

from yt_shorts.config import AppConfig
from yt_shorts.token_store import TokenRecord


@pytest.fixture
def app_config(tmp_path):
    """AppConfig with every file isolated under tmp_path."""
    return AppConfig(
        token_path=tmp_path / "token.json",
        credentials_path=tmp_path / "client_secrets.json",
        auth_timeout_sec=5.0,
    )


@pytest.fixture
def client_env():
    return {"YOUTUBE_CLIENT_ID": "env-id", "YOUTUBE_CLIENT_SECRET": "env-secret"}


class FakeProvider:
    """Identity provider double that records every call."""

    def __init__(self, refreshed_expiry: int = 9_999_999_999_999, refresh_error: Optional[Exception] = None):
        self.calls: List[str] = []
        self.refreshed_expiry = refreshed_expiry
        self.refresh_error = refresh_error

    def authorization_url(self, credential, redirect_uri, scopes):
        self.calls.append("authorization_url")
        return "https://accounts.example/auth?redirect_uri=%s" % redirect_uri

    def exchange_code(self, credential, code, redirect_uri, scopes):
        self.calls.append("exchange_code:%s" % code)
        return TokenRecord(access_token="new-access", refresh_token="new-refresh", expiry_date=123, extra={"scope": "s"})

    def refresh(self, credential, record, scopes):
        self.calls.append("refresh")
        if self.refresh_error is not None:
            raise self.refresh_error
        return TokenRecord(
            access_token="refreshed-access",
            refresh_token=record.refresh_token,
            expiry_date=self.refreshed_expiry,
            extra=dict(record.extra),
        )

    def build_credentials(self, credential, record, scopes):
        self.calls.append("build_credentials")
        return {"credential": credential, "token": record.access_token}


@pytest.fixture
def fake_provider():
    return FakeProvider()


class FakeRequest:
    def __init__(self, result: Dict[str, Any]):
        self.result = result

    def execute(self):
        return self.result


class FakeInsert:
    def __init__(self, response: Dict[str, Any], error: Optional[Exception] = None):
        self.response = response
        self.error = error

    def next_chunk(self):
        if self.error is not None:
            raise self.error
        return None, self.response


class _Videos:
    def __init__(self, svc: "FakeYouTube"):
        self.svc = svc

    def list(self, id, part):
        self.svc.calls.append(("videos.list", id, part))
        items = [self.svc.store[v] for v in id.split(",") if v in self.svc.store]
        return FakeRequest({"items": items})

    def update(self, part, body):
        self.svc.calls.append(("videos.update", body["id"], part))
        self.svc.updated.append(body)
        return FakeRequest(body)

    def insert(self, part, body, media_body):
        self.svc.calls.append(("videos.insert", media_body, part))
        self.svc.inserted.append(body)
        error = self.svc.insert_errors.pop(0) if self.svc.insert_errors else None
        vid = "new%d" % len(self.svc.inserted)
        return FakeInsert({"id": vid, "snippet": body["snippet"]}, error=error)


class _Channels:
    def __init__(self, svc: "FakeYouTube"):
        self.svc = svc

    def list(self, mine, part):
        self.svc.calls.append(("channels.list", mine, part))
        if self.svc.uploads_playlist is None:
            return FakeRequest({"items": []})
        return FakeRequest({"items": [{"contentDetails": {"relatedPlaylists": {"uploads": self.svc.uploads_playlist}}}]})


class _PlaylistItems:
    def __init__(self, svc: "FakeYouTube"):
        self.svc = svc

    def list(self, playlistId, part, maxResults):
        self.svc.calls.append(("playlistItems.list", playlistId, maxResults))
        ids = list(self.svc.store.keys())[:maxResults]
        return FakeRequest({
            "items": [{"snippet": {"resourceId": {"videoId": v}}} for v in ids],
            "pageInfo": {"totalResults": len(self.svc.store)},
        })


class FakeYouTube:
    """In-memory stand-in for the googleapiclient youtube v3 resource."""

    def __init__(self, videos: Optional[Dict[str, Dict[str, Any]]] = None):
        self.store: Dict[str, Dict[str, Any]] = dict(videos or {})
        self.uploads_playlist: Optional[str] = "UU123"
        self.calls: List[Any] = []
        self.updated: List[Dict[str, Any]] = []
        self.inserted: List[Dict[str, Any]] = []
        self.insert_errors: List[Exception] = []

    def videos(self):
        return _Videos(self)

    def channels(self):
        return _Channels(self)

    def playlistItems(self):
        return _PlaylistItems(self)


def make_video(video_id, title="Original", description="Original description", tags=None,
               privacy="private", category="24", views="0", duration="PT45S",
               published="2024-03-05T10:20:30Z"):
    return {
        "id": video_id,
        "snippet": {
            "title": title,
            "description": description,
            "tags": list(tags) if tags is not None else ["a", "b"],
            "categoryId": category,
            "publishedAt": published,
        },
        "status": {"privacyStatus": privacy},
        "statistics": {"viewCount": views, "likeCount": "1"},
        "contentDetails": {"duration": duration},
    }


@pytest.fixture
def fake_youtube():
    return FakeYouTube()
