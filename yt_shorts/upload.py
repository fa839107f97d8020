# ASCII-only. No ellipses.

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, List, Optional, Sequence, Tuple

from .errors import NetworkError, ShortsError, UsageError
from .merge import DEFAULT_PRIVACY, MetadataPatch, VideoMetadata
from .youtube_api import insert_video, shorts_url


MAX_TITLE_LEN = 100


@dataclass(frozen=True)
class UploadResult:
    video_id: str
    title: str
    url: str


@dataclass(frozen=True)
class BatchItemResult:
    file: str
    video_id: str = ""
    url: str = ""
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error


def shorts_title_and_description(title: str, description: str, add_shorts_hashtag: bool = True) -> Tuple[str, str]:
    if add_shorts_hashtag:
        if "#shorts" not in title.lower():
            title = "%s #shorts" % title
        if "#shorts" not in description.lower():
            description = "%s\n\n#shorts" % description if description else "#shorts"
    if len(title) > MAX_TITLE_LEN:
        title = title[: MAX_TITLE_LEN - 3] + "..."
    return title, description


def upload_video(service: Any, video_path: Path, metadata: VideoMetadata, add_shorts_hashtag: bool = True) -> UploadResult:
    if not video_path.is_file():
        raise UsageError("Video file not found: %s" % video_path)

    title, description = shorts_title_and_description(metadata.title, metadata.description, add_shorts_hashtag)
    size_mb = video_path.stat().st_size / (1024.0 * 1024.0)

    print("")
    print("Uploading: %s" % video_path.name)
    print("Title: %s" % title)
    print("Size: %.2f MB" % size_mb)
    print("Privacy: %s" % metadata.privacy_status)
    print("")

    body = {
        "snippet": {
            "title": title,
            "description": description,
            "tags": list(metadata.tags),
            "categoryId": metadata.category_id,
        },
        "status": {
            "privacyStatus": metadata.privacy_status,
            "selfDeclaredMadeForKids": False,
        },
    }
    response = insert_video(service, video_path, body)

    vid = str(response.get("id") or "").strip()
    if not vid:
        raise NetworkError("YouTube API returned no video id")
    url = shorts_url(vid)

    print("")
    print("Upload complete!")
    print("Video ID: %s" % vid)
    print("URL: %s" % url)
    return UploadResult(
        video_id=vid,
        title=str((response.get("snippet") or {}).get("title") or title),
        url=url,
    )


def upload_batch(service: Any, items: Sequence[Tuple[Path, VideoMetadata]]) -> List[BatchItemResult]:
    """Upload items one at a time. A failed item is recorded and the loop continues."""
    results: List[BatchItemResult] = []
    total = len(items)
    for i, (path, metadata) in enumerate(items, start=1):
        print("")
        print("=== Uploading video %d of %d ===" % (i, total))
        try:
            res = upload_video(service, path, metadata)
        except ShortsError as e:
            print("[batch] upload_fail file=%s err=%s" % (path, str(e).replace("\n", " ")))
            results.append(BatchItemResult(file=str(path), error=str(e)))
            continue
        except Exception as e:
            # One bad item must not abort the rest of the batch.
            err = "%s: %s" % (type(e).__name__, e)
            print("[batch] upload_fail file=%s err=%s" % (path, err.replace("\n", " ")))
            results.append(BatchItemResult(file=str(path), error=err))
            continue
        results.append(BatchItemResult(file=str(path), video_id=res.video_id, url=res.url))
    ok = sum(1 for r in results if r.ok)
    print("[batch] uploaded_count=%d failed_count=%d" % (ok, len(results) - ok))
    return results


def parse_batch_manifest(j: Any, base_dir: Path) -> List[Tuple[Path, VideoMetadata]]:
    """Accept a JSON list, or {"videos": [...]}, of {file, title, description?, tags?, privacy?}."""
    raw: Optional[List[Any]] = None
    if isinstance(j, list):
        raw = j
    elif isinstance(j, dict) and isinstance(j.get("videos"), list):
        raw = j["videos"]
    if raw is None:
        raise UsageError("batch manifest must be a list or contain a 'videos' list")

    out: List[Tuple[Path, VideoMetadata]] = []
    for n, entry in enumerate(raw, start=1):
        if not isinstance(entry, dict):
            raise UsageError("batch entry %d must be an object" % n)
        f = str(entry.get("file") or "").strip()
        title = str(entry.get("title") or "").strip()
        if not f or not title:
            raise UsageError("batch entry %d needs 'file' and 'title'" % n)
        tags = entry.get("tags") or []
        if isinstance(tags, str):
            tags = split_tags(tags)
        # Reuses the privacy check of MetadataPatch.
        patch = MetadataPatch(privacy_status=entry.get("privacy") or None)
        p = Path(f)
        if not p.is_absolute():
            p = base_dir / p
        out.append((
            p,
            VideoMetadata(
                title=title,
                description=str(entry.get("description") or ""),
                tags=[str(t) for t in tags],
                privacy_status=patch.privacy_status or DEFAULT_PRIVACY,
            ),
        ))
    return out


def split_tags(s: str) -> List[str]:
    """Comma-separated tags. An empty string is an explicitly empty list."""
    return [t.strip() for t in s.split(",") if t.strip()]
