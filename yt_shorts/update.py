# ASCII-only. No ellipses.

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, List

from .merge import MetadataPatch, patch_metadata
from .youtube_api import get_video_metadata, update_video_metadata, youtube_url


@dataclass(frozen=True)
class UpdateResult:
    video_id: str
    title: str
    url: str
    changes: List[str]


def update_video(service: Any, video_id: str, patch: MetadataPatch) -> UpdateResult:
    print("Fetching video %s..." % video_id)
    current = get_video_metadata(service, video_id)

    updated, changes = patch_metadata(current, patch)

    print("")
    print("Applying changes:")
    for c in changes:
        print("  - %s" % c)
    print("")

    update_video_metadata(service, video_id, updated)
    print("Video updated successfully!")

    return UpdateResult(
        video_id=video_id,
        title=updated.title,
        url=youtube_url(video_id),
        changes=changes,
    )
