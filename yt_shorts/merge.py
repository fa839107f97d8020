# ASCII-only. No ellipses.

from __future__ import annotations

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Tuple

from .errors import NoChangesSpecifiedError, UsageError


PRIVACY_STATUSES = ("public", "private", "unlisted")
DEFAULT_PRIVACY = "private"
DEFAULT_CATEGORY_ID = "22"  # People & Blogs

ARROW = "\u2192"
DESC_PREVIEW = 30


@dataclass(frozen=True)
class VideoMetadata:
    title: str
    description: str = ""
    tags: List[str] = field(default_factory=list)
    privacy_status: str = DEFAULT_PRIVACY
    category_id: str = DEFAULT_CATEGORY_ID

    @classmethod
    def from_api(cls, video: Dict[str, Any]) -> "VideoMetadata":
        snippet = video.get("snippet") or {}
        status = video.get("status") or {}
        return cls(
            title=str(snippet.get("title") or ""),
            description=str(snippet.get("description") or ""),
            tags=list(snippet.get("tags") or []),
            privacy_status=str(status.get("privacyStatus") or DEFAULT_PRIVACY),
            category_id=str(snippet.get("categoryId") or DEFAULT_CATEGORY_ID),
        )

    def to_api_body(self) -> Dict[str, Any]:
        return {
            "snippet": {
                "title": self.title,
                "description": self.description,
                "tags": list(self.tags),
                "categoryId": self.category_id,
            },
            "status": {
                "privacyStatus": self.privacy_status,
            },
        }


@dataclass(frozen=True)
class MetadataPatch:
    """Caller overrides. None means "not specified"; "" and [] are real values."""

    title: Optional[str] = None
    description: Optional[str] = None
    tags: Optional[List[str]] = None
    privacy_status: Optional[str] = None

    def __post_init__(self):
        if self.privacy_status is not None and self.privacy_status not in PRIVACY_STATUSES:
            raise UsageError("privacy must be public|private|unlisted, got: %s" % self.privacy_status)

    def is_empty(self) -> bool:
        return (
            self.title is None
            and self.description is None
            and self.tags is None
            and self.privacy_status is None
        )


def _preview(s: str) -> str:
    return (s or "")[:DESC_PREVIEW]


def patch_metadata(current: VideoMetadata, patch: MetadataPatch) -> Tuple[VideoMetadata, List[str]]:
    """Apply overrides to current metadata.

    Returns the new metadata and one change line per overridden field, in the
    order title, description, tags, privacy. A field counts as changed when it
    was supplied, even if the value is the same as before.
    """
    changes: List[str] = []
    updated = current

    if patch.title is not None:
        changes.append('Title: "%s" %s "%s"' % (current.title, ARROW, patch.title))
        updated = replace(updated, title=patch.title)

    if patch.description is not None:
        old = _preview(current.description) or "(empty)"
        changes.append('Description: "%s..." %s "%s..."' % (old, ARROW, _preview(patch.description)))
        updated = replace(updated, description=patch.description)

    if patch.tags is not None:
        old_tags = ", ".join(current.tags) or "(none)"
        changes.append("Tags: [%s] %s [%s]" % (old_tags, ARROW, ", ".join(patch.tags)))
        updated = replace(updated, tags=list(patch.tags))

    if patch.privacy_status is not None:
        changes.append("Privacy: %s %s %s" % (current.privacy_status, ARROW, patch.privacy_status))
        updated = replace(updated, privacy_status=patch.privacy_status)

    if not changes:
        raise NoChangesSpecifiedError("No changes specified. Use --title, --description, --tags, or --privacy")
    return updated, changes


def merge_for_clone(source: VideoMetadata, patch: MetadataPatch, title: Optional[str]) -> VideoMetadata:
    """Metadata for a re-upload of source.

    The title is always the caller's. Description and tags fall back to the
    source, then to empty. Privacy is never inherited: a clone stays private
    unless the caller asks otherwise.
    """
    if title is None:
        raise UsageError("Title is required for clone (--title or -t)")
    description = patch.description if patch.description is not None else source.description
    tags = patch.tags if patch.tags is not None else source.tags
    return VideoMetadata(
        title=title,
        description=description or "",
        tags=list(tags or []),
        privacy_status=patch.privacy_status or DEFAULT_PRIVACY,
        category_id=source.category_id or DEFAULT_CATEGORY_ID,
    )
