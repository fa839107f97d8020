# ASCII-only. No ellipses.

from __future__ import annotations

import tempfile
from pathlib import Path
from typing import Any, Callable, Optional

from .errors import ConfigurationError, NetworkError
from .merge import MetadataPatch, merge_for_clone
from .tools import ToolStatus, check_ytdlp
from .upload import UploadResult, upload_video
from .util import CommandError, now_ms, run
from .youtube_api import get_video_metadata, youtube_url


YTDLP_INSTALL_HINT = "Install with: brew install yt-dlp (macOS) or pip install yt-dlp"


def require_ytdlp(status: ToolStatus) -> None:
    if status == ToolStatus.UNAVAILABLE:
        raise ConfigurationError("yt-dlp is required for cloning videos. %s" % YTDLP_INSTALL_HINT)
    if status == ToolStatus.UNKNOWN:
        raise ConfigurationError("yt-dlp is installed but could not be run (yt-dlp --version failed)")


def download_video(video_id: str, dst: Path) -> None:
    # Let yt-dlp choose the best format and merge to mp4.
    cmd = ["yt-dlp", "--merge-output-format", "mp4", "-o", str(dst), youtube_url(video_id)]
    try:
        run(cmd, timeout_sec=3600, stream=True)
    except CommandError as e:
        raise NetworkError(
            "Failed to download video (%s). Make sure the video is accessible and you have permission to download it." % e
        ) from e
    if not dst.exists():
        raise NetworkError("Download failed: temp file not created")


def clone_temp_path(video_id: str) -> Path:
    return Path(tempfile.gettempdir()) / ("yt-clone-%s-%d.mp4" % (video_id, now_ms()))


def clone_video(
    service: Any,
    video_id: str,
    patch: MetadataPatch,
    title: Optional[str],
    keep_file: bool = False,
    downloader: Callable[[str, Path], None] = download_video,
    tool_check: Callable[[], ToolStatus] = check_ytdlp,
) -> UploadResult:
    """Download video_id and upload it again with merged metadata."""
    require_ytdlp(tool_check())

    print("Fetching original video %s..." % video_id)
    source = get_video_metadata(service, video_id)
    metadata = merge_for_clone(source, patch, title)

    print("Original title: %s" % source.title)
    print("New title: %s" % metadata.title)
    print("Privacy: %s" % metadata.privacy_status)
    print("")

    tmp = clone_temp_path(video_id)
    print("Downloading video...")
    try:
        downloader(video_id, tmp)
        print("")
        print("Downloaded to: %s" % tmp)
        print("Uploading clone...")
        # No #shorts hashtag: the clone keeps the caller's text as is.
        return upload_video(service, tmp, metadata, add_shorts_hashtag=False)
    finally:
        if keep_file:
            print("Keeping file: %s" % tmp)
        elif tmp.exists():
            tmp.unlink()
            print("Temp file deleted.")
