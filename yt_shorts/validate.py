# ASCII-only. No ellipses.

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List

from .errors import ValidationError
from .util import CommandError, run


MAX_SHORTS_DURATION = 60.0  # seconds
MIN_SHORTS_DURATION = 1.0
SHORTS_ASPECT = 9.0 / 16.0
ASPECT_TOLERANCE = 0.1


@dataclass
class VideoInfo:
    width: int
    height: int
    duration: float
    aspect_ratio: str
    is_vertical: bool
    is_valid_short: bool
    warnings: List[str] = field(default_factory=list)


def ffprobe_json(p: Path) -> Dict[str, Any]:
    cmd = [
        "ffprobe", "-v", "quiet",
        "-print_format", "json",
        "-show_streams", "-show_format",
        str(p),
    ]
    try:
        out = run(cmd, timeout_sec=120).stdout
    except CommandError as e:
        raise ValidationError(
            "Failed to analyze video (%s). Make sure ffprobe is installed (brew install ffmpeg)" % e
        ) from e
    try:
        j = json.loads(out or "{}")
    except ValueError as e:
        raise ValidationError("ffprobe returned unreadable output for %s" % p.name) from e
    return j if isinstance(j, dict) else {}


def evaluate(width: int, height: int, duration: float) -> VideoInfo:
    """Apply the Shorts rules to probed dimensions and duration."""
    warnings: List[str] = []
    valid = True

    if duration > MAX_SHORTS_DURATION:
        warnings.append(
            "Duration (%.1fs) exceeds %ds - will NOT be a Short" % (duration, int(MAX_SHORTS_DURATION))
        )
        valid = False
    elif duration < MIN_SHORTS_DURATION:
        warnings.append("Duration too short (%.1fs)" % duration)
        valid = False

    aspect_ratio = "%d:%d" % (width, height)
    is_vertical = height > width
    if not is_vertical:
        warnings.append(
            "Video is horizontal (%dx%d) - Shorts should be vertical (9:16)" % (width, height)
        )
        valid = False
    elif abs(width / float(height) - SHORTS_ASPECT) > ASPECT_TOLERANCE:
        warnings.append("Aspect ratio %s differs from ideal 9:16 - may have black bars" % aspect_ratio)

    return VideoInfo(
        width=width,
        height=height,
        duration=duration,
        aspect_ratio=aspect_ratio,
        is_vertical=is_vertical,
        is_valid_short=valid,
        warnings=warnings,
    )


def get_video_info(p: Path) -> VideoInfo:
    probe = ffprobe_json(p)
    stream = next((s for s in probe.get("streams") or [] if s.get("codec_type") == "video"), None)
    if stream is None:
        raise ValidationError("No video stream found in file")

    try:
        width = int(stream.get("width") or 0)
        height = int(stream.get("height") or 0)
        duration = float((probe.get("format") or {}).get("duration") or stream.get("duration") or 0)
    except (TypeError, ValueError) as e:
        raise ValidationError("ffprobe reported unusable stream info for %s" % p.name) from e
    if width <= 0 or height <= 0:
        raise ValidationError("Could not determine video dimensions for %s" % p.name)
    return evaluate(width, height, duration)


def validate_for_shorts(p: Path) -> VideoInfo:
    print("")
    print("Validating: %s" % p.name)

    info = get_video_info(p)

    print("  Resolution: %dx%d (%s)" % (info.width, info.height, info.aspect_ratio))
    print("  Duration: %.1fs" % info.duration)
    print("  Vertical: %s" % ("Yes" if info.is_vertical else "No"))
    print("  Valid Short: %s" % ("Yes" if info.is_valid_short else "No"))
    if info.warnings:
        print("  Warnings:")
        for w in info.warnings:
            print("    - %s" % w)
    return info
