# ASCII-only. No ellipses.

from __future__ import annotations

import enum
import subprocess
from typing import List


class ToolStatus(enum.Enum):
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"
    UNKNOWN = "unknown"  # present, but the probe itself failed


def check_tool(cmd: List[str], timeout_sec: int = 15) -> ToolStatus:
    """Probe an external executable by running a cheap command (e.g. --version)."""
    try:
        subprocess.run(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            check=True,
            timeout=timeout_sec,
        )
    except FileNotFoundError:
        return ToolStatus.UNAVAILABLE
    except (subprocess.CalledProcessError, subprocess.TimeoutExpired, OSError) as e:
        print("[tools] probe_failed cmd=%s err=%s" % (" ".join(cmd), type(e).__name__))
        return ToolStatus.UNKNOWN
    return ToolStatus.AVAILABLE


def check_ffprobe() -> ToolStatus:
    return check_tool(["ffprobe", "-version"])


def check_ytdlp() -> ToolStatus:
    return check_tool(["yt-dlp", "--version"])
