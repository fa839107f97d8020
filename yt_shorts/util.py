# ASCII-only. No ellipses.

import json
import os
import subprocess
import sys
import tempfile
import time
from pathlib import Path
from typing import Any, List, Optional


def now_ms() -> int:
    return int(time.time() * 1000)


STDERR_TAIL_CHARS = 800


class CommandError(RuntimeError):
    """An external command failed to start, exited non-zero, or timed out."""

    def __init__(self, cmd: List[str], reason: str, stderr_tail: str = "") -> None:
        self.cmd = list(cmd)
        self.reason = reason
        self.stderr_tail = stderr_tail
        msg = "%s %s" % (cmd[0] if cmd else "command", reason)
        if stderr_tail:
            msg = "%s: %s" % (msg, stderr_tail)
        super().__init__(msg)


def _tail(text: Optional[str]) -> str:
    lines = [ln.strip() for ln in (text or "").strip().splitlines() if ln.strip()]
    tail = " | ".join(lines[-5:])
    return tail[-STDERR_TAIL_CHARS:]


def run(
    cmd: List[str],
    timeout_sec: int = 600,
    stream: bool = False,
) -> subprocess.CompletedProcess:
    """Run an external tool (ffprobe, yt-dlp) and return its completed process.

    stdout is captured unless stream=True, where the tool's own progress goes
    to the terminal. stderr is always captured so a failure can say why.
    Every failure mode is raised as CommandError.
    """
    try:
        return subprocess.run(
            cmd,
            stdout=None if stream else subprocess.PIPE,
            stderr=subprocess.PIPE,
            text=True,
            check=True,
            timeout=timeout_sec,
        )
    except FileNotFoundError as e:
        raise CommandError(cmd, "not found") from e
    except subprocess.TimeoutExpired as e:
        print("[run][timeout] cmd=%s timeout_sec=%s" % (" ".join(cmd), timeout_sec), file=sys.stderr)
        raise CommandError(cmd, "timed out after %ss" % timeout_sec) from e
    except subprocess.CalledProcessError as e:
        tail = _tail(e.stderr)
        print("[run][fail] cmd=%s exit=%d" % (" ".join(cmd), e.returncode), file=sys.stderr)
        raise CommandError(cmd, "exited with status %d" % e.returncode, tail) from e
    except OSError as e:
        raise CommandError(cmd, "could not be started (%s)" % e) from e


def load_json(p: Path) -> Any:
    return json.loads(p.read_text(encoding="utf-8"))


def save_json(p: Path, obj: Any) -> None:
    """Write obj as pretty JSON. Readers never see a partial file."""
    p.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp = tempfile.mkstemp(prefix=".%s." % p.name, suffix=".tmp", dir=str(p.parent))
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as f:
            f.write(json.dumps(obj, indent=2, sort_keys=True))
            f.write("\n")
        os.replace(tmp, p)
    except BaseException:
        try:
            os.unlink(tmp)
        except OSError:
            pass
        raise
