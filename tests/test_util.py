"""
Tests for the subprocess runner and JSON file helpers.
"""

import json
import subprocess

import pytest

from yt_shorts import clone, util
from yt_shorts.errors import NetworkError
from yt_shorts.util import CommandError, run, save_json


def _patch_subprocess(monkeypatch, exc=None, stdout="out"):
    seen = {}

    def fake_run(cmd, **kwargs):
        seen.update(kwargs)
        if exc is not None:
            raise exc
        return subprocess.CompletedProcess(cmd, 0, stdout=stdout, stderr="")

    monkeypatch.setattr(util.subprocess, "run", fake_run)
    return seen


class TestRun:

    def test_captures_stdout(self, monkeypatch):
        seen = _patch_subprocess(monkeypatch)
        assert run(["ffprobe", "x"]).stdout == "out"
        assert seen["stdout"] == subprocess.PIPE
        assert seen["check"] is True

    def test_stream_leaves_stdout_on_terminal(self, monkeypatch):
        seen = _patch_subprocess(monkeypatch)
        run(["yt-dlp", "x"], stream=True)
        assert seen["stdout"] is None
        assert seen["stderr"] == subprocess.PIPE

    def test_failure_carries_exit_status_and_stderr_tail(self, monkeypatch):
        stderr = "\n".join("line %d" % i for i in range(10)) + "\nERROR: Video unavailable\n"
        _patch_subprocess(monkeypatch, subprocess.CalledProcessError(1, ["yt-dlp"], stderr=stderr))
        with pytest.raises(CommandError) as exc:
            run(["yt-dlp", "x"])
        assert exc.value.reason == "exited with status 1"
        assert exc.value.stderr_tail.endswith("ERROR: Video unavailable")
        assert "line 0" not in exc.value.stderr_tail
        assert str(exc.value).startswith("yt-dlp exited with status 1: ")

    def test_timeout(self, monkeypatch):
        _patch_subprocess(monkeypatch, subprocess.TimeoutExpired(["ffprobe"], 5))
        with pytest.raises(CommandError, match="timed out after 5s"):
            run(["ffprobe", "x"], timeout_sec=5)

    def test_missing_executable(self, monkeypatch):
        _patch_subprocess(monkeypatch, FileNotFoundError("ffprobe"))
        with pytest.raises(CommandError, match="ffprobe not found"):
            run(["ffprobe", "x"])

    def test_download_failure_names_the_cause(self, monkeypatch, tmp_path):
        def failing_run(cmd, timeout_sec=600, stream=False):
            raise CommandError(cmd, "exited with status 1", "ERROR: Private video")

        monkeypatch.setattr(clone, "run", failing_run)
        with pytest.raises(NetworkError, match="Private video"):
            clone.download_video("abc", tmp_path / "out.mp4")


class TestSaveJson:

    def test_pretty_sorted_and_no_temp_left(self, tmp_path):
        p = tmp_path / "nested" / "token.json"
        save_json(p, {"b": 1, "a": [1, 2]})
        text = p.read_text(encoding="utf-8")
        assert text.endswith("\n")
        assert text.index('"a"') < text.index('"b"')
        assert json.loads(text) == {"a": [1, 2], "b": 1}
        assert [f.name for f in p.parent.iterdir()] == ["token.json"]
