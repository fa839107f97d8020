#!/usr/bin/env python3
# ASCII-only. No ellipses.

from __future__ import annotations

import argparse
import sys
from dataclasses import replace
from pathlib import Path
from typing import Any, List, Optional

from .clone import clone_video
from .config import AppConfig, parse_port, parse_timeout
from .errors import NoChangesSpecifiedError, ShortsError, UsageError, ValidationError
from .identity import GoogleIdentityProvider
from .listing import list_videos, print_videos_json, print_videos_table
from .merge import DEFAULT_PRIVACY, PRIVACY_STATUSES, MetadataPatch, VideoMetadata
from .session import AuthSession
from .tools import ToolStatus, check_ffprobe
from .update import update_video
from .upload import parse_batch_manifest, split_tags, upload_batch, upload_video
from .util import load_json
from .validate import validate_for_shorts
from .youtube_api import build_service


EPILOG = """Examples:
  yt-shorts auth
  yt-shorts upload video.mp4 --title "My Short" --privacy public
  yt-shorts list --max 20 --format json
  yt-shorts update abc123 --title "New Title" --privacy unlisted
  yt-shorts clone abc123 --title "Cloned Video"
  yt-shorts validate video.mp4

Setup:
  1. Create a project at https://console.cloud.google.com
  2. Enable YouTube Data API v3
  3. Create OAuth 2.0 credentials and add http://localhost:3000 as redirect URI
  4. Save them as client_secrets.json in this directory
     (or set YOUTUBE_CLIENT_ID and YOUTUBE_CLIENT_SECRET)
  5. Run: yt-shorts auth
"""


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--token", default=None, help="Token file (default: ./token.json or YT_SHORTS_TOKEN_PATH)")
    common.add_argument(
        "--credentials",
        default=None,
        help="OAuth client file (default: ./client_secrets.json or YT_SHORTS_CREDENTIALS_PATH)",
    )
    common.add_argument("--port", default=None, help="Local port for the OAuth redirect (default: 3000)")
    common.add_argument("--auth-timeout", default=None, help="Seconds to wait for the browser login (0 = forever)")

    meta = argparse.ArgumentParser(add_help=False)
    meta.add_argument("--title", "-t", default=None)
    meta.add_argument("--description", "-d", default=None)
    meta.add_argument("--tags", type=split_tags, default=None, help="Comma-separated tags")
    meta.add_argument("--privacy", choices=PRIVACY_STATUSES, default=None)

    ap = argparse.ArgumentParser(
        prog="yt-shorts",
        description="YouTube Shorts Upload CLI",
        epilog=EPILOG,
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )
    sub = ap.add_subparsers(dest="command")

    p = sub.add_parser("auth", parents=[common], help="Authenticate with YouTube")
    p.add_argument("--reauth", action="store_true", help="Ignore the saved token and sign in again")

    p = sub.add_parser("upload", parents=[common, meta], help="Upload a video as a Short")
    p.add_argument("file")
    p.add_argument("--skip-validation", action="store_true", help="Skip video validation")
    p.add_argument("--force", action="store_true", help="Upload even if validation fails")

    p = sub.add_parser("batch", parents=[common], help="Upload every video listed in a JSON manifest")
    p.add_argument("manifest")

    p = sub.add_parser("list", parents=[common], help="List your channel's videos")
    p.add_argument("--max", "-n", type=int, default=None, help="Maximum videos to show (default: 10)")
    p.add_argument("--privacy", choices=PRIVACY_STATUSES, default=None, help="Filter by privacy status")
    p.add_argument("--format", choices=["table", "json"], default="table")

    p = sub.add_parser("update", parents=[common, meta], help="Update video metadata")
    p.add_argument("video_id")

    p = sub.add_parser("clone", parents=[common, meta], help="Clone video with new metadata")
    p.add_argument("video_id")
    p.add_argument("--keep-file", action="store_true", help="Keep downloaded video file")

    p = sub.add_parser("validate", help="Validate video for Shorts")
    p.add_argument("file")

    sub.add_parser("help", help="Show this help message")
    return ap


def config_from_args(args: argparse.Namespace) -> AppConfig:
    cfg = AppConfig.from_env()
    if getattr(args, "token", None):
        cfg = replace(cfg, token_path=Path(args.token))
    if getattr(args, "credentials", None):
        cfg = replace(cfg, credentials_path=Path(args.credentials))
    if getattr(args, "port", None):
        cfg = replace(cfg, listen_port=parse_port(args.port))
    if getattr(args, "auth_timeout", None) is not None:
        cfg = replace(cfg, auth_timeout_sec=parse_timeout(args.auth_timeout))
    return cfg


def patch_from_args(args: argparse.Namespace) -> MetadataPatch:
    return MetadataPatch(
        title=args.title,
        description=args.description,
        tags=args.tags,
        privacy_status=args.privacy,
    )


def _authenticated_service(config: AppConfig) -> Any:
    print("")
    print("Authenticating...")
    session = AuthSession(config, GoogleIdentityProvider())
    creds = session.authenticate()
    return build_service(creds)


def _existing_file(s: str) -> Path:
    p = Path(s).resolve()
    if not p.exists():
        raise UsageError("File not found: %s" % p)
    return p


def handle_auth(args: argparse.Namespace, config: AppConfig) -> int:
    print("Starting YouTube authentication...")
    session = AuthSession(config, GoogleIdentityProvider())
    session.authenticate(force=args.reauth)
    print("You can now upload videos!")
    return 0


def _prevalidate(path: Path, force: bool) -> None:
    status = check_ffprobe()
    if status != ToolStatus.AVAILABLE:
        why = "not found" if status == ToolStatus.UNAVAILABLE else "could not be run"
        print("Warning: ffprobe %s. Install ffmpeg for video validation." % why, file=sys.stderr)
        return
    try:
        info = validate_for_shorts(path)
    except ValidationError as e:
        if not force:
            raise
        print("Warning: %s" % e, file=sys.stderr)
        return
    if not info.is_valid_short:
        if not force:
            raise ValidationError("Video does not meet Shorts requirements. Use --force to upload anyway.")
        print("Warning: uploading despite failed Shorts validation (--force)", file=sys.stderr)


def handle_upload(args: argparse.Namespace, config: AppConfig) -> int:
    if not args.title:
        raise UsageError("Title is required (--title or -t)")
    path = _existing_file(args.file)

    if not args.skip_validation:
        _prevalidate(path, args.force)

    service = _authenticated_service(config)
    metadata = VideoMetadata(
        title=args.title,
        description=args.description or "",
        tags=list(args.tags or []),
        privacy_status=args.privacy or DEFAULT_PRIVACY,
    )
    result = upload_video(service, path, metadata)

    print("")
    print("=== Upload Summary ===")
    print("Title: %s" % result.title)
    print("URL: %s" % result.url)
    return 0


def handle_batch(args: argparse.Namespace, config: AppConfig) -> int:
    manifest = _existing_file(args.manifest)
    try:
        j = load_json(manifest)
    except ValueError as e:
        raise UsageError("batch manifest is not valid JSON: %s" % e) from e
    items = parse_batch_manifest(j, manifest.parent)

    service = _authenticated_service(config)
    results = upload_batch(service, items)

    print("")
    print("=== Batch Summary ===")
    for r in results:
        if r.ok:
            print("  ok    %s -> %s" % (r.file, r.url))
        else:
            print("  FAIL  %s: %s" % (r.file, r.error))
    return 0 if all(r.ok for r in results) else 1


def handle_list(args: argparse.Namespace, config: AppConfig) -> int:
    service = _authenticated_service(config)
    print("Fetching videos...")
    result = list_videos(service, max_results=args.max, privacy=args.privacy)
    if args.format == "json":
        print_videos_json(result)
    else:
        print_videos_table(result)
    return 0


def handle_update(args: argparse.Namespace, config: AppConfig) -> int:
    patch = patch_from_args(args)
    if patch.is_empty():
        raise NoChangesSpecifiedError("No changes specified. Use --title, --description, --tags, or --privacy")

    service = _authenticated_service(config)
    result = update_video(service, args.video_id, patch)
    print("")
    print("URL: %s" % result.url)
    return 0


def handle_clone(args: argparse.Namespace, config: AppConfig) -> int:
    if args.title is None:
        raise UsageError("Title is required for clone (--title or -t)")

    service = _authenticated_service(config)
    result = clone_video(
        service,
        args.video_id,
        patch_from_args(args),
        title=args.title,
        keep_file=args.keep_file,
    )
    print("")
    print("=== Clone Complete ===")
    print("New Video ID: %s" % result.video_id)
    print("Title: %s" % result.title)
    print("URL: %s" % result.url)
    return 0


def handle_validate(args: argparse.Namespace, config: AppConfig) -> int:
    status = check_ffprobe()
    if status != ToolStatus.AVAILABLE:
        print("Error: ffprobe not found. Install ffmpeg first.", file=sys.stderr)
        print("  macOS: brew install ffmpeg", file=sys.stderr)
        print("  Ubuntu: sudo apt install ffmpeg", file=sys.stderr)
        return 1
    path = _existing_file(args.file)
    info = validate_for_shorts(path)
    return 0 if info.is_valid_short else 1


HANDLERS = {
    "auth": handle_auth,
    "upload": handle_upload,
    "batch": handle_batch,
    "list": handle_list,
    "update": handle_update,
    "clone": handle_clone,
    "validate": handle_validate,
}


def main(argv: Optional[List[str]] = None) -> int:
    ap = build_parser()
    args = ap.parse_args(argv)

    handler = HANDLERS.get(args.command or "help")
    if handler is None:
        ap.print_help()
        return 0

    try:
        config = config_from_args(args)
        return handler(args, config)
    except ShortsError as e:
        print("", file=sys.stderr)
        print("Error: %s" % e, file=sys.stderr)
        return 1
    except KeyboardInterrupt:
        print("", file=sys.stderr)
        print("Cancelled.", file=sys.stderr)
        return 130


if __name__ == "__main__":
    raise SystemExit(main())
