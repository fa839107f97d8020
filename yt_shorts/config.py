# ASCII-only. No ellipses.

from __future__ import annotations

import os
from dataclasses import dataclass, replace
from pathlib import Path
from typing import Mapping, Optional, Tuple

from .errors import ConfigurationError


YOUTUBE_SCOPES: Tuple[str, ...] = ("https://www.googleapis.com/auth/youtube",)

DEFAULT_PORT = 3000
DEFAULT_AUTH_TIMEOUT_SEC = 300.0


@dataclass(frozen=True)
class AppConfig:
    token_path: Path
    credentials_path: Path
    client_id_env: str = "YOUTUBE_CLIENT_ID"
    client_secret_env: str = "YOUTUBE_CLIENT_SECRET"
    listen_host: str = "localhost"
    listen_port: int = DEFAULT_PORT
    callback_path: str = "/oauth2callback"
    auth_timeout_sec: Optional[float] = DEFAULT_AUTH_TIMEOUT_SEC
    scopes: Tuple[str, ...] = YOUTUBE_SCOPES

    @property
    def redirect_uri(self) -> str:
        # Must match the redirect URI registered for the OAuth client.
        return "http://%s:%d" % (self.listen_host, self.listen_port)

    @classmethod
    def from_env(cls, base_dir: Optional[Path] = None, environ: Optional[Mapping[str, str]] = None) -> "AppConfig":
        env = os.environ if environ is None else environ
        base = Path(base_dir) if base_dir is not None else Path.cwd()

        token = str(env.get("YT_SHORTS_TOKEN_PATH", "") or "").strip()
        creds = str(env.get("YT_SHORTS_CREDENTIALS_PATH", "") or "").strip()
        cfg = cls(
            token_path=Path(token) if token else base / "token.json",
            credentials_path=Path(creds) if creds else base / "client_secrets.json",
        )

        port_s = str(env.get("YT_SHORTS_PORT", "") or "").strip()
        if port_s:
            cfg = replace(cfg, listen_port=parse_port(port_s))

        timeout_s = str(env.get("YT_SHORTS_AUTH_TIMEOUT", "") or "").strip()
        if timeout_s:
            cfg = replace(cfg, auth_timeout_sec=parse_timeout(timeout_s))
        return cfg


def parse_port(s: str) -> int:
    try:
        port = int(str(s).strip())
    except ValueError as e:
        raise ConfigurationError("Invalid port: %s" % s) from e
    if port < 1 or port > 65535:
        raise ConfigurationError("Port out of range: %d" % port)
    return port


def parse_timeout(s: str) -> Optional[float]:
    """Parse a timeout in seconds. 0 (or negative) means wait forever."""
    try:
        v = float(str(s).strip())
    except ValueError as e:
        raise ConfigurationError("Invalid auth timeout: %s" % s) from e
    return v if v > 0 else None
