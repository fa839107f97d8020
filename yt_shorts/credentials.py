# ASCII-only. No ellipses.

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional

from .config import AppConfig
from .errors import ConfigurationError, PersistenceError
from .util import load_json


CLIENT_SHAPES = ("installed", "web")


@dataclass(frozen=True)
class ClientCredential:
    client_id: str
    client_secret: str

    def to_client_config(self, redirect_uri: str) -> Dict[str, Any]:
        """Client config in the client_secrets.json "installed" shape."""
        return {
            "installed": {
                "client_id": self.client_id,
                "client_secret": self.client_secret,
                "auth_uri": "https://accounts.google.com/o/oauth2/auth",
                "token_uri": "https://oauth2.googleapis.com/token",
                "redirect_uris": [redirect_uri],
            }
        }


def _missing_message(config: AppConfig) -> str:
    return (
        "No OAuth client credentials found. Either set %s and %s, "
        "or download OAuth 2.0 credentials from Google Cloud Console and save them as %s"
        % (config.client_id_env, config.client_secret_env, config.credentials_path)
    )


def resolve_client_credential(config: AppConfig, environ: Optional[Mapping[str, str]] = None) -> ClientCredential:
    env = os.environ if environ is None else environ

    client_id = str(env.get(config.client_id_env, "") or "").strip()
    client_secret = str(env.get(config.client_secret_env, "") or "").strip()
    if client_id and client_secret:
        return ClientCredential(client_id=client_id, client_secret=client_secret)

    path = config.credentials_path
    if not path.exists():
        raise ConfigurationError(_missing_message(config))

    try:
        j = load_json(path)
    except (OSError, ValueError) as e:
        raise PersistenceError("Could not read credential file %s: %s" % (path, e)) from e
    if not isinstance(j, dict):
        raise ConfigurationError("Credential file %s must contain a JSON object" % path)

    for shape in CLIENT_SHAPES:
        block = j.get(shape)
        if not isinstance(block, dict):
            continue
        cid = str(block.get("client_id") or "").strip()
        secret = str(block.get("client_secret") or "").strip()
        if cid and secret:
            return ClientCredential(client_id=cid, client_secret=secret)

    raise ConfigurationError(
        "Credential file %s has no usable 'installed' or 'web' client. %s"
        % (path, _missing_message(config))
    )
