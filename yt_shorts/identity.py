# ASCII-only. No ellipses.

from __future__ import annotations

import calendar
import datetime as dt
from typing import Any, Dict, Optional, Sequence

from .credentials import ClientCredential
from .errors import AuthorizationDeniedError, NetworkError, TokenRefreshError
from .token_store import TokenRecord


TOKEN_URI = "https://oauth2.googleapis.com/token"

# Fields of the raw token response that TokenRecord already models.
_CONSUMED = ("access_token", "refresh_token", "expires_at", "expires_in")


def expiry_to_ms(expiry: Optional[dt.datetime]) -> Optional[int]:
    """google-auth keeps expiry as a naive UTC datetime."""
    if expiry is None:
        return None
    return calendar.timegm(expiry.utctimetuple()) * 1000 + expiry.microsecond // 1000


def ms_to_expiry(ms: Optional[int]) -> Optional[dt.datetime]:
    if ms is None:
        return None
    return dt.datetime.fromtimestamp(ms / 1000.0, tz=dt.timezone.utc).replace(tzinfo=None)


def record_from_token_response(token: Dict[str, Any]) -> TokenRecord:
    access = str(token.get("access_token") or "")
    if not access:
        raise AuthorizationDeniedError("Token response did not include an access token")
    expires_at = token.get("expires_at")
    extra: Dict[str, Any] = {}
    for k, v in token.items():
        if k in _CONSUMED:
            continue
        if k == "scope" and isinstance(v, (list, tuple)):
            v = " ".join(v)
        extra[k] = v
    return TokenRecord(
        access_token=access,
        refresh_token=str(token.get("refresh_token") or "") or None,
        expiry_date=int(float(expires_at) * 1000) if expires_at is not None else None,
        extra=extra,
    )


class GoogleIdentityProvider:
    """Google OAuth 2.0 endpoints, reached through google-auth and google-auth-oauthlib."""

    def __init__(self) -> None:
        self._flow: Any = None

    def _new_flow(self, credential: ClientCredential, redirect_uri: str, scopes: Sequence[str]) -> Any:
        from google_auth_oauthlib.flow import Flow

        return Flow.from_client_config(
            credential.to_client_config(redirect_uri),
            scopes=list(scopes),
            redirect_uri=redirect_uri,
        )

    def authorization_url(self, credential: ClientCredential, redirect_uri: str, scopes: Sequence[str]) -> str:
        # The flow is kept so the code exchange reuses its PKCE verifier.
        self._flow = self._new_flow(credential, redirect_uri, scopes)
        url, _state = self._flow.authorization_url(access_type="offline", prompt="consent")
        return url

    def exchange_code(
        self,
        credential: ClientCredential,
        code: str,
        redirect_uri: str,
        scopes: Sequence[str],
    ) -> TokenRecord:
        import requests
        from oauthlib.oauth2.rfc6749.errors import OAuth2Error

        flow = self._flow or self._new_flow(credential, redirect_uri, scopes)
        try:
            token = flow.fetch_token(code=code)
        except OAuth2Error as e:
            raise AuthorizationDeniedError("Authorization code was rejected: %s" % e) from e
        except requests.exceptions.RequestException as e:
            raise NetworkError("Token exchange failed: %s" % e) from e
        finally:
            self._flow = None
        return record_from_token_response(dict(token))

    def build_credentials(self, credential: ClientCredential, record: TokenRecord, scopes: Sequence[str]) -> Any:
        from google.oauth2.credentials import Credentials

        return Credentials(
            token=record.access_token,
            refresh_token=record.refresh_token,
            token_uri=TOKEN_URI,
            client_id=credential.client_id,
            client_secret=credential.client_secret,
            scopes=list(scopes),
            expiry=ms_to_expiry(record.expiry_date),
        )

    def refresh(self, credential: ClientCredential, record: TokenRecord, scopes: Sequence[str]) -> TokenRecord:
        from google.auth.exceptions import RefreshError, TransportError
        from google.auth.transport.requests import Request

        if not record.refresh_token:
            raise TokenRefreshError("Stored token has expired and has no refresh token. Run: yt-shorts auth --reauth")

        creds = self.build_credentials(credential, record, scopes)
        try:
            creds.refresh(Request())
        except RefreshError as e:
            raise TokenRefreshError("Token refresh was rejected (%s). Run: yt-shorts auth --reauth" % e) from e
        except TransportError as e:
            raise NetworkError("Token refresh failed: %s" % e) from e

        return TokenRecord(
            access_token=creds.token,
            refresh_token=creds.refresh_token or record.refresh_token,
            expiry_date=expiry_to_ms(creds.expiry),
            extra=dict(record.extra),
        )
