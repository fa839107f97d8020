# ASCII-only. No ellipses.

from __future__ import annotations

import enum
from typing import Any, Callable, Mapping, Optional

from .config import AppConfig
from .credentials import ClientCredential, resolve_client_credential
from .oauth_listener import await_authorization_code
from .token_store import TokenRecord, TokenStore
from .util import now_ms


class SessionState(enum.Enum):
    NO_TOKEN = "no_token"
    TOKEN_VALID = "token_valid"
    TOKEN_EXPIRED = "token_expired"
    AUTHENTICATING = "authenticating"
    READY = "ready"
    FAILED = "failed"


def print_auth_instructions(url: str) -> None:
    print("")
    print("=== YouTube Shorts Upload Authentication ===")
    print("")
    print("1. Open this URL in your browser:")
    print("")
    print(url)
    print("")
    print("2. Authorize the application")
    print("3. You will be redirected to localhost")
    print("")


class AuthSession:
    """Turns the persisted token (or an interactive login) into API credentials.

    Flow:
      1) load token.json
      2) missing: interactive login through the local listener
      3) expired: one refresh, persisted; a failed refresh is final
      4) valid: used as is, no network call

    A failed refresh never falls back to interactive login; the user runs
    `yt-shorts auth --reauth` instead.
    """

    def __init__(
        self,
        config: AppConfig,
        provider: Any,
        store: Optional[TokenStore] = None,
        await_code: Optional[Callable[[AppConfig], str]] = None,
        present_url: Optional[Callable[[str], None]] = None,
        environ: Optional[Mapping[str, str]] = None,
        clock: Callable[[], int] = now_ms,
    ) -> None:
        self.config = config
        self.provider = provider
        self.store = store or TokenStore(config.token_path)
        self.await_code = await_code or _listen_for_code
        self.present_url = present_url or print_auth_instructions
        self.environ = environ
        self.clock = clock
        self.state: Optional[SessionState] = None
        self.failure: Optional[BaseException] = None
        self.record: Optional[TokenRecord] = None

    def _credential(self) -> ClientCredential:
        return resolve_client_credential(self.config, self.environ)

    def _start(self, force: bool) -> None:
        if force:
            self.record = None
            self.state = SessionState.NO_TOKEN
            return
        self.record = self.store.load()
        if self.record is None:
            self.state = SessionState.NO_TOKEN
        elif self.record.is_expired(self.clock()):
            self.state = SessionState.TOKEN_EXPIRED
        else:
            self.state = SessionState.TOKEN_VALID

    def authenticate(self, force: bool = False) -> Any:
        """Return google Credentials for the signed-in account."""
        self.failure = None
        try:
            self._start(force)
            credential = self._credential()

            if self.state == SessionState.NO_TOKEN:
                self.state = SessionState.AUTHENTICATING
                self.record = self._login(credential)
            elif self.state == SessionState.TOKEN_EXPIRED:
                print("[auth] token_expired=1 refreshing=1")
                print("Token expired, refreshing...")
                assert self.record is not None
                self.record = self.provider.refresh(credential, self.record, self.config.scopes)
                self.store.save(self.record)

            assert self.record is not None
            handle = self.provider.build_credentials(credential, self.record, self.config.scopes)
        except BaseException as e:
            self.state = SessionState.FAILED
            self.failure = e
            raise

        self.state = SessionState.READY
        return handle

    def _login(self, credential: ClientCredential) -> TokenRecord:
        cfg = self.config
        url = self.provider.authorization_url(credential, cfg.redirect_uri, cfg.scopes)
        self.present_url(url)

        code = self.await_code(cfg)
        record = self.provider.exchange_code(credential, code, cfg.redirect_uri, cfg.scopes)
        self.store.save(record)
        print("Authentication successful! Token saved.")
        return record


def _listen_for_code(config: AppConfig) -> str:
    return await_authorization_code(
        port=config.listen_port,
        host=config.listen_host,
        callback_path=config.callback_path,
        timeout_sec=config.auth_timeout_sec,
    )
