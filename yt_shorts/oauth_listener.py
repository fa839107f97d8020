# ASCII-only. No ellipses.

from __future__ import annotations

import html
import http.server
import time
from typing import Optional, Tuple
from urllib.parse import parse_qs, urlparse

from .errors import AuthorizationDeniedError, AuthorizationTimeoutError, NetworkError


SUCCESS_PAGE = "<h1>Authentication successful!</h1><p>You can close this window.</p>"
ERROR_PAGE = "<h1>Error: No authorization code received</h1>%s"

# Per-connection read bound. An idle client socket is dropped after this
# and the wait loop re-checks its deadline.
REQUEST_TIMEOUT_SEC = 2.0


class _CallbackHandler(http.server.BaseHTTPRequestHandler):
    def setup(self):
        self.timeout = self.server.listener.request_timeout()
        super().setup()

    def do_GET(self):
        listener = self.server.listener
        parsed = urlparse(self.path)
        if not listener.is_callback(parsed.path, parsed.query):
            self._reply(404, "<h1>Not found</h1>")
            return

        qs = parse_qs(parsed.query)
        code = (qs.get("code") or [""])[0]
        if code:
            self._reply(200, SUCCESS_PAGE)
            listener.finish(code=code)
            return

        err = (qs.get("error") or [""])[0]
        detail = "<p>%s</p>" % html.escape(err) if err else ""
        self._reply(400, ERROR_PAGE % detail)
        listener.finish(error=err or "no authorization code received")

    def _reply(self, status: int, body: str) -> None:
        data = body.encode("utf-8")
        self.send_response(status)
        self.send_header("Content-Type", "text/html; charset=utf-8")
        self.send_header("Content-Length", str(len(data)))
        self.end_headers()
        self.wfile.write(data)

    def log_message(self, format, *args):
        print("[auth][listener] %s" % (format % args))


class AuthorizationListener:
    """Single-use local endpoint that captures one OAuth redirect.

    The listener stops after the first request that carries a verdict
    (a code, or a callback without one). Requests to other paths get a 404
    and do not end the wait.
    """

    def __init__(self, host: str = "localhost", port: int = 3000, callback_path: str = "/oauth2callback") -> None:
        self.host = host
        self.requested_port = int(port)
        self.callback_path = callback_path
        self._server: Optional[http.server.HTTPServer] = None
        self._outcome: Optional[Tuple[str, str]] = None
        self._deadline: Optional[float] = None

    @property
    def port(self) -> int:
        if self._server is None:
            return self.requested_port
        return int(self._server.server_address[1])

    def bind(self) -> None:
        if self._server is not None:
            return
        try:
            server = http.server.HTTPServer((self.host, self.requested_port), _CallbackHandler)
        except OSError as e:
            raise NetworkError("Could not listen on %s:%d: %s" % (self.host, self.requested_port, e)) from e
        server.listener = self
        self._server = server

    def is_callback(self, path: str, query: str) -> bool:
        if path.startswith(self.callback_path):
            return True
        return path == "/" and bool(query)

    def request_timeout(self) -> float:
        if self._deadline is None:
            return REQUEST_TIMEOUT_SEC
        return max(0.05, min(REQUEST_TIMEOUT_SEC, self._deadline - time.monotonic()))

    def finish(self, code: str = "", error: str = "") -> None:
        if self._outcome is not None:
            return
        if code:
            self._outcome = ("code", code)
        else:
            self._outcome = ("error", error)

    def wait(self, timeout_sec: Optional[float] = None) -> str:
        """Block until the redirect arrives and return the authorization code."""
        self.bind()
        assert self._server is not None
        deadline = time.monotonic() + timeout_sec if timeout_sec is not None else None
        self._deadline = deadline
        print("Waiting for authorization on http://%s:%d ..." % (self.host, self.port))
        try:
            while self._outcome is None:
                if deadline is not None:
                    remaining = deadline - time.monotonic()
                    if remaining <= 0:
                        raise AuthorizationTimeoutError(
                            "No authorization received within %.0f seconds" % timeout_sec
                        )
                    self._server.timeout = remaining
                else:
                    self._server.timeout = None
                try:
                    self._server.handle_request()
                except OSError as e:
                    raise NetworkError("Authorization listener failed: %s" % e) from e
        finally:
            self.close()

        kind, value = self._outcome
        if kind == "code":
            return value
        raise AuthorizationDeniedError("Authorization was not granted: %s" % value)

    def close(self) -> None:
        if self._server is not None:
            self._server.server_close()
            self._server = None


def await_authorization_code(
    port: int,
    host: str = "localhost",
    callback_path: str = "/oauth2callback",
    timeout_sec: Optional[float] = None,
) -> str:
    listener = AuthorizationListener(host=host, port=port, callback_path=callback_path)
    listener.bind()
    return listener.wait(timeout_sec=timeout_sec)
