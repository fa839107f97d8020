# ASCII-only. No ellipses.

from __future__ import annotations


class ShortsError(RuntimeError):
    """Base for every error reported to the user as a one-line message."""


class ConfigurationError(ShortsError):
    pass


class PersistenceError(ShortsError):
    pass


class NetworkError(ShortsError):
    pass


class AuthorizationDeniedError(ShortsError):
    pass


class AuthorizationTimeoutError(ShortsError, TimeoutError):
    pass


class TokenRefreshError(ShortsError):
    pass


class NotFoundError(ShortsError):
    pass


class NoChangesSpecifiedError(ShortsError):
    pass


class ValidationError(ShortsError):
    pass


class UsageError(ShortsError):
    pass
