# ASCII-only. No ellipses.

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import PersistenceError
from .util import load_json, save_json


KNOWN_FIELDS = ("access_token", "refresh_token", "expiry_date")


@dataclass
class TokenRecord:
    access_token: str
    refresh_token: Optional[str] = None
    expiry_date: Optional[int] = None  # epoch milliseconds
    extra: Dict[str, Any] = field(default_factory=dict)

    def is_expired(self, now_ms: int) -> bool:
        if self.expiry_date is None:
            return False
        return self.expiry_date < now_ms

    def to_dict(self) -> Dict[str, Any]:
        out: Dict[str, Any] = dict(self.extra)
        out["access_token"] = self.access_token
        if self.refresh_token is not None:
            out["refresh_token"] = self.refresh_token
        if self.expiry_date is not None:
            out["expiry_date"] = self.expiry_date
        return out

    @classmethod
    def from_dict(cls, d: Dict[str, Any]) -> "TokenRecord":
        access = d.get("access_token")
        if not isinstance(access, str) or not access:
            raise ValueError("token record has no access_token")
        refresh = d.get("refresh_token")
        expiry = d.get("expiry_date")
        if expiry is not None:
            if isinstance(expiry, bool) or not isinstance(expiry, (int, float)):
                raise ValueError("expiry_date must be a number of epoch milliseconds")
            expiry = int(expiry)
        return cls(
            access_token=access,
            refresh_token=str(refresh) if refresh else None,
            expiry_date=expiry,
            extra={k: v for k, v in d.items() if k not in KNOWN_FIELDS},
        )


class TokenStore:
    """The persisted access/refresh token of the single signed-in account."""

    def __init__(self, path: Path) -> None:
        self.path = Path(path)

    def load(self) -> Optional[TokenRecord]:
        if not self.path.exists():
            return None
        try:
            j = load_json(self.path)
        except (OSError, ValueError) as e:
            raise PersistenceError("Could not read token file %s: %s" % (self.path, e)) from e
        if not isinstance(j, dict):
            raise PersistenceError("Token file %s must contain a JSON object" % self.path)
        try:
            return TokenRecord.from_dict(j)
        except ValueError as e:
            raise PersistenceError("Invalid token file %s: %s" % (self.path, e)) from e

    def save(self, record: TokenRecord) -> None:
        try:
            save_json(self.path, record.to_dict())
        except OSError as e:
            raise PersistenceError("Could not write token file %s: %s" % (self.path, e)) from e
        print("Token saved to %s" % self.path)
