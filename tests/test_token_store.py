"""
Tests for TokenStore and TokenRecord.
"""

import json

import pytest

from yt_shorts.errors import PersistenceError
from yt_shorts.token_store import TokenRecord, TokenStore


class TestLoad:

    def test_missing_file_is_absent(self, tmp_path):
        assert TokenStore(tmp_path / "token.json").load() is None

    def test_malformed_file_is_error(self, tmp_path):
        p = tmp_path / "token.json"
        p.write_text("{oops", encoding="utf-8")
        with pytest.raises(PersistenceError):
            TokenStore(p).load()

    def test_non_object_is_error(self, tmp_path):
        p = tmp_path / "token.json"
        p.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(PersistenceError):
            TokenStore(p).load()

    def test_missing_access_token_is_error(self, tmp_path):
        p = tmp_path / "token.json"
        p.write_text(json.dumps({"refresh_token": "r"}), encoding="utf-8")
        with pytest.raises(PersistenceError):
            TokenStore(p).load()

    def test_provider_file_fields(self, tmp_path):
        """A token file written by another OAuth client loads with passthrough fields."""
        p = tmp_path / "token.json"
        p.write_text(json.dumps({
            "access_token": "a",
            "refresh_token": "r",
            "expiry_date": 1700000000000,
            "scope": "https://www.googleapis.com/auth/youtube",
            "token_type": "Bearer",
        }), encoding="utf-8")
        rec = TokenStore(p).load()
        assert rec.access_token == "a"
        assert rec.refresh_token == "r"
        assert rec.expiry_date == 1700000000000
        assert rec.extra == {"scope": "https://www.googleapis.com/auth/youtube", "token_type": "Bearer"}


class TestSave:

    def test_round_trip(self, tmp_path):
        store = TokenStore(tmp_path / "token.json")
        rec = TokenRecord(
            access_token="acc",
            refresh_token="ref",
            expiry_date=1712345678901,
            extra={"scope": "s", "token_type": "Bearer", "id_token": "jwt"},
        )
        store.save(rec)
        assert store.load() == rec

    def test_round_trip_without_optional_fields(self, tmp_path):
        store = TokenStore(tmp_path / "token.json")
        rec = TokenRecord(access_token="acc")
        store.save(rec)
        assert store.load() == rec

    def test_pretty_printed_json(self, tmp_path):
        p = tmp_path / "token.json"
        TokenStore(p).save(TokenRecord(access_token="acc", refresh_token="ref", expiry_date=5))
        text = p.read_text(encoding="utf-8")
        assert text.startswith("{\n  ")
        assert json.loads(text) == {"access_token": "acc", "refresh_token": "ref", "expiry_date": 5}

    def test_overwrite_last_write_wins(self, tmp_path):
        store = TokenStore(tmp_path / "token.json")
        store.save(TokenRecord(access_token="one"))
        store.save(TokenRecord(access_token="two"))
        assert store.load().access_token == "two"
        # No temp files left next to the token.
        assert [f.name for f in tmp_path.iterdir()] == ["token.json"]


class TestExpiry:

    def test_past_expiry_is_expired(self):
        assert TokenRecord(access_token="a", expiry_date=1000).is_expired(now_ms=2000)

    def test_future_expiry_is_valid(self):
        assert not TokenRecord(access_token="a", expiry_date=3000).is_expired(now_ms=2000)

    def test_absent_expiry_never_expires(self):
        assert not TokenRecord(access_token="a").is_expired(now_ms=10 ** 15)
