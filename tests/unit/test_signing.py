"""Tests for keygen.signing — HMAC request signatures."""

import hashlib
import hmac

from tenantgate.keygen.signing import (
    create_hmac_signature,
    current_timestamp,
    verify_hmac_signature,
)

SECRET = "a" * 64
TS = "1700000000000"


class TestCreateSignature:
    def test_known_message_layout(self):
        expected = hmac.new(
            SECRET.encode(),
            b"1700000000000:/api/admin/users:?limit=10:",
            hashlib.sha256,
        ).hexdigest()
        assert create_hmac_signature(SECRET, TS, "/api/admin/users", "?limit=10") == expected

    def test_hex_digest_length(self):
        sig = create_hmac_signature(SECRET, TS, "/p", "")
        assert len(sig) == 64
        int(sig, 16)

    def test_deterministic(self):
        a = create_hmac_signature(SECRET, TS, "/p", "?q=1")
        b = create_hmac_signature(SECRET, TS, "/p", "?q=1")
        assert a == b

    def test_every_component_is_signed(self):
        base = create_hmac_signature(SECRET, TS, "/p", "?q=1", "body")
        assert create_hmac_signature("b" * 64, TS, "/p", "?q=1", "body") != base
        assert create_hmac_signature(SECRET, "1700000000001", "/p", "?q=1", "body") != base
        assert create_hmac_signature(SECRET, TS, "/other", "?q=1", "body") != base
        assert create_hmac_signature(SECRET, TS, "/p", "?q=2", "body") != base
        assert create_hmac_signature(SECRET, TS, "/p", "?q=1", "other") != base

    def test_empty_query_differs_from_bare_question_mark(self):
        assert create_hmac_signature(SECRET, TS, "/p", "") != create_hmac_signature(
            SECRET, TS, "/p", "?"
        )


class TestVerifySignature:
    def test_roundtrip(self):
        sig = create_hmac_signature(SECRET, TS, "/api/admin/users", "?limit=1")
        assert verify_hmac_signature(sig, SECRET, TS, "/api/admin/users", "?limit=1")

    def test_wrong_secret(self):
        sig = create_hmac_signature(SECRET, TS, "/api/admin/users", "")
        assert not verify_hmac_signature(sig, "c" * 64, TS, "/api/admin/users", "")

    def test_tampered_query(self):
        sig = create_hmac_signature(SECRET, TS, "/api/admin/users", "?limit=1")
        assert not verify_hmac_signature(sig, SECRET, TS, "/api/admin/users", "?limit=1000")


class TestTimestamp:
    def test_milliseconds(self):
        ts = current_timestamp()
        assert ts.isdigit()
        assert len(ts) == 13
