"""
Tests for password hashing, access tokens and the hash-generation CLI.
"""

import jwt
import pytest

import generate_hash
from auth import security


# =============================================================================
# Passwords
# =============================================================================


class TestPasswords:
    def test_hash_then_verify(self):
        hashed = security.hash_password("s3cret-pass")

        assert hashed != "s3cret-pass"
        assert hashed.startswith("$2")
        assert security.verify_password("s3cret-pass", hashed)

    def test_wrong_password_is_false(self):
        hashed = security.hash_password("s3cret-pass")
        assert security.verify_password("not-it", hashed) is False

    def test_each_hash_is_salted(self):
        assert security.hash_password("same") != security.hash_password("same")

    @pytest.mark.parametrize("stored", ["", "not-a-bcrypt-hash"])
    def test_bad_stored_hash_never_raises(self, stored):
        assert security.verify_password("whatever", stored) is False

    def test_empty_password_cannot_be_hashed(self):
        with pytest.raises(security.AuthSecurityError):
            security.hash_password("")


# =============================================================================
# Access tokens
# =============================================================================


class TestAccessTokens:
    def test_round_trip_carries_identity(self):
        token = security.build_access_token(user_id=7, username="admin", role="admin")

        claims = security.decode_access_token(token)
        assert claims.id == 7
        assert claims.username == "admin"
        assert claims.role == "admin"

    def test_expires_twenty_four_hours_after_issue(self):
        token = security.build_access_token(user_id=1, username="a", role="admin")
        claims = security.decode_access_token(token)
        assert claims.expires_at - claims.issued_at == 24 * 3600

    def test_expired_token(self):
        issued = security.now_epoch_s() - 25 * 3600
        token = security.build_access_token(user_id=1, username="a", role="admin", issued_at=issued)

        with pytest.raises(security.TokenError) as excinfo:
            security.decode_access_token(token)
        assert excinfo.value.kind is security.TokenErrorKind.EXPIRED

    def test_foreign_signature(self):
        now = security.now_epoch_s()
        token = jwt.encode(
            {"sub": "1", "id": 1, "username": "a", "role": "admin", "iat": now, "exp": now + 60},
            "some-other-secret-that-is-at-least-32-bytes-long",
            algorithm="HS256",
        )

        with pytest.raises(security.TokenError) as excinfo:
            security.decode_access_token(token)
        assert excinfo.value.kind is security.TokenErrorKind.INVALID_SIGNATURE

    @pytest.mark.parametrize("token", ["", "not-a-jwt", "a.b.c"])
    def test_malformed(self, token):
        with pytest.raises(security.TokenError) as excinfo:
            security.decode_access_token(token)
        assert excinfo.value.kind is security.TokenErrorKind.MALFORMED

    def test_missing_id_claim_is_malformed(self):
        now = security.now_epoch_s()
        token = jwt.encode({"iat": now, "exp": now + 60}, security.jwt_secret(), algorithm="HS256")

        with pytest.raises(security.TokenError) as excinfo:
            security.decode_access_token(token)
        assert excinfo.value.kind is security.TokenErrorKind.MALFORMED

    def test_missing_secret_is_fatal(self, monkeypatch):
        monkeypatch.delenv("JWT_SECRET", raising=False)

        with pytest.raises(security.AuthSecurityError):
            security.require_jwt_secret()
        with pytest.raises(security.AuthSecurityError):
            security.build_access_token(user_id=1, username="a", role="admin")


# =============================================================================
# generate-hash CLI
# =============================================================================


class TestGenerateHash:
    def test_prints_usable_hash(self, capsys):
        assert generate_hash.main(["letmein"]) == 0

        printed = capsys.readouterr().out.strip()
        assert security.verify_password("letmein", printed)

    def test_usage_without_argument(self, capsys):
        assert generate_hash.main([]) == 1
        assert "Usage" in capsys.readouterr().err
