"""Unit tests for auth/tokens.py -- password hashing and JWT issue/verify.

Covers:
- bcrypt hashes are salted and never equal the plaintext
- verify_password accepts the right password, rejects wrong and malformed input
- a fresh token decodes to the claims it was issued with
- expired, tampered, and foreign-key tokens are rejected
- tokens expire one hour after issue by default
"""

from datetime import datetime, timedelta, timezone

import pytest
from jose import jwt

from auth.tokens import MAX_PASSWORD_BYTES, create_access_token, decode_access_token, hash_password, verify_password


class TestPasswordHashing:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("hunter22")
        assert hashed != "hunter22"
        assert hashed.startswith("$2")

    def test_same_password_gets_different_salts(self):
        assert hash_password("hunter22") != hash_password("hunter22")

    def test_verify_roundtrip(self):
        hashed = hash_password("hunter22")
        assert verify_password("hunter22", hashed) is True
        assert verify_password("hunter23", hashed) is False

    def test_verify_malformed_hash_is_false(self):
        assert verify_password("hunter22", "not-a-bcrypt-hash") is False

    def test_password_at_byte_limit_hashes(self):
        plain = "p" * MAX_PASSWORD_BYTES
        assert verify_password(plain, hash_password(plain)) is True

    def test_password_over_byte_limit_rejected(self):
        with pytest.raises(ValueError):
            hash_password("p" * 100)
        # 37 two-byte characters: under the limit in characters, over it in bytes.
        with pytest.raises(ValueError):
            hash_password("\u00e9" * 37)

    def test_verify_over_byte_limit_is_false(self):
        hashed = hash_password("p" * MAX_PASSWORD_BYTES)
        assert verify_password("p" * 100, hashed) is False


class TestAccessTokens:
    def test_valid_token_decodes_to_claims(self):
        token = create_access_token(7, "ada@example.com", "Ada Lovelace")
        claims = decode_access_token(token)
        assert claims is not None
        assert claims.user_id == 7
        assert claims.email == "ada@example.com"
        assert claims.full_name == "Ada Lovelace"

    def test_full_name_is_optional(self):
        claims = decode_access_token(create_access_token(7, "ada@example.com"))
        assert claims is not None
        assert claims.full_name is None

    def test_default_expiry_is_one_hour(self):
        token = create_access_token(7, "ada@example.com")
        payload = jwt.get_unverified_claims(token)
        expires = datetime.fromtimestamp(payload["exp"], tz=timezone.utc)
        remaining = expires - datetime.now(timezone.utc)
        assert timedelta(minutes=59) < remaining <= timedelta(hours=1)

    def test_expired_token_rejected(self):
        token = create_access_token(7, "ada@example.com", expires_delta=timedelta(seconds=-5))
        assert decode_access_token(token) is None

    def test_tampered_payload_rejected(self):
        """Swap in another token's payload while keeping this token's signature."""
        mine = create_access_token(7, "ada@example.com").split(".")
        theirs = create_access_token(8, "mallory@example.com").split(".")
        forged = ".".join([mine[0], theirs[1], mine[2]])
        assert decode_access_token(forged) is None

    def test_token_signed_with_other_key_rejected(self):
        payload = {
            "sub": "ada@example.com",
            "userId": 7,
            "email": "ada@example.com",
            "exp": datetime.now(timezone.utc) + timedelta(hours=1),
        }
        foreign = jwt.encode(payload, "x" * 64, algorithm="HS256")
        assert decode_access_token(foreign) is None

    def test_garbage_rejected(self):
        assert decode_access_token("not.a.jwt") is None
