"""
Tests for password hashing and access tokens.
"""
from __future__ import annotations

from datetime import timedelta
from pathlib import Path

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from jose import jwt

from projects_api.auth import (
    ALGORITHM,
    create_access_token,
    decode_token,
    hash_password,
    verify_password,
)
from projects_api.models import TokenClaims

SECRET = "test-secret"
CLAIMS = TokenClaims(user_id="user-1", email="a@x.com", name="A")


def test_hash_is_not_plaintext_and_verifies():
    hashed = hash_password("secret")
    assert hashed != "secret"
    assert "secret" not in hashed
    assert verify_password("secret", hashed)


def test_hash_is_salted():
    assert hash_password("secret") != hash_password("secret")


def test_verify_rejects_wrong_password():
    hashed = hash_password("secret")
    assert not verify_password("Secret", hashed)


def test_verify_rejects_empty_hash():
    assert not verify_password("secret", "")
    assert not verify_password("secret", None)


def test_token_roundtrip_carries_identity():
    token = create_access_token(CLAIMS, SECRET)
    decoded = decode_token(token, SECRET)
    assert decoded is not None
    assert decoded.user_id == "user-1"
    assert decoded.email == "a@x.com"
    assert decoded.name == "A"


def test_token_expires_ten_hours_after_issue():
    token = create_access_token(CLAIMS, SECRET)
    payload = jwt.get_unverified_claims(token)
    assert payload["exp"] - payload["iat"] == 10 * 60 * 60


def test_expired_token_rejected():
    token = create_access_token(CLAIMS, SECRET, expires_delta=timedelta(seconds=-5))
    assert decode_token(token, SECRET) is None


def test_token_signed_with_other_secret_rejected():
    token = create_access_token(CLAIMS, "another-secret")
    assert decode_token(token, SECRET) is None


def test_malformed_and_missing_tokens_rejected():
    assert decode_token("not-a-jwt", SECRET) is None
    assert decode_token("", SECRET) is None
    assert decode_token(None, SECRET) is None


def test_token_without_user_id_rejected():
    token = jwt.encode({"email": "a@x.com"}, SECRET, algorithm=ALGORITHM)
    assert decode_token(token, SECRET) is None


def test_claims_to_dict_uses_wire_names():
    token = create_access_token(CLAIMS, SECRET)
    d = decode_token(token, SECRET).to_dict()
    assert d["userId"] == "user-1"
    assert d["email"] == "a@x.com"
    assert d["name"] == "A"
    assert "exp" in d and "iat" in d
