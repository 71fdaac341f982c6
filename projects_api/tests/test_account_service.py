"""
Tests for registration and login: validation, uniqueness, generic rejections.
"""
from __future__ import annotations

from pathlib import Path

import pytest

import sys
sys.path.insert(0, str(Path(__file__).resolve().parent.parent.parent))

from projects_api.auth import decode_token
from projects_api.persistence import UserRepository, get_connection, init_db
from projects_api.services import (
    AccountService,
    DuplicateEmailError,
    InvalidCredentialsError,
    MissingFieldsError,
)

SECRET = "account-test-secret"


@pytest.fixture
def db_conn(tmp_path):
    db_path = tmp_path / "account_test.db"
    init_db(db_path)
    conn = get_connection(db_path)
    try:
        yield conn
    finally:
        conn.close()


@pytest.fixture
def account_service():
    return AccountService(SECRET)


def test_register_hashes_password(db_conn, account_service):
    user = account_service.register(db_conn, "A", "a@x.com", "secret")
    stored = UserRepository().get(db_conn, user.id)
    assert stored.password_hash
    assert stored.password_hash != "secret"
    assert "password" not in user.to_dict()


def test_register_trims_name_and_email(db_conn, account_service):
    user = account_service.register(db_conn, "  A ", " a@x.com ", "secret")
    assert user.name == "A"
    assert user.email == "a@x.com"


@pytest.mark.parametrize(
    "name,email,password",
    [
        (None, "a@x.com", "secret"),
        ("A", None, "secret"),
        ("A", "a@x.com", None),
        ("   ", "a@x.com", "secret"),
        ("A", "a@x.com", ""),
    ],
)
def test_register_missing_fields(db_conn, account_service, name, email, password):
    with pytest.raises(MissingFieldsError):
        account_service.register(db_conn, name, email, password)
    assert UserRepository().list_all(db_conn) == []


def test_register_duplicate_email_creates_nothing(db_conn, account_service):
    account_service.register(db_conn, "A", "a@x.com", "secret")
    with pytest.raises(DuplicateEmailError):
        account_service.register(db_conn, "Other", "a@x.com", "different")
    assert len(UserRepository().list_all(db_conn)) == 1


def test_login_returns_token_with_identity(db_conn, account_service):
    user = account_service.register(db_conn, "A", "a@x.com", "secret")
    token = account_service.login(db_conn, "a@x.com", "secret")
    claims = decode_token(token, SECRET)
    assert claims is not None
    assert claims.user_id == user.id
    assert claims.email == "a@x.com"
    assert claims.name == "A"


def test_login_failures_share_one_message(db_conn, account_service):
    account_service.register(db_conn, "A", "a@x.com", "secret")
    with pytest.raises(InvalidCredentialsError) as wrong_password:
        account_service.login(db_conn, "a@x.com", "wrong")
    with pytest.raises(InvalidCredentialsError) as unknown_email:
        account_service.login(db_conn, "nobody@x.com", "secret")
    with pytest.raises(InvalidCredentialsError) as blank:
        account_service.login(db_conn, "", "")
    assert str(wrong_password.value) == str(unknown_email.value) == str(blank.value)
    assert str(wrong_password.value) == "Invalid email or password."
