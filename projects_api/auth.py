"""
Password hashing and JWT access tokens.
Passwords never stored in plain text. Tokens are stateless; no revocation.
"""
from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import JWTError, jwt
from passlib.context import CryptContext

from projects_api.models import TokenClaims

# Use pbkdf2_sha256 to avoid bcrypt backend init (passlib's bcrypt runs a 72+ byte test and raises)
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE = timedelta(hours=10)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    return pwd_context.verify(plain, hashed)


def create_access_token(
    claims: TokenClaims,
    secret: str,
    expires_delta: timedelta = ACCESS_TOKEN_EXPIRE,
) -> str:
    """Sign userId/email/name with an exp claim `expires_delta` from now."""
    if not secret:
        raise ValueError("jwt_secret_blank")
    now = datetime.now(timezone.utc)
    to_encode = {
        "userId": claims.user_id,
        "email": claims.email,
        "name": claims.name,
        "iat": int(now.timestamp()),
        "exp": int((now + expires_delta).timestamp()),
    }
    return jwt.encode(to_encode, secret, algorithm=ALGORITHM)


def decode_token(token: str | None, secret: str) -> TokenClaims | None:
    """
    Verify signature and expiry. Returns None for any failure
    (blank, malformed, bad signature, expired, missing userId).
    """
    if not token or not secret:
        return None
    try:
        payload = jwt.decode(token, secret, algorithms=[ALGORITHM])
    except JWTError:
        return None
    user_id = payload.get("userId")
    if not user_id:
        return None
    return TokenClaims(
        user_id=str(user_id),
        email=str(payload.get("email") or ""),
        name=str(payload.get("name") or ""),
        issued_at=payload.get("iat"),
        expires_at=payload.get("exp"),
    )
