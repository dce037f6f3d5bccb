"""
Operator tokens for the admin surface.

Operators are not stored anywhere; a token signed with NEWSDESK_SECRET_KEY
whose "sub" names the operator is the whole credential.
"""

import os
from datetime import UTC, datetime, timedelta
from typing import Any, cast

from jose import JWTError, jwt

SECRET_KEY = os.environ.get("NEWSDESK_SECRET_KEY", "dev-secret-unsafe")
ALGORITHM = "HS256"
OPERATOR_TOKEN_EXPIRE_MINUTES = 60 * 24  # 24 hours
COOKIE_NAME = "access_token"


def create_access_token(
    data: dict[str, Any],
    expires_delta: timedelta | None = None,
    now_utc: datetime | None = None,
    secret_key: str | None = None,
) -> str:
    """
    Sign a JWT.

    Args:
        data: Claims to encode in the token
        expires_delta: Lifetime; defaults to OPERATOR_TOKEN_EXPIRE_MINUTES
        now_utc: Current UTC time (for testing/determinism). Defaults to datetime.now(UTC).
        secret_key: Signing key; defaults to SECRET_KEY
    """
    to_encode = data.copy()
    current_time = now_utc if now_utc is not None else datetime.now(UTC)
    lifetime = expires_delta or timedelta(minutes=OPERATOR_TOKEN_EXPIRE_MINUTES)

    to_encode.update({"exp": current_time + lifetime, "iat": current_time})
    encoded_jwt: str = jwt.encode(to_encode, secret_key or SECRET_KEY, algorithm=ALGORITHM)
    return encoded_jwt


def decode_access_token(token: str, secret_key: str | None = None) -> dict[str, Any] | None:
    try:
        payload = jwt.decode(token, secret_key or SECRET_KEY, algorithms=[ALGORITHM])
        return cast(dict[str, Any], payload)
    except JWTError:
        return None


def issue_operator_token(operator_id: str, expires_delta: timedelta | None = None) -> str:
    """Token the admin routes accept for `operator_id`."""
    if not operator_id.strip():
        raise ValueError("Operator id is required")
    return create_access_token({"sub": operator_id}, expires_delta=expires_delta)


def operator_from_token(token: str) -> str | None:
    """Operator id carried by a valid token, else None."""
    payload = decode_access_token(token)
    if not payload:
        return None
    operator_id = payload.get("sub")
    if not isinstance(operator_id, str) or not operator_id:
        return None
    return operator_id
