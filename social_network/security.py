"""Token signing and password hashing.

Tokens are HS256 JWTs signed with ``settings.SECRET_KEY``; the ``sub`` claim
carries the account id.  Passwords are hashed with ``bcrypt`` directly.
"""
from datetime import datetime, timedelta, timezone

import bcrypt
from jose import JWTError, jwt

from social_network.config import settings
from social_network.errors import TokenInvalidError
from social_network.schemas import PASSWORD_MAX_BYTES


def create_token(account_id: str) -> str:
    """Issue a token for *account_id* valid for ``JWT_EXPIRE_MINUTES``."""
    now = datetime.now(timezone.utc)
    payload = {
        "sub": account_id,
        "iat": now,
        "exp": now + timedelta(minutes=settings.JWT_EXPIRE_MINUTES),
    }
    return str(jwt.encode(payload, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM))


def decode_token(token: str) -> str:
    """
    Validate *token* and return the account id it was issued for.

    Raises ``TokenInvalidError`` for a bad signature, an expired token or a
    token without a subject.
    """
    try:
        payload = jwt.decode(
            token,
            settings.SECRET_KEY,
            algorithms=[settings.JWT_ALGORITHM],
        )
    except JWTError:
        raise TokenInvalidError() from None

    account_id = payload.get("sub")
    if not account_id:
        raise TokenInvalidError()
    return account_id


def hash_password(plain: str) -> str:
    hashed_bytes: bytes = bcrypt.hashpw(plain.encode("utf-8"), bcrypt.gensalt())
    return hashed_bytes.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """False for a mismatch, including passwords bcrypt cannot take."""
    candidate = plain.encode("utf-8")
    if len(candidate) > PASSWORD_MAX_BYTES:
        return False
    return bcrypt.checkpw(candidate, hashed.encode("utf-8"))
