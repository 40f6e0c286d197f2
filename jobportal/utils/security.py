"""Password hashing and bearer token helpers."""

from datetime import UTC, datetime, timedelta

import bcrypt
import jwt

from jobportal.config import settings

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    salt = bcrypt.gensalt(rounds=settings.bcrypt_rounds)
    return bcrypt.hashpw(_password_bytes(password), salt).decode("utf-8")


def verify_password(password: str, hashed: str | None) -> bool:
    if not hashed:
        return False
    try:
        return bcrypt.checkpw(_password_bytes(password), hashed.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


def create_access_token(user_id: str, role: str) -> str:
    """Issue a signed token carrying the user id and role."""
    now = datetime.now(UTC)
    payload = {
        "userId": user_id,
        "role": role,
        "iat": now,
        "exp": now + timedelta(minutes=settings.jwt_expire_minutes),
    }
    return jwt.encode(payload, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> dict:
    """Decode and verify a token.

    Raises jwt.InvalidTokenError (or a subclass such as ExpiredSignatureError)
    when the token is malformed, tampered with or expired.
    """
    payload = jwt.decode(token, settings.jwt_secret, algorithms=[settings.jwt_algorithm])
    if not payload.get("userId"):
        raise jwt.InvalidTokenError("Token has no userId claim")
    return payload
