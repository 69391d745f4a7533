"""
Security utilities including password hashing and JWT token generation.
"""

import hashlib
import secrets
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import jwt, JWTError

from app.config import settings

# JWT configuration
ALGORITHM = "HS256"

# Digests already stored in passwords.json were produced with these exact
# parameters, changing any of them invalidates every stored password.
PASSWORD_SALT = b"salt"
PASSWORD_ITERATIONS = 1000
PASSWORD_KEY_LENGTH = 64


def get_password_hash(password: str) -> str:
    """Generate a hex-encoded PBKDF2-SHA512 password hash."""
    digest = hashlib.pbkdf2_hmac(
        "sha512",
        password.encode("utf-8"),
        PASSWORD_SALT,
        PASSWORD_ITERATIONS,
        dklen=PASSWORD_KEY_LENGTH,
    )
    return digest.hex()


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against a hash."""
    return secrets.compare_digest(
        get_password_hash(plain_password).encode("utf-8"),
        hashed_password.encode("utf-8"),
    )


def create_access_token(user_id: str, expires_delta: Optional[timedelta] = None) -> str:
    """Create a signed identity token for `user_id`."""
    issued_at = datetime.now(timezone.utc)
    if expires_delta is None:
        expires_delta = timedelta(days=settings.ACCESS_TOKEN_EXPIRE_DAYS)

    to_encode = {
        "userId": user_id,
        "iat": issued_at,
        "exp": issued_at + expires_delta,
    }
    return jwt.encode(to_encode, settings.JWT_SECRET, algorithm=ALGORITHM)


def verify_access_token(token: str) -> Optional[str]:
    """
    Return the user id carried by `token`, or None.

    Expired, malformed and badly signed tokens are all treated the same way.
    """
    try:
        payload = jwt.decode(token, settings.JWT_SECRET, algorithms=[ALGORITHM])
    except JWTError:
        return None

    user_id = payload.get("userId")
    if isinstance(user_id, str) and user_id:
        return user_id
    return None
