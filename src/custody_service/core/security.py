"""
Credential helpers: bcrypt password hashing and signed access tokens.
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Dict

import bcrypt
import jwt

from custody_service.config.settings import Settings
from custody_service.core.errors import BadRequestError, UnauthorizedError

logger = logging.getLogger(__name__)

# bcrypt only looks at the first 72 bytes of a password
_BCRYPT_MAX_BYTES = 72


def _password_bytes(password: str) -> bytes:
    encoded = password.encode("utf-8")
    if len(encoded) > _BCRYPT_MAX_BYTES:
        raise BadRequestError("Password is too long")
    return encoded


def hash_password(password: str, rounds: int = 12) -> str:
    """Hash a password with a fresh salt."""
    hashed = bcrypt.hashpw(_password_bytes(password), bcrypt.gensalt(rounds=rounds))
    return hashed.decode("utf-8")


def verify_password(password: str, password_hash: str) -> bool:
    try:
        return bcrypt.checkpw(_password_bytes(password), password_hash.encode("utf-8"))
    except (BadRequestError, ValueError):
        return False


class TokenService:
    """Issues and verifies HS256 access tokens"""

    def __init__(self, settings: Settings):
        self.secret = settings.jwt_secret
        self.algorithm = settings.jwt_algorithm
        self.lifetime = timedelta(minutes=settings.jwt_expires_minutes)

    def issue(self, staff_id: str, designation: str) -> str:
        now = datetime.now(timezone.utc)
        payload = {
            "sub": staff_id,
            "designation": designation,
            "iat": now,
            "exp": now + self.lifetime,
        }
        return jwt.encode(payload, self.secret, algorithm=self.algorithm)

    def decode(self, token: str) -> Dict[str, Any]:
        """Verify a token and return its claims

        Raises:
            UnauthorizedError: If the token is expired, tampered with or malformed
        """
        try:
            return jwt.decode(token, self.secret, algorithms=[self.algorithm], options={"require": ["sub", "exp"]})
        except jwt.ExpiredSignatureError:
            raise UnauthorizedError("Authentication token has expired")
        except jwt.InvalidTokenError as e:
            logger.warning(f"Rejected access token: {e}")
            raise UnauthorizedError("Invalid authentication token")
