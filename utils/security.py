"""
security helpers:
- Argon2 password hashing via argon2-cffi
- SHA-256 digests for refresh tokens kept at rest
- Access token signing/verification via PyJWT (HS256)
"""
from __future__ import annotations

import hashlib
import logging
from datetime import datetime, timedelta, timezone
from typing import Any, Callable, Dict

import jwt
from argon2 import PasswordHasher as Argon2Hasher
from argon2 import exceptions as argon2_exceptions

from utils.exceptions import Expired, HashingError, InvalidSignature, Malformed

logger = logging.getLogger(__name__)

ACCESS_TOKEN_TTL = timedelta(minutes=15)
ACCESS_TOKEN_TYPE = "access"
JWT_ALGORITHM = "HS256"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class PasswordHasher:
    """Salted adaptive hash for user passwords (argon2id, library defaults)."""

    def __init__(self, hasher: Argon2Hasher | None = None):
        self._ph = hasher or Argon2Hasher()
        self._dummy_hash: str | None = None

    def hash(self, password: str) -> str:
        """Hash a plaintext password using Argon2
        """
        try:
            return self._ph.hash(password)
        except argon2_exceptions.HashingError as exc:
            logger.exception("argon2 hashing failed")
            raise HashingError() from exc

    def verify(self, password_hash: str, password: str) -> bool:
        """ Verify a plaintext password against a stored Argon2 hash
        """
        try:
            return self._ph.verify(password_hash, password)
        except argon2_exceptions.VerifyMismatchError:
            return False
        except (argon2_exceptions.VerificationError, argon2_exceptions.InvalidHashError):
            logger.warning("stored password hash could not be verified")
            return False

    def burn(self, password: str) -> bool:
        """Run one verification against a throwaway hash; always False.

        Used when the username is unknown so both login failure paths cost
        the same.
        """
        if self._dummy_hash is None:
            self._dummy_hash = self.hash("dummy-password-for-timing")
        self.verify(self._dummy_hash, password)
        return False


def digest_token(token: str) -> str:
    """Hex-encoded SHA-256 of an opaque refresh token (64 chars)."""
    return hashlib.sha256(token.encode("utf-8")).hexdigest()


class AccessTokenIssuer:
    """Signs and verifies short-lived bearer tokens.

    Verification is self-contained: it never touches the credential store.
    """

    def __init__(self, secret: str, clock: Callable[[], datetime] = _now, ttl: timedelta = ACCESS_TOKEN_TTL):
        if not secret:
            raise ValueError("signing secret must not be empty")
        self._secret = secret
        self._clock = clock
        self.ttl = ttl

    @property
    def expires_in(self) -> int:
        return int(self.ttl.total_seconds())

    def issue(self, username: str, user_id: int) -> str:
        iat = int(self._clock().timestamp())
        payload = {
            "username": username,
            "userID": user_id,
            "type": ACCESS_TOKEN_TYPE,
            "iat": iat,
            "exp": iat + self.expires_in,
        }
        return jwt.encode(payload, self._secret, algorithm=JWT_ALGORITHM)

    def verify(self, token: str) -> Dict[str, Any]:
        """
        Decode and validate an access token.
        Raises InvalidSignature, Expired or Malformed; signature is checked
        before expiry, so a forged token never reports Expired.
        """
        try:
            claims = jwt.decode(
                token,
                self._secret,
                algorithms=[JWT_ALGORITHM],
                options={"verify_exp": False, "verify_iat": False},
            )
        except jwt.InvalidSignatureError as exc:
            raise InvalidSignature() from exc
        except jwt.InvalidTokenError as exc:
            raise Malformed() from exc

        exp = claims.get("exp")
        username = claims.get("username")
        user_id = claims.get("userID")
        if (
            not isinstance(exp, int)
            or not isinstance(username, str)
            or not isinstance(user_id, int)
            or isinstance(user_id, bool)
            or claims.get("type") != ACCESS_TOKEN_TYPE
        ):
            raise Malformed()
        if exp < int(self._clock().timestamp()):
            raise Expired()
        return claims
