"""
Credential service: register / login / refresh / logout / introspect.

This is the only component that talks to more than one peer. Every failure
from the token lifecycle is translated here into the small external
taxonomy; internal detail is logged, never returned.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict

from models.db_storage import DBStorage
from services.refresh_tokens import RefreshTokenManager
from utils.exceptions import (
    Conflict,
    InvalidCredentials,
    TokenError,
    Unauthorized,
    ValidationError,
)
from utils.security import AccessTokenIssuer, PasswordHasher

logger = logging.getLogger(__name__)

INVALID_REFRESH_TOKEN = "Invalid refresh token"


@dataclass
class AuthResult:
    access_token: str
    refresh_token: str
    expires_in: int
    user: Dict[str, Any] = field(default_factory=dict)


def public_user(user_id: int, username: str) -> Dict[str, Any]:
    return {"id": user_id, "username": username}


class CredentialService:
    def __init__(
        self,
        storage: DBStorage,
        issuer: AccessTokenIssuer,
        password_hasher: PasswordHasher | None = None,
        refresh_tokens: RefreshTokenManager | None = None,
    ):
        self.storage = storage
        self.issuer = issuer
        self.password_hasher = password_hasher or PasswordHasher()
        self.refresh_tokens = refresh_tokens or RefreshTokenManager(storage)

    def _result(self, user_id: int, username: str, refresh_token: str) -> AuthResult:
        return AuthResult(
            access_token=self.issuer.issue(username, user_id),
            refresh_token=refresh_token,
            expires_in=self.issuer.expires_in,
            user=public_user(user_id, username),
        )

    def _issue(self, user_id: int, username: str) -> AuthResult:
        refresh_token = self.refresh_tokens.generate()
        self.refresh_tokens.store(user_id, refresh_token)
        return self._result(user_id, username, refresh_token)

    def register(self, username: str, password: str, confirm_password: str) -> AuthResult:
        if not username or not password or not confirm_password:
            raise ValidationError("All fields are required")
        if password != confirm_password:
            raise ValidationError("Passwords do not match")

        # the unique constraint is authoritative, this only avoids a wasted hash
        if self.storage.username_exists(username):
            raise Conflict()

        user = self.storage.add_user(username, self.password_hasher.hash(password))
        logger.info("registered user %s (%r)", user.id, user.username)
        return self._issue(user.id, user.username)

    def login(self, username: str, password: str) -> AuthResult:
        if not username or not password:
            raise ValidationError("Username and password are required")

        user = self.storage.get_user_by_username(username)
        if user is None:
            self.password_hasher.burn(password)
            raise InvalidCredentials()
        if not self.password_hasher.verify(user.password_hash, password):
            raise InvalidCredentials()

        logger.info("user %s logged in", user.id)
        return self._issue(user.id, user.username)

    def refresh(self, refresh_token: str) -> AuthResult:
        if not refresh_token:
            raise ValidationError("Refresh token is required")
        try:
            user_id, username, new_token = self.refresh_tokens.rotate(refresh_token)
        except TokenError as exc:
            logger.info("refresh rejected: %s", exc.__class__.__name__)
            raise Unauthorized(INVALID_REFRESH_TOKEN) from exc

        logger.info("rotated refresh token for user %s", user_id)
        return self._result(user_id, username, new_token)

    def logout(self, refresh_token: str | None) -> None:
        """Revoke a refresh token; unknown tokens are ignored."""
        if refresh_token and self.refresh_tokens.revoke(refresh_token):
            logger.info("refresh token revoked")

    def introspect(self, user_id: int, username: str) -> Dict[str, Any]:
        """Public view of an identity already verified at the boundary."""
        return public_user(user_id, username)
