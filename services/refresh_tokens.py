"""
Refresh token manager.

Refresh tokens are opaque: 32 bytes from the OS CSPRNG, hex encoded. Only the
SHA-256 digest is persisted, together with an absolute expiry 7 days after
creation. A token is single use; consuming it deletes its record, and the
delete itself decides which of two concurrent requests wins. Rotation
deletes the old record and inserts the new one in the same commit.
"""
from __future__ import annotations

import logging
import secrets
from datetime import datetime, timedelta
from typing import Callable, Tuple

from models.base_model import utcnow
from models.db_storage import DBStorage
from models.refresh_token import RefreshToken
from models.user import User
from utils.exceptions import EntropyError, Expired, NotFound, UserNotFound
from utils.security import digest_token

logger = logging.getLogger(__name__)

REFRESH_TOKEN_BYTES = 32
REFRESH_TOKEN_TTL = timedelta(days=7)


class RefreshTokenManager:
    def __init__(self, storage: DBStorage, clock: Callable[[], datetime] = utcnow, ttl: timedelta = REFRESH_TOKEN_TTL):
        self.storage = storage
        self._clock = clock
        self.ttl = ttl

    def generate(self) -> str:
        try:
            return secrets.token_hex(REFRESH_TOKEN_BYTES)
        except (OSError, NotImplementedError) as exc:
            logger.exception("secure random source unavailable")
            raise EntropyError() from exc

    def store(self, user_id: int, token: str):
        now = self._clock()
        self.storage.add_refresh_token(
            user_id=user_id,
            token_hash=digest_token(token),
            expires_at=now + self.ttl,
            created_at=now,
        )

    def _live_record(self, token: str) -> Tuple[RefreshToken, User]:
        record = self.storage.get_refresh_token(digest_token(token))
        if record is None:
            raise NotFound()

        if record.expires_at < self._clock():
            self.storage.delete_refresh_token(record.id)
            logger.info("expired refresh token presented for user %s", record.user_id)
            raise Expired()

        user = self.storage.get_user(record.user_id)
        if user is None:
            raise UserNotFound()
        return record, user

    def validate_and_consume(self, token: str) -> Tuple[int, str]:
        """
        Consume a refresh token and return (user_id, username) of its owner.

        Raises NotFound for unknown or already rotated tokens (the two are
        indistinguishable on purpose), Expired after deleting a stale record,
        and UserNotFound when the owner is gone.
        """
        record, user = self._live_record(token)
        # losing a concurrent race shows up as zero rows deleted
        if not self.storage.delete_refresh_token(record.id):
            raise NotFound()
        return user.id, user.username

    def rotate(self, token: str) -> Tuple[int, str, str]:
        """
        Consume a refresh token and persist its replacement in one commit.

        Same errors as validate_and_consume. The replacement is generated
        before anything is touched; if it cannot be stored the old token
        stays valid. Returns (user_id, username, new_token).
        """
        record, user = self._live_record(token)
        new_token = self.generate()
        now = self._clock()
        if not self.storage.rotate_refresh_token(
            record.id,
            user_id=user.id,
            token_hash=digest_token(new_token),
            expires_at=now + self.ttl,
            created_at=now,
        ):
            raise NotFound()
        return user.id, user.username, new_token

    def revoke(self, token: str) -> bool:
        return self.storage.delete_refresh_token_by_hash(digest_token(token))

    def purge_expired(self) -> int:
        """Delete every record past its expiry; returns how many went."""
        deleted = self.storage.delete_expired_refresh_tokens(self._clock())
        if deleted:
            logger.info("purged %d expired refresh tokens", deleted)
        return deleted
