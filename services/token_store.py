"""
Persistence of issued refresh tokens.

Methods stage their changes on the shared session and leave the commit to the
caller (storage.save()), so a rotation deletes the old row and inserts the new
one in a single transaction.
"""
from __future__ import annotations

import logging
from datetime import datetime

import models
from models.base_model import utcnow
from models.refresh_token import RefreshToken
from services.errors import TokenNotFound

logger = logging.getLogger(__name__)


class RefreshTokenStore:
    def __init__(self, storage=None):
        self.storage = storage or models.storage

    @property
    def session(self):
        return self.storage.get_session()

    def save(self, user_id: str, token: str, expires_at: datetime) -> RefreshToken:
        record = RefreshToken(user_id=user_id, token=token, expires_at=expires_at)
        self.storage.new(record)
        return record

    def find_by_value(self, token: str) -> RefreshToken:
        record = self.session.query(RefreshToken).filter(RefreshToken.token == token).first()
        if record is None:
            raise TokenNotFound()
        return record

    def delete_by_value(self, token: str) -> int:
        return self.session.query(RefreshToken).filter(RefreshToken.token == token).delete()

    def delete_all_for_user(self, user_id: str) -> int:
        return self.session.query(RefreshToken).filter(RefreshToken.user_id == user_id).delete()

    def sweep_expired(self, now: datetime | None = None) -> int:
        cutoff = now or utcnow()
        removed = self.session.query(RefreshToken).filter(RefreshToken.expires_at < cutoff).delete()
        logger.info("Swept %d expired refresh tokens", removed)
        return removed
