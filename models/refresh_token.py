"""
RefreshToken model: one row per live refresh token.
Fields:
- token (unique) - the signed refresh token value itself
- user_id (String(36)) - FK to users.id
- expires_at - naive UTC
"""
from sqlalchemy import Column, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, utcnow


class RefreshToken(BaseModel, Base):
    __tablename__ = "refresh_tokens"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    token = Column(String(500), nullable=False, unique=True, index=True)
    expires_at = Column(DateTime, nullable=False, index=True)

    user = relationship("User", back_populates="refresh_tokens")

    def is_expired(self, now=None) -> bool:
        return self.expires_at < (now or utcnow())
