from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Text,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base

DEFAULT_PRIORITY = 3


class Wishlist(BaseModel, Base):
    """A book the user wants to read; priority 1 is the most wanted."""
    __tablename__ = "wishlists"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    author = Column(String(100), nullable=True)
    cover_image = Column(String(500), nullable=True)
    publisher = Column(String(100), nullable=True)
    published_date = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    memo = Column(Text, nullable=True)
    priority = Column(Integer, nullable=False, default=DEFAULT_PRIORITY)

    user = relationship("User")

    __table_args__ = (
        CheckConstraint("priority >= 1 AND priority <= 5", name="ck_wishlists_priority_range"),
        Index("ix_wishlists_user_priority", "user_id", "priority"),
    )
