import enum

from sqlalchemy import (
    Column,
    String,
    Integer,
    Boolean,
    ForeignKey,
    Text,
    Enum,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class ReviewStatus(enum.Enum):
    DRAFT = "DRAFT"
    PUBLISHED = "PUBLISHED"
    HIDDEN = "HIDDEN"


class BookReview(BaseModel, Base):
    """A member's review of a group's monthly book; one per member and book."""
    __tablename__ = "book_reviews"

    monthly_book_id = Column(
        String(36), ForeignKey("monthly_books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    rating = Column(Integer, nullable=False)
    title = Column(String(100), nullable=False)
    content = Column(Text, nullable=True)
    favorite_quote = Column(Text, nullable=True)
    recommendation = Column(Text, nullable=True)
    status = Column(Enum(ReviewStatus, name="review_status"), nullable=False, default=ReviewStatus.PUBLISHED)
    is_public = Column(Boolean, nullable=False, default=True)

    monthly_book = relationship("MonthlyBook")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("monthly_book_id", "user_id", name="uq_book_reviews_monthly_book_user"),
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_book_reviews_rating_range"),
    )

    def is_published(self) -> bool:
        return self.status == ReviewStatus.PUBLISHED

    def is_visible(self) -> bool:
        return bool(self.is_public) and self.is_published()
