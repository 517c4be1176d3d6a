from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Date,
    Text,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class Book(BaseModel, Base):
    """A book the user has finished reading, with their rating and review."""
    __tablename__ = "books"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    author = Column(String(100), nullable=False)
    cover_image = Column(String(500), nullable=True)
    rating = Column(Integer, nullable=False)
    review = Column(Text, nullable=True)
    finished_date = Column(Date, nullable=False)  # validated not in future (in schema)

    user = relationship("User", back_populates="books")

    __table_args__ = (
        CheckConstraint("rating >= 1 AND rating <= 5", name="ck_books_rating_range"),
        Index("ix_books_user_finished", "user_id", "finished_date"),
    )
