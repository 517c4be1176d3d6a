from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Date,
    Text,
    Enum,
    CheckConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base
from models.currently_reading import ReadingType, READING_TYPE_LABELS


class DroppedBook(BaseModel, Base):
    """A book the user stopped reading, with how far they got and why."""
    __tablename__ = "dropped_books"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    author = Column(String(100), nullable=True)
    isbn = Column(String(13), nullable=True)
    cover_image = Column(String(500), nullable=True)
    publisher = Column(String(100), nullable=True)
    published_date = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    reading_type = Column(Enum(ReadingType, name="reading_type"), nullable=False)
    progress_percentage = Column(Integer, nullable=True)
    drop_reason = Column(Text, nullable=True)
    started_date = Column(Date, nullable=True)
    dropped_date = Column(Date, nullable=False)
    memo = Column(String(1000), nullable=True)

    user = relationship("User")

    __table_args__ = (
        CheckConstraint(
            "progress_percentage IS NULL OR (progress_percentage >= 0 AND progress_percentage <= 100)",
            name="ck_dropped_books_progress_range",
        ),
        Index("ix_dropped_books_user_dropped", "user_id", "dropped_date"),
    )

    @property
    def reading_type_label(self) -> str:
        return READING_TYPE_LABELS[self.reading_type]
