import enum
from datetime import date

from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Date,
    Text,
    Enum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, utcnow


class ReadingType(enum.Enum):
    PAPER_BOOK = "PAPER_BOOK"
    LIBRARY_RENTAL = "LIBRARY_RENTAL"
    MILLIE = "MILLIE"
    E_BOOK = "E_BOOK"


READING_TYPE_LABELS = {
    ReadingType.PAPER_BOOK: "Owned paper book",
    ReadingType.LIBRARY_RENTAL: "Library rental",
    ReadingType.MILLIE: "Millie subscription",
    ReadingType.E_BOOK: "Owned e-book",
}


def clamp_progress(value: int) -> int:
    return min(100, max(0, value))


class CurrentlyReading(BaseModel, Base):
    """A book the user is reading right now, with progress and an optional return date."""
    __tablename__ = "currently_reading"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String(200), nullable=False)
    author = Column(String(100), nullable=True)
    cover_image = Column(String(500), nullable=True)
    publisher = Column(String(100), nullable=True)
    published_date = Column(String(20), nullable=True)
    description = Column(Text, nullable=True)
    reading_type = Column(Enum(ReadingType, name="reading_type"), nullable=False)
    due_date = Column(Date, nullable=True)  # library rentals only
    progress_percentage = Column(Integer, nullable=False, default=0)
    memo = Column(Text, nullable=True)

    user = relationship("User")

    __table_args__ = (
        CheckConstraint(
            "progress_percentage >= 0 AND progress_percentage <= 100",
            name="ck_currently_reading_progress_range",
        ),
    )

    @property
    def reading_type_label(self) -> str:
        return READING_TYPE_LABELS[self.reading_type]

    def is_overdue(self, today: date | None = None) -> bool:
        today = today or utcnow().date()
        return (
            self.reading_type == ReadingType.LIBRARY_RENTAL
            and self.due_date is not None
            and self.due_date < today
        )
