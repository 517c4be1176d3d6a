import enum

from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Text,
    Date,
    Enum,
    UniqueConstraint,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class MonthlyBookStatus(enum.Enum):
    UPCOMING = "UPCOMING"
    READING = "READING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class MonthlyBook(BaseModel, Base):
    """The book a group reads in a given month; at most one per group and month."""
    __tablename__ = "monthly_books"

    group_id = Column(String(36), ForeignKey("reading_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    month = Column(Integer, nullable=False)

    book_title = Column(String(200), nullable=False)
    book_author = Column(String(100), nullable=True)
    book_isbn = Column(String(13), nullable=True)
    book_cover_image = Column(String(500), nullable=True)
    book_publisher = Column(String(100), nullable=True)
    book_description = Column(Text, nullable=True)

    selected_by_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)
    selection_reason = Column(Text, nullable=True)
    start_date = Column(Date, nullable=True)
    end_date = Column(Date, nullable=True)
    status = Column(Enum(MonthlyBookStatus, name="monthly_book_status"), nullable=False,
                    default=MonthlyBookStatus.UPCOMING)

    group = relationship("ReadingGroup", back_populates="monthly_books")
    selected_by = relationship("User")

    __table_args__ = (
        UniqueConstraint("group_id", "year", "month", name="uq_monthly_books_group_year_month"),
        CheckConstraint("month >= 1 AND month <= 12", name="ck_monthly_books_month_range"),
    )
