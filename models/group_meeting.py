import enum

from sqlalchemy import Column, String, ForeignKey, Text, DateTime, Enum
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class MeetingStatus(enum.Enum):
    SCHEDULED = "SCHEDULED"
    ONGOING = "ONGOING"
    COMPLETED = "COMPLETED"
    CANCELLED = "CANCELLED"


class GroupMeeting(BaseModel, Base):
    __tablename__ = "group_meetings"

    group_id = Column(String(36), ForeignKey("reading_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    monthly_book_id = Column(String(36), ForeignKey("monthly_books.id", ondelete="SET NULL"), nullable=True)
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)
    meeting_date_time = Column(DateTime, nullable=False, index=True)
    location = Column(String(200), nullable=True)
    agenda = Column(Text, nullable=True)
    status = Column(Enum(MeetingStatus, name="meeting_status"), nullable=False, default=MeetingStatus.SCHEDULED)
    created_by_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False)

    group = relationship("ReadingGroup", back_populates="meetings")
    monthly_book = relationship("MonthlyBook")
    created_by = relationship("User")
