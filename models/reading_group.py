import enum

from sqlalchemy import (
    Column,
    String,
    Integer,
    ForeignKey,
    Text,
    Boolean,
    DateTime,
    Enum,
    CheckConstraint,
)
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base

DEFAULT_MAX_MEMBERS = 20


class GroupStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    ARCHIVED = "ARCHIVED"


class MeetingType(enum.Enum):
    ONLINE = "ONLINE"
    OFFLINE = "OFFLINE"


class ReadingGroup(BaseModel, Base):
    __tablename__ = "reading_groups"

    name = Column(String(100), nullable=False, index=True)
    description = Column(Text, nullable=True)
    creator_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    max_members = Column(Integer, nullable=False, default=DEFAULT_MAX_MEMBERS)
    is_public = Column(Boolean, nullable=False, default=True)
    invite_code = Column(String(8), nullable=False, unique=True, index=True)
    status = Column(Enum(GroupStatus, name="group_status"), nullable=False, default=GroupStatus.ACTIVE)

    # Book the group is currently reading
    book_title = Column(String(200), nullable=True)
    book_author = Column(String(100), nullable=True)
    book_publisher = Column(String(100), nullable=True)
    book_cover_image = Column(String(500), nullable=True)

    # Regular meeting schedule
    meeting_date_time = Column(DateTime, nullable=True)
    duration_hours = Column(Integer, nullable=True)
    has_assignment = Column(Boolean, nullable=False, default=False)
    meeting_type = Column(Enum(MeetingType, name="meeting_type"), nullable=True)
    location = Column(String(200), nullable=True)
    meeting_url = Column(String(500), nullable=True)

    creator = relationship("User")
    members = relationship("GroupMember", back_populates="group", passive_deletes="all")
    meetings = relationship("GroupMeeting", back_populates="group", passive_deletes="all")
    monthly_books = relationship("MonthlyBook", back_populates="group", passive_deletes="all")

    __table_args__ = (
        CheckConstraint("max_members >= 2", name="ck_reading_groups_max_members"),
    )

    def is_active(self) -> bool:
        return self.status == GroupStatus.ACTIVE
