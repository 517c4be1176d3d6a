import enum

from sqlalchemy import Column, String, ForeignKey, Text, DateTime, Enum, UniqueConstraint
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, utcnow


class MemberRole(enum.Enum):
    CREATOR = "CREATOR"
    ADMIN = "ADMIN"
    MEMBER = "MEMBER"


class MemberStatus(enum.Enum):
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    BANNED = "BANNED"


class GroupMember(BaseModel, Base):
    __tablename__ = "group_members"

    group_id = Column(String(36), ForeignKey("reading_groups.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    role = Column(Enum(MemberRole, name="member_role"), nullable=False, default=MemberRole.MEMBER)
    status = Column(Enum(MemberStatus, name="member_status"), nullable=False, default=MemberStatus.ACTIVE)
    introduction = Column(Text, nullable=True)
    joined_at = Column(DateTime, nullable=False, default=utcnow)

    group = relationship("ReadingGroup", back_populates="members")
    user = relationship("User")

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_group_members_group_user"),
    )

    def is_active(self) -> bool:
        return self.status == MemberStatus.ACTIVE

    def is_admin(self) -> bool:
        return self.role in (MemberRole.CREATOR, MemberRole.ADMIN)
