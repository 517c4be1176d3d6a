import enum

from sqlalchemy import Column, String, ForeignKey, Date, Text, JSON, Enum, Index
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base


class PostType(enum.Enum):
    REVIEW = "REVIEW"
    RECOMMENDATION = "RECOMMENDATION"
    QUOTE = "QUOTE"


class Visibility(enum.Enum):
    PUBLIC = "PUBLIC"
    PRIVATE = "PRIVATE"


class RecommendationType(enum.Enum):
    RECOMMEND = "RECOMMEND"
    NOT_RECOMMEND = "NOT_RECOMMEND"


class Post(BaseModel, Base):
    __tablename__ = "posts"

    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    post_type = Column(Enum(PostType, name="post_type"), nullable=False)
    visibility = Column(Enum(Visibility, name="post_visibility"), nullable=False, default=Visibility.PUBLIC)

    # Book the post is about (copied in, not a FK: it may come from an external search)
    book_isbn = Column(String(13), nullable=True, index=True)
    book_title = Column(String(200), nullable=False)
    book_author = Column(String(100), nullable=True)
    book_publisher = Column(String(100), nullable=True)
    book_cover = Column(String(500), nullable=True)
    book_pub_date = Column(Date, nullable=True)
    book_description = Column(Text, nullable=True)

    title = Column(String(200), nullable=True)
    content = Column(Text, nullable=True)

    # RECOMMENDATION only
    recommendation_type = Column(Enum(RecommendationType, name="recommendation_type"), nullable=True)
    reason = Column(Text, nullable=True)

    # QUOTE only: [{"page": int, "text": str}, ...] kept sorted by page
    quotes = Column(JSON, nullable=True)

    user = relationship("User", back_populates="posts")
    comments = relationship("Comment", back_populates="post", passive_deletes="all")

    __table_args__ = (
        Index("ix_posts_visibility_created", "visibility", "created_at"),
    )

    def is_public(self) -> bool:
        return self.visibility == Visibility.PUBLIC
