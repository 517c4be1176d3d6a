from sqlalchemy import Column, String, ForeignKey, Text, Boolean
from sqlalchemy.orm import relationship

from models.base_model import BaseModel, Base, utcnow

DELETED_COMMENT_TEXT = "This comment has been deleted."


class Comment(BaseModel, Base):
    """
    A comment on a post. Replies point at a root comment through parent_id
    (one level deep). Deleting is soft: the row stays so reply threads keep
    their anchor, only the content is replaced.
    """
    __tablename__ = "comments"

    post_id = Column(String(36), ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    parent_id = Column(String(36), ForeignKey("comments.id", ondelete="CASCADE"), nullable=True, index=True)
    content = Column(Text, nullable=False)
    is_deleted = Column(Boolean, nullable=False, default=False)

    post = relationship("Post", back_populates="comments")
    user = relationship("User")
    parent = relationship("Comment", remote_side="Comment.id", back_populates="replies")
    replies = relationship(
        "Comment",
        back_populates="parent",
        passive_deletes="all",
        order_by="Comment.created_at",
    )

    def is_reply(self) -> bool:
        return self.parent_id is not None

    def can_delete(self, user_id: str) -> bool:
        return self.user_id == user_id and not self.is_deleted

    def soft_delete(self):
        self.is_deleted = True
        self.content = DELETED_COMMENT_TEXT
        self.updated_at = utcnow()
