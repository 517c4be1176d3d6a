from models.base_model import Base, BaseModel
from sqlalchemy import Column, String
from sqlalchemy.orm import relationship


class User(BaseModel, Base):
    __tablename__ = "users"

    # Stable id issued by the identity provider; never changes after creation
    external_id = Column(String(64), nullable=False, unique=True, index=True)
    nickname = Column(String(50), nullable=False, unique=True, index=True)
    profile_image = Column(String(500), nullable=True)

    refresh_tokens = relationship("RefreshToken", back_populates="user", passive_deletes="all")
    books = relationship("Book", back_populates="user", passive_deletes="all")
    posts = relationship("Post", back_populates="user", passive_deletes="all")
