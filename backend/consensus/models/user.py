"""User 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Boolean, DateTime
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from consensus.database import Base


class User(Base):
    __tablename__ = "users"

    user_id = Column(Integer, primary_key=True, autoincrement=True)
    username = Column(String(50), unique=True, nullable=False)
    name = Column(String(50), nullable=False)
    email = Column(String(100))
    is_active = Column(Boolean, default=True)
    created_at = Column(DateTime, server_default=func.now())

    # Relationships
    memberships = relationship("Membership", back_populates="user")
    discussions = relationship("Discussion", back_populates="author")
    comments = relationship("Comment", back_populates="author")
    motions = relationship("Motion", back_populates="author")
    votes = relationship("Vote", back_populates="user")
    discussion_readers = relationship("DiscussionReader", back_populates="user")
    notifications = relationship("Notification", back_populates="user")
    notification_preference = relationship("NotificationPreference", back_populates="user", uselist=False)
