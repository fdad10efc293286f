"""Group/Membership 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from consensus.database import Base


PRIVATE_ONLY = "private_only"
PUBLIC_OR_PRIVATE = "public_or_private"
PUBLIC_ONLY = "public_only"

DISCUSSION_PRIVACY_OPTIONS = (PRIVATE_ONLY, PUBLIC_OR_PRIVATE, PUBLIC_ONLY)


class Group(Base):
    __tablename__ = "groups"

    group_id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    discussion_privacy_options = Column(String(30), nullable=False, default=PUBLIC_OR_PRIVATE)
    created_at = Column(DateTime, server_default=func.now())

    memberships = relationship("Membership", back_populates="group", cascade="all, delete-orphan")
    discussions = relationship("Discussion", back_populates="group")

    @property
    def is_private_only(self):
        return self.discussion_privacy_options == PRIVATE_ONLY

    @property
    def is_public_only(self):
        return self.discussion_privacy_options == PUBLIC_ONLY


class Membership(Base):
    __tablename__ = "membership"

    membership_id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey("groups.group_id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    following_by_default = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, server_default=func.now())

    group = relationship("Group", back_populates="memberships")
    user = relationship("User", back_populates="memberships")

    __table_args__ = (
        UniqueConstraint("group_id", "user_id", name="uq_membership_group_user"),
        Index("idx_membership_user", "user_id"),
    )

    @property
    def user_name(self):
        return self.user.name if self.user else None

    @property
    def username(self):
        return self.user.username if self.user else None
