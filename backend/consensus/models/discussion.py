"""Discussion 도메인의 SQLAlchemy 모델 정의입니다."""

from sqlalchemy import Column, Integer, String, Text, DateTime, Boolean, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from consensus.database import Base
from consensus.utils.helpers import utcnow


class Discussion(Base):
    __tablename__ = "discussion"

    discussion_id = Column(Integer, primary_key=True, autoincrement=True)
    group_id = Column(Integer, ForeignKey("groups.group_id"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    title = Column(String(200), nullable=False)
    description = Column(Text)
    private = Column(Boolean, nullable=True)  # None = 그룹 설정에 위임
    archived_at = Column(DateTime)
    is_deleted = Column(Boolean, nullable=False, default=False)
    total_views = Column(Integer, nullable=False, default=0)
    motions_count = Column(Integer, nullable=False, default=0)
    last_comment_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, onupdate=func.now())

    group = relationship("Group", back_populates="discussions")
    author = relationship("User", back_populates="discussions")
    comments = relationship("Comment", back_populates="discussion", order_by="Comment.created_at")
    motions = relationship("Motion", back_populates="discussion", order_by="Motion.motion_id")
    readers = relationship("DiscussionReader", back_populates="discussion")

    __table_args__ = (
        Index("idx_discussion_group", "group_id", "created_at"),
        Index("idx_discussion_author", "author_id"),
    )

    @property
    def is_archived(self):
        return self.archived_at is not None

    def inherit_group_privacy(self):
        """Default ``private`` from the group's discussion privacy option.

        An explicit value is passed on unmodified and is checked by
        ``privacy_errors`` instead. ``public_or_private`` groups leave an
        unset value as ``None``. Without a group nothing can be inferred.
        """
        if self.group is None or self.private is not None:
            return self.private
        if self.group.is_private_only:
            self.private = True
        elif self.group.is_public_only:
            self.private = False
        return self.private

    def privacy_errors(self):
        if self.group is None:
            return []
        if self.group.is_private_only and not self.private:
            return ["그룹 설정상 비공개 토론만 만들 수 있습니다."]
        if self.group.is_public_only and self.private is True:
            return ["그룹 설정상 공개 토론만 만들 수 있습니다."]
        return []

    @property
    def errors(self):
        errors = {}
        privacy = self.privacy_errors()
        if privacy:
            errors["private"] = privacy
        return errors

    def is_valid(self):
        return not self.errors


class Comment(Base):
    __tablename__ = "comment"

    comment_id = Column(Integer, primary_key=True, autoincrement=True)
    discussion_id = Column(Integer, ForeignKey("discussion.discussion_id"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    body = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utcnow, server_default=func.now())

    discussion = relationship("Discussion", back_populates="comments")
    author = relationship("User", back_populates="comments")

    __table_args__ = (
        Index("idx_comment_discussion", "discussion_id", "created_at"),
    )

    @property
    def author_name(self):
        return self.author.name if self.author else None


class DiscussionReader(Base):
    __tablename__ = "discussion_reader"

    reader_id = Column(Integer, primary_key=True, autoincrement=True)
    discussion_id = Column(Integer, ForeignKey("discussion.discussion_id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    following = Column(Boolean, nullable=True)  # None = 멤버십 기본값을 따름
    read_comments_count = Column(Integer, nullable=False, default=0)
    last_read_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    discussion = relationship("Discussion", back_populates="readers")
    user = relationship("User", back_populates="discussion_readers")

    __table_args__ = (
        UniqueConstraint("discussion_id", "user_id", name="uq_discussion_reader_discussion_user"),
        Index("idx_discussion_reader_user", "user_id"),
    )
