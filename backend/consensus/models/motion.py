"""Motion/Vote 도메인의 SQLAlchemy 모델 정의입니다."""

from datetime import datetime
from typing import Optional

from sqlalchemy import Column, Integer, String, Text, DateTime, ForeignKey, Index, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from consensus.database import Base
from consensus.utils.helpers import to_naive_utc, utcnow


VOTE_POSITIONS = ("yes", "abstain", "no", "block")


class Motion(Base):
    __tablename__ = "motion"

    motion_id = Column(Integer, primary_key=True, autoincrement=True)
    discussion_id = Column(Integer, ForeignKey("discussion.discussion_id"), nullable=False)
    author_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    name = Column(String(200), nullable=False)
    description = Column(Text)
    closed_at = Column(DateTime)
    created_at = Column(DateTime, server_default=func.now())

    discussion = relationship("Discussion", back_populates="motions")
    author = relationship("User", back_populates="motions")
    votes = relationship("Vote", back_populates="motion")

    __table_args__ = (
        Index("idx_motion_discussion", "discussion_id", "closed_at"),
    )

    def is_open(self, now: Optional[datetime] = None) -> bool:
        # closed_at == now 이면 마감된 것으로 본다.
        now = to_naive_utc(now) or utcnow()
        return self.closed_at is None or self.closed_at > now


class Vote(Base):
    __tablename__ = "vote"

    vote_id = Column(Integer, primary_key=True, autoincrement=True)
    motion_id = Column(Integer, ForeignKey("motion.motion_id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.user_id"), nullable=False)
    position = Column(String(20), nullable=False)  # yes/abstain/no/block
    statement = Column(String(250))
    created_at = Column(DateTime, server_default=func.now())

    motion = relationship("Motion", back_populates="votes")
    user = relationship("User", back_populates="votes")

    __table_args__ = (
        UniqueConstraint("motion_id", "user_id", name="uq_vote_motion_user"),
    )
