"""DiscussionReader 서비스입니다. 사용자별 읽음/팔로우 상태를 관리합니다."""

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from consensus.models.discussion import Discussion, Comment, DiscussionReader
from consensus.models.user import User
from consensus.utils.helpers import utcnow
from typing import List


def reader_for(db: Session, discussion: Discussion, user: User) -> DiscussionReader:
    reader = (
        db.query(DiscussionReader)
        .filter(
            DiscussionReader.discussion_id == discussion.discussion_id,
            DiscussionReader.user_id == user.user_id,
        )
        .first()
    )
    if reader:
        return reader
    reader = DiscussionReader(discussion_id=discussion.discussion_id, user_id=user.user_id)
    db.add(reader)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        return (
            db.query(DiscussionReader)
            .filter(
                DiscussionReader.discussion_id == discussion.discussion_id,
                DiscussionReader.user_id == user.user_id,
            )
            .one()
        )
    db.refresh(reader)
    return reader


def readers_of(db: Session, discussion: Discussion) -> List[DiscussionReader]:
    return (
        db.query(DiscussionReader)
        .filter(DiscussionReader.discussion_id == discussion.discussion_id)
        .order_by(DiscussionReader.reader_id.asc())
        .all()
    )


def follow(db: Session, reader: DiscussionReader) -> DiscussionReader:
    reader.following = True
    db.commit()
    db.refresh(reader)
    return reader


def unfollow(db: Session, reader: DiscussionReader) -> DiscussionReader:
    reader.following = False
    db.commit()
    db.refresh(reader)
    return reader


def _comments_query(db: Session, discussion_id: int):
    return db.query(func.count(Comment.comment_id)).filter(Comment.discussion_id == discussion_id)


def viewed(db: Session, reader: DiscussionReader) -> DiscussionReader:
    reader.last_read_at = utcnow()
    reader.read_comments_count = _comments_query(db, reader.discussion_id).scalar() or 0
    db.commit()
    db.refresh(reader)
    return reader


def reset_counts(db: Session, reader: DiscussionReader) -> DiscussionReader:
    """Recount the comments this reader has seen up to ``last_read_at``."""
    if reader.last_read_at is None:
        reader.read_comments_count = 0
    else:
        reader.read_comments_count = (
            _comments_query(db, reader.discussion_id)
            .filter(Comment.created_at <= reader.last_read_at)
            .scalar()
            or 0
        )
    db.commit()
    db.refresh(reader)
    return reader


def unread_comments_count(db: Session, reader: DiscussionReader) -> int:
    total = _comments_query(db, reader.discussion_id).scalar() or 0
    return max(0, total - int(reader.read_comments_count or 0))
