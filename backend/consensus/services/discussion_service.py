"""Discussion Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from datetime import datetime

from sqlalchemy import and_, func, or_
from sqlalchemy.orm import Session
from fastapi import HTTPException
from consensus.config import settings
from consensus.models.discussion import Discussion, Comment, DiscussionReader
from consensus.models.group import Membership
from consensus.models.motion import Motion, Vote
from consensus.models.user import User
from consensus.schemas.discussion import DiscussionCreate, DiscussionUpdate
from consensus.services import group_service, notification_service, reader_service, version_service
from consensus.utils.helpers import like_pattern, to_naive_utc, utcnow
from typing import List, Optional

logger = logging.getLogger(__name__)

ENTITY_TYPE = "discussion"


def _versioned_fields() -> List[str]:
    return list(settings.VERSIONED_DISCUSSION_FIELDS)


def _link(discussion: Discussion) -> str:
    return f"#/discussions/{discussion.discussion_id}"


def _raise_if_invalid(db: Session, discussion: Discussion):
    errors = discussion.errors
    if errors:
        # 검증에 실패한 변경분은 세션에서 되돌린다.
        db.rollback()
        raise HTTPException(status_code=422, detail={"errors": errors})


def find_discussion(db: Session, discussion_id: int) -> Optional[Discussion]:
    return db.query(Discussion).filter(Discussion.discussion_id == discussion_id).first()


def get_discussion(db: Session, discussion_id: int, include_deleted: bool = False) -> Discussion:
    discussion = find_discussion(db, discussion_id)
    if not discussion or (discussion.is_deleted and not include_deleted):
        raise HTTPException(status_code=404, detail="토론을 찾을 수 없습니다.")
    return discussion


def can_view(db: Session, discussion: Discussion, user: User) -> bool:
    if discussion.private is not True:
        return True
    return group_service.is_member(db, discussion.group, user)


def get_visible_discussion(db: Session, discussion_id: int, current_user: User) -> Discussion:
    discussion = get_discussion(db, discussion_id)
    if not can_view(db, discussion, current_user):
        # 비공개 토론은 존재 자체를 숨긴다.
        raise HTTPException(status_code=404, detail="토론을 찾을 수 없습니다.")
    return discussion


def list_group_discussions(db: Session, group_id: int, current_user: User, include_archived: bool = False) -> List[Discussion]:
    group = group_service.get_group(db, group_id)
    query = db.query(Discussion).filter(
        Discussion.group_id == group.group_id,
        Discussion.is_deleted == False,  # noqa: E712
    )
    if not include_archived:
        query = query.filter(Discussion.archived_at.is_(None))
    if not group_service.is_member(db, group, current_user):
        query = query.filter(or_(Discussion.private.is_(None), Discussion.private == False))  # noqa: E712
    return query.order_by(Discussion.created_at.desc(), Discussion.discussion_id.desc()).all()


def create_discussion(db: Session, data: DiscussionCreate, current_user: User) -> Discussion:
    group = group_service.get_group(db, data.group_id)
    group_service.ensure_member(db, group, current_user)
    payload = data.model_dump()
    payload.pop("group_id", None)
    discussion = Discussion(author_id=current_user.user_id, **payload)
    discussion.group = group
    discussion.inherit_group_privacy()
    _raise_if_invalid(db, discussion)
    db.add(discussion)
    db.commit()
    db.refresh(discussion)
    version_service.create_content_version(
        db,
        entity_type=ENTITY_TYPE,
        entity_id=discussion.discussion_id,
        changed_by=current_user.user_id,
        change_type="create",
        snapshot=version_service.snapshot_of(discussion, _versioned_fields()),
    )
    logger.info("[discussion] created discussion_id=%s in group_id=%s", discussion.discussion_id, group.group_id)
    return discussion


def update_discussion(db: Session, discussion_id: int, data: DiscussionUpdate, current_user: User) -> Discussion:
    discussion = get_discussion(db, discussion_id)
    if discussion.author_id != current_user.user_id:
        raise HTTPException(status_code=403, detail="작성자만 토론을 수정할 수 있습니다.")
    payload = data.model_dump(exclude_unset=True)
    next_author_id = payload.pop("author_id", None)
    if next_author_id is not None and int(next_author_id) != int(discussion.author_id):
        next_author = group_service.get_user(db, int(next_author_id))
        group_service.ensure_member(db, discussion.group, next_author)
        discussion.author_id = next_author.user_id

    before = version_service.snapshot_of(discussion, _versioned_fields())
    for k, v in payload.items():
        if k == "title" and v is None:
            continue
        setattr(discussion, k, v)
    _raise_if_invalid(db, discussion)
    after = version_service.snapshot_of(discussion, _versioned_fields())
    db.commit()
    db.refresh(discussion)
    version_service.record_changes(
        db,
        entity_type=ENTITY_TYPE,
        entity_id=discussion.discussion_id,
        changed_by=current_user.user_id,
        before=before,
        after=after,
    )
    return discussion


def archive(db: Session, discussion: Discussion) -> Discussion:
    if discussion.archived_at is None:
        discussion.archived_at = utcnow()
        db.commit()
        db.refresh(discussion)
        logger.info("[discussion] archived discussion_id=%s", discussion.discussion_id)
    return discussion


def archive_discussion(db: Session, discussion_id: int, current_user: User) -> Discussion:
    discussion = get_discussion(db, discussion_id)
    group_service.ensure_member(db, discussion.group, current_user)
    return archive(db, discussion)


def viewed(db: Session, discussion: Discussion, user: Optional[User] = None) -> Discussion:
    db.query(Discussion).filter(Discussion.discussion_id == discussion.discussion_id).update(
        {"total_views": Discussion.total_views + 1},
        synchronize_session=False,
    )
    db.commit()
    db.refresh(discussion)
    if user is not None:
        reader_service.viewed(db, reader_service.reader_for(db, discussion, user))
    return discussion


def search_user_discussions(db: Session, user: User, query: str | None) -> List[Discussion]:
    keyword = (query or "").strip()
    if not keyword:
        return []
    return (
        db.query(Discussion)
        .filter(
            Discussion.author_id == user.user_id,
            Discussion.is_deleted == False,  # noqa: E712
            Discussion.title.ilike(like_pattern(keyword), escape="\\"),
        )
        .order_by(Discussion.created_at.desc(), Discussion.discussion_id.desc())
        .limit(settings.SEARCH_RESULT_LIMIT)
        .all()
    )


def followers(db: Session, discussion: Discussion) -> List[User]:
    """Group members following the discussion.

    An explicit reader choice wins; without one the membership's
    ``following_by_default`` applies. Non-members never follow.
    """
    return (
        db.query(User)
        .join(
            Membership,
            and_(Membership.user_id == User.user_id, Membership.group_id == discussion.group_id),
        )
        .outerjoin(
            DiscussionReader,
            and_(
                DiscussionReader.user_id == User.user_id,
                DiscussionReader.discussion_id == discussion.discussion_id,
            ),
        )
        .filter(
            or_(
                DiscussionReader.following == True,  # noqa: E712
                and_(
                    DiscussionReader.following.is_(None),
                    Membership.following_by_default == True,  # noqa: E712
                ),
            ),
        )
        .order_by(User.user_id.asc())
        .all()
    )


def participants(db: Session, discussion: Discussion) -> List[User]:
    """Author, commenters and motion authors who are still group members."""
    participant_ids = {int(discussion.author_id)}
    participant_ids |= {
        int(row[0])
        for row in db.query(Comment.author_id).filter(Comment.discussion_id == discussion.discussion_id).distinct()
    }
    participant_ids |= {
        int(row[0])
        for row in db.query(Motion.author_id).filter(Motion.discussion_id == discussion.discussion_id).distinct()
    }
    participant_ids &= group_service.member_ids(db, discussion.group_id)
    if not participant_ids:
        return []
    return db.query(User).filter(User.user_id.in_(participant_ids)).order_by(User.user_id.asc()).all()


def current_motion(db: Session, discussion: Discussion, now: Optional[datetime] = None) -> Optional[Motion]:
    now = to_naive_utc(now) or utcnow()
    return (
        db.query(Motion)
        .filter(
            Motion.discussion_id == discussion.discussion_id,
            or_(Motion.closed_at.is_(None), Motion.closed_at > now),
        )
        .order_by(Motion.created_at.desc(), Motion.motion_id.desc())
        .first()
    )


def refresh_last_comment_at(db: Session, discussion: Discussion) -> Discussion:
    discussion.last_comment_at = (
        db.query(func.max(Comment.created_at))
        .filter(Comment.discussion_id == discussion.discussion_id)
        .scalar()
    )
    db.commit()
    db.refresh(discussion)
    return discussion


def discussion_readers(db: Session, discussion: Discussion) -> List[DiscussionReader]:
    return reader_service.readers_of(db, discussion)


def get_comments(db: Session, discussion: Discussion) -> List[Comment]:
    return (
        db.query(Comment)
        .filter(Comment.discussion_id == discussion.discussion_id)
        .order_by(Comment.created_at.asc(), Comment.comment_id.asc())
        .all()
    )


def add_comment(db: Session, discussion: Discussion, user: User, body: str) -> Comment:
    group_service.ensure_member(db, discussion.group, user)
    comment = Comment(discussion_id=discussion.discussion_id, author_id=user.user_id, body=body)
    db.add(comment)
    db.commit()
    db.refresh(comment)
    discussion.last_comment_at = comment.created_at
    db.commit()
    reader_service.viewed(db, reader_service.reader_for(db, discussion, user))
    notification_service.notify_users(
        db,
        followers(db, discussion),
        actor=user,
        noti_type="discussion_comment",
        title="새 댓글",
        message=f"{user.name}님이 '{discussion.title}'에 댓글을 남겼습니다.",
        link_url=_link(discussion),
    )
    return comment


def comment_deleted(db: Session, discussion: Discussion):
    refresh_last_comment_at(db, discussion)
    for reader in discussion_readers(db, discussion):
        reader_service.reset_counts(db, reader)


def delete_comment(db: Session, comment_id: int, current_user: User):
    comment = db.query(Comment).filter(Comment.comment_id == comment_id).first()
    if not comment:
        raise HTTPException(status_code=404, detail="댓글을 찾을 수 없습니다.")
    if comment.author_id != current_user.user_id:
        raise HTTPException(status_code=403, detail="본인 댓글만 삭제할 수 있습니다.")
    discussion = comment.discussion
    db.delete(comment)
    db.commit()
    comment_deleted(db, discussion)


def has_previous_versions(db: Session, discussion: Discussion) -> bool:
    return previous_version(db, discussion) is not None


def previous_version(db: Session, discussion: Discussion):
    return version_service.latest_update_version(
        db, entity_type=ENTITY_TYPE, entity_id=discussion.discussion_id
    )


def last_versioned_at(db: Session, discussion: Discussion) -> datetime:
    if has_previous_versions(db, discussion):
        return previous_version(db, discussion).created_at
    return discussion.created_at


def list_versions(db: Session, discussion: Discussion) -> List[dict]:
    rows = version_service.list_versions(db, entity_type=ENTITY_TYPE, entity_id=discussion.discussion_id)
    return [version_service.to_response(row) for row in rows]


def delete_discussion(db: Session, discussion_id: int, current_user: User):
    discussion = get_discussion(db, discussion_id)
    if discussion.author_id != current_user.user_id:
        raise HTTPException(status_code=403, detail="작성자만 토론을 삭제할 수 있습니다.")
    delayed_destroy(db, discussion)


def mark_deleted(db: Session, discussion: Discussion) -> Discussion:
    discussion.is_deleted = True
    db.commit()
    db.refresh(discussion)
    return discussion


def destroy(db: Session, discussion: Discussion):
    discussion_id = discussion.discussion_id
    motion_ids = [
        int(row[0])
        for row in db.query(Motion.motion_id).filter(Motion.discussion_id == discussion_id).all()
    ]
    if motion_ids:
        db.query(Vote).filter(Vote.motion_id.in_(motion_ids)).delete(synchronize_session=False)
    db.query(Motion).filter(Motion.discussion_id == discussion_id).delete(synchronize_session=False)
    db.query(Comment).filter(Comment.discussion_id == discussion_id).delete(synchronize_session=False)
    db.query(DiscussionReader).filter(DiscussionReader.discussion_id == discussion_id).delete(
        synchronize_session=False
    )
    version_service.delete_versions(db, entity_type=ENTITY_TYPE, entity_id=discussion_id)
    # 하위 컬렉션을 비운 상태로 다시 읽게 한다.
    db.expire(discussion)
    db.delete(discussion)
    db.commit()


def delayed_destroy(db: Session, discussion: Discussion):
    discussion_id = discussion.discussion_id
    mark_deleted(db, discussion)
    destroy(db, discussion)
    logger.info("[discussion] destroyed discussion_id=%s", discussion_id)
