"""Motion Service 도메인 서비스 레이어입니다. 제안 생성/마감/삭제와 투표를 다룹니다."""

import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException
from consensus.models.discussion import Discussion
from consensus.models.motion import Motion, Vote, VOTE_POSITIONS
from consensus.models.user import User
from consensus.schemas.motion import MotionCreate, VoteCreate
from consensus.services import discussion_service, group_service, notification_service
from consensus.utils.helpers import to_naive_utc, utcnow
from typing import List

logger = logging.getLogger(__name__)


def get_motion(db: Session, motion_id: int) -> Motion:
    motion = db.query(Motion).filter(Motion.motion_id == motion_id).first()
    if not motion:
        raise HTTPException(status_code=404, detail="제안을 찾을 수 없습니다.")
    return motion


def _adjust_motions_count(db: Session, discussion_id: int, delta: int):
    db.query(Discussion).filter(Discussion.discussion_id == discussion_id).update(
        {"motions_count": Discussion.motions_count + delta},
        synchronize_session=False,
    )


def create_motion(db: Session, data: MotionCreate, current_user: User) -> Motion:
    discussion = discussion_service.get_discussion(db, data.discussion_id)
    group_service.ensure_member(db, discussion.group, current_user)
    if discussion.is_archived:
        raise HTTPException(status_code=400, detail="보관된 토론에는 제안을 올릴 수 없습니다.")
    payload = data.model_dump()
    payload["closed_at"] = to_naive_utc(payload.get("closed_at"))
    motion = Motion(author_id=current_user.user_id, **payload)
    db.add(motion)
    db.flush()
    _adjust_motions_count(db, discussion.discussion_id, 1)
    db.commit()
    db.refresh(motion)
    notification_service.notify_users(
        db,
        discussion_service.followers(db, discussion),
        actor=current_user,
        noti_type="motion_created",
        title="새 제안",
        message=f"{current_user.name}님이 '{motion.name}' 제안을 올렸습니다.",
        link_url=f"#/discussions/{discussion.discussion_id}",
    )
    return motion


def close_motion(db: Session, motion: Motion, current_user: User | None = None) -> Motion:
    if not motion.is_open():
        return motion
    motion.closed_at = utcnow()
    db.commit()
    db.refresh(motion)
    logger.info("[motion] closed motion_id=%s", motion.motion_id)
    notification_service.notify_users(
        db,
        discussion_service.followers(db, motion.discussion),
        actor=current_user,
        noti_type="motion_closed",
        title="제안 마감",
        message=f"'{motion.name}' 제안이 마감되었습니다.",
        link_url=f"#/discussions/{motion.discussion_id}",
    )
    return motion


def destroy_motion(db: Session, motion: Motion):
    discussion_id = motion.discussion_id
    db.query(Vote).filter(Vote.motion_id == motion.motion_id).delete(synchronize_session=False)
    db.expire(motion)
    db.delete(motion)
    _adjust_motions_count(db, discussion_id, -1)
    db.commit()


def delete_motion(db: Session, motion_id: int, current_user: User):
    motion = get_motion(db, motion_id)
    if motion.author_id != current_user.user_id:
        raise HTTPException(status_code=403, detail="제안 작성자만 삭제할 수 있습니다.")
    destroy_motion(db, motion)


def cast_vote(db: Session, motion_id: int, data: VoteCreate, current_user: User) -> Vote:
    motion = get_motion(db, motion_id)
    group_service.ensure_member(db, motion.discussion.group, current_user)
    if not motion.is_open():
        raise HTTPException(status_code=400, detail="마감된 제안에는 투표할 수 없습니다.")
    if data.position not in VOTE_POSITIONS:
        raise HTTPException(status_code=400, detail="지원하지 않는 투표 항목입니다.")
    vote = (
        db.query(Vote)
        .filter(Vote.motion_id == motion.motion_id, Vote.user_id == current_user.user_id)
        .first()
    )
    if vote:
        vote.position = data.position
        vote.statement = data.statement
    else:
        vote = Vote(
            motion_id=motion.motion_id,
            user_id=current_user.user_id,
            position=data.position,
            statement=data.statement,
        )
        db.add(vote)
    db.commit()
    db.refresh(vote)
    return vote


def get_votes(db: Session, motion_id: int) -> List[Vote]:
    get_motion(db, motion_id)
    return db.query(Vote).filter(Vote.motion_id == motion_id).order_by(Vote.vote_id.asc()).all()
