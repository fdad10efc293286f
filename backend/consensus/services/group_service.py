"""Group Service 도메인 서비스 레이어입니다. 그룹과 멤버십(기본 팔로우 설정 포함)을 관리합니다."""

import logging

from sqlalchemy.orm import Session
from fastapi import HTTPException
from consensus.models.group import Group, Membership, DISCUSSION_PRIVACY_OPTIONS, PUBLIC_OR_PRIVATE
from consensus.models.user import User
from consensus.schemas.group import GroupCreate, GroupUpdate
from typing import List, Optional

logger = logging.getLogger(__name__)


def _normalize_privacy_option(value: str | None) -> str:
    text = (value or PUBLIC_OR_PRIVATE).strip().lower()
    if text not in DISCUSSION_PRIVACY_OPTIONS:
        return PUBLIC_OR_PRIVATE
    return text


def get_group(db: Session, group_id: int) -> Group:
    group = db.query(Group).filter(Group.group_id == group_id).first()
    if not group:
        raise HTTPException(status_code=404, detail="그룹을 찾을 수 없습니다.")
    return group


def get_user(db: Session, user_id: int) -> User:
    user = db.query(User).filter(User.user_id == user_id).first()
    if not user:
        raise HTTPException(status_code=404, detail="사용자를 찾을 수 없습니다.")
    return user


def create_group(db: Session, data: GroupCreate, creator: User) -> Group:
    payload = data.model_dump()
    payload["discussion_privacy_options"] = _normalize_privacy_option(payload.get("discussion_privacy_options"))
    group = Group(**payload)
    db.add(group)
    db.flush()
    db.add(Membership(group_id=group.group_id, user_id=creator.user_id))
    db.commit()
    db.refresh(group)
    logger.info("[group] created group_id=%s by user_id=%s", group.group_id, creator.user_id)
    return group


def update_group(db: Session, group_id: int, data: GroupUpdate, current_user: User) -> Group:
    group = get_group(db, group_id)
    ensure_member(db, group, current_user)
    payload = data.model_dump(exclude_none=True)
    if "discussion_privacy_options" in payload:
        payload["discussion_privacy_options"] = _normalize_privacy_option(payload["discussion_privacy_options"])
    for k, v in payload.items():
        setattr(group, k, v)
    db.commit()
    db.refresh(group)
    return group


def membership_for(db: Session, group: Group, user: User) -> Optional[Membership]:
    return (
        db.query(Membership)
        .filter(Membership.group_id == group.group_id, Membership.user_id == user.user_id)
        .first()
    )


def is_member(db: Session, group: Group, user: User) -> bool:
    return membership_for(db, group, user) is not None


def ensure_member(db: Session, group: Group, user: User):
    if not is_member(db, group, user):
        raise HTTPException(status_code=403, detail="그룹 멤버만 이용할 수 있습니다.")


def member_ids(db: Session, group_id: int) -> set[int]:
    return {
        int(row[0])
        for row in db.query(Membership.user_id).filter(Membership.group_id == group_id).all()
    }


def list_members(db: Session, group_id: int) -> List[Membership]:
    return (
        db.query(Membership)
        .filter(Membership.group_id == group_id)
        .order_by(Membership.membership_id.asc())
        .all()
    )


def add_member(db: Session, group: Group, user: User) -> Membership:
    existing = membership_for(db, group, user)
    if existing:
        return existing
    membership = Membership(group_id=group.group_id, user_id=user.user_id)
    db.add(membership)
    db.commit()
    db.refresh(membership)
    return membership


def remove_member(db: Session, group: Group, user: User):
    membership = membership_for(db, group, user)
    if not membership:
        raise HTTPException(status_code=404, detail="멤버십을 찾을 수 없습니다.")
    db.delete(membership)
    db.commit()
    logger.info("[group] user_id=%s left group_id=%s", user.user_id, group.group_id)


def follow_by_default(db: Session, membership: Membership) -> Membership:
    membership.following_by_default = True
    db.commit()
    db.refresh(membership)
    return membership


def dont_follow_by_default(db: Session, membership: Membership) -> Membership:
    membership.following_by_default = False
    db.commit()
    db.refresh(membership)
    return membership
