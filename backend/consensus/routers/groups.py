"""Groups 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from consensus.database import get_db
from consensus.schemas.group import (
    GroupCreate,
    GroupUpdate,
    GroupOut,
    MembershipCreate,
    MembershipOut,
    FollowByDefaultUpdate,
)
from consensus.schemas.discussion import DiscussionOut
from consensus.services import discussion_service, group_service
from consensus.middleware.auth_middleware import get_current_user
from consensus.models.user import User

router = APIRouter(prefix="/api/groups", tags=["groups"])


@router.post("", response_model=GroupOut)
def create_group(data: GroupCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.create_group(db, data, current_user)


@router.get("/{group_id}", response_model=GroupOut)
def get_group(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return group_service.get_group(db, group_id)


@router.put("/{group_id}", response_model=GroupOut)
def update_group(
    group_id: int,
    data: GroupUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return group_service.update_group(db, group_id, data, current_user)


@router.get("/{group_id}/discussions", response_model=List[DiscussionOut])
def list_discussions(
    group_id: int,
    include_archived: bool = False,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return discussion_service.list_group_discussions(db, group_id, current_user, include_archived=include_archived)


@router.get("/{group_id}/members", response_model=List[MembershipOut])
def list_members(group_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    group_service.get_group(db, group_id)
    return group_service.list_members(db, group_id)


@router.post("/{group_id}/members", response_model=MembershipOut)
def add_member(
    group_id: int,
    data: MembershipCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = group_service.get_group(db, group_id)
    group_service.ensure_member(db, group, current_user)
    user = group_service.get_user(db, data.user_id)
    return group_service.add_member(db, group, user)


@router.delete("/{group_id}/members/{user_id}")
def remove_member(
    group_id: int,
    user_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = group_service.get_group(db, group_id)
    group_service.ensure_member(db, group, current_user)
    user = group_service.get_user(db, user_id)
    group_service.remove_member(db, group, user)
    return {"message": "멤버가 그룹에서 제외되었습니다."}


@router.put("/{group_id}/membership/follow-by-default", response_model=MembershipOut)
def set_follow_by_default(
    group_id: int,
    data: FollowByDefaultUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    group = group_service.get_group(db, group_id)
    group_service.ensure_member(db, group, current_user)
    membership = group_service.membership_for(db, group, current_user)
    if data.following_by_default:
        return group_service.follow_by_default(db, membership)
    return group_service.dont_follow_by_default(db, membership)
