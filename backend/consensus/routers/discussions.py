"""Discussions 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session
from typing import List, Optional
from consensus.database import get_db
from consensus.schemas.discussion import (
    DiscussionCreate,
    DiscussionUpdate,
    DiscussionOut,
    CommentCreate,
    CommentOut,
    DiscussionReaderOut,
    LastVersionedOut,
)
from consensus.schemas.motion import MotionOut
from consensus.schemas.user import UserOut
from consensus.schemas.version import ContentVersionOut
from consensus.services import discussion_service, reader_service
from consensus.middleware.auth_middleware import get_current_user
from consensus.models.user import User

router = APIRouter(prefix="/api/discussions", tags=["discussions"])


@router.post("", response_model=DiscussionOut)
def create_discussion(
    data: DiscussionCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return discussion_service.create_discussion(db, data, current_user)


@router.get("/search", response_model=List[DiscussionOut])
def search_my_discussions(
    q: str = Query(..., min_length=1, max_length=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return discussion_service.search_user_discussions(db, current_user, q)


@router.get("/{discussion_id}", response_model=DiscussionOut)
def get_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return discussion_service.viewed(db, discussion, current_user)


@router.put("/{discussion_id}", response_model=DiscussionOut)
def update_discussion(
    discussion_id: int,
    data: DiscussionUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return discussion_service.update_discussion(db, discussion_id, data, current_user)


@router.post("/{discussion_id}/archive", response_model=DiscussionOut)
def archive_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return discussion_service.archive_discussion(db, discussion_id, current_user)


@router.delete("/{discussion_id}")
def delete_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion_service.delete_discussion(db, discussion_id, current_user)
    return {"message": "삭제되었습니다."}


@router.get("/{discussion_id}/followers", response_model=List[UserOut])
def list_followers(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return discussion_service.followers(db, discussion)


@router.get("/{discussion_id}/participants", response_model=List[UserOut])
def list_participants(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return discussion_service.participants(db, discussion)


@router.get("/{discussion_id}/current-motion", response_model=Optional[MotionOut])
def get_current_motion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return discussion_service.current_motion(db, discussion)


@router.get("/{discussion_id}/versions", response_model=List[ContentVersionOut])
def list_versions(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return discussion_service.list_versions(db, discussion)


@router.get("/{discussion_id}/last-versioned-at", response_model=LastVersionedOut)
def get_last_versioned_at(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return LastVersionedOut(
        discussion_id=discussion.discussion_id,
        last_versioned_at=discussion_service.last_versioned_at(db, discussion),
    )


@router.post("/{discussion_id}/follow", response_model=DiscussionReaderOut)
def follow_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return reader_service.follow(db, reader_service.reader_for(db, discussion, current_user))


@router.post("/{discussion_id}/unfollow", response_model=DiscussionReaderOut)
def unfollow_discussion(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return reader_service.unfollow(db, reader_service.reader_for(db, discussion, current_user))


@router.get("/{discussion_id}/comments", response_model=List[CommentOut])
def list_comments(discussion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion = discussion_service.get_visible_discussion(db, discussion_id, current_user)
    return discussion_service.get_comments(db, discussion)


@router.post("/{discussion_id}/comments", response_model=CommentOut)
def create_comment(
    discussion_id: int,
    data: CommentCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    discussion = discussion_service.get_discussion(db, discussion_id)
    return discussion_service.add_comment(db, discussion, current_user, data.body)


@router.delete("/comments/{comment_id}")
def delete_comment(comment_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    discussion_service.delete_comment(db, comment_id, current_user)
    return {"message": "삭제되었습니다."}
