"""Motions 기능 API 라우터입니다. 요청을 검증하고 서비스 레이어로 비즈니스 로직을 위임합니다."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from typing import List
from consensus.database import get_db
from consensus.schemas.motion import MotionCreate, MotionOut, VoteCreate, VoteOut
from consensus.services import motion_service
from consensus.middleware.auth_middleware import get_current_user
from consensus.models.user import User

router = APIRouter(prefix="/api/motions", tags=["motions"])


@router.post("", response_model=MotionOut)
def create_motion(data: MotionCreate, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return motion_service.create_motion(db, data, current_user)


@router.get("/{motion_id}", response_model=MotionOut)
def get_motion(motion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return motion_service.get_motion(db, motion_id)


@router.post("/{motion_id}/close", response_model=MotionOut)
def close_motion(motion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    motion = motion_service.get_motion(db, motion_id)
    return motion_service.close_motion(db, motion, current_user)


@router.delete("/{motion_id}")
def delete_motion(motion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    motion_service.delete_motion(db, motion_id, current_user)
    return {"message": "삭제되었습니다."}


@router.get("/{motion_id}/votes", response_model=List[VoteOut])
def list_votes(motion_id: int, db: Session = Depends(get_db), current_user: User = Depends(get_current_user)):
    return motion_service.get_votes(db, motion_id)


@router.post("/{motion_id}/votes", response_model=VoteOut)
def cast_vote(
    motion_id: int,
    data: VoteCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return motion_service.cast_vote(db, motion_id, data, current_user)
