"""Motion/Vote 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional, Literal
from datetime import datetime


class MotionCreate(BaseModel):
    discussion_id: int
    name: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    closed_at: Optional[datetime] = None


class MotionOut(BaseModel):
    motion_id: int
    discussion_id: int
    author_id: int
    name: str
    description: Optional[str] = None
    closed_at: Optional[datetime] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class VoteCreate(BaseModel):
    position: Literal["yes", "abstain", "no", "block"]
    statement: Optional[str] = Field(None, max_length=250)


class VoteOut(BaseModel):
    vote_id: int
    motion_id: int
    user_id: int
    position: str
    statement: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}
