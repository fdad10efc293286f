"""Discussion/Comment/Reader 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class DiscussionBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = None
    private: Optional[bool] = None


class DiscussionCreate(DiscussionBase):
    group_id: int


class DiscussionUpdate(BaseModel):
    title: Optional[str] = Field(None, min_length=1, max_length=200)
    description: Optional[str] = None
    private: Optional[bool] = None
    author_id: Optional[int] = None


class DiscussionOut(DiscussionBase):
    discussion_id: int
    group_id: int
    author_id: int
    archived_at: Optional[datetime] = None
    total_views: int
    motions_count: int
    last_comment_at: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class CommentCreate(BaseModel):
    body: str = Field(..., min_length=1)


class CommentOut(BaseModel):
    comment_id: int
    discussion_id: int
    author_id: int
    body: str
    author_name: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class DiscussionReaderOut(BaseModel):
    reader_id: int
    discussion_id: int
    user_id: int
    following: Optional[bool] = None
    read_comments_count: int
    last_read_at: Optional[datetime] = None

    model_config = {"from_attributes": True}


class LastVersionedOut(BaseModel):
    discussion_id: int
    last_versioned_at: datetime
