"""Group/Membership 요청/응답 계약을 위한 Pydantic 스키마입니다."""

from pydantic import BaseModel
from typing import Optional, Literal
from datetime import datetime


PrivacyOption = Literal["private_only", "public_or_private", "public_only"]


class GroupBase(BaseModel):
    name: str
    description: Optional[str] = None
    discussion_privacy_options: PrivacyOption = "public_or_private"


class GroupCreate(GroupBase):
    pass


class GroupUpdate(BaseModel):
    name: Optional[str] = None
    description: Optional[str] = None
    discussion_privacy_options: Optional[PrivacyOption] = None


class GroupOut(GroupBase):
    group_id: int
    created_at: datetime

    model_config = {"from_attributes": True}


class MembershipCreate(BaseModel):
    user_id: int


class MembershipOut(BaseModel):
    membership_id: int
    group_id: int
    user_id: int
    following_by_default: bool
    user_name: Optional[str] = None
    username: Optional[str] = None
    created_at: datetime

    model_config = {"from_attributes": True}


class FollowByDefaultUpdate(BaseModel):
    following_by_default: bool
