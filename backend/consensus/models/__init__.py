"""SQLAlchemy 모델 패키지 초기화 모듈입니다."""

from consensus.models.user import User
from consensus.models.group import Group, Membership
from consensus.models.discussion import Discussion, Comment, DiscussionReader
from consensus.models.motion import Motion, Vote
from consensus.models.notification import Notification, NotificationPreference
from consensus.models.content_version import ContentVersion

__all__ = [
    "User",
    "Group", "Membership",
    "Discussion", "Comment", "DiscussionReader",
    "Motion", "Vote",
    "Notification", "NotificationPreference",
    "ContentVersion",
]
