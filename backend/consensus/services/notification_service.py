"""Notification Service 도메인 서비스 레이어입니다. 비즈니스 규칙과 데이터 접근 흐름을 캡슐화합니다."""

import logging
from sqlalchemy.orm import Session
from consensus.config import settings
from consensus.models.notification import Notification, NotificationPreference
from consensus.models.user import User
from consensus.utils.helpers import utcnow
from typing import Iterable, List, Optional

logger = logging.getLogger(__name__)

SUPPORTED_FREQUENCIES = {"realtime", "daily"}


def get_notifications(db: Session, user_id: int, unread_only: bool = False) -> List[Notification]:
    q = db.query(Notification).filter(Notification.user_id == user_id)
    if unread_only:
        q = q.filter(Notification.is_read == False)  # noqa: E712
    return q.order_by(Notification.created_at.desc(), Notification.noti_id.desc()).limit(
        settings.NOTIFICATION_LIST_LIMIT
    ).all()


def mark_read(db: Session, noti_id: int, user_id: int) -> Optional[Notification]:
    noti = db.query(Notification).filter(
        Notification.noti_id == noti_id,
        Notification.user_id == user_id,
    ).first()
    if noti:
        noti.is_read = True
        db.commit()
        db.refresh(noti)
    return noti


def mark_all_read(db: Session, user_id: int):
    db.query(Notification).filter(
        Notification.user_id == user_id,
        Notification.is_read == False,  # noqa: E712
    ).update({"is_read": True})
    db.commit()


def _build_default_pref(user_id: int) -> NotificationPreference:
    return NotificationPreference(
        user_id=user_id,
        comment_enabled=True,
        motion_enabled=True,
        frequency="realtime",
    )


def get_or_create_preference(db: Session, user_id: int) -> NotificationPreference:
    pref = db.query(NotificationPreference).filter(NotificationPreference.user_id == user_id).first()
    if pref:
        return pref
    pref = _build_default_pref(user_id)
    db.add(pref)
    db.commit()
    db.refresh(pref)
    return pref


def update_preference(
    db: Session,
    *,
    user_id: int,
    comment_enabled: bool,
    motion_enabled: bool,
    frequency: str,
) -> NotificationPreference:
    freq = (frequency or "").strip().lower()
    if freq not in SUPPORTED_FREQUENCIES:
        freq = "realtime"
    pref = get_or_create_preference(db, user_id)
    pref.comment_enabled = comment_enabled
    pref.motion_enabled = motion_enabled
    pref.frequency = freq
    db.commit()
    db.refresh(pref)
    return pref


def _is_type_enabled(pref: NotificationPreference, noti_type: str) -> bool:
    kind = (noti_type or "").strip().lower()
    if kind in {"discussion_comment", "comment"}:
        return bool(pref.comment_enabled)
    if kind in {"motion_created", "motion_closed", "motion"}:
        return bool(pref.motion_enabled)
    # 정의되지 않은 타입은 차단하지 않고 전달합니다.
    return True


def _upsert_daily_notification(
    db: Session,
    *,
    user_id: int,
    noti_type: str,
    title: str,
    message: Optional[str],
    link_url: Optional[str],
) -> Notification:
    start_of_day = utcnow().replace(hour=0, minute=0, second=0, microsecond=0)
    existing = (
        db.query(Notification)
        .filter(
            Notification.user_id == user_id,
            Notification.noti_type == noti_type,
            Notification.created_at >= start_of_day,
        )
        .order_by(Notification.created_at.desc(), Notification.noti_id.desc())
        .first()
    )
    if existing:
        existing.title = title
        existing.message = message
        existing.link_url = link_url
        existing.is_read = False
        db.commit()
        db.refresh(existing)
        return existing

    noti = Notification(
        user_id=user_id,
        noti_type=noti_type,
        title=title,
        message=message,
        link_url=link_url,
    )
    db.add(noti)
    db.commit()
    db.refresh(noti)
    return noti


def create_notification(
    db: Session,
    user_id: int,
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    link_url: Optional[str] = None,
):
    pref = get_or_create_preference(db, user_id)
    if not _is_type_enabled(pref, noti_type):
        return None

    if pref.frequency == "daily":
        return _upsert_daily_notification(
            db,
            user_id=user_id,
            noti_type=noti_type,
            title=title,
            message=message,
            link_url=link_url,
        )

    noti = Notification(
        user_id=user_id,
        noti_type=noti_type,
        title=title,
        message=message,
        link_url=link_url,
    )
    db.add(noti)
    db.commit()
    db.refresh(noti)
    return noti


def notify_users(
    db: Session,
    users: Iterable[User],
    *,
    actor: Optional[User],
    noti_type: str,
    title: str,
    message: Optional[str] = None,
    link_url: Optional[str] = None,
) -> int:
    sent = 0
    for user in users:
        if actor is not None and user.user_id == actor.user_id:
            continue
        if create_notification(db, user.user_id, noti_type, title, message, link_url) is not None:
            sent += 1
    logger.info("[notification] %s sent to %d user(s)", noti_type, sent)
    return sent
