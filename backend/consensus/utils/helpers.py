from typing import Optional
from datetime import datetime, timezone


def utcnow() -> datetime:
    # DB server_default(CURRENT_TIMESTAMP)와 같은 naive UTC 기준으로 맞춘다.
    return datetime.now(timezone.utc).replace(tzinfo=None)


def like_pattern(keyword: str) -> str:
    escaped = keyword.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
    return f"%{escaped}%"


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Offset-aware 값은 UTC로 변환한 뒤 tzinfo를 떼어 저장 기준에 맞춘다."""
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)
