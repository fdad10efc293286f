"""서비스 레이어 패키지 초기화 모듈입니다."""

from consensus.services import (
    auth_service,
    version_service,
    notification_service,
    group_service,
    reader_service,
    discussion_service,
    motion_service,
)
