"""환경 변수 기반 애플리케이션 설정을 중앙에서 관리합니다."""

from pydantic_settings import BaseSettings
from typing import List
from pathlib import Path


class Settings(BaseSettings):
    DATABASE_URL: str = "sqlite:///./consensus.db"
    SECRET_KEY: str = "change-me-to-a-random-secret-key"
    DEBUG: bool = True
    ALLOWED_ORIGINS: List[str] = ["http://localhost:3000", "http://localhost:8000"]
    LOG_LEVEL: str = "INFO"

    # JWT
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 480

    # Discussions
    SEARCH_RESULT_LIMIT: int = 50
    # 이 목록의 컬럼이 바뀔 때만 버전 이력을 남긴다.
    VERSIONED_DISCUSSION_FIELDS: List[str] = ["title", "description", "private"]

    # Notifications
    NOTIFICATION_LIST_LIMIT: int = 50

    # CI runner
    CI_DISPLAY: str = ":99"

    class Config:
        # 실행 cwd와 무관하게 backend/.env를 로드한다.
        env_file = str(Path(__file__).resolve().parents[1] / ".env")


settings = Settings()
