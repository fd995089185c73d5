# ============================================
# safecircle/config.py - 환경 설정 파일
# ============================================
# 이 파일은 애플리케이션의 모든 설정을 관리합니다.
# .env 파일에서 값을 읽어와서 사용합니다.
# ============================================

from functools import lru_cache
from typing import List
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """
    애플리케이션 설정 클래스

    Pydantic의 BaseSettings를 상속받아 환경 변수를 자동으로 로드합니다.
    - .env 파일에서 값을 읽어옵니다.
    - 환경 변수가 설정되어 있으면 그 값을 우선 사용합니다.

    [신입 개발자를 위한 팁]
    - 이 클래스의 변수명과 .env 파일의 키 이름은 동일해야 합니다.
    - 대소문자는 구분하지 않습니다 (LOG_LEVEL = log_level)
    """

    # --------------------------------------------
    # 서버 설정
    # --------------------------------------------
    # 현재 환경 (development, production, testing)
    ENVIRONMENT: str = "development"

    # 디버그 모드
    DEBUG: bool = True

    # CORS 허용 도메인 (프론트엔드 주소)
    CORS_ORIGINS: str = "http://localhost:3000,http://localhost:19006,http://localhost:8081"

    # API 버전 프리픽스
    API_V1_PREFIX: str = "/api/v1"

    # 로그 레벨
    LOG_LEVEL: str = "INFO"

    # 시간대 (안전점수의 시간대 요인 계산에 사용)
    TIMEZONE: str = "Asia/Kolkata"

    # --------------------------------------------
    # 데이터베이스 설정
    # --------------------------------------------
    # 메모리 SQLite (프로세스 종료 시 모든 데이터가 사라집니다)
    DATABASE_URL: str = "sqlite://"

    # --------------------------------------------
    # 위치 설정
    # --------------------------------------------
    # 위치 정보를 얻지 못했을 때 사용하는 기본 위치 (나비 뭄바이)
    DEFAULT_LATITUDE: float = 19.033
    DEFAULT_LONGITUDE: float = 73.0297

    # --------------------------------------------
    # 데모 사용자 / 알림 설정
    # --------------------------------------------
    # 인증이 없으므로 모든 요청은 이 사용자로 처리됩니다
    DEMO_USER_ID: str = "user-123"

    # 이메일이 등록된 비상연락처가 없을 때 SOS 메일 수신자
    SOS_FALLBACK_EMAIL: str = "sreejitc2019@gmail.com"

    # 토스트 대기열 최대 길이
    TOAST_QUEUE_SIZE: int = 50

    # --------------------------------------------
    # 지도 설정
    # --------------------------------------------
    # 뷰포트 크기를 알려주지 않았을 때의 기본값 (px)
    MAP_VIEWPORT_WIDTH: int = 360
    MAP_VIEWPORT_HEIGHT: int = 480

    # 마커 클릭 판정 반경 (px)
    MAP_HIT_RADIUS_PX: float = 10.0

    # 이 거리(px) 이상 움직이면 클릭이 아니라 드래그로 판단
    MAP_DRAG_THRESHOLD_PX: float = 4.0

    # 동시에 유지하는 지도 세션 수
    MAP_SESSION_LIMIT: int = 100

    @property
    def cors_origins_list(self) -> List[str]:
        """
        CORS 허용 도메인을 리스트로 반환합니다.

        환경 변수에서는 쉼표로 구분된 문자열로 저장하고,
        실제 사용할 때는 리스트로 변환합니다.
        """
        return [origin.strip() for origin in self.CORS_ORIGINS.split(",")]

    class Config:
        """
        Pydantic 설정

        env_file: .env 파일 경로
        env_file_encoding: .env 파일 인코딩
        case_sensitive: 환경 변수 대소문자 구분 여부
        """
        env_file = ".env"
        env_file_encoding = "utf-8"
        case_sensitive = False
        extra = "ignore"


@lru_cache()
def get_settings() -> Settings:
    """
    설정 객체를 반환합니다.

    @lru_cache() 데코레이터를 사용하여 한 번만 생성하고 캐시합니다.

    사용 예시:
        from safecircle.config import get_settings
        settings = get_settings()
        print(settings.DEFAULT_LATITUDE)
    """
    return Settings()


# 전역 설정 객체 (편의를 위해 미리 생성)
settings = get_settings()
