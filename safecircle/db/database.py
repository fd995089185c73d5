# ============================================
# safecircle/db/database.py - 데이터베이스 연결 설정
# ============================================
# 목업 데이터 저장소로 쓰는 in-memory SQLite 연결을 관리합니다.
# SQLAlchemy ORM을 사용하며, 프로세스가 끝나면 데이터도 사라집니다.
# ============================================

from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, declarative_base, sessionmaker
from sqlalchemy.pool import StaticPool

from safecircle.config import settings


# ============================================
# 데이터베이스 엔진 생성
# ============================================
# [신입 개발자를 위한 팁]
# - "sqlite://" 는 메모리 DB 입니다. 연결마다 새 DB가 생기므로
#   StaticPool 로 연결 하나를 모든 세션이 공유하게 합니다.
# - check_same_thread=False: FastAPI 스레드풀에서 같은 연결을 사용
# - echo: True로 설정하면 실행되는 SQL을 콘솔에 출력 (디버깅용)
# ============================================
def create_db_engine(url: str = None) -> Engine:
    """설정된 URL(기본: 메모리 SQLite)로 엔진을 만듭니다."""
    return create_engine(
        url or settings.DATABASE_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        echo=settings.DEBUG
    )


engine = create_db_engine()


# ============================================
# 세션 팩토리 생성
# ============================================
SessionLocal = sessionmaker(
    autocommit=False,
    autoflush=False,
    bind=engine
)


# ============================================
# 모델 베이스 클래스
# ============================================
# 모든 데이터베이스 모델(테이블)은 이 Base 클래스를 상속받습니다.
# ============================================
Base = declarative_base()


def init_db(bind: Engine = None) -> None:
    """
    모든 테이블을 생성합니다.

    models 패키지를 import 해야 Base.metadata 에 테이블이 등록됩니다.
    """
    import safecircle.models  # noqa: F401

    Base.metadata.create_all(bind=bind or engine)


def get_db() -> Generator[Session, None, None]:
    """
    데이터베이스 세션을 생성하고 반환하는 의존성 함수

    사용 예시:
        @router.get("/contacts")
        def list_contacts(db: Session = Depends(get_db)):
            return MockDataService(db).get_emergency_contacts()

    Returns:
        Generator[Session, None, None]: 데이터베이스 세션 제너레이터
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        # 예외가 발생해도 반드시 실행됩니다
        db.close()
