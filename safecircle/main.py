# ============================================
# safecircle/main.py - FastAPI 애플리케이션 시작점
# ============================================
# 이 파일은 SafeCircle 서버의 진입점(Entry Point)입니다.
# 서버를 시작하면 이 파일이 가장 먼저 실행됩니다.
# ============================================

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from safecircle import __version__
from safecircle.config import settings
from safecircle.api.v1.router import api_router
from safecircle.db.database import SessionLocal, init_db
from safecircle.db.seed import seed_demo_data

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    애플리케이션 생명주기 관리

    [신입 개발자를 위한 팁]
    - yield 전: 서버 시작 시 실행되는 코드 (로깅 설정, 테이블 생성, 데모 데이터)
    - yield 후: 서버 종료 시 실행되는 코드 (정리)
    """
    # ========== 서버 시작 시 실행 ==========
    logging.basicConfig(
        level=settings.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )
    logger.info("SafeCircle 서버를 시작합니다...")
    logger.info(f"환경: {settings.ENVIRONMENT}")
    logger.info(f"디버그 모드: {settings.DEBUG}")

    init_db()
    db = SessionLocal()
    try:
        seed_demo_data(db)
    finally:
        db.close()

    yield  # 여기서 서버가 실행됩니다

    # ========== 서버 종료 시 실행 ==========
    logger.info("SafeCircle 서버를 종료합니다...")


# ============================================
# FastAPI 애플리케이션 인스턴스 생성
# ============================================
app = FastAPI(
    title="SafeCircle API",
    description="""
    ## SafeCircle - personal safety companion

    ### 주요 기능
    - **안전점수**: 위치와 시간대로 계산한 1~10 안전점수
    - **안전 지도**: 사용자들이 남긴 지역 안전 평가 보기/추가
    - **SOS**: 비상연락처에 위치와 함께 긴급 알림
    - **체크인 / 보호자 모드**: 정기 안전 확인, 경로 공유
    - **프로필**: 비상연락처, 알림, 설정, Aadhaar 본인 인증
    """,
    version=__version__,
    lifespan=lifespan,
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url=f"{settings.API_V1_PREFIX}/openapi.json"
)


# ============================================
# CORS (Cross-Origin Resource Sharing) 설정
# ============================================
# 모바일 웹 프론트엔드에서 API를 호출하려면 필수입니다.
# ============================================
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,  # 허용할 도메인
    allow_credentials=True,                     # 쿠키 허용
    allow_methods=["*"],                        # 모든 HTTP 메서드 허용
    allow_headers=["*"],                        # 모든 헤더 허용
)


# ============================================
# API 라우터 등록
# ============================================
# 모든 API 엔드포인트는 /api/v1 경로 아래에 위치합니다.
# 예: /api/v1/safety/score, /api/v1/map/sessions 등
# ============================================
app.include_router(api_router, prefix=settings.API_V1_PREFIX)


# ============================================
# 루트 엔드포인트 (서버 상태 확인용)
# ============================================
@app.get("/", tags=["Health Check"])
async def root():
    """서버 상태 확인 엔드포인트"""
    return {
        "status": "ok",
        "message": "SafeCircle API 서버가 실행 중입니다!",
        "version": __version__,
        "docs": "/docs"
    }


@app.get("/health", tags=["Health Check"])
async def health_check():
    """
    상세 헬스체크 엔드포인트

    주로 로드밸런서나 모니터링 시스템에서 사용합니다.
    """
    return {
        "status": "healthy",
        "environment": settings.ENVIRONMENT,
        "debug": settings.DEBUG
    }


# ============================================
# 직접 실행 시 (python -m safecircle.main)
# ============================================
if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "safecircle.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True,
        reload_excludes=["venv/*"]
    )
