# ============================================
# safecircle/api/v1/notifications.py - 토스트 API 라우터
# ============================================
# 서버가 만든 토스트를 화면이 가져가는 API 입니다.
# ============================================

from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends

from safecircle.api.deps import get_toast_sink
from safecircle.schemas.common import BaseResponse, ToastSchema
from safecircle.services.notification_service import ToastSink


router = APIRouter(prefix="/notifications", tags=["Notifications"])


@router.get(
    "/toasts",
    response_model=BaseResponse[List[ToastSchema]],
    summary="토스트 가져오기",
    description="쌓인 토스트를 오래된 순으로 돌려주고 대기열을 비웁니다."
)
def drain_toasts(toasts: ToastSink = Depends(get_toast_sink)):
    return BaseResponse(data=[ToastSchema(**asdict(t)) for t in toasts.drain()])
