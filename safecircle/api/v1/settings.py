# ============================================
# safecircle/api/v1/settings.py - 사용자 설정 API 라우터
# ============================================

from fastapi import APIRouter, Depends

from safecircle.api.deps import get_store
from safecircle.schemas.common import BaseResponse
from safecircle.schemas.settings import UpdateUserSettingsRequest, UserSettingsSchema
from safecircle.services.mock_data_service import MockDataService


router = APIRouter(prefix="/settings", tags=["Settings"])


@router.get("", response_model=BaseResponse[UserSettingsSchema], summary="설정 조회")
def get_settings(store: MockDataService = Depends(get_store)):
    return BaseResponse(data=UserSettingsSchema.model_validate(store.get_settings()))


@router.patch(
    "",
    response_model=BaseResponse[UserSettingsSchema],
    summary="설정 수정",
    description="""
    보낸 필드만 수정합니다.

    - privacy_mode: standard / enhanced / maximum
    - check_in_interval: 5~60분 (5분 단위)
    - safety_radius: 10~200m (10m 단위)
    """
)
def update_settings(
    request: UpdateUserSettingsRequest,
    store: MockDataService = Depends(get_store)
):
    user_settings = store.update_settings(**request.model_dump(exclude_unset=True))
    return BaseResponse(
        data=UserSettingsSchema.model_validate(user_settings),
        message="Your preferences have been updated."
    )
