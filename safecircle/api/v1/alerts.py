# ============================================
# safecircle/api/v1/alerts.py - 알림 API 라우터
# ============================================

from fastapi import APIRouter, Depends, Path

from safecircle.api.deps import get_store
from safecircle.schemas.alert import AlertListSchema, AlertSchema, MarkAllReadSchema
from safecircle.schemas.common import BaseResponse
from safecircle.services.mock_data_service import MockDataService


router = APIRouter(prefix="/alerts", tags=["Alerts"])


@router.get("", response_model=BaseResponse[AlertListSchema], summary="알림 목록 (최신순)")
def list_alerts(store: MockDataService = Depends(get_store)):
    alerts = store.get_alerts()
    return BaseResponse(data=AlertListSchema(
        alerts=[AlertSchema.model_validate(a) for a in alerts],
        unread_count=sum(1 for a in alerts if not a.read)
    ))


# read-all 을 /{alert_id}/read 보다 먼저 등록
@router.post("/read-all", response_model=BaseResponse[MarkAllReadSchema], summary="모두 읽음 처리")
def mark_all_alerts_as_read(store: MockDataService = Depends(get_store)):
    updated = store.mark_all_alerts_as_read()
    return BaseResponse(data=MarkAllReadSchema(updated=updated), message="All Alerts Marked as Read")


@router.post("/{alert_id}/read", response_model=BaseResponse[AlertSchema], summary="읽음 처리")
def mark_alert_as_read(
    alert_id: str = Path(..., description="알림 ID"),
    store: MockDataService = Depends(get_store)
):
    return BaseResponse(data=AlertSchema.model_validate(store.mark_alert_as_read(alert_id)))


@router.delete("/{alert_id}", response_model=BaseResponse, summary="알림 삭제")
def delete_alert(
    alert_id: str = Path(..., description="알림 ID"),
    store: MockDataService = Depends(get_store)
):
    store.delete_alert(alert_id)
    return BaseResponse(message="The alert has been removed.")
