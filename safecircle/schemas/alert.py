# ============================================
# safecircle/schemas/alert.py - 알림 스키마
# ============================================

from typing import List, Optional

from pydantic import BaseModel


class AlertSchema(BaseModel):
    """알림 응답 스키마"""
    id: str
    type: str
    title: str
    message: str
    location: Optional[str] = None
    time: str
    read: bool

    class Config:
        from_attributes = True


class AlertListSchema(BaseModel):
    """최신순 알림 목록과 안 읽은 개수"""
    alerts: List[AlertSchema]
    unread_count: int


class MarkAllReadSchema(BaseModel):
    updated: int
