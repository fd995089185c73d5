# ============================================
# safecircle/models/alert.py - 알림 모델
# ============================================

from sqlalchemy import Column, String, Text, Boolean, DateTime, ForeignKey

from safecircle.db.database import Base
from safecircle.models.user import generate_uuid, utcnow


# 알림 종류
ALERT_TYPES = ("sos", "checkin", "area", "system")


class Alert(Base):
    """
    알림 테이블 (alerts)

    [신입 개발자를 위한 팁]
    - time: 화면에 그대로 보여주는 문자열 ("Today, 10:30 AM")
    - created_at: 정렬용 시각 (최신순)
    """
    __tablename__ = "alerts"

    id = Column(String(36), primary_key=True, default=generate_uuid, comment='알림 ID')
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True, comment='사용자 ID')
    type = Column(String(10), nullable=False, comment='sos/checkin/area/system')
    title = Column(String(200), nullable=False, comment='제목')
    message = Column(Text, nullable=False, comment='내용')
    location = Column(String(255), nullable=True, comment='위치 설명')
    time = Column(String(50), nullable=False, comment='표시용 시간 문자열')
    read = Column(Boolean, nullable=False, default=False, comment='읽음 여부')
    created_at = Column(DateTime, nullable=False, default=utcnow, index=True)

    def __repr__(self):
        return f"<Alert(id={self.id}, type={self.type}, read={self.read})>"
