# ============================================
# safecircle/models/contact.py - 비상연락처 모델
# ============================================

from sqlalchemy import Column, String, DateTime, ForeignKey

from safecircle.db.database import Base
from safecircle.models.user import generate_uuid, utcnow


class EmergencyContact(Base):
    """
    비상연락처 테이블 (emergency_contacts)

    이름은 필수이고, 전화번호와 이메일 중 하나 이상이 있어야 합니다.
    SOS 이메일과 보호자 모드의 대상이 됩니다.
    """
    __tablename__ = "emergency_contacts"

    id = Column(String(36), primary_key=True, default=generate_uuid, comment='연락처 ID')
    user_id = Column(String(36), ForeignKey("profiles.id"), nullable=False, index=True, comment='사용자 ID')
    name = Column(String(100), nullable=False, comment='이름')
    phone = Column(String(30), nullable=False, default="", comment='전화번호')
    email = Column(String(255), nullable=False, default="", comment='이메일')
    relation = Column(String(50), nullable=False, default="", comment='관계 (Family, Friend ...)')
    created_at = Column(DateTime, nullable=False, default=utcnow)

    def __repr__(self):
        return f"<EmergencyContact(id={self.id}, name={self.name})>"
