# ============================================
# safecircle/schemas/contact.py - 비상연락처 스키마
# ============================================

from pydantic import BaseModel, Field


class ContactSchema(BaseModel):
    """비상연락처 응답 스키마"""
    id: str
    name: str
    phone: str
    email: str
    relation: str

    class Config:
        from_attributes = True


class CreateContactRequest(BaseModel):
    """
    비상연락처 추가 요청

    이름과, 전화번호/이메일 중 하나가 필요합니다 (서비스에서 검사).
    """
    name: str = Field("", max_length=100, description="이름")
    phone: str = Field("", max_length=30, description="전화번호")
    email: str = Field("", max_length=255, description="이메일")
    relation: str = Field("", max_length=50, description="관계")

    class Config:
        json_schema_extra = {
            "example": {
                "name": "Dad",
                "phone": "9876543210",
                "email": "",
                "relation": "Family"
            }
        }
