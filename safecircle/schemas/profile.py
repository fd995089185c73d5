# ============================================
# safecircle/schemas/profile.py - 프로필 관련 스키마
# ============================================

from typing import Optional

from pydantic import BaseModel, Field


class ProfileSchema(BaseModel):
    """프로필 응답 스키마"""
    id: str
    full_name: str
    email: str
    phone: str
    address: str
    aadhaar_verified: bool
    aadhaar_number: str
    blood_group: str
    allergies: str
    medications: str

    class Config:
        from_attributes = True


class UpdateProfileRequest(BaseModel):
    """프로필 수정 요청 스키마 (보낸 필드만 수정)"""
    full_name: Optional[str] = Field(None, min_length=1, max_length=100, description="이름")
    email: Optional[str] = Field(None, max_length=255, description="이메일")
    phone: Optional[str] = Field(None, max_length=30, description="전화번호")
    address: Optional[str] = Field(None, max_length=255, description="주소")
    blood_group: Optional[str] = Field(None, max_length=5, description="혈액형")
    allergies: Optional[str] = Field(None, max_length=255, description="알레르기")
    medications: Optional[str] = Field(None, max_length=255, description="복용 약")

    class Config:
        json_schema_extra = {
            "example": {
                "phone": "9876543210",
                "address": "42 Marine Drive, Mumbai"
            }
        }


class AadhaarOtpRequest(BaseModel):
    """Aadhaar OTP 요청 (형식 검사는 서비스에서)"""
    aadhaar_number: str = Field(..., description="12자리 Aadhaar 번호")


class AadhaarVerifyRequest(BaseModel):
    """Aadhaar OTP 확인 요청"""
    aadhaar_number: str = Field(..., description="12자리 Aadhaar 번호")
    otp: str = Field(..., description="6자리 OTP")
