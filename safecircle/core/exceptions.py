# ============================================
# safecircle/core/exceptions.py - 커스텀 예외 클래스
# ============================================
# 애플리케이션 전체에서 사용하는 커스텀 예외들을 정의합니다.
# FastAPI의 HTTPException을 상속받아 일관된 에러 응답을 제공합니다.
#
# 순수 계산 모듈(utils, area_rating_map)은 ValueError 만 발생시키고,
# 라우터가 이를 ValidationException 으로 바꿔서 응답합니다.
# ============================================

from fastapi import HTTPException, status
from typing import Optional, Any


class SafeCircleException(HTTPException):
    """
    SafeCircle 기본 예외 클래스

    모든 커스텀 예외의 부모 클래스입니다.

    [신입 개발자를 위한 팁]
    - 예외를 발생시키면 FastAPI가 자동으로 HTTP 응답으로 변환합니다.
    - status_code: HTTP 상태 코드 (400, 404, 409 등)
    - detail: 에러 메시지 (클라이언트에게 전달)
    """
    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        details: Optional[Any] = None
    ):
        # 일관된 에러 응답 형식
        detail = {
            "success": False,
            "error": {
                "code": error_code,
                "message": message
            }
        }

        if details:
            detail["error"]["details"] = details

        self.error_code = error_code
        self.message = message
        super().__init__(status_code=status_code, detail=detail)


# ============================================
# 검증 관련 예외
# ============================================

class ValidationException(SafeCircleException):
    """
    입력값 검증 실패 예외 (400)
    """
    def __init__(
        self,
        message: str = "Invalid input",
        field: Optional[str] = None,
        reason: Optional[str] = None,
        error_code: str = "VALIDATION_ERROR"
    ):
        details = None
        if field or reason:
            details = {"field": field, "reason": reason}

        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code=error_code,
            message=message,
            details=details
        )


class InvalidAadhaarNumberException(ValidationException):
    """Aadhaar 번호 형식 오류 (12자리 숫자)"""
    def __init__(self):
        super().__init__(
            message="Please enter a valid 12-digit Aadhaar number",
            field="aadhaar_number",
            error_code="INVALID_AADHAAR_NUMBER"
        )


class InvalidOtpException(ValidationException):
    """OTP 형식 오류 (6자리 숫자)"""
    def __init__(self):
        super().__init__(
            message="Please enter a valid 6-digit OTP",
            field="otp",
            error_code="INVALID_OTP"
        )


# ============================================
# 리소스 관련 예외
# ============================================

class NotFoundException(SafeCircleException):
    """
    리소스를 찾을 수 없음 예외 (404)
    """
    def __init__(
        self,
        resource: str = "Resource",
        error_code: str = "NOT_FOUND"
    ):
        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code=error_code,
            message=f"{resource} not found"
        )


class ProfileNotFoundException(NotFoundException):
    """프로필을 찾을 수 없음"""
    def __init__(self):
        super().__init__(resource="Profile", error_code="PROFILE_NOT_FOUND")


class ContactNotFoundException(NotFoundException):
    """비상연락처를 찾을 수 없음"""
    def __init__(self):
        super().__init__(resource="Emergency contact", error_code="CONTACT_NOT_FOUND")


class AlertNotFoundException(NotFoundException):
    """알림을 찾을 수 없음"""
    def __init__(self):
        super().__init__(resource="Alert", error_code="ALERT_NOT_FOUND")


class MapSessionNotFoundException(NotFoundException):
    """지도 세션을 찾을 수 없음 (만료되었거나 닫힘)"""
    def __init__(self):
        super().__init__(resource="Map session", error_code="MAP_SESSION_NOT_FOUND")


# ============================================
# 상태 충돌 관련 예외
# ============================================

class ConflictException(SafeCircleException):
    """
    현재 상태에서 처리할 수 없는 요청 (409)
    """
    def __init__(
        self,
        message: str = "Request conflicts with the current state",
        error_code: str = "CONFLICT"
    ):
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code=error_code,
            message=message
        )


class NoPendingRatingException(ConflictException):
    """저장/취소할 평가 마커가 없음"""
    def __init__(self):
        super().__init__(
            message="There is no pending safety rating on this map",
            error_code="NO_PENDING_RATING"
        )


class ConfirmationRequiredException(ConflictException):
    """작성 중인 평가를 버리려면 확인이 필요함"""
    def __init__(self):
        super().__init__(
            message="Discard your safety rating?",
            error_code="CONFIRMATION_REQUIRED"
        )
