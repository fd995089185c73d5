# ============================================
# safecircle/api/v1/contacts.py - 비상연락처 API 라우터
# ============================================

from typing import List

from fastapi import APIRouter, Depends, Path, status

from safecircle.api.deps import get_store
from safecircle.schemas.common import BaseResponse
from safecircle.schemas.contact import ContactSchema, CreateContactRequest
from safecircle.services.mock_data_service import MockDataService


router = APIRouter(prefix="/contacts", tags=["Emergency Contacts"])


@router.get("", response_model=BaseResponse[List[ContactSchema]], summary="비상연락처 목록")
def list_contacts(store: MockDataService = Depends(get_store)):
    contacts = store.get_emergency_contacts()
    return BaseResponse(data=[ContactSchema.model_validate(c) for c in contacts])


@router.post(
    "",
    response_model=BaseResponse[ContactSchema],
    status_code=status.HTTP_201_CREATED,
    summary="비상연락처 추가",
    description="이름과, 전화번호 또는 이메일 중 하나가 필요합니다."
)
def add_contact(
    request: CreateContactRequest,
    store: MockDataService = Depends(get_store)
):
    contact = store.add_emergency_contact(
        name=request.name,
        phone=request.phone,
        email=request.email,
        relation=request.relation
    )
    return BaseResponse(
        data=ContactSchema.model_validate(contact),
        message=f"{contact.name} has been added to your emergency contacts."
    )


@router.delete("/{contact_id}", response_model=BaseResponse, summary="비상연락처 삭제")
def delete_contact(
    contact_id: str = Path(..., description="연락처 ID"),
    store: MockDataService = Depends(get_store)
):
    store.delete_emergency_contact(contact_id)
    return BaseResponse(message="The contact has been removed from your emergency contacts.")
