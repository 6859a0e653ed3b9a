"""
Legal case and hearing endpoints
"""
from fastapi import APIRouter, Depends, File, UploadFile, status
from typing import List

from backoffice.api.v1.deps import get_legal_case_service
from backoffice.db.schemas import (
    DeleteResponse,
    DocumentUploadResponse,
    HearingCreate,
    HearingDetailResponse,
    LegalCaseCreate,
    LegalCaseDetailResponse,
    LegalCaseUpdate,
)
from backoffice.services.legal_case_service import LegalCaseService
from backoffice.utils.exceptions import EntityNotFoundError

router = APIRouter()
hearings_router = APIRouter()

# ============================================================================
# Legal cases
# ============================================================================

@router.get("/", response_model=List[LegalCaseDetailResponse])
def list_cases(service: LegalCaseService = Depends(get_legal_case_service)):
    """
    All cases, newest first.
    Hearings are split into upcoming (today or later) and past on every read.
    """
    return service.list_cases()


@router.get("/{case_id}", response_model=LegalCaseDetailResponse)
def get_case(case_id: str, service: LegalCaseService = Depends(get_legal_case_service)):
    case = service.get_case(case_id)
    if not case:
        raise EntityNotFoundError("Legal case", case_id)
    return case


@router.post("/", response_model=LegalCaseDetailResponse, status_code=status.HTTP_201_CREATED)
def create_case(data: LegalCaseCreate, service: LegalCaseService = Depends(get_legal_case_service)):
    return service.create_case(data)


@router.patch("/{case_id}", response_model=LegalCaseDetailResponse)
def update_case(
    case_id: str,
    data: LegalCaseUpdate,
    service: LegalCaseService = Depends(get_legal_case_service),
):
    case = service.update_case(case_id, data)
    if not case:
        raise EntityNotFoundError("Legal case", case_id)
    return case


@router.delete("/{case_id}", response_model=DeleteResponse)
def delete_case(case_id: str, service: LegalCaseService = Depends(get_legal_case_service)):
    """Delete a case, its hearing documents and its hearings"""
    if not service.delete_case(case_id):
        raise EntityNotFoundError("Legal case", case_id)
    return {"success": True, "message": "Legal case deleted successfully"}


@router.post(
    "/{case_id}/hearings",
    response_model=HearingDetailResponse,
    status_code=status.HTTP_201_CREATED,
)
def add_hearing(
    case_id: str,
    data: HearingCreate,
    service: LegalCaseService = Depends(get_legal_case_service),
):
    hearing = service.add_hearing(case_id, data.hearing_date)
    if not hearing:
        raise EntityNotFoundError("Legal case", case_id)
    return hearing

# ============================================================================
# Hearings
# ============================================================================

@hearings_router.delete("/{hearing_id}", response_model=DeleteResponse)
def delete_hearing(hearing_id: str, service: LegalCaseService = Depends(get_legal_case_service)):
    """Delete a hearing. Its document is removed first; if that fails the hearing is kept."""
    if not service.delete_hearing(hearing_id):
        raise EntityNotFoundError("Hearing", hearing_id)
    return {"success": True, "message": "Hearing deleted successfully"}


@hearings_router.post("/{hearing_id}/document", response_model=DocumentUploadResponse)
async def attach_document(
    hearing_id: str,
    file: UploadFile = File(...),
    service: LegalCaseService = Depends(get_legal_case_service),
):
    """Upload a PDF and attach it to the hearing, replacing any previous document"""
    payload = await file.read()
    result = service.attach_document(
        hearing_id,
        file.filename or "",
        payload,
        file.content_type,
    )
    if not result:
        raise EntityNotFoundError("Hearing", hearing_id)
    return result
