from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from exam_portal.schemas.response import APIResponse
from exam_portal.utils import deps
from exam_portal.schemas.certificate import (
    AvailableCertificate,
    Certificate,
    CertificateIssueRequest,
    CertificateVerification,
    CertificateVerifyRequest,
    EligibilityDecision,
)
from exam_portal.schemas.user import UserContext
from exam_portal.services.certificate import certificate_service

router = APIRouter()

@router.get("/eligibility/{attempt_id}", response_model=APIResponse[EligibilityDecision])
async def get_certificate_eligibility(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    decision = certificate_service.get_eligibility(db, attempt_id=attempt_id, current_user_context=context)
    return APIResponse(message="Certificate eligibility evaluated", data=decision)


@router.post("/", response_model=APIResponse[Certificate], status_code=status.HTTP_201_CREATED)
async def issue_certificate(
    *,
    db: Session = Depends(deps.get_transactional_db, scope="function"),
    certificate_in: CertificateIssueRequest,
    context: UserContext = Depends(deps.get_current_user_context)
):
    certificate = certificate_service.issue_certificate(db, attempt_id=certificate_in.attempt_id, current_user_context=context)
    return APIResponse(message="Certificate generated successfully", data=Certificate.model_validate(certificate))


@router.get("/me", response_model=APIResponse[List[Certificate]])
async def get_my_certificates(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_context)
):
    certificates = certificate_service.get_user_certificates(db, current_user_context=context)
    return APIResponse(message="Certificates retrieved successfully", data=[Certificate.model_validate(c) for c in certificates])


@router.get("/available", response_model=APIResponse[List[AvailableCertificate]])
async def get_available_certificates(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_context)
):
    available = certificate_service.get_available_certificates(db, current_user_context=context)
    return APIResponse(message="Available certificates retrieved successfully", data=available)


@router.post("/verify", response_model=APIResponse[CertificateVerification])
async def verify_certificate(
    *,
    db: Session = Depends(deps.get_db),
    verify_in: CertificateVerifyRequest
):
    verification = certificate_service.verify_certificate(db, request=verify_in)
    return APIResponse(message="Certificate verification completed", data=verification)


@router.post("/{certificate_id}/revoke", response_model=APIResponse[Certificate])
async def revoke_certificate(
    *,
    db: Session = Depends(deps.get_transactional_db, scope="function"),
    certificate_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    certificate = certificate_service.revoke_certificate(db, certificate_id=certificate_id, current_user_context=context)
    return APIResponse(message="Certificate revoked successfully", data=Certificate.model_validate(certificate))
