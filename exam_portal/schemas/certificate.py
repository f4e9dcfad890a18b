from pydantic import BaseModel, ConfigDict, model_validator
from typing import Optional
from datetime import datetime

from exam_portal.core.constants import CertificateStatusEnum, IneligibilityReasonEnum

class CertificatePayload(BaseModel):
    exam_id: int
    user_id: int
    exam_attempt_id: int
    score: float
    total_marks: float
    percentage: float

class EligibilityDecision(BaseModel):
    eligible: bool
    reason: Optional[IneligibilityReasonEnum] = None
    payload: Optional[CertificatePayload] = None

class CertificateIssueRequest(BaseModel):
    attempt_id: int

class CertificateVerifyRequest(BaseModel):
    verification_code: Optional[str] = None
    certificate_number: Optional[str] = None

    @model_validator(mode="after")
    def require_one_identifier(self):
        if not self.verification_code and not self.certificate_number:
            raise ValueError("Either verification_code or certificate_number is required.")
        return self

class Certificate(BaseModel):
    id: int
    user_id: int
    exam_id: int
    exam_attempt_id: int
    certificate_number: Optional[str] = None
    verification_code: str
    status: CertificateStatusEnum
    score: float
    total_marks: float
    percentage: float
    issued_at: datetime
    issued_by: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

class CertificateVerification(BaseModel):
    verified: bool
    certificate: Optional[Certificate] = None
    reason: Optional[str] = None

class AvailableCertificate(BaseModel):
    """A submitted attempt seen from the certificate side."""
    exam_id: int
    exam_title: str
    exam_attempt_id: int
    score: float
    total_marks: float
    percentage: float
    passed: bool
    eligible: bool
    reason: Optional[IneligibilityReasonEnum] = None
    certificate_issued: bool
    can_generate: bool
    completion_date: Optional[datetime] = None
