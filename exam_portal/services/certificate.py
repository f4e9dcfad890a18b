import logging
import secrets
from datetime import datetime
from typing import Iterable, List, Optional
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.constants import (
    AnswerVerdictEnum,
    CertificateStatusEnum,
    IneligibilityReasonEnum,
    SUBMITTED_ATTEMPT_STATUSES,
)
from exam_portal.core.decorators import translate_store_errors
from exam_portal.core.exceptions import CertificateExists, NotEligible, NotFound
from exam_portal.crud.certificate import certificate as crud_certificate
from exam_portal.crud.exam import exam as crud_exam
from exam_portal.crud.exam_attempt import exam_attempt as crud_exam_attempt
from exam_portal.crud.user_answer import user_answer as crud_user_answer
from exam_portal.models.certificate import Certificate
from exam_portal.models.exam import Exam
from exam_portal.models.exam_attempt import ExamAttempt
from exam_portal.models.user_answer import UserAnswer
from exam_portal.schemas.certificate import (
    AvailableCertificate,
    CertificatePayload,
    CertificateVerification,
    CertificateVerifyRequest,
    EligibilityDecision,
)
from exam_portal.schemas.certificate import Certificate as CertificateSchema
from exam_portal.schemas.user import UserContext
from exam_portal.services.scoring import percentage_of
from exam_portal.utils.clock import ensure_utc, utcnow
from exam_portal.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


def decide_eligibility(attempt: ExamAttempt, exam: Exam,
                       answers: Optional[Iterable[UserAnswer]] = None) -> EligibilityDecision:
    """Decide whether a finalized attempt earns a certificate.

    Checks run in a fixed order: the attempt must be submitted, every answer
    must have a definitive verdict (a provisional total is never certified),
    and the total must reach the exam's passing marks.
    """
    if attempt.status not in SUBMITTED_ATTEMPT_STATUSES:
        return EligibilityDecision(eligible=False, reason=IneligibilityReasonEnum.NOT_SUBMITTED)

    if answers is None:
        answers = attempt.user_answers
    if any(answer.verdict is AnswerVerdictEnum.PENDING for answer in answers):
        return EligibilityDecision(eligible=False, reason=IneligibilityReasonEnum.PENDING_EVALUATION)

    score = float(attempt.total_score or 0.0)
    if score < exam.passing_marks:
        return EligibilityDecision(eligible=False, reason=IneligibilityReasonEnum.BELOW_PASSING_MARKS)

    return EligibilityDecision(
        eligible=True,
        payload=CertificatePayload(
            exam_id=exam.id,
            user_id=attempt.user_id,
            exam_attempt_id=attempt.id,
            score=score,
            total_marks=float(exam.total_marks),
            percentage=percentage_of(score, exam.total_marks),
        ),
    )


def generate_verification_code() -> str:
    return f"{settings.VERIFICATION_CODE_PREFIX}-{secrets.token_hex(6)}"


def format_certificate_number(certificate_id: int, issued_at: datetime) -> str:
    return f"{settings.CERTIFICATE_NUMBER_PREFIX}-{issued_at.year}-{certificate_id:05d}"


class CertificateService:

    def _load_attempt_and_exam(self, db: Session, attempt_id: int, for_update: bool = False):
        if for_update:
            attempt = crud_exam_attempt.get_for_update(db, id=attempt_id)
        else:
            attempt = crud_exam_attempt.get(db, id=attempt_id)
        if not attempt:
            raise NotFound("Exam attempt not found.")

        exam = crud_exam.get(db, id=attempt.exam_id)
        if not exam:
            raise NotFound("Exam not found for this attempt.")
        return attempt, exam

    @translate_store_errors
    def get_eligibility(self, db: Session, attempt_id: int, current_user_context: UserContext) -> EligibilityDecision:
        attempt, exam = self._load_attempt_and_exam(db, attempt_id)
        permission_helper.require_attempt_view_permission(current_user_context, attempt)

        answers = crud_user_answer.get_all_by_attempt(db, exam_attempt_id=attempt.id)
        return decide_eligibility(attempt, exam, answers)

    @translate_store_errors
    def issue_certificate(self, db: Session, attempt_id: int, current_user_context: UserContext,
                          now: Optional[datetime] = None) -> Certificate:
        now = ensure_utc(now) or utcnow()

        attempt, exam = self._load_attempt_and_exam(db, attempt_id, for_update=True)
        permission_helper.require_attempt_owner(current_user_context, attempt)

        answers = crud_user_answer.get_all_by_attempt(db, exam_attempt_id=attempt.id)
        decision = decide_eligibility(attempt, exam, answers)
        if not decision.eligible:
            raise NotEligible(
                f"Attempt is not eligible for a certificate: {decision.reason.value}",
                details={"reason": decision.reason.value},
            )

        if crud_certificate.get_by_user_and_exam(db, user_id=attempt.user_id, exam_id=exam.id):
            raise CertificateExists()

        payload = decision.payload
        certificate = crud_certificate.create_guarded(db, obj_in={
            **payload.model_dump(),
            "verification_code": generate_verification_code(),
            "status": CertificateStatusEnum.ACTIVE,
            "issued_at": now,
            "issued_by": current_user_context.user_id,
        })
        if certificate is None:
            raise CertificateExists()

        certificate = crud_certificate.update(db, db_obj=certificate, obj_in={
            "certificate_number": format_certificate_number(certificate.id, now),
        })
        logger.info(
            f"Issued certificate {certificate.certificate_number} to user {attempt.user_id} "
            f"for exam {exam.id} ({payload.percentage}%)"
        )
        return certificate

    @translate_store_errors
    def get_user_certificates(self, db: Session, current_user_context: UserContext) -> List[Certificate]:
        return crud_certificate.get_all_by_user(db, user_id=current_user_context.user_id)

    @translate_store_errors
    def get_available_certificates(self, db: Session, current_user_context: UserContext) -> List[AvailableCertificate]:
        attempts = crud_exam_attempt.get_submitted_by_user(db, user_id=current_user_context.user_id)
        issued_exam_ids = {
            c.exam_id for c in crud_certificate.get_all_by_user(db, user_id=current_user_context.user_id)
        }

        available = []
        for attempt in attempts:
            exam = attempt.exam
            decision = decide_eligibility(attempt, exam)
            score = float(attempt.total_score or 0.0)
            issued = exam.id in issued_exam_ids
            available.append(AvailableCertificate(
                exam_id=exam.id,
                exam_title=exam.title,
                exam_attempt_id=attempt.id,
                score=score,
                total_marks=float(exam.total_marks),
                percentage=percentage_of(score, exam.total_marks),
                passed=score >= exam.passing_marks,
                eligible=decision.eligible,
                reason=decision.reason,
                certificate_issued=issued,
                can_generate=decision.eligible and not issued,
                completion_date=attempt.submitted_at,
            ))
        return available

    @translate_store_errors
    def verify_certificate(self, db: Session, request: CertificateVerifyRequest) -> CertificateVerification:
        if request.verification_code:
            certificate = crud_certificate.get_by_verification_code(db, code=request.verification_code)
        else:
            certificate = crud_certificate.get_by_certificate_number(db, number=request.certificate_number)

        if not certificate:
            raise NotFound("Certificate not found or invalid verification code.")

        if certificate.status != CertificateStatusEnum.ACTIVE:
            return CertificateVerification(
                verified=False,
                certificate=CertificateSchema.model_validate(certificate),
                reason="Certificate has been revoked or is inactive.",
            )

        return CertificateVerification(verified=True, certificate=CertificateSchema.model_validate(certificate))

    @translate_store_errors
    def revoke_certificate(self, db: Session, certificate_id: int, current_user_context: UserContext) -> Certificate:
        permission_helper.require_admin(current_user_context)

        certificate = crud_certificate.get(db, id=certificate_id)
        if not certificate:
            raise NotFound("Certificate not found.")

        certificate = crud_certificate.update(db, db_obj=certificate, obj_in={"status": CertificateStatusEnum.REVOKED})
        logger.info(f"Certificate {certificate.certificate_number} revoked by {current_user_context.user_id}")
        return certificate


certificate_service = CertificateService()
