import logging
from typing import List
from sqlalchemy.orm import Session

from exam_portal.core.config import settings
from exam_portal.core.constants import (
    AnswerVerdictEnum,
    ExamAttemptStatusEnum,
    GradingFlagEnum,
    MissingQuestionPolicyEnum,
    SUBMITTED_ATTEMPT_STATUSES,
)
from exam_portal.core.decorators import translate_store_errors
from exam_portal.core.exceptions import InvalidState, NotFound, ValidationError
from exam_portal.crud.exam_attempt import exam_attempt as crud_exam_attempt
from exam_portal.crud.question import question as crud_question
from exam_portal.crud.user_answer import user_answer as crud_user_answer
from exam_portal.models.exam_attempt import ExamAttempt
from exam_portal.schemas.evaluation import (
    EvaluationFailure,
    EvaluationReport,
    ManualEvaluationItem,
    PendingEvaluation,
)
from exam_portal.schemas.user import UserContext
from exam_portal.services.grading import grade
from exam_portal.services.scoring import score_aggregator
from exam_portal.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class EvaluationCoordinator:
    """Keeps every answer in the ledger either definitively scored or
    explicitly pending manual evaluation."""

    def _missing_question_policy(self) -> MissingQuestionPolicyEnum:
        return MissingQuestionPolicyEnum(settings.MISSING_QUESTION_POLICY)

    def grade_attempt(self, db: Session, attempt: ExamAttempt) -> None:
        """Auto-grade every answer of ``attempt``. Runs inside the caller's
        finalize transaction and never commits."""
        answers = crud_user_answer.get_all_by_attempt(db, exam_attempt_id=attempt.id)
        questions = crud_question.get_map(db, ids=[a.question_id for a in answers])

        missing_ids = sorted({a.question_id for a in answers if a.question_id not in questions})
        if missing_ids and self._missing_question_policy() == MissingQuestionPolicyEnum.REJECT:
            raise NotFound(
                "Some answered questions no longer exist; the attempt cannot be graded.",
                details={"question_ids": missing_ids},
            )

        for answer in answers:
            question = questions.get(answer.question_id)

            if question is None:
                logger.warning(
                    f"Question {answer.question_id} missing while grading answer {answer.id} "
                    f"of attempt {attempt.id}; scoring zero and flagging"
                )
                crud_user_answer.update(db, db_obj=answer, obj_in={
                    "is_correct": False,
                    "score_awarded": 0.0,
                    "grading_flag": GradingFlagEnum.QUESTION_MISSING,
                })
                continue

            result = grade(question, answer.answer_text)
            if result.verdict is AnswerVerdictEnum.PENDING:
                crud_user_answer.update(db, db_obj=answer, obj_in={
                    "is_correct": None,
                    "score_awarded": None,
                    "grading_flag": None,
                })
            else:
                crud_user_answer.update(db, db_obj=answer, obj_in={
                    "is_correct": result.is_correct,
                    "score_awarded": result.score,
                    "grading_flag": GradingFlagEnum.AUTO,
                })

    @translate_store_errors
    def pending_evaluations(self, db: Session, current_user_context: UserContext,
                            skip: int = 0, limit: int = 100) -> List[PendingEvaluation]:
        permission_helper.require_evaluator(current_user_context)

        rows = crud_exam_attempt.get_pending_evaluations(db, skip=skip, limit=limit)
        return [
            PendingEvaluation(
                attempt_id=attempt.id,
                exam_id=attempt.exam_id,
                user_id=attempt.user_id,
                status=attempt.status,
                submitted_at=attempt.submitted_at,
                total_score=attempt.total_score,
                pending_answers=pending_answers,
            )
            for attempt, pending_answers in rows
        ]

    @translate_store_errors
    def apply_manual_evaluation(self, db: Session, attempt_id: int, items: List[ManualEvaluationItem],
                                current_user_context: UserContext) -> EvaluationReport:
        permission_helper.require_evaluator(current_user_context)

        if not items:
            raise ValidationError("No evaluations provided.")

        answer_ids = [item.answer_id for item in items]
        if len(answer_ids) != len(set(answer_ids)):
            raise ValidationError("Duplicate answer_ids found in evaluation batch.")

        attempt = crud_exam_attempt.get_for_update(db, id=attempt_id)
        if not attempt:
            raise NotFound("Exam attempt not found.")

        if attempt.status not in SUBMITTED_ATTEMPT_STATUSES:
            raise InvalidState("Only submitted attempts can be evaluated.")

        if attempt.status == ExamAttemptStatusEnum.EVALUATED and not settings.ALLOW_REEVALUATION:
            raise InvalidState("This attempt has already been evaluated and re-evaluation is disabled.")

        answers = crud_user_answer.get_map(db, ids=answer_ids)
        questions = crud_question.get_map(db, ids=[a.question_id for a in answers.values()])

        failures: List[EvaluationFailure] = []
        invalid_scores = []
        accepted = []
        for item in items:
            answer = answers.get(item.answer_id)
            if answer is None:
                failures.append(EvaluationFailure(answer_id=item.answer_id, reason="Answer not found."))
                continue
            if answer.exam_attempt_id != attempt.id:
                failures.append(EvaluationFailure(
                    answer_id=item.answer_id, reason="Answer does not belong to this attempt."
                ))
                continue

            question = questions.get(answer.question_id)
            if question is None:
                failures.append(EvaluationFailure(
                    answer_id=item.answer_id, reason="Question no longer exists; score cannot be validated."
                ))
                continue
            if item.score_awarded > question.marks:
                invalid_scores.append({
                    "answer_id": item.answer_id,
                    "score_awarded": item.score_awarded,
                    "max_score": question.marks,
                })
                continue
            accepted.append((item, answer))

        # out-of-range scores reject the whole batch before anything is written
        if invalid_scores:
            raise ValidationError(
                "score_awarded must be between 0 and the question's marks.",
                details={"invalid_scores": invalid_scores},
            )

        for failure in failures:
            logger.warning(
                f"Evaluation of answer {failure.answer_id} on attempt {attempt.id} skipped: {failure.reason}"
            )

        if not accepted:
            return EvaluationReport(
                attempt_id=attempt.id,
                status=attempt.status,
                total_score=attempt.total_score,
                failures=failures,
            )

        for item, answer in accepted:
            crud_user_answer.update(db, db_obj=answer, obj_in={
                "is_correct": item.is_correct,
                "score_awarded": item.score_awarded,
                "evaluated_by": current_user_context.user_id,
                "grading_flag": GradingFlagEnum.MANUAL,
            })

        total_score = score_aggregator.aggregate(db, attempt.id)

        moved = crud_exam_attempt.transition_status(
            db,
            attempt=attempt,
            expected=SUBMITTED_ATTEMPT_STATUSES,
            values={
                "status": ExamAttemptStatusEnum.EVALUATED,
                "total_score": total_score,
                "evaluator_id": current_user_context.user_id,
            },
        )
        if not moved:
            raise InvalidState("Attempt changed state during evaluation.")

        logger.info(
            f"Attempt {attempt.id} evaluated by {current_user_context.user_id}: "
            f"{len(accepted)} applied, {len(failures)} failed, total_score={total_score}"
        )

        return EvaluationReport(
            attempt_id=attempt.id,
            status=attempt.status,
            total_score=attempt.total_score,
            applied=[item.answer_id for item, _ in accepted],
            failures=failures,
        )


evaluation_coordinator = EvaluationCoordinator()
