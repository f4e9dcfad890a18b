import logging
from datetime import datetime
from typing import List, Optional, Tuple
from sqlalchemy.orm import Session

from exam_portal.core.constants import (
    AnswerVerdictEnum,
    ExamAttemptStatusEnum,
    ExamStatusEnum,
    SUBMITTED_ATTEMPT_STATUSES,
)
from exam_portal.core.decorators import translate_store_errors
from exam_portal.core.exceptions import (
    AlreadyCompleted,
    AttemptNotEditable,
    ExamNotActive,
    ExamWindowClosed,
    InvalidState,
    NotFound,
    ValidationError,
)
from exam_portal.crud.exam import exam as crud_exam
from exam_portal.crud.exam_attempt import exam_attempt as crud_exam_attempt
from exam_portal.crud.question import question as crud_question
from exam_portal.crud.user_answer import user_answer as crud_user_answer
from exam_portal.models.exam import Exam
from exam_portal.models.exam_attempt import ExamAttempt
from exam_portal.models.question import Question
from exam_portal.models.user_answer import UserAnswer
from exam_portal.schemas.exam import Exam as ExamSchema
from exam_portal.schemas.exam_attempt import (
    AnswerResult,
    ExamAttempt as ExamAttemptSchema,
    ExamAttemptProgress,
    ExamAttemptResult,
    ResultStatistics,
)
from exam_portal.schemas.user import UserContext
from exam_portal.schemas.user_answer import UserAnswerCreate
from exam_portal.services.evaluation import evaluation_coordinator
from exam_portal.services.scoring import percentage_of, score_aggregator
from exam_portal.utils.clock import ensure_utc, utcnow
from exam_portal.utils.permission import PermissionHelper as permission_helper

logger = logging.getLogger(__name__)


class ExamAttemptService:

    def _require_exam_open(self, exam: Exam, now: datetime):
        if exam.status != ExamStatusEnum.ACTIVE:
            raise ExamNotActive()

        start_date = ensure_utc(exam.start_date)
        end_date = ensure_utc(exam.end_date)
        if start_date and now < start_date:
            raise ExamWindowClosed("Exam has not started yet.")
        if end_date and now > end_date:
            raise ExamWindowClosed("Exam has ended.")

    def _get_attempt_for_update(self, db: Session, attempt_id: int) -> ExamAttempt:
        attempt = crud_exam_attempt.get_for_update(db, id=attempt_id)
        if not attempt:
            raise NotFound("Exam attempt not found.")
        return attempt

    def _require_editable(self, current_user_context: UserContext, attempt: ExamAttempt):
        permission_helper.require_attempt_owner(current_user_context, attempt)
        if attempt.status != ExamAttemptStatusEnum.PENDING:
            raise AttemptNotEditable()

    def _validate_question_belongs_to_exam(self, question: Optional[Question], attempt: ExamAttempt, question_id: int):
        if question is None:
            raise NotFound(f"Question {question_id} not found.")
        if question.exam_id != attempt.exam_id:
            raise ValidationError("Question does not belong to this exam attempt.")

    @translate_store_errors
    def start_exam_attempt(self, db: Session, exam_id: int, current_user_context: UserContext,
                           now: Optional[datetime] = None) -> Tuple[ExamAttempt, Exam]:
        now = ensure_utc(now) or utcnow()

        exam = crud_exam.get_with_questions(db, id=exam_id)
        if not exam:
            raise NotFound("Exam not found.")

        self._require_exam_open(exam, now)

        user_id = current_user_context.user_id
        pending = crud_exam_attempt.get_pending(db, user_id=user_id, exam_id=exam_id)
        if pending:
            return pending, exam

        if crud_exam_attempt.get_submitted(db, user_id=user_id, exam_id=exam_id):
            raise AlreadyCompleted("You have already completed this exam.")

        attempt = crud_exam_attempt.create_guarded(db, obj_in={
            "user_id": user_id,
            "exam_id": exam_id,
            "started_at": now,
            "status": ExamAttemptStatusEnum.PENDING,
        })
        if attempt is None:
            # lost the race on the pending-attempt index; resume the winner's row
            attempt = crud_exam_attempt.get_pending(db, user_id=user_id, exam_id=exam_id)
            if attempt is None:
                raise AlreadyCompleted("You have already completed this exam.")
            return attempt, exam

        logger.info(f"User {user_id} started attempt {attempt.id} on exam {exam_id}")
        return attempt, exam

    @translate_store_errors
    def get_exam_questions(self, db: Session, exam_id: int, current_user_context: UserContext) -> List[Question]:
        exam = crud_exam.get(db, id=exam_id)
        if not exam:
            raise NotFound("Exam not found.")
        if not permission_helper.is_evaluator(current_user_context) and exam.status != ExamStatusEnum.ACTIVE:
            raise ExamNotActive()
        return crud_question.get_by_exam(db, exam_id=exam_id)

    @translate_store_errors
    def submit_answer(self, db: Session, attempt_id: int, question_id: int,
                      answer_text: Optional[str], current_user_context: UserContext) -> UserAnswer:
        attempt = self._get_attempt_for_update(db, attempt_id)
        self._require_editable(current_user_context, attempt)

        question = crud_question.get(db, id=question_id)
        self._validate_question_belongs_to_exam(question, attempt, question_id)

        return crud_user_answer.upsert(
            db,
            exam_attempt_id=attempt.id,
            question_id=question_id,
            answer_text=answer_text,
        )

    @translate_store_errors
    def submit_bulk_answers(self, db: Session, attempt_id: int, answers_in: List[UserAnswerCreate],
                            current_user_context: UserContext) -> List[UserAnswer]:
        if not answers_in:
            raise ValidationError("No answers provided.")

        question_ids = [ans.question_id for ans in answers_in]
        if len(question_ids) != len(set(question_ids)):
            raise ValidationError("Duplicate question_ids found in submission.")

        attempt = self._get_attempt_for_update(db, attempt_id)
        self._require_editable(current_user_context, attempt)

        exam_questions = {q.id for q in crud_question.get_by_exam(db, exam_id=attempt.exam_id)}
        invalid_questions = [qid for qid in question_ids if qid not in exam_questions]
        if invalid_questions:
            raise ValidationError(
                f"Invalid question_id(s): {invalid_questions}. All questions must belong to the exam.",
                details={"question_ids": invalid_questions},
            )

        return [
            crud_user_answer.upsert(
                db,
                exam_attempt_id=attempt.id,
                question_id=answer_in.question_id,
                answer_text=answer_in.answer_text,
            )
            for answer_in in answers_in
        ]

    @translate_store_errors
    def submit_exam(self, db: Session, attempt_id: int, current_user_context: UserContext,
                    now: Optional[datetime] = None) -> ExamAttempt:
        now = ensure_utc(now) or utcnow()

        attempt = self._get_attempt_for_update(db, attempt_id)
        permission_helper.require_attempt_owner(current_user_context, attempt)

        if attempt.status != ExamAttemptStatusEnum.PENDING:
            raise AlreadyCompleted()

        evaluation_coordinator.grade_attempt(db, attempt)
        total_score = score_aggregator.aggregate(db, attempt.id)

        moved = crud_exam_attempt.transition_status(
            db,
            attempt=attempt,
            expected=(ExamAttemptStatusEnum.PENDING,),
            values={
                "status": ExamAttemptStatusEnum.COMPLETED,
                "submitted_at": now,
                "total_score": total_score,
            },
        )
        if not moved:
            raise AlreadyCompleted()

        logger.info(
            f"Attempt {attempt.id} completed by user {attempt.user_id} with provisional score {total_score}"
        )
        return crud_exam_attempt.get_with_answers(db, id=attempt.id)

    @translate_store_errors
    def get_exam_attempt(self, db: Session, attempt_id: int, current_user_context: UserContext) -> ExamAttempt:
        attempt = crud_exam_attempt.get_with_answers(db, id=attempt_id)
        if not attempt:
            raise NotFound("Exam attempt not found.")

        permission_helper.require_attempt_view_permission(current_user_context, attempt)
        return attempt

    @translate_store_errors
    def get_attempt_progress(self, db: Session, attempt_id: int, current_user_context: UserContext) -> ExamAttemptProgress:
        attempt = crud_exam_attempt.get(db, id=attempt_id)
        if not attempt:
            raise NotFound("Exam attempt not found.")

        permission_helper.require_attempt_view_permission(current_user_context, attempt)

        return ExamAttemptProgress(
            attempt_id=attempt.id,
            status=attempt.status,
            answered_questions=crud_user_answer.count_by_attempt(db, exam_attempt_id=attempt.id),
            total_questions=crud_question.count_by_exam(db, exam_id=attempt.exam_id),
            editable=attempt.status == ExamAttemptStatusEnum.PENDING,
        )

    def _answer_result(self, answer: UserAnswer, question: Optional[Question], reveal_key: bool) -> AnswerResult:
        result = AnswerResult(
            answer_id=answer.id,
            question_id=answer.question_id,
            answer_text=answer.answer_text,
            verdict=answer.verdict,
            score_awarded=answer.score_awarded,
            grading_flag=answer.grading_flag,
        )
        if question is not None:
            result.question_text = question.question_text
            result.question_type = question.type
            result.options = question.options
            result.max_score = float(question.marks)
            if reveal_key:
                result.correct_answer = question.correct_answer
        return result

    @translate_store_errors
    def get_attempt_result(self, db: Session, attempt_id: int, current_user_context: UserContext) -> ExamAttemptResult:
        """Scored summary of a submitted attempt. Answer keys are shown to admins only."""
        attempt = crud_exam_attempt.get(db, id=attempt_id)
        if not attempt:
            raise NotFound("Exam attempt not found.")

        permission_helper.require_attempt_view_permission(current_user_context, attempt)
        if attempt.status not in SUBMITTED_ATTEMPT_STATUSES:
            raise InvalidState("Exam has not been completed yet.")

        exam = crud_exam.get(db, id=attempt.exam_id)
        answers = crud_user_answer.get_all_by_attempt(db, exam_attempt_id=attempt.id)
        questions = crud_question.get_map(db, ids=[a.question_id for a in answers])

        def _position(answer: UserAnswer):
            question = questions.get(answer.question_id)
            # answers to deleted questions go last
            return (question is None, question.order_number if question else 0, answer.id)

        reveal_key = permission_helper.is_admin(current_user_context)
        details = [
            self._answer_result(answer, questions.get(answer.question_id), reveal_key)
            for answer in sorted(answers, key=_position)
        ]

        verdicts = [answer.verdict for answer in answers]
        pending = verdicts.count(AnswerVerdictEnum.PENDING)
        total_score = float(attempt.total_score or 0.0)

        time_taken = None
        if attempt.submitted_at and attempt.started_at:
            elapsed = ensure_utc(attempt.submitted_at) - ensure_utc(attempt.started_at)
            time_taken = round(elapsed.total_seconds() / 60, 2)

        return ExamAttemptResult(
            attempt=ExamAttemptSchema.model_validate(attempt),
            exam=ExamSchema.model_validate(exam),
            time_taken_minutes=time_taken,
            statistics=ResultStatistics(
                total_questions=crud_question.count_by_exam(db, exam_id=attempt.exam_id),
                answered_questions=len(answers),
                correct_answers=verdicts.count(AnswerVerdictEnum.CORRECT),
                incorrect_answers=verdicts.count(AnswerVerdictEnum.INCORRECT),
                pending_evaluation=pending,
                total_score=total_score,
                percentage=percentage_of(total_score, exam.total_marks),
                passed=None if pending else total_score >= exam.passing_marks,
            ),
            answers=details,
        )

    @translate_store_errors
    def get_user_exam_attempts(self, db: Session, current_user_context: UserContext,
                               skip: int = 0, limit: int = 100) -> List[ExamAttempt]:
        return crud_exam_attempt.get_all_by_user(
            db, user_id=current_user_context.user_id, skip=skip, limit=limit
        )


exam_attempt_service = ExamAttemptService()
