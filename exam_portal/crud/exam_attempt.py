from typing import List, Optional, Tuple
from sqlalchemy import func, update
from sqlalchemy.orm import Session, selectinload

from exam_portal.core.constants import ExamAttemptStatusEnum, QuestionTypeEnum, SUBMITTED_ATTEMPT_STATUSES
from exam_portal.crud.base import CRUDBase
from exam_portal.models.exam_attempt import ExamAttempt
from exam_portal.models.question import Question
from exam_portal.models.user_answer import UserAnswer
from exam_portal.schemas.exam_attempt import ExamAttempt as ExamAttemptSchema

class CRUDExamAttempt(CRUDBase[ExamAttempt, ExamAttemptSchema, ExamAttemptSchema]):

    def _query_with_relationships(self, db: Session):
        return db.query(ExamAttempt).options(selectinload(ExamAttempt.user_answers))

    def get_with_answers(self, db: Session, id: int) -> Optional[ExamAttempt]:
        return self._query_with_relationships(db).filter(ExamAttempt.id == id).first()

    def get_pending(self, db: Session, *, user_id: int, exam_id: int) -> Optional[ExamAttempt]:
        return (
            db.query(ExamAttempt)
            .filter(ExamAttempt.user_id == user_id)
            .filter(ExamAttempt.exam_id == exam_id)
            .filter(ExamAttempt.status == ExamAttemptStatusEnum.PENDING)
            .first()
        )

    def get_submitted(self, db: Session, *, user_id: int, exam_id: int) -> Optional[ExamAttempt]:
        return (
            db.query(ExamAttempt)
            .filter(ExamAttempt.user_id == user_id)
            .filter(ExamAttempt.exam_id == exam_id)
            .filter(ExamAttempt.status.in_(SUBMITTED_ATTEMPT_STATUSES))
            .order_by(ExamAttempt.submitted_at.desc())
            .first()
        )

    def get_submitted_by_user(self, db: Session, *, user_id: int) -> List[ExamAttempt]:
        return (
            self._query_with_relationships(db)
            .options(selectinload(ExamAttempt.exam))
            .filter(ExamAttempt.user_id == user_id)
            .filter(ExamAttempt.status.in_(SUBMITTED_ATTEMPT_STATUSES))
            .order_by(ExamAttempt.submitted_at.desc())
            .all()
        )

    def get_all_by_user(self, db: Session, *, user_id: int, skip: int = 0, limit: int = 100) -> List[ExamAttempt]:
        return (
            db.query(ExamAttempt)
            .filter(ExamAttempt.user_id == user_id)
            .order_by(ExamAttempt.started_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def transition_status(
        self,
        db: Session,
        *,
        attempt: ExamAttempt,
        expected: Tuple[ExamAttemptStatusEnum, ...],
        values: dict,
    ) -> bool:
        """Compare-and-set on status. Returns False when another transaction
        already moved the attempt out of ``expected``."""
        result = db.execute(
            update(ExamAttempt)
            .where(ExamAttempt.id == attempt.id)
            .where(ExamAttempt.status.in_(expected))
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            return False
        db.refresh(attempt)
        return True

    def get_pending_evaluations(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Tuple[ExamAttempt, int]]:
        pending_count = func.count(UserAnswer.id).label("pending_answers")
        return (
            db.query(ExamAttempt, pending_count)
            .join(UserAnswer, UserAnswer.exam_attempt_id == ExamAttempt.id)
            .join(Question, Question.id == UserAnswer.question_id)
            .filter(ExamAttempt.status.in_(SUBMITTED_ATTEMPT_STATUSES))
            .filter(UserAnswer.is_correct.is_(None))
            .filter(Question.type == QuestionTypeEnum.TEXT)
            .group_by(ExamAttempt.id)
            .order_by(ExamAttempt.submitted_at.asc(), ExamAttempt.id.asc())
            .offset(skip)
            .limit(limit)
            .all()
        )


exam_attempt = CRUDExamAttempt(ExamAttempt)
