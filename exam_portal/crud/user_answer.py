from typing import Dict, Iterable, List, Optional
from sqlalchemy.orm import Session

from exam_portal.crud.base import CRUDBase
from exam_portal.models.user_answer import UserAnswer
from exam_portal.schemas.user_answer import UserAnswerCreate

class CRUDUserAnswer(CRUDBase[UserAnswer, UserAnswerCreate, UserAnswerCreate]):

    def get_by_attempt_and_question(self, db: Session, *, exam_attempt_id: int,
                                    question_id: int) -> Optional[UserAnswer]:
        return (
            db.query(UserAnswer)
            .filter(UserAnswer.exam_attempt_id == exam_attempt_id)
            .filter(UserAnswer.question_id == question_id)
            .first()
        )

    def get_all_by_attempt(self, db: Session, *, exam_attempt_id: int) -> List[UserAnswer]:
        return (
            db.query(UserAnswer)
            .filter(UserAnswer.exam_attempt_id == exam_attempt_id)
            .order_by(UserAnswer.id)
            .all()
        )

    def get_map(self, db: Session, *, ids: Iterable[int]) -> Dict[int, UserAnswer]:
        ids = set(ids)
        if not ids:
            return {}
        return {a.id: a for a in db.query(UserAnswer).filter(UserAnswer.id.in_(ids)).all()}

    def upsert(self, db: Session, *, exam_attempt_id: int, question_id: int,
               answer_text: Optional[str]) -> UserAnswer:
        """Insert or overwrite the single answer row for (attempt, question).

        A concurrent insert of the same pair loses on the unique constraint and
        falls through to an update of the winner's row (last write wins).
        """
        existing = self.get_by_attempt_and_question(
            db, exam_attempt_id=exam_attempt_id, question_id=question_id
        )
        if existing is None:
            created = self.create_guarded(db, obj_in={
                "exam_attempt_id": exam_attempt_id,
                "question_id": question_id,
                "answer_text": answer_text,
            })
            if created is not None:
                return created
            existing = self.get_by_attempt_and_question(
                db, exam_attempt_id=exam_attempt_id, question_id=question_id
            )
        return self.update(db, db_obj=existing, obj_in={"answer_text": answer_text})

    def count_by_attempt(self, db: Session, *, exam_attempt_id: int) -> int:
        return db.query(UserAnswer).filter(UserAnswer.exam_attempt_id == exam_attempt_id).count()

    def get_scores(self, db: Session, *, exam_attempt_id: int) -> List[Optional[float]]:
        rows = (
            db.query(UserAnswer.score_awarded)
            .filter(UserAnswer.exam_attempt_id == exam_attempt_id)
            .all()
        )
        return [score for (score,) in rows]


user_answer = CRUDUserAnswer(UserAnswer)
