from typing import Optional
from sqlalchemy.orm import Session, selectinload

from exam_portal.crud.base import CRUDBase
from exam_portal.models.exam import Exam
from exam_portal.schemas.exam import ExamCreate

class CRUDExam(CRUDBase[Exam, ExamCreate, ExamCreate]):
    def get_with_questions(self, db: Session, id: int) -> Optional[Exam]:
        return (
            db.query(Exam)
            .options(selectinload(Exam.questions))
            .filter(Exam.id == id)
            .first()
        )

exam = CRUDExam(Exam)
