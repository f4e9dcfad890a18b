from typing import Dict, Iterable, List
from sqlalchemy.orm import Session

from exam_portal.crud.base import CRUDBase
from exam_portal.models.question import Question
from exam_portal.schemas.question import QuestionCreate

class CRUDQuestion(CRUDBase[Question, QuestionCreate, QuestionCreate]):
    def get_by_exam(self, db: Session, *, exam_id: int) -> List[Question]:
        return (
            db.query(self.model)
            .filter(self.model.exam_id == exam_id)
            .order_by(self.model.order_number, self.model.id)
            .all()
        )

    def get_map(self, db: Session, *, ids: Iterable[int]) -> Dict[int, Question]:
        ids = set(ids)
        if not ids:
            return {}
        return {q.id: q for q in db.query(self.model).filter(self.model.id.in_(ids)).all()}

    def count_by_exam(self, db: Session, *, exam_id: int) -> int:
        return db.query(self.model).filter(self.model.exam_id == exam_id).count()

question = CRUDQuestion(Question)
