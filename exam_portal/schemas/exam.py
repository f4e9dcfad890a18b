from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from exam_portal.core.constants import ExamStatusEnum
from exam_portal.schemas.question import QuestionPublic

class ExamBase(BaseModel):
    title: str
    description: Optional[str] = None
    total_marks: float
    passing_marks: float
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    status: ExamStatusEnum = ExamStatusEnum.DRAFT

    model_config = ConfigDict(json_schema_extra={
        "example": {
            "title": "Final Exam",
            "description": "End of term assessment",
            "total_marks": 100,
            "passing_marks": 50,
            "start_date": "2025-01-01T09:00:00Z",
            "end_date": "2025-01-01T12:00:00Z",
            "status": "active"
        }
    })

class ExamCreate(ExamBase):
    pass

class Exam(ExamBase):
    id: int
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)

class ExamWithQuestions(Exam):
    questions: List[QuestionPublic] = []
