from pydantic import BaseModel, ConfigDict, Field
from typing import Optional, List

from exam_portal.core.constants import QuestionTypeEnum

class QuestionBase(BaseModel):
    exam_id: int
    question_text: str
    type: QuestionTypeEnum
    options: Optional[List[str]] = None
    marks: int = Field(default=1, gt=0)
    order_number: int = 0

    model_config = ConfigDict(use_enum_values=True)

class QuestionCreate(QuestionBase):
    correct_answer: Optional[str] = None

class QuestionPublic(QuestionBase):
    """What a learner sees. Never carries the correct answer."""
    id: int

    model_config = ConfigDict(from_attributes=True)
