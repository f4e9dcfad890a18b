from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime

from exam_portal.core.constants import AnswerVerdictEnum, GradingFlagEnum

class UserAnswerBase(BaseModel):
    question_id: int
    answer_text: Optional[str] = Field(default=None, max_length=10000)

class UserAnswerCreate(UserAnswerBase):
    pass

class UserAnswer(UserAnswerBase):
    id: int
    exam_attempt_id: int
    is_correct: Optional[bool] = None
    verdict: AnswerVerdictEnum = AnswerVerdictEnum.PENDING
    score_awarded: Optional[float] = None
    evaluated_by: Optional[int] = None
    grading_flag: Optional[GradingFlagEnum] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
