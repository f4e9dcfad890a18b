from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from exam_portal.core.constants import ExamAttemptStatusEnum

class ManualEvaluationItem(BaseModel):
    answer_id: int
    is_correct: bool
    score_awarded: float = Field(..., ge=0)

class ManualEvaluationRequest(BaseModel):
    evaluations: List[ManualEvaluationItem] = Field(..., min_length=1)

class EvaluationFailure(BaseModel):
    answer_id: int
    reason: str

class EvaluationReport(BaseModel):
    """Outcome of one evaluation batch; failures are never folded into success."""
    attempt_id: int
    status: ExamAttemptStatusEnum
    total_score: Optional[float] = None
    applied: List[int] = []
    failures: List[EvaluationFailure] = []

    @property
    def fully_applied(self) -> bool:
        return not self.failures

class PendingEvaluation(BaseModel):
    attempt_id: int
    exam_id: int
    user_id: int
    status: ExamAttemptStatusEnum
    submitted_at: Optional[datetime] = None
    total_score: Optional[float] = None
    pending_answers: int
