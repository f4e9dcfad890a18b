from pydantic import BaseModel, ConfigDict
from typing import Optional, List
from datetime import datetime

from exam_portal.core.constants import AnswerVerdictEnum, ExamAttemptStatusEnum, GradingFlagEnum, QuestionTypeEnum
from exam_portal.schemas.exam import Exam, ExamWithQuestions
from exam_portal.schemas.user_answer import UserAnswer

class ExamAttempt(BaseModel):
    id: int
    user_id: int
    exam_id: int
    started_at: datetime
    submitted_at: Optional[datetime] = None
    status: ExamAttemptStatusEnum
    total_score: Optional[float] = None
    evaluator_id: Optional[int] = None

    model_config = ConfigDict(from_attributes=True)

class ExamAttemptDetails(ExamAttempt):
    user_answers: List[UserAnswer] = []

class ExamAttemptStart(BaseModel):
    attempt: ExamAttempt
    exam: ExamWithQuestions

class ExamAttemptProgress(BaseModel):
    attempt_id: int
    status: ExamAttemptStatusEnum
    answered_questions: int
    total_questions: int
    editable: bool

class AnswerResult(BaseModel):
    """One graded answer. Question fields are empty when the question no longer exists."""
    answer_id: int
    question_id: int
    question_text: Optional[str] = None
    question_type: Optional[QuestionTypeEnum] = None
    options: Optional[List[str]] = None
    answer_text: Optional[str] = None
    correct_answer: Optional[str] = None
    verdict: AnswerVerdictEnum
    score_awarded: Optional[float] = None
    max_score: Optional[float] = None
    grading_flag: Optional[GradingFlagEnum] = None

class ResultStatistics(BaseModel):
    total_questions: int
    answered_questions: int
    correct_answers: int
    incorrect_answers: int
    pending_evaluation: int
    total_score: float
    percentage: float
    passed: Optional[bool] = None # None while answers await evaluation

class ExamAttemptResult(BaseModel):
    attempt: ExamAttempt
    exam: Exam
    time_taken_minutes: Optional[float] = None
    statistics: ResultStatistics
    answers: List[AnswerResult] = []
