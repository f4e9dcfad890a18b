from typing import List
from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from exam_portal.schemas.response import APIResponse
from exam_portal.utils import deps
from exam_portal.schemas.exam import ExamWithQuestions
from exam_portal.schemas.question import QuestionPublic
from exam_portal.schemas.exam_attempt import ExamAttempt, ExamAttemptStart
from exam_portal.schemas.user import UserContext
from exam_portal.services.exam_attempt import exam_attempt_service

router = APIRouter()

@router.get("/{exam_id}/questions", response_model=APIResponse[List[QuestionPublic]])
async def get_exam_questions(
    *,
    db: Session = Depends(deps.get_db),
    exam_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    questions = exam_attempt_service.get_exam_questions(db, exam_id=exam_id, current_user_context=context)
    return APIResponse(
        message="Exam questions retrieved successfully",
        data=[QuestionPublic.model_validate(q) for q in questions]
    )


@router.post("/{exam_id}/attempts", response_model=APIResponse[ExamAttemptStart], status_code=status.HTTP_201_CREATED)
async def start_exam_attempt(
    *,
    db: Session = Depends(deps.get_transactional_db, scope="function"),
    exam_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    attempt, exam = exam_attempt_service.start_exam_attempt(db, exam_id=exam_id, current_user_context=context)
    return APIResponse(
        message="Exam attempt started successfully",
        data=ExamAttemptStart(
            attempt=ExamAttempt.model_validate(attempt),
            exam=ExamWithQuestions.model_validate(exam)
        )
    )
