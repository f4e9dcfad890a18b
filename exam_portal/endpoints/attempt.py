from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.schemas.response import APIResponse
from exam_portal.utils import deps
from exam_portal.schemas.exam_attempt import ExamAttempt, ExamAttemptDetails, ExamAttemptProgress, ExamAttemptResult
from exam_portal.schemas.user_answer import UserAnswer, UserAnswerCreate
from exam_portal.schemas.user import UserContext
from exam_portal.services.exam_attempt import exam_attempt_service

router = APIRouter()

@router.get("/me", response_model=APIResponse[List[ExamAttempt]])
async def get_my_exam_attempts(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_context),
    skip: int = 0,
    limit: int = 100
):
    attempts = exam_attempt_service.get_user_exam_attempts(db, current_user_context=context, skip=skip, limit=limit)
    return APIResponse(message="Exam attempts retrieved successfully", data=[ExamAttempt.model_validate(a) for a in attempts])


@router.post("/{attempt_id}/answers", response_model=APIResponse[UserAnswer])
async def submit_answer(
    *,
    db: Session = Depends(deps.get_transactional_db, scope="function"),
    attempt_id: int,
    answer_in: UserAnswerCreate,
    context: UserContext = Depends(deps.get_current_user_context)
):
    user_answer = exam_attempt_service.submit_answer(
        db,
        attempt_id=attempt_id,
        question_id=answer_in.question_id,
        answer_text=answer_in.answer_text,
        current_user_context=context
    )
    return APIResponse(message="Answer saved successfully", data=UserAnswer.model_validate(user_answer))


@router.post("/{attempt_id}/answers/bulk", response_model=APIResponse[List[UserAnswer]])
async def submit_bulk_answers(
    *,
    db: Session = Depends(deps.get_transactional_db, scope="function"),
    attempt_id: int,
    answers_in: List[UserAnswerCreate],
    context: UserContext = Depends(deps.get_current_user_context)
):
    user_answers = exam_attempt_service.submit_bulk_answers(
        db,
        attempt_id=attempt_id,
        answers_in=answers_in,
        current_user_context=context
    )
    return APIResponse(message="Answers saved successfully", data=[UserAnswer.model_validate(ua) for ua in user_answers])


@router.post("/{attempt_id}/submit", response_model=APIResponse[ExamAttemptDetails])
async def submit_exam(
    *,
    db: Session = Depends(deps.get_transactional_db, scope="function"),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    completed_attempt = exam_attempt_service.submit_exam(db, attempt_id=attempt_id, current_user_context=context)
    return APIResponse(
        message="Exam submitted successfully. Results will be available after evaluation.",
        data=ExamAttemptDetails.model_validate(completed_attempt)
    )


@router.get("/{attempt_id}", response_model=APIResponse[ExamAttemptDetails])
async def get_exam_attempt(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    attempt = exam_attempt_service.get_exam_attempt(db, attempt_id=attempt_id, current_user_context=context)
    return APIResponse(message="Exam attempt retrieved successfully", data=ExamAttemptDetails.model_validate(attempt))


@router.get("/{attempt_id}/progress", response_model=APIResponse[ExamAttemptProgress])
async def get_exam_attempt_progress(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    progress = exam_attempt_service.get_attempt_progress(db, attempt_id=attempt_id, current_user_context=context)
    return APIResponse(message="Exam attempt progress retrieved successfully", data=progress)


@router.get("/{attempt_id}/result", response_model=APIResponse[ExamAttemptResult])
async def get_exam_attempt_result(
    *,
    db: Session = Depends(deps.get_db),
    attempt_id: int,
    context: UserContext = Depends(deps.get_current_user_context)
):
    result = exam_attempt_service.get_attempt_result(db, attempt_id=attempt_id, current_user_context=context)
    return APIResponse(message="Exam result retrieved successfully", data=result)
