from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from exam_portal.schemas.response import APIResponse
from exam_portal.utils import deps
from exam_portal.schemas.evaluation import EvaluationReport, ManualEvaluationRequest, PendingEvaluation
from exam_portal.schemas.user import UserContext
from exam_portal.services.evaluation import evaluation_coordinator

router = APIRouter()

@router.get("/pending", response_model=APIResponse[List[PendingEvaluation]])
async def get_pending_evaluations(
    db: Session = Depends(deps.get_db),
    context: UserContext = Depends(deps.get_current_user_context),
    skip: int = 0,
    limit: int = 100
):
    pending = evaluation_coordinator.pending_evaluations(db, current_user_context=context, skip=skip, limit=limit)
    return APIResponse(message="Pending evaluations retrieved successfully", data=pending)


@router.post("/attempts/{attempt_id}", response_model=APIResponse[EvaluationReport])
async def apply_manual_evaluation(
    *,
    db: Session = Depends(deps.get_transactional_db, scope="function"),
    attempt_id: int,
    evaluation_in: ManualEvaluationRequest,
    context: UserContext = Depends(deps.get_current_user_context)
):
    report = evaluation_coordinator.apply_manual_evaluation(
        db,
        attempt_id=attempt_id,
        items=evaluation_in.evaluations,
        current_user_context=context
    )
    if report.fully_applied:
        message = "Evaluation submitted successfully"
    elif report.applied:
        message = "Evaluation partially applied; see failures"
    else:
        message = "No evaluations were applied; see failures"
    return APIResponse(message=message, data=report)
