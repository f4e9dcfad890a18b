from typing import Iterable, Optional
from sqlalchemy.orm import Session

from exam_portal.crud.user_answer import user_answer as crud_user_answer


def aggregate_scores(scores: Iterable[Optional[float]]) -> float:
    """Sum awarded scores; ungraded (None) entries contribute nothing."""
    return float(sum(score for score in scores if score is not None))


def percentage_of(score: float, total_marks: float) -> float:
    if not total_marks:
        return 0.0
    return round(score / total_marks * 100, 1)


class ScoreAggregator:
    def aggregate(self, db: Session, attempt_id: int) -> float:
        # flush first so the read sees this transaction's pending grade updates
        db.flush()
        return aggregate_scores(crud_user_answer.get_scores(db, exam_attempt_id=attempt_id))


score_aggregator = ScoreAggregator()
