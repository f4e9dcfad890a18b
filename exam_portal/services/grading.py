"""Auto-grading of objective questions.

Grading is a pure function of the question definition and the submitted
text. Objective kinds are compared with exact, case-sensitive string
equality; free-text answers are never auto-graded and come back pending so
that "awaiting evaluation" stays distinguishable from "scored zero".
"""
from typing import NamedTuple, Optional

from exam_portal.core.constants import AnswerVerdictEnum, AUTO_GRADED_QUESTION_TYPES, QuestionTypeEnum
from exam_portal.models.question import Question


class GradeResult(NamedTuple):
    verdict: AnswerVerdictEnum
    score: Optional[float]

    @property
    def is_correct(self) -> Optional[bool]:
        if self.verdict is AnswerVerdictEnum.PENDING:
            return None
        return self.verdict is AnswerVerdictEnum.CORRECT


PENDING_RESULT = GradeResult(AnswerVerdictEnum.PENDING, None)


def grade(question: Question, answer_text: Optional[str]) -> GradeResult:
    question_type = QuestionTypeEnum(question.type)

    if question_type in AUTO_GRADED_QUESTION_TYPES:
        correct = (
            answer_text is not None
            and question.correct_answer is not None
            and answer_text == question.correct_answer
        )
        if correct:
            return GradeResult(AnswerVerdictEnum.CORRECT, float(question.marks))
        return GradeResult(AnswerVerdictEnum.INCORRECT, 0.0)

    return PENDING_RESULT
