import pytest

from exam_portal.core.constants import AnswerVerdictEnum, GradingFlagEnum, RoleEnum
from exam_portal.core.exceptions import InvalidState, Unauthorized
from exam_portal.crud.user_answer import user_answer as crud_user_answer
from exam_portal.schemas.evaluation import ManualEvaluationItem
from exam_portal.schemas.user import UserContext
from exam_portal.services.evaluation import evaluation_coordinator
from exam_portal.services.exam_attempt import exam_attempt_service


@pytest.fixture
def submitted_attempt(db_session, two_question_exam, student_context):
    exam, q1, q2 = two_question_exam
    attempt, _ = exam_attempt_service.start_exam_attempt(db_session, exam.id, student_context)
    exam_attempt_service.submit_answer(db_session, attempt.id, q2.id, "my essay", student_context)
    exam_attempt_service.submit_answer(db_session, attempt.id, q1.id, "A", student_context)
    exam_attempt_service.submit_exam(db_session, attempt.id, student_context)
    return attempt


def test_result_counts_pending_answers(db_session, submitted_attempt, two_question_exam, student_context):
    _, q1, q2 = two_question_exam
    result = exam_attempt_service.get_attempt_result(db_session, submitted_attempt.id, student_context)

    stats = result.statistics
    assert stats.total_questions == 2
    assert stats.answered_questions == 2
    assert stats.correct_answers == 1
    assert stats.incorrect_answers == 0
    assert stats.pending_evaluation == 1
    assert stats.total_score == 5
    assert stats.percentage == 33.3
    assert stats.passed is None
    assert [a.question_id for a in result.answers] == [q1.id, q2.id]
    assert result.answers[1].verdict == AnswerVerdictEnum.PENDING
    assert result.time_taken_minutes is not None


def test_result_after_evaluation_reports_pass(db_session, submitted_attempt, two_question_exam, student_context,
                                              evaluator_context):
    _, _, q2 = two_question_exam
    essay = crud_user_answer.get_by_attempt_and_question(
        db_session, exam_attempt_id=submitted_attempt.id, question_id=q2.id
    )
    evaluation_coordinator.apply_manual_evaluation(
        db_session, submitted_attempt.id, [ManualEvaluationItem(answer_id=essay.id, is_correct=True, score_awarded=8)],
        evaluator_context,
    )

    stats = exam_attempt_service.get_attempt_result(db_session, submitted_attempt.id, student_context).statistics
    assert stats.pending_evaluation == 0
    assert stats.correct_answers == 2
    assert stats.total_score == 13
    assert stats.passed is True


def test_answer_key_is_shown_to_admins_only(db_session, submitted_attempt, student_context, evaluator_context,
                                            admin_context):
    student_view = exam_attempt_service.get_attempt_result(db_session, submitted_attempt.id, student_context)
    evaluator_view = exam_attempt_service.get_attempt_result(db_session, submitted_attempt.id, evaluator_context)
    admin_view = exam_attempt_service.get_attempt_result(db_session, submitted_attempt.id, admin_context)

    assert all(a.correct_answer is None for a in student_view.answers)
    assert all(a.correct_answer is None for a in evaluator_view.answers)
    assert admin_view.answers[0].correct_answer == "A"
    assert admin_view.answers[0].max_score == 5


def test_result_of_pending_attempt(db_session, two_question_exam, student_context):
    exam, _, _ = two_question_exam
    attempt, _ = exam_attempt_service.start_exam_attempt(db_session, exam.id, student_context)

    with pytest.raises(InvalidState):
        exam_attempt_service.get_attempt_result(db_session, attempt.id, student_context)


def test_result_hidden_from_other_students(db_session, submitted_attempt, user_ids):
    intruder = UserContext(user_id=user_ids(), role=RoleEnum.STUDENT)
    with pytest.raises(Unauthorized):
        exam_attempt_service.get_attempt_result(db_session, submitted_attempt.id, intruder)


def test_answer_to_deleted_question_is_listed_last(db_session, two_question_exam, student_context):
    exam, q1, _ = two_question_exam
    attempt, _ = exam_attempt_service.start_exam_attempt(db_session, exam.id, student_context)
    orphan = crud_user_answer.upsert(db_session, exam_attempt_id=attempt.id, question_id=999999, answer_text="?")
    exam_attempt_service.submit_answer(db_session, attempt.id, q1.id, "B", student_context)
    exam_attempt_service.submit_exam(db_session, attempt.id, student_context)

    result = exam_attempt_service.get_attempt_result(db_session, attempt.id, student_context)

    last = result.answers[-1]
    assert last.answer_id == orphan.id
    assert last.question_text is None
    assert last.grading_flag == GradingFlagEnum.QUESTION_MISSING
    assert result.statistics.incorrect_answers == 2
    assert result.statistics.passed is False
