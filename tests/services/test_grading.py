from exam_portal.core.constants import AnswerVerdictEnum, QuestionTypeEnum
from exam_portal.models.question import Question
from exam_portal.services.grading import grade


def _question(type, marks=5, correct_answer=None):
    return Question(question_text="Q", type=type, marks=marks, correct_answer=correct_answer)


def test_mcq_exact_match_awards_full_marks():
    result = grade(_question(QuestionTypeEnum.MCQ, marks=5, correct_answer="B"), "B")
    assert result.verdict is AnswerVerdictEnum.CORRECT
    assert result.is_correct is True
    assert result.score == 5


def test_mcq_match_is_case_sensitive():
    result = grade(_question(QuestionTypeEnum.MCQ, marks=5, correct_answer="B"), "b")
    assert result.is_correct is False
    assert result.score == 0


def test_mcq_does_not_normalize_whitespace():
    result = grade(_question(QuestionTypeEnum.MCQ, marks=5, correct_answer="B"), " B")
    assert result.verdict is AnswerVerdictEnum.INCORRECT


def test_truefalse_is_auto_graded():
    question = _question(QuestionTypeEnum.TRUE_FALSE, marks=2, correct_answer="true")
    assert grade(question, "true").score == 2
    assert grade(question, "false").score == 0


def test_missing_answer_is_incorrect():
    result = grade(_question(QuestionTypeEnum.MCQ, correct_answer="A"), None)
    assert result.verdict is AnswerVerdictEnum.INCORRECT
    assert result.score == 0


def test_objective_question_without_key_never_matches():
    result = grade(_question(QuestionTypeEnum.MCQ, correct_answer=None), "A")
    assert result.is_correct is False


def test_text_answers_stay_pending_not_zero():
    result = grade(_question(QuestionTypeEnum.TEXT, marks=10), "a long essay")
    assert result.verdict is AnswerVerdictEnum.PENDING
    assert result.is_correct is None
    assert result.score is None


def test_plain_string_kind_is_accepted():
    result = grade(_question("mcq", marks=3, correct_answer="C"), "C")
    assert result.score == 3
