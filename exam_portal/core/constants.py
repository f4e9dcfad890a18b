from enum import Enum


class RoleEnum(str, Enum):
    STUDENT = "student"
    EVALUATOR = "evaluator"
    ADMIN = "admin"

class ExamStatusEnum(str, Enum):
    DRAFT = "draft"
    ACTIVE = "active"
    CLOSED = "closed"

class QuestionTypeEnum(str, Enum):
    MCQ = "mcq"
    TRUE_FALSE = "truefalse"
    TEXT = "text"

AUTO_GRADED_QUESTION_TYPES = (QuestionTypeEnum.MCQ, QuestionTypeEnum.TRUE_FALSE)

class ExamAttemptStatusEnum(str, Enum):
    PENDING = "pending"
    COMPLETED = "completed"
    EVALUATED = "evaluated"

SUBMITTED_ATTEMPT_STATUSES = (ExamAttemptStatusEnum.COMPLETED, ExamAttemptStatusEnum.EVALUATED)

class AnswerVerdictEnum(str, Enum):
    CORRECT = "correct"
    INCORRECT = "incorrect"
    PENDING = "pending"

class GradingFlagEnum(str, Enum):
    AUTO = "auto"
    MANUAL = "manual"
    QUESTION_MISSING = "question_missing"

class MissingQuestionPolicyEnum(str, Enum):
    ZERO_AND_FLAG = "zero_and_flag"
    REJECT = "reject"

class CertificateStatusEnum(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"

class IneligibilityReasonEnum(str, Enum):
    NOT_SUBMITTED = "NotSubmitted"
    PENDING_EVALUATION = "PendingEvaluation"
    BELOW_PASSING_MARKS = "BelowPassingMarks"
