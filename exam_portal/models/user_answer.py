from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Boolean, Float, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from exam_portal.core.database import Base
from exam_portal.core.constants import AnswerVerdictEnum, GradingFlagEnum

class UserAnswer(Base):
    __tablename__ = "user_answers"
    __table_args__ = (
        UniqueConstraint("exam_attempt_id", "question_id", name="uq_user_answers_attempt_question"),
    )

    id = Column(Integer, primary_key=True, index=True)
    exam_attempt_id = Column(Integer, ForeignKey("exam_attempts.id", ondelete="CASCADE"), nullable=False, index=True)
    # no FK: questions belong to the authoring side and may disappear under us
    question_id = Column(Integer, nullable=False)
    answer_text = Column(String, nullable=True)
    is_correct = Column(Boolean, nullable=True) # NULL = awaiting evaluation
    score_awarded = Column(Float, nullable=True)
    evaluated_by = Column(Integer, nullable=True)
    grading_flag = Column(Enum(GradingFlagEnum), nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    exam_attempt = relationship("ExamAttempt", back_populates="user_answers")

    @property
    def verdict(self) -> AnswerVerdictEnum:
        if self.is_correct is None:
            return AnswerVerdictEnum.PENDING
        return AnswerVerdictEnum.CORRECT if self.is_correct else AnswerVerdictEnum.INCORRECT
