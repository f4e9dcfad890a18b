from sqlalchemy import Column, Integer, DateTime, ForeignKey, Float, Enum, Index, text
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from exam_portal.core.database import Base
from exam_portal.core.constants import ExamAttemptStatusEnum

_PENDING_ONLY = text("status = 'PENDING'")

class ExamAttempt(Base):
    __tablename__ = "exam_attempts"
    __table_args__ = (
        # at most one pending attempt per (user, exam)
        Index(
            "uq_exam_attempts_pending_user_exam",
            "user_id",
            "exam_id",
            unique=True,
            postgresql_where=_PENDING_ONLY,
            sqlite_where=_PENDING_ONLY,
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False, index=True)
    started_at = Column(DateTime(timezone=True), nullable=False)
    submitted_at = Column(DateTime(timezone=True), nullable=True)
    status = Column(Enum(ExamAttemptStatusEnum), nullable=False, default=ExamAttemptStatusEnum.PENDING)
    total_score = Column(Float, nullable=True)
    evaluator_id = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    exam = relationship("Exam", back_populates="attempts")
    user_answers = relationship(
        "UserAnswer",
        back_populates="exam_attempt",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
