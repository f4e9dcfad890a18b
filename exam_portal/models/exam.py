from sqlalchemy import Column, Integer, String, DateTime, Float, Enum
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from exam_portal.core.database import Base
from exam_portal.core.constants import ExamStatusEnum

class Exam(Base):
    __tablename__ = "exams"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(String, nullable=True)
    total_marks = Column(Float, nullable=False, default=0)
    passing_marks = Column(Float, nullable=False, default=0)
    start_date = Column(DateTime(timezone=True), nullable=True)
    end_date = Column(DateTime(timezone=True), nullable=True)
    status = Column(Enum(ExamStatusEnum), nullable=False, default=ExamStatusEnum.DRAFT)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    questions = relationship(
        "Question",
        back_populates="exam",
        order_by="Question.order_number",
        cascade="all, delete-orphan",
    )
    attempts = relationship("ExamAttempt", back_populates="exam", cascade="all, delete-orphan")
