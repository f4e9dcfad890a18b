from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Float, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from exam_portal.core.database import Base
from exam_portal.core.constants import CertificateStatusEnum

class Certificate(Base):
    __tablename__ = "certificates"
    __table_args__ = (
        UniqueConstraint("user_id", "exam_id", name="uq_certificates_user_exam"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, nullable=False, index=True)
    exam_id = Column(Integer, ForeignKey("exams.id"), nullable=False)
    exam_attempt_id = Column(Integer, ForeignKey("exam_attempts.id"), nullable=False)
    certificate_number = Column(String, unique=True, nullable=True, index=True)
    verification_code = Column(String, unique=True, nullable=False, index=True)
    status = Column(Enum(CertificateStatusEnum), nullable=False, default=CertificateStatusEnum.ACTIVE)
    score = Column(Float, nullable=False)
    total_marks = Column(Float, nullable=False)
    percentage = Column(Float, nullable=False)
    issued_at = Column(DateTime(timezone=True), nullable=False)
    issued_by = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    exam = relationship("Exam")
    exam_attempt = relationship("ExamAttempt")
