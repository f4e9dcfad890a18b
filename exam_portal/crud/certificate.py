from typing import List, Optional
from sqlalchemy.orm import Session

from exam_portal.crud.base import CRUDBase
from exam_portal.models.certificate import Certificate
from exam_portal.schemas.certificate import Certificate as CertificateSchema

class CRUDCertificate(CRUDBase[Certificate, CertificateSchema, CertificateSchema]):
    def get_by_user_and_exam(self, db: Session, *, user_id: int, exam_id: int) -> Optional[Certificate]:
        return (
            db.query(Certificate)
            .filter(Certificate.user_id == user_id)
            .filter(Certificate.exam_id == exam_id)
            .first()
        )

    def get_by_verification_code(self, db: Session, *, code: str) -> Optional[Certificate]:
        return db.query(Certificate).filter(Certificate.verification_code == code).first()

    def get_by_certificate_number(self, db: Session, *, number: str) -> Optional[Certificate]:
        return db.query(Certificate).filter(Certificate.certificate_number == number).first()

    def get_all_by_user(self, db: Session, *, user_id: int) -> List[Certificate]:
        return (
            db.query(Certificate)
            .filter(Certificate.user_id == user_id)
            .order_by(Certificate.issued_at.desc())
            .all()
        )


certificate = CRUDCertificate(Certificate)
