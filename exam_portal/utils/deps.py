from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.orm import Session
from exam_portal.core.database import SessionLocal
from exam_portal.core.decorators import translate_store_errors
from exam_portal.core.exceptions import InvalidToken
from exam_portal.core.security import authenticate
from exam_portal.schemas.user import UserContext

http_bearer = HTTPBearer(auto_error=False)

def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

@translate_store_errors
def commit_session(db: Session):
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

def get_transactional_db():
    """One request, one transaction.

    Mutating routes depend on this with ``scope="function"`` so the commit runs
    before the response is sent and a failed commit reaches the client as an
    error instead of a 2xx.
    """
    db = SessionLocal()
    try:
        yield db
    except Exception:
        db.rollback()
        raise
    else:
        commit_session(db)
    finally:
        db.close()

def get_current_user_context(
    credentials: HTTPAuthorizationCredentials = Depends(http_bearer)
) -> UserContext:
    if credentials is None or not credentials.credentials:
        raise InvalidToken("No authentication token available")

    token_data = authenticate(credentials.credentials)
    return UserContext(user_id=token_data.user_id, role=token_data.role)
