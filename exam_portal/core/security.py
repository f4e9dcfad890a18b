from datetime import datetime, timedelta, timezone
from typing import Optional
import uuid

from jose import jwt, JWTError
from pydantic import ValidationError as PydanticValidationError

from exam_portal.core.config import settings
from exam_portal.core.constants import RoleEnum
from exam_portal.core.exceptions import InvalidToken
from exam_portal.schemas.token import TokenPayload


def create_access_token(user_id: int, role: RoleEnum, expires_delta: Optional[timedelta] = None) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode = {
        "user_id": user_id,
        "role": RoleEnum(role).value,
        "exp": expire,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def authenticate(token: str) -> TokenPayload:
    """Resolve a bearer token into its verified payload or raise InvalidToken."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
        token_data = TokenPayload(**payload)
    except JWTError:
        raise InvalidToken()
    except PydanticValidationError:
        raise InvalidToken("Invalid token payload")

    if token_data.user_id is None:
        raise InvalidToken("Invalid token payload")
    return token_data
