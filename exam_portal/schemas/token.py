from pydantic import BaseModel
from exam_portal.core.constants import RoleEnum

class Token(BaseModel):
    access_token: str
    token_type: str

class TokenPayload(BaseModel):
    user_id: int | None = None
    role: RoleEnum = RoleEnum.STUDENT
    jti: str | None = None
    exp: int | None = None
