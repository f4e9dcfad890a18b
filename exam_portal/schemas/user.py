from pydantic import BaseModel
from exam_portal.core.constants import RoleEnum

class UserContext(BaseModel):
    """Identity of the caller, passed explicitly into every service call."""
    user_id: int
    role: RoleEnum = RoleEnum.STUDENT
