from exam_portal.core.constants import RoleEnum
from exam_portal.core.exceptions import Unauthorized
from exam_portal.models.exam_attempt import ExamAttempt
from exam_portal.schemas.user import UserContext


class PermissionHelper:
    @staticmethod
    def is_admin(context: UserContext) -> bool:
        return context.role == RoleEnum.ADMIN

    @staticmethod
    def is_evaluator(context: UserContext) -> bool:
        return context.role in (RoleEnum.EVALUATOR, RoleEnum.ADMIN)

    @staticmethod
    def is_owner(context: UserContext, attempt: ExamAttempt) -> bool:
        return attempt.user_id == context.user_id

    @staticmethod
    def require_evaluator(context: UserContext):
        if not PermissionHelper.is_evaluator(context):
            raise Unauthorized("Only evaluators can perform this action.")

    @staticmethod
    def require_admin(context: UserContext):
        if not PermissionHelper.is_admin(context):
            raise Unauthorized("Only administrators can perform this action.")

    @staticmethod
    def require_attempt_owner(context: UserContext, attempt: ExamAttempt):
        if not PermissionHelper.is_owner(context, attempt):
            raise Unauthorized("You can only act on your own exam attempts.")

    @staticmethod
    def require_attempt_view_permission(context: UserContext, attempt: ExamAttempt):
        if PermissionHelper.is_owner(context, attempt) or PermissionHelper.is_evaluator(context):
            return
        raise Unauthorized("You can only view your own exam attempts.")
