"""Custom exceptions and error codes."""

from enum import StrEnum
from typing import Any


class ErrorCode(StrEnum):
    """Standardized error codes for the API."""

    # Authentication errors (401)
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_TOKEN = "INVALID_TOKEN"
    TOKEN_EXPIRED = "TOKEN_EXPIRED"

    # Authorization errors (403)
    FORBIDDEN = "FORBIDDEN"
    INSUFFICIENT_PERMISSIONS = "INSUFFICIENT_PERMISSIONS"
    ROLE_CHANGE_NOT_ALLOWED = "ROLE_CHANGE_NOT_ALLOWED"
    ALLOCATION_LIMIT_REACHED = "ALLOCATION_LIMIT_REACHED"

    # Not found errors (404)
    WORKSPACE_NOT_FOUND = "WORKSPACE_NOT_FOUND"
    MEMBER_NOT_FOUND = "MEMBER_NOT_FOUND"
    FUNNEL_NOT_FOUND = "FUNNEL_NOT_FOUND"
    USER_NOT_FOUND = "USER_NOT_FOUND"

    # Validation errors (400)
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_ROLE = "INVALID_ROLE"

    # Conflict errors (409)
    ALREADY_A_MEMBER = "ALREADY_A_MEMBER"
    CONFLICT = "CONFLICT"

    # Rate limiting (429)
    RATE_LIMIT_EXCEEDED = "RATE_LIMIT_EXCEEDED"

    # Server errors (500)
    INTERNAL_ERROR = "INTERNAL_ERROR"
    DATABASE_ERROR = "DATABASE_ERROR"


class AppException(Exception):
    """Base application exception."""

    def __init__(
        self,
        error_code: ErrorCode,
        message: str,
        status_code: int = 400,
        details: Any | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.status_code = status_code
        self.details = details
        super().__init__(self.message)


class AuthenticationError(AppException):
    """Authentication failed."""

    def __init__(
        self,
        message: str = "Authentication required",
        error_code: ErrorCode = ErrorCode.UNAUTHORIZED,
    ) -> None:
        super().__init__(
            error_code=error_code,
            message=message,
            status_code=401,
        )


class WorkspaceAccessNotFoundError(AppException):
    """Workspace is missing, or the user neither owns it nor is a member.

    Both cases share one message so callers cannot probe for workspace ids.
    """

    def __init__(self, workspace_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.WORKSPACE_NOT_FOUND,
            message="Workspace not found or you don't have access to it",
            status_code=404,
            details={"workspace_id": workspace_id},
        )


class WorkspaceForbiddenError(AppException):
    """User is a member but lacks one or more required permissions."""

    def __init__(
        self,
        workspace_name: str,
        missing_permissions: list[str] | None = None,
    ) -> None:
        super().__init__(
            error_code=ErrorCode.FORBIDDEN,
            message=(
                f"You don't have permission to perform this action in workspace "
                f"'{workspace_name}'. Contact the workspace owner or an admin for access."
            ),
            status_code=403,
            details={"missing_permissions": missing_permissions or []},
        )


class InsufficientPermissionsError(AppException):
    """User's role doesn't allow the requested action."""

    def __init__(self, action: str, role: str) -> None:
        readable = action.lower().replace("_", " ")
        super().__init__(
            error_code=ErrorCode.INSUFFICIENT_PERMISSIONS,
            message=(
                f"You don't have permission to {readable}. "
                f"Your role ({role}) doesn't allow this action. "
                "Contact the workspace owner or an admin for access."
            ),
            status_code=403,
            details={"action": action, "role": role},
        )


class RoleChangeNotAllowedError(AppException):
    """Member role or permission change violates the role hierarchy."""

    def __init__(self, reason: str) -> None:
        super().__init__(
            error_code=ErrorCode.ROLE_CHANGE_NOT_ALLOWED,
            message=reason,
            status_code=403,
        )


class AllocationLimitError(AppException):
    """Creating the resource would exceed the plan allocation."""

    def __init__(self, message: str, resource: str, total_allocation: int) -> None:
        super().__init__(
            error_code=ErrorCode.ALLOCATION_LIMIT_REACHED,
            message=message,
            status_code=403,
            details={"resource": resource, "total_allocation": total_allocation},
        )


class MemberNotFoundError(AppException):
    """Membership row not found."""

    def __init__(self, workspace_id: int, user_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.MEMBER_NOT_FOUND,
            message=f"User {user_id} is not a member of this workspace",
            status_code=404,
            details={"workspace_id": workspace_id, "user_id": user_id},
        )


class FunnelNotFoundError(AppException):
    """Funnel not found."""

    def __init__(self, funnel_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.FUNNEL_NOT_FOUND,
            message=f"Funnel not found: {funnel_id}",
            status_code=404,
            details={"funnel_id": funnel_id},
        )


class UserNotFoundError(AppException):
    """User account not found."""

    def __init__(self, user_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.USER_NOT_FOUND,
            message=f"User not found: {user_id}",
            status_code=404,
            details={"user_id": user_id},
        )


class InvalidRoleError(AppException):
    """Role value can't be assigned to a membership."""

    def __init__(self, role: str) -> None:
        super().__init__(
            error_code=ErrorCode.INVALID_ROLE,
            message=f"Invalid role: {role}",
            status_code=400,
            details={"role": role},
        )


class AlreadyAMemberError(AppException):
    """User is already a member (or the owner) of the workspace."""

    def __init__(self, user_id: int) -> None:
        super().__init__(
            error_code=ErrorCode.ALREADY_A_MEMBER,
            message=f"User {user_id} is already a member of this workspace",
            status_code=409,
            details={"user_id": user_id},
        )
