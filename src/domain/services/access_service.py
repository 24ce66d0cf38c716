"""Workspace access resolution."""

import logging
from collections.abc import Callable, Iterable

from core.exceptions import (
    FunnelNotFoundError,
    InsufficientPermissionsError,
    WorkspaceAccessNotFoundError,
    WorkspaceForbiddenError,
)
from domain.entities.access import (
    Access,
    MemberAccess,
    OwnerAccess,
    WorkspaceAccessResult,
    WorkspaceCapabilities,
    WorkspaceRef,
)
from domain.entities.funnel import Funnel
from domain.entities.workspace import WorkspacePermission
from domain.permissions import PermissionAction, allowed_actions, can_perform, missing_permissions
from domain.repositories.unit_of_work import IUnitOfWork

logger = logging.getLogger(__name__)


async def resolve_workspace_access(
    uow: IUnitOfWork,
    user_id: int,
    workspace_id: int,
    required_permissions: Iterable[WorkspacePermission] = (),
) -> WorkspaceAccessResult:
    """Resolve a user's role and permissions in a workspace.

    Raises WorkspaceAccessNotFoundError when the workspace is missing or the
    user is neither its owner nor a member, and WorkspaceForbiddenError when
    the user has access but misses a required permission.
    """
    workspace = await uow.workspaces.get(workspace_id)

    access: Access | None = None
    if workspace is not None:
        if workspace.owner_id == user_id:
            access = OwnerAccess()
        else:
            member = await uow.workspaces.get_member(workspace_id, user_id)
            if member is not None:
                access = MemberAccess(role=member.role, permissions=tuple(member.permissions))

    if workspace is None or access is None:
        raise WorkspaceAccessNotFoundError(workspace_id)

    required = list(required_permissions)
    if required and not isinstance(access, OwnerAccess):
        missing = missing_permissions(access.role, access.permissions, required)
        if missing:
            logger.info(
                "User %s denied in workspace %s: missing %s",
                user_id,
                workspace_id,
                ", ".join(missing),
            )
            raise WorkspaceForbiddenError(workspace.name, missing)

    return WorkspaceAccessResult(
        has_access=True,
        workspace=WorkspaceRef(id=workspace_id, name=workspace.name, owner_id=workspace.owner_id),
        access=access,
    )


async def resolve_funnel_access(
    uow: IUnitOfWork,
    user_id: int,
    funnel_id: int,
    required_permissions: Iterable[WorkspacePermission] = (),
) -> tuple[Funnel, WorkspaceAccessResult]:
    """Load a funnel and resolve access to its workspace.

    A missing funnel and a funnel in a workspace the user cannot see both
    raise FunnelNotFoundError.
    """
    funnel = await uow.funnels.get(funnel_id)
    if funnel is None:
        raise FunnelNotFoundError(funnel_id)
    try:
        access = await resolve_workspace_access(
            uow, user_id, funnel.workspace_id, required_permissions
        )
    except WorkspaceAccessNotFoundError:
        raise FunnelNotFoundError(funnel_id) from None
    return funnel, access


def require_action(access: WorkspaceAccessResult, action: PermissionAction) -> None:
    """Raise InsufficientPermissionsError unless the access allows the action."""
    if not can_perform(action, access.user_role, access.user_permissions):
        raise InsufficientPermissionsError(action.value, access.user_role.value)


class WorkspaceAccessService:
    """Service layer for resolving workspace access."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def resolve_access(
        self,
        user_id: int,
        workspace_id: int,
        required_permissions: Iterable[WorkspacePermission] = (),
    ) -> WorkspaceAccessResult:
        """Resolve access with its own read-only unit of work."""
        async with self._uow_factory() as uow:
            return await resolve_workspace_access(uow, user_id, workspace_id, required_permissions)

    async def get_capabilities(self, user_id: int, workspace_id: int) -> WorkspaceCapabilities:
        """Evaluate every guarded action for the user in the workspace."""
        access = await self.resolve_access(user_id, workspace_id)
        return WorkspaceCapabilities(
            workspace=access.workspace,
            role=access.user_role,
            permissions=access.user_permissions,
            allowed_actions=[
                action.value for action in allowed_actions(access.user_role, access.user_permissions)
            ],
        )
