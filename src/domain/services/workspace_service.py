"""Workspace service layer with business logic."""

import logging
import re
from collections.abc import Callable, Iterable

from core.exceptions import (
    AlreadyAMemberError,
    InvalidRoleError,
    MemberNotFoundError,
    RoleChangeNotAllowedError,
    UserNotFoundError,
)
from domain.allocations import ResourceKind
from domain.entities.access import WorkspaceAccessResult
from domain.entities.workspace import (
    Workspace,
    WorkspaceMember,
    WorkspacePermission,
    WorkspaceRole,
)
from domain.permissions import (
    PermissionAction,
    can_affect_role,
    permission_change_denial,
    role_change_denial,
)
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access_service import require_action, resolve_workspace_access
from domain.services.allocation_service import load_owner_add_ons, require_capacity

logger = logging.getLogger(__name__)

# Matches the workspaces.slug column
SLUG_MAX_LENGTH = 100


class WorkspaceService:
    """Service layer for Workspace business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_by_id(self, workspace_id: int, user_id: int) -> Workspace:
        """Get a workspace by ID, verifying ownership or membership."""
        async with self._uow_factory() as uow:
            await resolve_workspace_access(uow, user_id, workspace_id)
            return await uow.workspaces.get(workspace_id)  # type: ignore[no-any-return]

    async def create(self, user_id: int, name: str) -> Workspace:
        """Create a workspace owned by the user, within their workspace allocation.

        The new workspace inherits the owner's plan tier.
        """
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)

            add_ons = await uow.add_ons.list_for_user(user_id)
            owned = await uow.workspaces.count_owned_by(user_id)
            require_capacity(ResourceKind.WORKSPACES, owned, user.plan, add_ons)

            slug = await self._unique_slug(uow, self._generate_slug(name))

            workspace = Workspace(
                name=name,
                slug=slug,
                owner_id=user_id,
                plan_type=user.plan,
            )

            created = await uow.workspaces.create(workspace)
            await uow.commit()
            logger.info("User %s created workspace %s", user_id, created.id)
            return created  # type: ignore[no-any-return]

    async def get_members(self, workspace_id: int, user_id: int) -> list[WorkspaceMember]:
        """Get all members of a workspace. Any member may view them."""
        async with self._uow_factory() as uow:
            access = await resolve_workspace_access(uow, user_id, workspace_id)
            require_action(access, PermissionAction.VIEW_MEMBERS)
            return await uow.workspaces.get_members(workspace_id)  # type: ignore[no-any-return]

    async def add_member(
        self,
        workspace_id: int,
        user_id: int,
        target_user_id: int,
        role: WorkspaceRole = WorkspaceRole.VIEWER,
        permissions: Iterable[WorkspacePermission] = (),
    ) -> WorkspaceMember:
        """Add a member directly. Requires MANAGE_MEMBERS.

        Only the owner can add admins, and only while admin slots remain.
        """
        async with self._uow_factory() as uow:
            access = await resolve_workspace_access(uow, user_id, workspace_id)
            require_action(access, PermissionAction.INVITE_MEMBER)

            if role == WorkspaceRole.OWNER:
                raise InvalidRoleError(role.value)
            if role == WorkspaceRole.ADMIN and not access.is_owner:
                raise RoleChangeNotAllowedError(
                    "Only the workspace owner can promote members to admin"
                )

            target = await uow.users.get(target_user_id)
            if target is None:
                raise UserNotFoundError(target_user_id)

            existing = await uow.workspaces.get_member(workspace_id, target_user_id)
            if existing or target_user_id == access.workspace.owner_id:
                raise AlreadyAMemberError(target_user_id)

            if role == WorkspaceRole.ADMIN:
                await self._require_admin_slot(uow, workspace_id)

            member = WorkspaceMember(
                workspace_id=workspace_id,
                user_id=target_user_id,
                role=role,
                permissions=_dedupe(permissions),
                invited_by=user_id,
            )
            added = await uow.workspaces.add_member(member)
            await uow.commit()
            return added  # type: ignore[no-any-return]

    async def update_member_role(
        self,
        workspace_id: int,
        user_id: int,
        target_user_id: int,
        role: WorkspaceRole,
    ) -> WorkspaceMember:
        """Change a member's role under the role-hierarchy rules.

        Promotion to ADMIN also needs a free admin slot.
        """
        async with self._uow_factory() as uow:
            access = await resolve_workspace_access(uow, user_id, workspace_id)
            require_action(access, PermissionAction.MODIFY_MEMBER_ROLE)

            if target_user_id == access.workspace.owner_id:
                if access.is_owner:
                    raise RoleChangeNotAllowedError(
                        "The workspace owner cannot change their own role"
                    )
                raise RoleChangeNotAllowedError("Only the workspace owner can modify the owner")

            target_member = await self._get_member(uow, access, target_user_id)

            denial = role_change_denial(
                access.user_role, access.user_permissions, target_member.role, role
            )
            if denial:
                raise RoleChangeNotAllowedError(denial)

            if role == WorkspaceRole.ADMIN and target_member.role != WorkspaceRole.ADMIN:
                await self._require_admin_slot(uow, workspace_id)

            old_role = target_member.role
            target_member.role = role
            updated = await uow.workspaces.update_member(target_member)
            await uow.commit()
            logger.info(
                "Member %s role changed %s -> %s in workspace %s",
                target_user_id,
                old_role,
                role,
                workspace_id,
            )
            return updated  # type: ignore[no-any-return]

    async def update_member_permissions(
        self,
        workspace_id: int,
        user_id: int,
        target_user_id: int,
        permissions: Iterable[WorkspacePermission],
    ) -> WorkspaceMember:
        """Replace an editor's or viewer's permission set."""
        async with self._uow_factory() as uow:
            access = await resolve_workspace_access(uow, user_id, workspace_id)
            require_action(access, PermissionAction.MODIFY_MEMBER_PERMISSIONS)

            if target_user_id == access.workspace.owner_id:
                raise RoleChangeNotAllowedError(
                    "Permissions can only be assigned to editors and viewers"
                )

            target_member = await self._get_member(uow, access, target_user_id)

            denial = permission_change_denial(
                access.user_role, access.user_permissions, target_member.role
            )
            if denial:
                raise RoleChangeNotAllowedError(denial)

            target_member.permissions = _dedupe(permissions)
            updated = await uow.workspaces.update_member(target_member)
            await uow.commit()
            return updated  # type: ignore[no-any-return]

    async def remove_member(
        self,
        workspace_id: int,
        user_id: int,
        target_user_id: int,
    ) -> bool:
        """Remove a member from a workspace.

        - Members can always remove themselves (leave)
        - The owner cannot leave their own workspace
        - Otherwise MANAGE_MEMBERS is needed and the target must rank lower
        """
        async with self._uow_factory() as uow:
            access = await resolve_workspace_access(uow, user_id, workspace_id)

            if user_id == target_user_id:
                if access.is_owner:
                    raise RoleChangeNotAllowedError(
                        "The workspace owner cannot leave their own workspace"
                    )
            else:
                require_action(access, PermissionAction.REMOVE_MEMBER)
                if target_user_id == access.workspace.owner_id:
                    target_role = WorkspaceRole.OWNER
                else:
                    target_role = (await self._get_member(uow, access, target_user_id)).role
                if not can_affect_role(access.user_role, target_role):
                    raise RoleChangeNotAllowedError(
                        f"You cannot remove a member with the {target_role} role"
                    )

            removed = await uow.workspaces.remove_member(workspace_id, target_user_id)
            await uow.commit()
            return removed  # type: ignore[no-any-return]

    async def _get_member(
        self,
        uow: IUnitOfWork,
        access: WorkspaceAccessResult,
        target_user_id: int,
    ) -> WorkspaceMember:
        """Load a membership row. The owner has none, so callers handle them first."""
        member = await uow.workspaces.get_member(access.workspace.id, target_user_id)
        if member is None:
            raise MemberNotFoundError(access.workspace.id, target_user_id)
        return member  # type: ignore[no-any-return]

    async def _require_admin_slot(self, uow: IUnitOfWork, workspace_id: int) -> None:
        workspace = await uow.workspaces.get(workspace_id)
        add_ons = await load_owner_add_ons(uow, workspace)
        admins = await uow.workspaces.count_members_with_role(workspace_id, WorkspaceRole.ADMIN)
        require_capacity(ResourceKind.ADMINS, admins, workspace.plan_type, add_ons)

    @staticmethod
    async def _unique_slug(uow: IUnitOfWork, base: str) -> str:
        """Append -2, -3, ... to the base slug until it is free."""
        slug = base
        suffix = 1
        while await uow.workspaces.get_by_slug(slug) is not None:
            suffix += 1
            tail = f"-{suffix}"
            slug = base[: SLUG_MAX_LENGTH - len(tail)].rstrip("-") + tail
        return slug

    @staticmethod
    def _generate_slug(name: str) -> str:
        """Generate a URL-friendly slug from a workspace name."""
        slug = name.lower().strip()
        slug = re.sub(r"[^a-z0-9\s-]", "", slug)
        slug = re.sub(r"[\s_]+", "-", slug)
        slug = re.sub(r"-+", "-", slug)
        slug = slug.strip("-")
        return slug[:SLUG_MAX_LENGTH].rstrip("-") if slug else "workspace"


def _dedupe(permissions: Iterable[WorkspacePermission]) -> list[WorkspacePermission]:
    return list(dict.fromkeys(WorkspacePermission(p) for p in permissions))
