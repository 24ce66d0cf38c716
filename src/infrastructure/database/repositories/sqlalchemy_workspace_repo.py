"""SQLAlchemy implementation of Workspace repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.workspace import (
    PlanTier,
    Workspace,
    WorkspaceMember,
    WorkspacePermission,
    WorkspaceRole,
)
from infrastructure.database.models import WorkspaceMemberModel, WorkspaceModel

# Map string role values in DB to WorkspaceRole enum
_ROLE_TO_ENUM = {
    "admin": WorkspaceRole.ADMIN,
    "editor": WorkspaceRole.EDITOR,
    "viewer": WorkspaceRole.VIEWER,
}

_ENUM_TO_ROLE = {v: k for k, v in _ROLE_TO_ENUM.items()}

_PLANS = {tier.value: tier for tier in PlanTier}
_PERMISSIONS = {perm.value: perm for perm in WorkspacePermission}


def to_plan(value: str) -> PlanTier | str:
    """Map a stored plan to PlanTier, keeping unknown values as-is."""
    return _PLANS.get(value, value)


class SQLAlchemyWorkspaceRepository:
    """SQLAlchemy implementation of IWorkspaceRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: int) -> Workspace | None:
        """Get a workspace by ID."""
        stmt = select(WorkspaceModel).where(WorkspaceModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def get_by_slug(self, slug: str) -> Workspace | None:
        """Get a workspace by slug."""
        stmt = select(WorkspaceModel).where(WorkspaceModel.slug == slug)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, workspace: Workspace) -> Workspace:
        """Create a new workspace."""
        model = self._to_model(workspace)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def count_owned_by(self, user_id: int) -> int:
        """Count the workspaces a user owns."""
        stmt = (
            select(func.count())
            .select_from(WorkspaceModel)
            .where(WorkspaceModel.owner_id == user_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def get_member(self, workspace_id: int, user_id: int) -> WorkspaceMember | None:
        """Get a workspace member by workspace and user IDs."""
        model = await self._get_member_model(workspace_id, user_id)
        return self._member_to_entity(model) if model else None

    async def get_members(self, workspace_id: int) -> list[WorkspaceMember]:
        """Get all members of a workspace."""
        stmt = (
            select(WorkspaceMemberModel)
            .where(WorkspaceMemberModel.workspace_id == workspace_id)
            .order_by(WorkspaceMemberModel.joined_at)
        )
        result = await self._session.execute(stmt)
        return [self._member_to_entity(model) for model in result.scalars()]

    async def add_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Add a member to a workspace."""
        model = self._member_to_model(member)
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._member_to_entity(model)

    async def update_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Persist a member's role and permissions."""
        model = await self._get_member_model(member.workspace_id, member.user_id)

        if not model:
            raise ValueError("Member not found in workspace")

        model.role = _ENUM_TO_ROLE[member.role]
        model.permissions = [str(p) for p in member.permissions]
        await self._session.flush()
        return self._member_to_entity(model)

    async def remove_member(self, workspace_id: int, user_id: int) -> bool:
        """Remove a member from a workspace."""
        model = await self._get_member_model(workspace_id, user_id)

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def count_members_with_role(self, workspace_id: int, role: WorkspaceRole) -> int:
        """Count the members of a workspace holding a role."""
        stmt = (
            select(func.count())
            .select_from(WorkspaceMemberModel)
            .where(
                WorkspaceMemberModel.workspace_id == workspace_id,
                WorkspaceMemberModel.role == _ENUM_TO_ROLE[role],
            )
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def _get_member_model(
        self, workspace_id: int, user_id: int
    ) -> WorkspaceMemberModel | None:
        stmt = select(WorkspaceMemberModel).where(
            WorkspaceMemberModel.workspace_id == workspace_id,
            WorkspaceMemberModel.user_id == user_id,
        )
        result = await self._session.execute(stmt)
        return result.scalar_one_or_none()

    def _to_entity(self, model: WorkspaceModel) -> Workspace:
        """Convert ORM model to domain entity."""
        return Workspace(
            id=model.id,
            name=model.name,
            slug=model.slug,
            owner_id=model.owner_id,
            plan_type=to_plan(model.plan_type),  # type: ignore[arg-type]
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_model(self, entity: Workspace) -> WorkspaceModel:
        """Convert domain entity to ORM model."""
        return WorkspaceModel(
            id=entity.id,
            name=entity.name,
            slug=entity.slug,
            owner_id=entity.owner_id,
            plan_type=str(entity.plan_type),
            created_at=entity.created_at,
            updated_at=entity.updated_at,
        )

    def _member_to_entity(self, model: WorkspaceMemberModel) -> WorkspaceMember:
        """Convert member ORM model to domain entity.

        Permissions no longer in the closed set are dropped.
        """
        return WorkspaceMember(
            workspace_id=model.workspace_id,
            user_id=model.user_id,
            role=_ROLE_TO_ENUM[model.role],
            permissions=[_PERMISSIONS[p] for p in model.permissions or [] if p in _PERMISSIONS],
            joined_at=model.joined_at,
            invited_by=model.invited_by,
        )

    def _member_to_model(self, entity: WorkspaceMember) -> WorkspaceMemberModel:
        """Convert member domain entity to ORM model."""
        return WorkspaceMemberModel(
            workspace_id=entity.workspace_id,
            user_id=entity.user_id,
            role=_ENUM_TO_ROLE[entity.role],
            permissions=[str(p) for p in entity.permissions],
            joined_at=entity.joined_at,
            invited_by=entity.invited_by,
        )
