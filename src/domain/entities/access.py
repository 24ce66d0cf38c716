"""Workspace access resolution results."""

from dataclasses import dataclass, field

from domain.entities.workspace import WorkspacePermission, WorkspaceRole


@dataclass(frozen=True)
class OwnerAccess:
    """The user owns the workspace."""

    @property
    def role(self) -> WorkspaceRole:
        return WorkspaceRole.OWNER

    @property
    def permissions(self) -> tuple[WorkspacePermission, ...]:
        return ()


@dataclass(frozen=True)
class MemberAccess:
    """The user holds a membership row in the workspace."""

    role: WorkspaceRole
    permissions: tuple[WorkspacePermission, ...] = ()


Access = OwnerAccess | MemberAccess


@dataclass(frozen=True)
class WorkspaceRef:
    """Projection of a workspace carried on an access result."""

    id: int
    name: str
    owner_id: int


@dataclass(frozen=True)
class WorkspaceAccessResult:
    """Outcome of resolving a user's access to a workspace.

    Built fresh for every check and never cached, so it always reflects
    the current membership state.
    """

    has_access: bool
    workspace: WorkspaceRef
    access: Access

    @property
    def user_role(self) -> WorkspaceRole:
        return self.access.role

    @property
    def user_permissions(self) -> list[WorkspacePermission]:
        return list(self.access.permissions)

    @property
    def is_owner(self) -> bool:
        return isinstance(self.access, OwnerAccess)


@dataclass(frozen=True)
class WorkspaceCapabilities:
    """Every guarded action the caller may perform in a workspace."""

    workspace: WorkspaceRef
    role: WorkspaceRole
    permissions: list[WorkspacePermission]
    allowed_actions: list[str] = field(default_factory=list)
