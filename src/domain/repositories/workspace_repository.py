"""Workspace repository protocol."""

from typing import Protocol

from domain.entities.workspace import Workspace, WorkspaceMember, WorkspaceRole


class IWorkspaceRepository(Protocol):
    """Repository interface for Workspace entities."""

    async def get(self, id: int) -> Workspace | None:
        """Get a workspace by ID."""
        ...

    async def get_by_slug(self, slug: str) -> Workspace | None:
        """Get a workspace by slug."""
        ...

    async def create(self, workspace: Workspace) -> Workspace:
        """Create a new workspace."""
        ...

    async def count_owned_by(self, user_id: int) -> int:
        """Count the workspaces a user owns."""
        ...

    async def get_member(self, workspace_id: int, user_id: int) -> WorkspaceMember | None:
        """Get a workspace member by workspace and user IDs."""
        ...

    async def get_members(self, workspace_id: int) -> list[WorkspaceMember]:
        """Get all members of a workspace."""
        ...

    async def add_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Add a member to a workspace."""
        ...

    async def update_member(self, member: WorkspaceMember) -> WorkspaceMember:
        """Persist a member's role and permissions."""
        ...

    async def remove_member(self, workspace_id: int, user_id: int) -> bool:
        """Remove a member from a workspace."""
        ...

    async def count_members_with_role(self, workspace_id: int, role: WorkspaceRole) -> int:
        """Count the members of a workspace holding a role."""
        ...
