"""Shared fixtures for unit tests."""

from typing import Any
from unittest.mock import AsyncMock

import pytest

from domain.entities.workspace import (
    PlanTier,
    Workspace,
    WorkspaceMember,
    WorkspacePermission,
    WorkspaceRole,
)


class FakeUnitOfWork:
    """Fake Unit of Work with repository mocks for unit testing."""

    def __init__(self) -> None:
        self.users = AsyncMock()
        self.add_ons = AsyncMock()
        self.workspaces = AsyncMock()
        self.funnels = AsyncMock()
        self.add_ons.list_for_user.return_value = []
        self.committed = False
        self.rolled_back = False

    async def commit(self) -> None:
        self.committed = True

    async def rollback(self) -> None:
        self.rolled_back = True

    async def __aenter__(self) -> "FakeUnitOfWork":
        return self

    async def __aexit__(self, *args: Any) -> None:
        pass


def make_member(
    workspace_id: int,
    user_id: int,
    role: WorkspaceRole,
    permissions: list[WorkspacePermission] | None = None,
) -> WorkspaceMember:
    return WorkspaceMember(
        workspace_id=workspace_id,
        user_id=user_id,
        role=role,
        permissions=permissions or [],
    )


@pytest.fixture
def uow() -> FakeUnitOfWork:
    """Create a fresh FakeUnitOfWork."""
    return FakeUnitOfWork()


@pytest.fixture
def owner_id() -> int:
    """ID of the workspace owner."""
    return 10


@pytest.fixture
def user_id() -> int:
    """ID of a non-owner user."""
    return 20


@pytest.fixture
def target_id() -> int:
    """ID of a member being acted upon (distinct from user_id)."""
    return 30


@pytest.fixture
def workspace_id() -> int:
    return 100


@pytest.fixture
def workspace(workspace_id: int, owner_id: int) -> Workspace:
    return Workspace(
        id=workspace_id,
        name="Acme Launches",
        slug="acme-launches",
        owner_id=owner_id,
        plan_type=PlanTier.BUSINESS,
    )
