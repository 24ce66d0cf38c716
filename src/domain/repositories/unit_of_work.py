"""Unit of Work protocol."""

from typing import Protocol

from domain.repositories.account_repository import IAddOnRepository, IUserRepository
from domain.repositories.funnel_repository import IFunnelRepository
from domain.repositories.workspace_repository import IWorkspaceRepository


class IUnitOfWork(Protocol):
    """Unit of Work interface for managing transactions."""

    users: IUserRepository
    add_ons: IAddOnRepository
    workspaces: IWorkspaceRepository
    funnels: IFunnelRepository

    async def commit(self) -> None:
        """Commit the current transaction."""
        ...

    async def rollback(self) -> None:
        """Rollback the current transaction."""
        ...

    async def __aenter__(self) -> "IUnitOfWork":
        """Enter the context manager."""
        ...

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:  # type: ignore
        """Exit the context manager."""
        ...
