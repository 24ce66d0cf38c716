"""Dependency injection factories for API v1."""

from functools import lru_cache
from typing import Callable

from domain.services.access_service import WorkspaceAccessService
from domain.services.allocation_service import AllocationService
from domain.services.funnel_service import FunnelService
from domain.services.workspace_service import WorkspaceService
from infrastructure.database.session import async_session_factory
from infrastructure.database.sqlalchemy_uow import SQLAlchemyUnitOfWork


def get_uow_factory() -> Callable[[], SQLAlchemyUnitOfWork]:
    """Factory for creating Unit of Work instances."""

    def factory() -> SQLAlchemyUnitOfWork:
        return SQLAlchemyUnitOfWork(async_session_factory)

    return factory


@lru_cache
def get_access_service() -> WorkspaceAccessService:
    """Get Workspace access service instance."""
    return WorkspaceAccessService(get_uow_factory())


@lru_cache
def get_allocation_service() -> AllocationService:
    """Get Allocation service instance."""
    return AllocationService(get_uow_factory())


@lru_cache
def get_workspace_service() -> WorkspaceService:
    """Get Workspace service instance."""
    return WorkspaceService(get_uow_factory())


@lru_cache
def get_funnel_service() -> FunnelService:
    """Get Funnel service instance."""
    return FunnelService(get_uow_factory())
