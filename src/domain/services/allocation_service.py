"""Allocation service: plan ceilings against live usage counts."""

import logging
from collections.abc import Callable, Iterable

from core.exceptions import AllocationLimitError, UserNotFoundError
from domain.allocations import (
    AllocationSummary,
    ResourceKind,
    allocation_summary,
    limit_reached_message,
)
from domain.entities.workspace import AddOn, PlanTier, Workspace, WorkspaceRole
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access_service import resolve_funnel_access, resolve_workspace_access

logger = logging.getLogger(__name__)


def require_capacity(
    kind: ResourceKind,
    current_count: int,
    plan_tier: PlanTier | str | None,
    add_ons: Iterable[AddOn] = (),
) -> AllocationSummary:
    """Return the summary, or raise AllocationLimitError when the ceiling is hit.

    The count must be read just before the guarded insert. Count and insert
    are not serialized, so two concurrent creators can both pass.
    """
    summary = allocation_summary(kind, current_count, plan_tier, add_ons)
    if not summary.can_create_more:
        logger.info(
            "Allocation limit reached for %s: %s/%s",
            kind,
            current_count,
            summary.total_allocation,
        )
        raise AllocationLimitError(
            limit_reached_message(summary),
            resource=kind.value,
            total_allocation=summary.total_allocation,
        )
    return summary


async def load_owner_add_ons(uow: IUnitOfWork, workspace: Workspace) -> list[AddOn]:
    """Add-ons are purchased by the workspace owner and apply to their workspaces."""
    return await uow.add_ons.list_for_user(workspace.owner_id)  # type: ignore[no-any-return]


class AllocationService:
    """Service layer for allocation previews."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def get_workspace_summary(
        self, user_id: int, workspace_id: int
    ) -> dict[ResourceKind, AllocationSummary]:
        """Summaries for the workspace-scoped resources. Requires access."""
        async with self._uow_factory() as uow:
            await resolve_workspace_access(uow, user_id, workspace_id)
            workspace = await uow.workspaces.get(workspace_id)
            add_ons = await load_owner_add_ons(uow, workspace)

            admins = await uow.workspaces.count_members_with_role(
                workspace_id, WorkspaceRole.ADMIN
            )
            funnels = await uow.funnels.count_for_workspace(workspace_id)

            return {
                ResourceKind.ADMINS: allocation_summary(
                    ResourceKind.ADMINS, admins, workspace.plan_type, add_ons
                ),
                ResourceKind.FUNNELS: allocation_summary(
                    ResourceKind.FUNNELS, funnels, workspace.plan_type, add_ons
                ),
            }

    async def get_funnel_pages_summary(self, user_id: int, funnel_id: int) -> AllocationSummary:
        """Pages-per-funnel summary. Requires access to the funnel's workspace."""
        async with self._uow_factory() as uow:
            _, access = await resolve_funnel_access(uow, user_id, funnel_id)
            workspace = await uow.workspaces.get(access.workspace.id)
            add_ons = await load_owner_add_ons(uow, workspace)
            pages = await uow.funnels.count_pages(funnel_id)
            return allocation_summary(ResourceKind.PAGES, pages, workspace.plan_type, add_ons)

    async def get_user_summary(self, user_id: int) -> AllocationSummary:
        """Workspaces-per-user summary for the caller."""
        async with self._uow_factory() as uow:
            user = await uow.users.get(user_id)
            if user is None:
                raise UserNotFoundError(user_id)
            add_ons = await uow.add_ons.list_for_user(user_id)
            owned = await uow.workspaces.count_owned_by(user_id)
            return allocation_summary(ResourceKind.WORKSPACES, owned, user.plan, add_ons)
