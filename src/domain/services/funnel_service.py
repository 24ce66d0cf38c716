"""Funnel service layer with business logic."""

import logging
import re
import secrets
from collections.abc import Callable

from domain.allocations import ResourceKind
from domain.entities.funnel import Funnel, Page
from domain.entities.workspace import WorkspacePermission
from domain.repositories.unit_of_work import IUnitOfWork
from domain.services.access_service import resolve_funnel_access, resolve_workspace_access
from domain.services.allocation_service import load_owner_add_ons, require_capacity

logger = logging.getLogger(__name__)


class FunnelService:
    """Service layer for Funnel and Page business logic."""

    def __init__(self, uow_factory: Callable[[], IUnitOfWork]) -> None:
        self._uow_factory = uow_factory

    async def create_funnel(self, user_id: int, workspace_id: int, name: str) -> Funnel:
        """Create a funnel. Requires CREATE_FUNNELS and a free funnel slot."""
        async with self._uow_factory() as uow:
            await resolve_workspace_access(
                uow, user_id, workspace_id, [WorkspacePermission.CREATE_FUNNELS]
            )
            workspace = await uow.workspaces.get(workspace_id)

            # Funnel ceiling is flat, add-ons don't extend it
            count = await uow.funnels.count_for_workspace(workspace_id)
            require_capacity(ResourceKind.FUNNELS, count, workspace.plan_type)

            funnel = Funnel(
                workspace_id=workspace_id,
                name=name,
                slug=self._generate_slug(name),
                created_by=user_id,
            )
            created = await uow.funnels.create(funnel)
            await uow.commit()
            logger.info("User %s created funnel %s in workspace %s", user_id, created.id, workspace_id)
            return created  # type: ignore[no-any-return]

    async def delete_funnel(self, user_id: int, funnel_id: int) -> bool:
        """Delete a funnel and its pages. Requires DELETE_FUNNELS."""
        async with self._uow_factory() as uow:
            await resolve_funnel_access(
                uow, user_id, funnel_id, [WorkspacePermission.DELETE_FUNNELS]
            )

            deleted = await uow.funnels.delete(funnel_id)
            await uow.commit()
            return deleted  # type: ignore[no-any-return]

    async def create_page(self, user_id: int, funnel_id: int, name: str) -> Page:
        """Append a page to a funnel. Requires EDIT_PAGES and a free page slot."""
        async with self._uow_factory() as uow:
            funnel, _ = await resolve_funnel_access(
                uow, user_id, funnel_id, [WorkspacePermission.EDIT_PAGES]
            )
            workspace = await uow.workspaces.get(funnel.workspace_id)
            add_ons = await load_owner_add_ons(uow, workspace)

            count = await uow.funnels.count_pages(funnel_id)
            require_capacity(ResourceKind.PAGES, count, workspace.plan_type, add_ons)

            page = Page(
                funnel_id=funnel_id,
                name=name,
                link_id=secrets.token_hex(6),
                order=count + 1,
            )
            created = await uow.funnels.add_page(page)
            await uow.commit()
            return created  # type: ignore[no-any-return]

    @staticmethod
    def _generate_slug(name: str) -> str:
        """Generate a URL-friendly slug from a funnel name."""
        slug = name.lower().strip()
        slug = re.sub(r"[^a-z0-9\s-]", "", slug)
        slug = re.sub(r"[\s_]+", "-", slug)
        slug = re.sub(r"-+", "-", slug)
        slug = slug.strip("-")
        return slug[:100] if slug else "funnel"
