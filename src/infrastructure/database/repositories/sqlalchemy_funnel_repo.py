"""SQLAlchemy implementation of Funnel repository."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.funnel import Funnel, Page
from infrastructure.database.models import FunnelModel, PageModel


class SQLAlchemyFunnelRepository:
    """SQLAlchemy implementation of IFunnelRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: int) -> Funnel | None:
        """Get a funnel by ID."""
        stmt = select(FunnelModel).where(FunnelModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def create(self, funnel: Funnel) -> Funnel:
        """Create a new funnel."""
        model = FunnelModel(
            workspace_id=funnel.workspace_id,
            name=funnel.name,
            slug=funnel.slug,
            status=funnel.status,
            created_by=funnel.created_by,
            created_at=funnel.created_at,
            updated_at=funnel.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return self._to_entity(model)

    async def delete(self, id: int) -> bool:
        """Delete a funnel (cascade deletes pages)."""
        stmt = select(FunnelModel).where(FunnelModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()

        if not model:
            return False

        await self._session.delete(model)
        await self._session.flush()
        return True

    async def count_for_workspace(self, workspace_id: int) -> int:
        """Count the funnels in a workspace."""
        stmt = (
            select(func.count())
            .select_from(FunnelModel)
            .where(FunnelModel.workspace_id == workspace_id)
        )
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def count_pages(self, funnel_id: int) -> int:
        """Count the pages in a funnel."""
        stmt = select(func.count()).select_from(PageModel).where(PageModel.funnel_id == funnel_id)
        result = await self._session.execute(stmt)
        return result.scalar_one()

    async def add_page(self, page: Page) -> Page:
        """Add a page to a funnel."""
        model = PageModel(
            funnel_id=page.funnel_id,
            name=page.name,
            link_id=page.link_id,
            order=page.order,
            created_at=page.created_at,
            updated_at=page.updated_at,
        )
        self._session.add(model)
        await self._session.flush()
        await self._session.refresh(model)
        return Page(
            id=model.id,
            funnel_id=model.funnel_id,
            name=model.name,
            link_id=model.link_id,
            order=model.order,
            created_at=model.created_at,
            updated_at=model.updated_at,
        )

    def _to_entity(self, model: FunnelModel) -> Funnel:
        """Convert ORM model to domain entity."""
        return Funnel(
            id=model.id,
            workspace_id=model.workspace_id,
            name=model.name,
            slug=model.slug,
            status=model.status,
            created_by=model.created_by,  # type: ignore[arg-type]
            created_at=model.created_at,
            updated_at=model.updated_at,
        )
