"""Funnel repository protocol."""

from typing import Protocol

from domain.entities.funnel import Funnel, Page


class IFunnelRepository(Protocol):
    """Repository interface for Funnel and Page entities."""

    async def get(self, id: int) -> Funnel | None:
        """Get a funnel by ID."""
        ...

    async def create(self, funnel: Funnel) -> Funnel:
        """Create a new funnel."""
        ...

    async def delete(self, id: int) -> bool:
        """Delete a funnel and its pages."""
        ...

    async def count_for_workspace(self, workspace_id: int) -> int:
        """Count the funnels in a workspace."""
        ...

    async def count_pages(self, funnel_id: int) -> int:
        """Count the pages in a funnel."""
        ...

    async def add_page(self, page: Page) -> Page:
        """Add a page to a funnel."""
        ...
