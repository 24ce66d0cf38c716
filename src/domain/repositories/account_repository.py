"""User account and add-on repository protocols."""

from typing import Protocol

from domain.entities.workspace import AddOn, UserAccount


class IUserRepository(Protocol):
    """Repository interface for user accounts."""

    async def get(self, id: int) -> UserAccount | None:
        """Get a user by ID."""
        ...


class IAddOnRepository(Protocol):
    """Repository interface for purchased add-ons."""

    async def list_for_user(self, user_id: int) -> list[AddOn]:
        """Get every add-on a user has purchased, in any status."""
        ...
