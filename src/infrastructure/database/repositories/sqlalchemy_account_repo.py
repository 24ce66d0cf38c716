"""SQLAlchemy implementations of user and add-on repositories."""

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from domain.entities.workspace import AddOn, AddOnStatus, AddOnType, UserAccount
from infrastructure.database.models import AddOnModel, UserModel
from infrastructure.database.repositories.sqlalchemy_workspace_repo import to_plan

_ADD_ON_TYPES = {t.value: t for t in AddOnType}
# Older subdomain add-on rows were stored as EXTRA_DOMAIN
_ADD_ON_TYPES["EXTRA_DOMAIN"] = AddOnType.EXTRA_SUBDOMAIN
_ADD_ON_STATUSES = {s.value: s for s in AddOnStatus}


class SQLAlchemyUserRepository:
    """SQLAlchemy implementation of IUserRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get(self, id: int) -> UserAccount | None:
        """Get a user by ID."""
        stmt = select(UserModel).where(UserModel.id == id)
        result = await self._session.execute(stmt)
        model = result.scalar_one_or_none()
        if not model:
            return None
        return UserAccount(
            id=model.id,
            email=model.email,
            display_name=model.display_name,
            plan=to_plan(model.plan),  # type: ignore[arg-type]
        )


class SQLAlchemyAddOnRepository:
    """SQLAlchemy implementation of IAddOnRepository."""

    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def list_for_user(self, user_id: int) -> list[AddOn]:
        """Get every add-on a user has purchased.

        Rows with an unrecognised type are skipped; unrecognised statuses
        are treated as inactive.
        """
        stmt = select(AddOnModel).where(AddOnModel.user_id == user_id).order_by(AddOnModel.id)
        result = await self._session.execute(stmt)
        return [
            AddOn(
                id=model.id,
                user_id=model.user_id,
                type=_ADD_ON_TYPES[model.type],
                quantity=model.quantity,
                status=_ADD_ON_STATUSES.get(model.status, AddOnStatus.INACTIVE),
                end_date=model.end_date,
            )
            for model in result.scalars()
            if model.type in _ADD_ON_TYPES
        ]
