"""Unit tests for FunnelService."""

import pytest

from core.exceptions import (
    AllocationLimitError,
    FunnelNotFoundError,
    WorkspaceAccessNotFoundError,
    WorkspaceForbiddenError,
)
from domain.entities.funnel import Funnel, Page
from domain.entities.workspace import (
    AddOn,
    AddOnType,
    Workspace,
    WorkspacePermission,
    WorkspaceRole,
)
from domain.services.funnel_service import FunnelService
from tests.unit.conftest import FakeUnitOfWork, make_member

P = WorkspacePermission


@pytest.fixture
def service(uow: FakeUnitOfWork) -> FunnelService:
    return FunnelService(lambda: uow)


@pytest.fixture
def funnel(workspace_id: int, owner_id: int) -> Funnel:
    return Funnel(id=7, workspace_id=workspace_id, name="Spring Sale", created_by=owner_id)


class TestCreateFunnel:
    @pytest.mark.asyncio
    async def test_editor_with_create_funnels(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        user_id: int,
        workspace_id: int,
    ):
        uow.workspaces.get.return_value = workspace
        uow.workspaces.get_member.return_value = make_member(
            workspace_id, user_id, WorkspaceRole.EDITOR, [P.CREATE_FUNNELS]
        )
        uow.funnels.count_for_workspace.return_value = 2
        uow.funnels.create.side_effect = lambda f: f

        result = await service.create_funnel(user_id, workspace_id, "Spring Sale 2026")

        assert result.slug == "spring-sale-2026"
        assert result.created_by == user_id
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_fourth_funnel_is_rejected(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        owner_id: int,
        workspace_id: int,
    ):
        uow.workspaces.get.return_value = workspace
        uow.funnels.count_for_workspace.return_value = 3
        uow.add_ons.list_for_user.return_value = [AddOn(type=AddOnType.EXTRA_FUNNEL, quantity=10)]

        with pytest.raises(AllocationLimitError) as exc_info:
            await service.create_funnel(owner_id, workspace_id, "Fourth")

        assert exc_info.value.message == (
            "You've reached the maximum of 3 funnels for this workspace"
        )
        uow.funnels.create.assert_not_called()
        assert uow.committed is False

    @pytest.mark.asyncio
    async def test_viewer_without_permission_is_forbidden(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        user_id: int,
        workspace_id: int,
    ):
        uow.workspaces.get.return_value = workspace
        uow.workspaces.get_member.return_value = make_member(
            workspace_id, user_id, WorkspaceRole.VIEWER
        )

        with pytest.raises(WorkspaceForbiddenError) as exc_info:
            await service.create_funnel(user_id, workspace_id, "Nope")

        assert exc_info.value.details == {"missing_permissions": ["CREATE_FUNNELS"]}
        uow.funnels.count_for_workspace.assert_not_called()

    @pytest.mark.asyncio
    async def test_outsider_gets_not_found(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        user_id: int,
        workspace_id: int,
    ):
        uow.workspaces.get.return_value = workspace
        uow.workspaces.get_member.return_value = None

        with pytest.raises(WorkspaceAccessNotFoundError):
            await service.create_funnel(user_id, workspace_id, "Nope")

    @pytest.mark.asyncio
    async def test_blank_name_gets_fallback_slug(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        owner_id: int,
        workspace_id: int,
    ):
        uow.workspaces.get.return_value = workspace
        uow.funnels.count_for_workspace.return_value = 0
        uow.funnels.create.side_effect = lambda f: f

        result = await service.create_funnel(owner_id, workspace_id, "!!!")

        assert result.slug == "funnel"


class TestDeleteFunnel:
    @pytest.mark.asyncio
    async def test_editor_needs_delete_funnels(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        funnel: Funnel,
        user_id: int,
        workspace_id: int,
    ):
        uow.funnels.get.return_value = funnel
        uow.workspaces.get.return_value = workspace
        uow.workspaces.get_member.return_value = make_member(
            workspace_id, user_id, WorkspaceRole.EDITOR, [P.CREATE_FUNNELS, P.EDIT_FUNNELS]
        )

        with pytest.raises(WorkspaceForbiddenError):
            await service.delete_funnel(user_id, 7)

        uow.funnels.delete.assert_not_called()

    @pytest.mark.asyncio
    async def test_admin_deletes(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        funnel: Funnel,
        user_id: int,
        workspace_id: int,
    ):
        uow.funnels.get.return_value = funnel
        uow.workspaces.get.return_value = workspace
        uow.workspaces.get_member.return_value = make_member(
            workspace_id, user_id, WorkspaceRole.ADMIN
        )
        uow.funnels.delete.return_value = True

        assert await service.delete_funnel(user_id, 7) is True
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_missing_funnel(self, service: FunnelService, uow: FakeUnitOfWork, user_id: int):
        uow.funnels.get.return_value = None

        with pytest.raises(FunnelNotFoundError):
            await service.delete_funnel(user_id, 7)

    @pytest.mark.asyncio
    async def test_outsider_sees_existing_funnel_as_missing(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        funnel: Funnel,
        user_id: int,
    ):
        uow.funnels.get.return_value = funnel
        uow.workspaces.get.return_value = workspace
        uow.workspaces.get_member.return_value = None

        with pytest.raises(FunnelNotFoundError) as exc_info:
            await service.delete_funnel(user_id, 7)

        assert exc_info.value.details == {"funnel_id": 7}
        uow.funnels.delete.assert_not_called()


class TestCreatePage:
    @pytest.mark.asyncio
    async def test_appends_page(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        funnel: Funnel,
        owner_id: int,
    ):
        uow.funnels.get.return_value = funnel
        uow.workspaces.get.return_value = workspace
        uow.funnels.count_pages.return_value = 4
        uow.funnels.add_page.side_effect = lambda p: p

        page: Page = await service.create_page(owner_id, 7, "Thank You")

        assert page.order == 5
        assert len(page.link_id) == 12
        assert uow.committed is True

    @pytest.mark.asyncio
    async def test_page_ceiling_reached(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        funnel: Funnel,
        owner_id: int,
    ):
        uow.funnels.get.return_value = funnel
        uow.workspaces.get.return_value = workspace
        uow.funnels.count_pages.return_value = 35

        with pytest.raises(AllocationLimitError) as exc_info:
            await service.create_page(owner_id, 7, "Overflow")

        assert exc_info.value.details == {"resource": "PAGES", "total_allocation": 35}

    @pytest.mark.asyncio
    async def test_extra_page_add_on_of_owner_extends_ceiling(
        self,
        service: FunnelService,
        uow: FakeUnitOfWork,
        workspace: Workspace,
        funnel: Funnel,
        owner_id: int,
        user_id: int,
        workspace_id: int,
    ):
        uow.funnels.get.return_value = funnel
        uow.workspaces.get.return_value = workspace
        uow.workspaces.get_member.return_value = make_member(
            workspace_id, user_id, WorkspaceRole.EDITOR, [P.EDIT_PAGES]
        )
        uow.add_ons.list_for_user.return_value = [AddOn(type=AddOnType.EXTRA_PAGE)]
        uow.funnels.count_pages.return_value = 35
        uow.funnels.add_page.side_effect = lambda p: p

        page = await service.create_page(user_id, 7, "Bonus")

        assert page.order == 36
        uow.add_ons.list_for_user.assert_called_once_with(owner_id)
