"""Workspace API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import (
    get_access_service,
    get_allocation_service,
    get_workspace_service,
)
from api.v1.schemas.allocation import (
    AllocationSummaryListResponse,
    AllocationSummaryResponse,
)
from api.v1.schemas.common import AUTH_ERROR_RESPONSES
from api.v1.schemas.workspace import (
    AddMemberRequest,
    CapabilitiesDetailResponse,
    CapabilitiesResponse,
    UpdateMemberPermissionsRequest,
    UpdateMemberRoleRequest,
    WorkspaceCreate,
    WorkspaceDetailResponse,
    WorkspaceMemberDetailResponse,
    WorkspaceMemberListResponse,
    WorkspaceMemberResponse,
    WorkspaceRefResponse,
    WorkspaceResponse,
)
from core.rate_limit import limiter
from domain.entities.workspace import Workspace, WorkspaceMember
from domain.services.access_service import WorkspaceAccessService
from domain.services.allocation_service import AllocationService
from domain.services.workspace_service import WorkspaceService

router = APIRouter(
    prefix="/workspaces", tags=["workspaces"], responses=AUTH_ERROR_RESPONSES
)


@router.post(
    "",
    response_model=WorkspaceDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a workspace",
    responses={
        201: {"description": "Workspace created successfully"},
        403: {"description": "Workspace allocation reached"},
        409: {"description": "Workspace slug already taken"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_workspace(
    request: Request,
    body: WorkspaceCreate,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Create a new workspace owned by the caller, within their plan's allocation."""
    workspace = await service.create(user_id=user.id, name=body.name)
    return WorkspaceDetailResponse(data=_build_workspace_response(workspace))


@router.get(
    "/{workspace_id}",
    response_model=WorkspaceDetailResponse,
    summary="Get workspace details",
    responses={
        200: {"description": "Workspace details"},
        404: {"description": "Workspace not found or no access"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_workspace(
    request: Request,
    workspace_id: int,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceDetailResponse:
    """Get a specific workspace by ID. Requires ownership or membership."""
    workspace = await service.get_by_id(workspace_id, user.id)
    return WorkspaceDetailResponse(data=_build_workspace_response(workspace))


@router.get(
    "/{workspace_id}/capabilities",
    response_model=CapabilitiesDetailResponse,
    summary="Get the caller's capabilities",
    responses={
        200: {"description": "Role, permissions and allowed actions"},
        404: {"description": "Workspace not found or no access"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_capabilities(
    request: Request,
    workspace_id: int,
    user: CurrentUser,
    service: WorkspaceAccessService = Depends(get_access_service),
) -> CapabilitiesDetailResponse:
    """List every action the caller may perform in the workspace."""
    capabilities = await service.get_capabilities(user.id, workspace_id)
    return CapabilitiesDetailResponse(
        data=CapabilitiesResponse(
            workspace=WorkspaceRefResponse.model_validate(capabilities.workspace),
            role=capabilities.role,
            permissions=capabilities.permissions,
            allowed_actions=capabilities.allowed_actions,
        )
    )


@router.get(
    "/{workspace_id}/allocations",
    response_model=AllocationSummaryListResponse,
    summary="Preview workspace allocations",
    responses={
        200: {"description": "Ceilings and usage for admins and funnels"},
        404: {"description": "Workspace not found or no access"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_allocations(
    request: Request,
    workspace_id: int,
    user: CurrentUser,
    service: AllocationService = Depends(get_allocation_service),
) -> AllocationSummaryListResponse:
    """Show how much of each workspace allocation remains."""
    summaries = await service.get_workspace_summary(user.id, workspace_id)
    return AllocationSummaryListResponse(
        data=[AllocationSummaryResponse.model_validate(s) for s in summaries.values()]
    )


# --- Member Management ---


@router.get(
    "/{workspace_id}/members",
    response_model=WorkspaceMemberListResponse,
    summary="List workspace members",
    responses={
        200: {"description": "List of workspace members"},
        404: {"description": "Workspace not found or no access"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def list_members(
    request: Request,
    workspace_id: int,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberListResponse:
    """Get all members of a workspace. The owner is not listed as a member."""
    members = await service.get_members(workspace_id, user.id)
    data = [_build_member_response(m) for m in members]
    return WorkspaceMemberListResponse(data=data, meta={"total": len(data)})


@router.post(
    "/{workspace_id}/members",
    response_model=WorkspaceMemberDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add workspace member",
    responses={
        201: {"description": "Member added"},
        403: {"description": "Insufficient permissions or admin allocation reached"},
        404: {"description": "Workspace or user not found"},
        409: {"description": "User is already a member"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def add_member(
    request: Request,
    workspace_id: int,
    body: AddMemberRequest,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberDetailResponse:
    """Add a member to a workspace. Requires MANAGE_MEMBERS."""
    member = await service.add_member(
        workspace_id=workspace_id,
        user_id=user.id,
        target_user_id=body.user_id,
        role=body.role,
        permissions=body.permissions,
    )
    return WorkspaceMemberDetailResponse(data=_build_member_response(member))


@router.patch(
    "/{workspace_id}/members/{member_user_id}/role",
    response_model=WorkspaceMemberDetailResponse,
    summary="Update member role",
    responses={
        200: {"description": "Role updated"},
        403: {"description": "Role change not allowed or admin allocation reached"},
        404: {"description": "Workspace or member not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_member_role(
    request: Request,
    workspace_id: int,
    member_user_id: int,
    body: UpdateMemberRoleRequest,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberDetailResponse:
    """Update a member's role under the role hierarchy."""
    member = await service.update_member_role(
        workspace_id=workspace_id,
        user_id=user.id,
        target_user_id=member_user_id,
        role=body.role,
    )
    return WorkspaceMemberDetailResponse(data=_build_member_response(member))


@router.patch(
    "/{workspace_id}/members/{member_user_id}/permissions",
    response_model=WorkspaceMemberDetailResponse,
    summary="Replace member permissions",
    responses={
        200: {"description": "Permissions updated"},
        403: {"description": "Permission change not allowed"},
        404: {"description": "Workspace or member not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def update_member_permissions(
    request: Request,
    workspace_id: int,
    member_user_id: int,
    body: UpdateMemberPermissionsRequest,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> WorkspaceMemberDetailResponse:
    """Replace an editor's or viewer's permission set."""
    member = await service.update_member_permissions(
        workspace_id=workspace_id,
        user_id=user.id,
        target_user_id=member_user_id,
        permissions=body.permissions,
    )
    return WorkspaceMemberDetailResponse(data=_build_member_response(member))


@router.delete(
    "/{workspace_id}/members/{member_user_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Remove workspace member",
    responses={
        204: {"description": "Member removed"},
        403: {"description": "Insufficient permissions"},
        404: {"description": "Workspace or member not found"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def remove_member(
    request: Request,
    workspace_id: int,
    member_user_id: int,
    user: CurrentUser,
    service: WorkspaceService = Depends(get_workspace_service),
) -> None:
    """Remove a member from a workspace or leave the workspace."""
    await service.remove_member(
        workspace_id=workspace_id,
        user_id=user.id,
        target_user_id=member_user_id,
    )
    return None


def _build_workspace_response(workspace: Workspace) -> WorkspaceResponse:
    """Convert domain entity to response schema."""
    return WorkspaceResponse(
        id=workspace.id,  # type: ignore[arg-type]
        name=workspace.name,
        slug=workspace.slug,
        owner_id=workspace.owner_id,
        plan_type=str(workspace.plan_type),
        created_at=workspace.created_at,
        updated_at=workspace.updated_at,
    )


def _build_member_response(member: WorkspaceMember) -> WorkspaceMemberResponse:
    """Convert domain entity to response schema."""
    return WorkspaceMemberResponse(
        user_id=member.user_id,
        role=member.role,
        permissions=member.permissions,
        joined_at=member.joined_at,
        invited_by=member.invited_by,
    )
