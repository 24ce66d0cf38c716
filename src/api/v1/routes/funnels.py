"""Funnel and page API routes."""

from fastapi import APIRouter, Depends, Request, status

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_allocation_service, get_funnel_service
from api.v1.schemas.allocation import (
    AllocationSummaryDetailResponse,
    AllocationSummaryResponse,
)
from api.v1.schemas.common import AUTH_ERROR_RESPONSES
from api.v1.schemas.funnel import (
    FunnelCreate,
    FunnelDetailResponse,
    FunnelResponse,
    PageCreate,
    PageDetailResponse,
    PageResponse,
)
from core.rate_limit import limiter
from domain.services.allocation_service import AllocationService
from domain.services.funnel_service import FunnelService

# Funnel creation is nested under its workspace
workspace_funnels_router = APIRouter(
    prefix="/workspaces", tags=["funnels"], responses=AUTH_ERROR_RESPONSES
)
router = APIRouter(prefix="/funnels", tags=["funnels"], responses=AUTH_ERROR_RESPONSES)


@workspace_funnels_router.post(
    "/{workspace_id}/funnels",
    response_model=FunnelDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a funnel",
    responses={
        201: {"description": "Funnel created"},
        403: {"description": "Missing CREATE_FUNNELS or funnel allocation reached"},
        404: {"description": "Workspace not found or no access"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_funnel(
    request: Request,
    workspace_id: int,
    body: FunnelCreate,
    user: CurrentUser,
    service: FunnelService = Depends(get_funnel_service),
) -> FunnelDetailResponse:
    """Create a funnel in a workspace."""
    funnel = await service.create_funnel(user.id, workspace_id, body.name)
    return FunnelDetailResponse(data=FunnelResponse.model_validate(funnel))


@router.delete(
    "/{funnel_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    summary="Delete a funnel",
    responses={
        204: {"description": "Funnel deleted"},
        403: {"description": "Missing DELETE_FUNNELS"},
        404: {"description": "Funnel not found or no access"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def delete_funnel(
    request: Request,
    funnel_id: int,
    user: CurrentUser,
    service: FunnelService = Depends(get_funnel_service),
) -> None:
    """Delete a funnel and all of its pages."""
    await service.delete_funnel(user.id, funnel_id)
    return None


@router.post(
    "/{funnel_id}/pages",
    response_model=PageDetailResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Add a page to a funnel",
    responses={
        201: {"description": "Page created"},
        403: {"description": "Missing EDIT_PAGES or page allocation reached"},
        404: {"description": "Funnel not found or no access"},
    },
)
@limiter.limit("10/minute")  # type: ignore[untyped-decorator]
async def create_page(
    request: Request,
    funnel_id: int,
    body: PageCreate,
    user: CurrentUser,
    service: FunnelService = Depends(get_funnel_service),
) -> PageDetailResponse:
    """Append a page to a funnel."""
    page = await service.create_page(user.id, funnel_id, body.name)
    return PageDetailResponse(data=PageResponse.model_validate(page))


@router.get(
    "/{funnel_id}/allocations",
    response_model=AllocationSummaryDetailResponse,
    summary="Preview page allocation",
    responses={
        200: {"description": "Pages ceiling and usage"},
        404: {"description": "Funnel not found or no access"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_page_allocation(
    request: Request,
    funnel_id: int,
    user: CurrentUser,
    service: AllocationService = Depends(get_allocation_service),
) -> AllocationSummaryDetailResponse:
    """Show how many more pages the funnel can hold."""
    summary = await service.get_funnel_pages_summary(user.id, funnel_id)
    return AllocationSummaryDetailResponse(data=AllocationSummaryResponse.model_validate(summary))
