"""Current-user API routes."""

from fastapi import APIRouter, Depends, Request

from api.dependencies.auth import CurrentUser
from api.v1.dependencies import get_allocation_service
from api.v1.schemas.allocation import (
    AllocationSummaryDetailResponse,
    AllocationSummaryResponse,
)
from api.v1.schemas.common import AUTH_ERROR_RESPONSES
from core.rate_limit import limiter
from domain.services.allocation_service import AllocationService

router = APIRouter(prefix="/users", tags=["users"], responses=AUTH_ERROR_RESPONSES)


@router.get(
    "/me/allocations",
    response_model=AllocationSummaryDetailResponse,
    summary="Preview workspace allocation",
    responses={
        200: {"description": "Workspaces ceiling and usage for the caller"},
        404: {"description": "User not found"},
    },
)
@limiter.limit("30/minute")  # type: ignore[untyped-decorator]
async def get_my_allocations(
    request: Request,
    user: CurrentUser,
    service: AllocationService = Depends(get_allocation_service),
) -> AllocationSummaryDetailResponse:
    """Show how many more workspaces the caller can own."""
    summary = await service.get_user_summary(user.id)
    return AllocationSummaryDetailResponse(data=AllocationSummaryResponse.model_validate(summary))
