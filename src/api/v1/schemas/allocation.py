"""Pydantic schemas for allocation previews."""

from typing import List

from pydantic import BaseModel, ConfigDict

from domain.allocations import ResourceKind


class AllocationSummaryResponse(BaseModel):
    """Ceiling breakdown for one resource."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "resource": "ADMINS",
                "base_allocation": 1,
                "extra_from_add_ons": 2,
                "total_allocation": 3,
                "current_usage": 2,
                "remaining_slots": 1,
                "can_create_more": True,
            }
        },
    )

    resource: ResourceKind
    base_allocation: int
    extra_from_add_ons: int
    total_allocation: int
    current_usage: int
    remaining_slots: int
    can_create_more: bool


class AllocationSummaryDetailResponse(BaseModel):
    """Schema for a single allocation summary response."""

    data: AllocationSummaryResponse


class AllocationSummaryListResponse(BaseModel):
    """Schema for a list of allocation summaries."""

    data: List[AllocationSummaryResponse]
