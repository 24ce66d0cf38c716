"""Pydantic schemas for Funnel API."""

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class FunnelCreate(BaseModel):
    """Schema for creating a Funnel."""

    name: str = Field(..., min_length=1, max_length=255)


class FunnelResponse(BaseModel):
    """Schema for Funnel response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    workspace_id: int
    name: str
    slug: str
    status: str
    created_by: int | None = None
    created_at: datetime
    updated_at: datetime


class FunnelDetailResponse(BaseModel):
    """Schema for single Funnel response."""

    data: FunnelResponse


class PageCreate(BaseModel):
    """Schema for adding a Page to a Funnel."""

    name: str = Field(..., min_length=1, max_length=255)


class PageResponse(BaseModel):
    """Schema for Page response."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    funnel_id: int
    name: str
    link_id: str
    order: int
    created_at: datetime


class PageDetailResponse(BaseModel):
    """Schema for single Page response."""

    data: PageResponse
