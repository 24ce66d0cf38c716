"""Pydantic schemas for Workspace API."""

from datetime import datetime
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from domain.entities.workspace import WorkspacePermission, WorkspaceRole


class WorkspaceCreate(BaseModel):
    """Schema for creating a Workspace."""

    name: str = Field(..., min_length=1, max_length=255)


class WorkspaceResponse(BaseModel):
    """Schema for Workspace response."""

    model_config = ConfigDict(
        from_attributes=True,
        json_schema_extra={
            "example": {
                "id": 12,
                "name": "Acme Launches",
                "slug": "acme-launches",
                "owner_id": 7,
                "plan_type": "BUSINESS",
                "created_at": "2026-02-01T10:00:00",
                "updated_at": "2026-02-01T10:00:00",
            }
        },
    )

    id: int
    name: str
    slug: str
    owner_id: int
    plan_type: str
    created_at: datetime
    updated_at: datetime


class WorkspaceDetailResponse(BaseModel):
    """Schema for single Workspace response."""

    data: WorkspaceResponse


class WorkspaceMemberResponse(BaseModel):
    """Schema for Workspace Member response."""

    model_config = ConfigDict(from_attributes=True)

    user_id: int
    role: WorkspaceRole
    permissions: List[WorkspacePermission] = Field(default_factory=list)
    joined_at: datetime
    invited_by: Optional[int] = None


class WorkspaceMemberDetailResponse(BaseModel):
    """Schema for single Workspace Member response."""

    data: WorkspaceMemberResponse


class WorkspaceMemberListResponse(BaseModel):
    """Schema for list of Workspace Members response."""

    data: List[WorkspaceMemberResponse]
    meta: dict[str, Any] = Field(default_factory=dict)


class AddMemberRequest(BaseModel):
    """Schema for adding a member to a workspace."""

    user_id: int = Field(..., gt=0)
    role: WorkspaceRole = WorkspaceRole.VIEWER
    permissions: List[WorkspacePermission] = Field(default_factory=list)


class UpdateMemberRoleRequest(BaseModel):
    """Schema for updating a member's role."""

    role: WorkspaceRole


class UpdateMemberPermissionsRequest(BaseModel):
    """Schema for replacing a member's permissions."""

    permissions: List[WorkspacePermission]


class WorkspaceRefResponse(BaseModel):
    """Workspace projection carried on access results."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    owner_id: int


class CapabilitiesResponse(BaseModel):
    """Schema for the caller's capabilities in a workspace."""

    model_config = ConfigDict(from_attributes=True)

    workspace: WorkspaceRefResponse
    role: WorkspaceRole
    permissions: List[WorkspacePermission]
    allowed_actions: List[str]


class CapabilitiesDetailResponse(BaseModel):
    """Schema for capabilities response."""

    data: CapabilitiesResponse
