"""Workspace domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import StrEnum


def _utcnow() -> datetime:
    return datetime.now(UTC)


class WorkspaceRole(StrEnum):
    """Workspace roles.

    OWNER is never stored on a membership; it is derived from
    ``Workspace.owner_id``.
    """

    OWNER = "OWNER"
    ADMIN = "ADMIN"
    EDITOR = "EDITOR"
    VIEWER = "VIEWER"


MEMBER_ROLES = frozenset({WorkspaceRole.ADMIN, WorkspaceRole.EDITOR, WorkspaceRole.VIEWER})


class WorkspacePermission(StrEnum):
    """Fine-grained permissions, consulted only for EDITOR and VIEWER."""

    CREATE_FUNNELS = "CREATE_FUNNELS"
    EDIT_FUNNELS = "EDIT_FUNNELS"
    DELETE_FUNNELS = "DELETE_FUNNELS"
    EDIT_PAGES = "EDIT_PAGES"
    CREATE_DOMAINS = "CREATE_DOMAINS"
    CONNECT_DOMAINS = "CONNECT_DOMAINS"
    MANAGE_DOMAINS = "MANAGE_DOMAINS"
    DELETE_DOMAINS = "DELETE_DOMAINS"
    MANAGE_MEMBERS = "MANAGE_MEMBERS"
    MANAGE_WORKSPACE = "MANAGE_WORKSPACE"
    VIEW_ANALYTICS = "VIEW_ANALYTICS"


class PlanTier(StrEnum):
    """Subscription plan tiers."""

    FREE = "FREE"
    BUSINESS = "BUSINESS"
    AGENCY = "AGENCY"


class AddOnType(StrEnum):
    """Purchasable allocation increments."""

    EXTRA_PAGE = "EXTRA_PAGE"
    EXTRA_ADMIN = "EXTRA_ADMIN"
    EXTRA_FUNNEL = "EXTRA_FUNNEL"
    EXTRA_WORKSPACE = "EXTRA_WORKSPACE"
    EXTRA_SUBDOMAIN = "EXTRA_SUBDOMAIN"
    EXTRA_CUSTOM_DOMAIN = "EXTRA_CUSTOM_DOMAIN"


class AddOnStatus(StrEnum):
    """Add-on lifecycle states. Only ACTIVE counts toward allocations."""

    ACTIVE = "ACTIVE"
    PENDING = "PENDING"
    INACTIVE = "INACTIVE"
    CANCELLED = "CANCELLED"
    EXPIRED = "EXPIRED"


@dataclass
class UserAccount:
    """Domain entity for an application user."""

    id: int
    email: str
    display_name: str | None = None
    plan: PlanTier = PlanTier.FREE


@dataclass
class Workspace:
    """Domain entity for a Workspace."""

    name: str
    owner_id: int
    id: int | None = None
    slug: str = ""
    plan_type: PlanTier = PlanTier.FREE
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass
class WorkspaceMember:
    """Domain entity for a workspace membership."""

    workspace_id: int
    user_id: int
    role: WorkspaceRole = WorkspaceRole.VIEWER
    permissions: list[WorkspacePermission] = field(default_factory=list)
    joined_at: datetime = field(default_factory=_utcnow)
    invited_by: int | None = None

    def __post_init__(self) -> None:
        """Reject rows that would encode ownership as a membership."""
        if self.role == WorkspaceRole.OWNER:
            raise ValueError("Ownership is a workspace attribute, not a membership")


@dataclass
class AddOn:
    """Domain entity for a purchased add-on."""

    type: AddOnType
    quantity: int = 1
    status: AddOnStatus = AddOnStatus.ACTIVE
    user_id: int | None = None
    id: int | None = None
    end_date: datetime | None = None

    @property
    def is_active(self) -> bool:
        """Check whether the add-on contributes to allocations."""
        return self.status == AddOnStatus.ACTIVE
