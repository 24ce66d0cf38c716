"""Plan allocation calculators and usage guards.

Ceilings are computed from a plan tier's base table plus the contribution
of ACTIVE add-ons. Nothing here raises: an unknown tier degrades to the
FREE table and remaining slots are clamped at zero.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import StrEnum

from domain.entities.workspace import AddOn, AddOnStatus, AddOnType, PlanTier


class ResourceKind(StrEnum):
    """Allocated resources and the scope each is counted in."""

    WORKSPACES = "WORKSPACES"
    ADMINS = "ADMINS"
    FUNNELS = "FUNNELS"
    PAGES = "PAGES"
    SUBDOMAINS = "SUBDOMAINS"
    CUSTOM_DOMAINS = "CUSTOM_DOMAINS"


# Flat for every tier and not extendable by add-ons.
FUNNELS_PER_WORKSPACE = 3

BASE_ALLOCATIONS: dict[ResourceKind, dict[PlanTier, int]] = {
    ResourceKind.WORKSPACES: {PlanTier.FREE: 1, PlanTier.BUSINESS: 1, PlanTier.AGENCY: 3},
    ResourceKind.ADMINS: {PlanTier.FREE: 1, PlanTier.BUSINESS: 2, PlanTier.AGENCY: 1},
    ResourceKind.FUNNELS: {tier: FUNNELS_PER_WORKSPACE for tier in PlanTier},
    ResourceKind.PAGES: {PlanTier.FREE: 35, PlanTier.BUSINESS: 35, PlanTier.AGENCY: 35},
    ResourceKind.SUBDOMAINS: {PlanTier.FREE: 1, PlanTier.BUSINESS: 1, PlanTier.AGENCY: 1},
    ResourceKind.CUSTOM_DOMAINS: {PlanTier.FREE: 0, PlanTier.BUSINESS: 1, PlanTier.AGENCY: 0},
}

# resource -> (add-on type, increment per unit of quantity)
ADD_ON_INCREMENTS: dict[ResourceKind, tuple[AddOnType, int]] = {
    ResourceKind.WORKSPACES: (AddOnType.EXTRA_WORKSPACE, 1),
    ResourceKind.ADMINS: (AddOnType.EXTRA_ADMIN, 1),
    ResourceKind.PAGES: (AddOnType.EXTRA_PAGE, 5),
    ResourceKind.SUBDOMAINS: (AddOnType.EXTRA_SUBDOMAIN, 1),
    ResourceKind.CUSTOM_DOMAINS: (AddOnType.EXTRA_CUSTOM_DOMAIN, 1),
}

_LABELS: dict[ResourceKind, tuple[str, str, str]] = {
    # singular, plural, scope
    ResourceKind.WORKSPACES: ("workspace", "workspaces", "your account"),
    ResourceKind.ADMINS: ("admin", "admins", "this workspace"),
    ResourceKind.FUNNELS: ("funnel", "funnels", "this workspace"),
    ResourceKind.PAGES: ("page", "pages", "this funnel"),
    ResourceKind.SUBDOMAINS: ("subdomain", "subdomains", "this workspace"),
    ResourceKind.CUSTOM_DOMAINS: ("custom domain", "custom domains", "this workspace"),
}


@dataclass(frozen=True)
class AllocationSummary:
    """Breakdown of a resource ceiling against current usage."""

    resource: ResourceKind
    base_allocation: int
    extra_from_add_ons: int
    total_allocation: int
    current_usage: int
    remaining_slots: int
    can_create_more: bool

    @property
    def can_promote_more(self) -> bool:
        return self.can_create_more


def base_allocation(kind: ResourceKind, plan_tier: PlanTier | str | None) -> int:
    """Base ceiling for a resource on a plan tier."""
    table = BASE_ALLOCATIONS[kind]
    return table.get(plan_tier, table[PlanTier.FREE])  # type: ignore[arg-type]


def extra_from_add_ons(kind: ResourceKind, add_ons: Iterable[AddOn]) -> int:
    """Sum the contribution of ACTIVE add-ons matching the resource."""
    mapping = ADD_ON_INCREMENTS.get(kind)
    if mapping is None:
        return 0
    add_on_type, per_unit = mapping
    return sum(
        add_on.quantity * per_unit
        for add_on in add_ons
        if add_on.type == add_on_type and add_on.status == AddOnStatus.ACTIVE
    )


def total_allocation(
    kind: ResourceKind,
    plan_tier: PlanTier | str | None,
    add_ons: Iterable[AddOn] = (),
) -> int:
    """Base ceiling plus active add-on contribution."""
    return base_allocation(kind, plan_tier) + extra_from_add_ons(kind, add_ons)


def can_create(
    kind: ResourceKind,
    current_count: int,
    plan_tier: PlanTier | str | None,
    add_ons: Iterable[AddOn] = (),
) -> bool:
    """Admit a creation while usage is below the ceiling."""
    return current_count < total_allocation(kind, plan_tier, add_ons)


def remaining_slots(
    kind: ResourceKind,
    current_count: int,
    plan_tier: PlanTier | str | None,
    add_ons: Iterable[AddOn] = (),
) -> int:
    """Slots left before the ceiling, never negative."""
    return max(0, total_allocation(kind, plan_tier, add_ons) - current_count)


def can_promote_to_admin(
    current_admin_count: int,
    plan_tier: PlanTier | str | None,
    add_ons: Iterable[AddOn] = (),
) -> bool:
    """Check whether another member may be promoted to ADMIN."""
    return can_create(ResourceKind.ADMINS, current_admin_count, plan_tier, add_ons)


def allocation_summary(
    kind: ResourceKind,
    current_count: int,
    plan_tier: PlanTier | str | None,
    add_ons: Iterable[AddOn] = (),
) -> AllocationSummary:
    """Full breakdown used for limit messages and capacity previews."""
    add_ons = list(add_ons)
    base = base_allocation(kind, plan_tier)
    total = base + extra_from_add_ons(kind, add_ons)
    return AllocationSummary(
        resource=kind,
        base_allocation=base,
        extra_from_add_ons=total - base,
        total_allocation=total,
        current_usage=current_count,
        remaining_slots=max(0, total - current_count),
        can_create_more=current_count < total,
    )


def limit_reached_message(summary: AllocationSummary) -> str:
    """Message shown when a creation is rejected by the guard."""
    singular, plural, scope = _LABELS[summary.resource]
    noun = singular if summary.total_allocation == 1 else plural
    return f"You've reached the maximum of {summary.total_allocation} {noun} for {scope}"
