"""Unit tests for plan allocation calculators."""

import pytest

from domain.allocations import (
    FUNNELS_PER_WORKSPACE,
    ResourceKind,
    allocation_summary,
    base_allocation,
    can_create,
    can_promote_to_admin,
    extra_from_add_ons,
    limit_reached_message,
    remaining_slots,
    total_allocation,
)
from domain.entities.workspace import AddOn, AddOnStatus, AddOnType, PlanTier

K = ResourceKind


def add_on(
    type_: AddOnType, quantity: int = 1, status: AddOnStatus = AddOnStatus.ACTIVE
) -> AddOn:
    return AddOn(type=type_, quantity=quantity, status=status, user_id=1)


class TestBaseTables:
    @pytest.mark.parametrize(
        ("kind", "free", "business", "agency"),
        [
            (K.WORKSPACES, 1, 1, 3),
            (K.ADMINS, 1, 2, 1),
            (K.FUNNELS, 3, 3, 3),
            (K.PAGES, 35, 35, 35),
            (K.SUBDOMAINS, 1, 1, 1),
            (K.CUSTOM_DOMAINS, 0, 1, 0),
        ],
    )
    def test_base_per_tier(self, kind: ResourceKind, free: int, business: int, agency: int) -> None:
        assert base_allocation(kind, PlanTier.FREE) == free
        assert base_allocation(kind, PlanTier.BUSINESS) == business
        assert base_allocation(kind, PlanTier.AGENCY) == agency

    @pytest.mark.parametrize("tier", [None, "", "ENTERPRISE", "business"])
    def test_unknown_tier_falls_back_to_free(self, tier: str | None) -> None:
        for kind in ResourceKind:
            assert base_allocation(kind, tier) == base_allocation(kind, PlanTier.FREE)

    def test_plain_string_tier(self) -> None:
        assert base_allocation(K.WORKSPACES, "AGENCY") == 3


class TestAddOnContribution:
    def test_extra_page_adds_five_per_unit(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_PAGE, quantity=2)]
        assert extra_from_add_ons(K.PAGES, add_ons) == 10
        assert total_allocation(K.PAGES, PlanTier.FREE, add_ons) == 45

    @pytest.mark.parametrize(
        "status",
        [AddOnStatus.PENDING, AddOnStatus.INACTIVE, AddOnStatus.CANCELLED, AddOnStatus.EXPIRED],
    )
    def test_non_active_add_ons_contribute_nothing(self, status: AddOnStatus) -> None:
        add_ons = [add_on(AddOnType.EXTRA_PAGE, quantity=4, status=status)]
        assert extra_from_add_ons(K.PAGES, add_ons) == 0
        assert total_allocation(K.PAGES, PlanTier.FREE, add_ons) == 35

    def test_only_matching_type_counts(self) -> None:
        add_ons = [
            add_on(AddOnType.EXTRA_SUBDOMAIN, quantity=3),
            add_on(AddOnType.EXTRA_WORKSPACE),
        ]
        assert extra_from_add_ons(K.SUBDOMAINS, add_ons) == 3
        assert extra_from_add_ons(K.WORKSPACES, add_ons) == 1
        assert extra_from_add_ons(K.CUSTOM_DOMAINS, add_ons) == 0

    def test_multiple_add_ons_of_one_type_are_summed(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_ADMIN), add_on(AddOnType.EXTRA_ADMIN, quantity=2)]
        assert total_allocation(K.ADMINS, PlanTier.FREE, add_ons) == 4

    def test_extra_custom_domain_on_free(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_CUSTOM_DOMAIN)]
        assert total_allocation(K.CUSTOM_DOMAINS, PlanTier.FREE, add_ons) == 1

    def test_unknown_tier_still_gets_add_ons(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_WORKSPACE, quantity=2)]
        assert total_allocation(K.WORKSPACES, "LEGACY", add_ons) == 3


class TestFunnelCeiling:
    @pytest.mark.parametrize("tier", list(PlanTier))
    def test_flat_for_every_tier(self, tier: PlanTier) -> None:
        assert total_allocation(K.FUNNELS, tier) == FUNNELS_PER_WORKSPACE

    def test_extra_funnel_add_on_is_ignored(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_FUNNEL, quantity=5)]
        assert total_allocation(K.FUNNELS, PlanTier.AGENCY, add_ons) == 3
        assert can_create(K.FUNNELS, 3, PlanTier.AGENCY, add_ons) is False


class TestUsageGuards:
    @pytest.mark.parametrize(("count", "expected"), [(0, True), (34, True), (35, False), (40, False)])
    def test_can_create_below_ceiling(self, count: int, expected: bool) -> None:
        assert can_create(K.PAGES, count, PlanTier.BUSINESS) is expected

    def test_zero_ceiling_never_admits(self) -> None:
        assert can_create(K.CUSTOM_DOMAINS, 0, PlanTier.FREE) is False

    @pytest.mark.parametrize(("count", "expected"), [(0, 3), (2, 1), (3, 0), (7, 0)])
    def test_remaining_is_clamped(self, count: int, expected: int) -> None:
        assert remaining_slots(K.FUNNELS, count, PlanTier.FREE) == expected

    def test_admin_promotion_with_add_ons(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_ADMIN, quantity=2)]
        assert total_allocation(K.ADMINS, PlanTier.AGENCY, add_ons) == 3
        assert can_promote_to_admin(2, PlanTier.AGENCY, add_ons) is True
        assert can_promote_to_admin(3, PlanTier.AGENCY, add_ons) is False

    def test_pending_admin_add_on_does_not_help(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_ADMIN, status=AddOnStatus.PENDING)]
        assert can_promote_to_admin(1, PlanTier.FREE, add_ons) is False


class TestSummary:
    def test_breakdown(self) -> None:
        add_ons = [add_on(AddOnType.EXTRA_PAGE)]
        summary = allocation_summary(K.PAGES, 12, PlanTier.FREE, add_ons)

        assert summary.resource == K.PAGES
        assert summary.base_allocation == 35
        assert summary.extra_from_add_ons == 5
        assert summary.total_allocation == 40
        assert summary.current_usage == 12
        assert summary.remaining_slots == 28
        assert summary.can_create_more is True

    def test_over_ceiling_after_downgrade(self) -> None:
        summary = allocation_summary(K.WORKSPACES, 3, PlanTier.FREE)
        assert summary.remaining_slots == 0
        assert summary.can_create_more is False

    def test_admin_summary_exposes_promotion_flag(self) -> None:
        summary = allocation_summary(K.ADMINS, 1, PlanTier.BUSINESS)
        assert summary.can_promote_more is True

    def test_accepts_generator_of_add_ons(self) -> None:
        add_ons = (a for a in [add_on(AddOnType.EXTRA_SUBDOMAIN, quantity=2)])
        summary = allocation_summary(K.SUBDOMAINS, 0, PlanTier.FREE, add_ons)
        assert summary.extra_from_add_ons == 2
        assert summary.total_allocation == 3


class TestLimitMessage:
    def test_plural(self) -> None:
        summary = allocation_summary(K.FUNNELS, 3, PlanTier.FREE)
        assert limit_reached_message(summary) == (
            "You've reached the maximum of 3 funnels for this workspace"
        )

    def test_singular(self) -> None:
        summary = allocation_summary(K.WORKSPACES, 1, PlanTier.FREE)
        assert limit_reached_message(summary) == (
            "You've reached the maximum of 1 workspace for your account"
        )

    def test_pages_scope(self) -> None:
        summary = allocation_summary(K.PAGES, 35, PlanTier.AGENCY)
        assert limit_reached_message(summary).endswith("35 pages for this funnel")
