"""Funnel and page domain entities."""

from dataclasses import dataclass, field
from datetime import UTC, datetime


def _utcnow() -> datetime:
    return datetime.now(UTC)


@dataclass
class Funnel:
    """Domain entity for a Funnel."""

    workspace_id: int
    name: str
    created_by: int
    id: int | None = None
    slug: str = ""
    status: str = "DRAFT"
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)


@dataclass
class Page:
    """Domain entity for a funnel page."""

    funnel_id: int
    name: str
    id: int | None = None
    link_id: str = ""
    order: int = 0
    created_at: datetime = field(default_factory=_utcnow)
    updated_at: datetime = field(default_factory=_utcnow)
