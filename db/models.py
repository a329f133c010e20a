"""SQLAlchemy 2.0 ORM models for the influencer campaign dashboard.

Covers 7 tables:
  - tenancy: organizations, memberships, profiles
  - campaigns: influencers, campaigns, campaign_influencers, content

Every campaign-side row is scoped to an organization, either directly
(influencers, campaigns) or through its parent (campaign_influencers,
content). Deleting a campaign or influencer cascades through the foreign
keys down to content.
"""

import uuid
from datetime import date, datetime, timezone
from decimal import Decimal
from typing import Any, Optional

from sqlalchemy import (
    UUID,
    CheckConstraint,
    Date,
    DateTime,
    JSON,
    Numeric,
    Text,
    ForeignKey,
    TypeDecorator,
    UniqueConstraint,
)
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ---------------------------------------------------------------------------
# Shared base
# ---------------------------------------------------------------------------


class Base(DeclarativeBase):
    pass


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class UTCDateTime(TypeDecorator):
    """Timezone-aware timestamp stored and returned in UTC on every dialect.

    SQLite drops the offset on write and hands back naive values.
    """

    impl = DateTime(timezone=True)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is not None and value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value

    def process_result_value(self, value, dialect):
        if value is not None and value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return value


def _created_at() -> Mapped[datetime]:
    return mapped_column(UTCDateTime, default=utcnow, nullable=False)


def _updated_at() -> Mapped[datetime]:
    return mapped_column(
        UTCDateTime, default=utcnow, onupdate=utcnow, nullable=False
    )


# ---------------------------------------------------------------------------
# Closed enumerations used in CHECK constraints
# ---------------------------------------------------------------------------

MEMBERSHIP_ROLES = ("owner", "admin", "member")

CAMPAIGN_STATUSES = ("draft", "active", "paused", "completed")

CAMPAIGN_INFLUENCER_STATUSES = (
    "invited",
    "negotiating",
    "confirmed",
    "active",
    "completed",
    "declined",
)

CONTENT_STATUSES = ("planned", "scheduled", "published", "archived")


def _in_check(column: str, values: tuple[str, ...]) -> str:
    return f"{column} IN (" + ", ".join(f"'{v}'" for v in values) + ")"


# ===========================================================================
# Tenancy
# ===========================================================================


class Organization(Base):
    """organizations — the tenant boundary."""

    __tablename__ = "organizations"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    logo_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    # Relationships
    memberships: Mapped[list["Membership"]] = relationship(
        "Membership",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    influencers: Mapped[list["Influencer"]] = relationship(
        "Influencer",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    campaigns: Mapped[list["Campaign"]] = relationship(
        "Campaign",
        back_populates="organization",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Membership(Base):
    """memberships — role grant for one user within one organization."""

    __tablename__ = "memberships"
    __table_args__ = (
        CheckConstraint(_in_check("role", MEMBERSHIP_ROLES), name="ck_membership_role"),
        UniqueConstraint("organization_id", "user_id", name="uq_membership_org_user"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("profiles.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    role: Mapped[str] = mapped_column(Text, nullable=False, default="member")
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="memberships"
    )


class Profile(Base):
    """profiles — one row per authenticated user, keyed by the identity id."""

    __tablename__ = "profiles"

    # Same value as the external identity id; not generated locally
    id: Mapped[uuid.UUID] = mapped_column(UUID(as_uuid=True), primary_key=True)
    email: Mapped[str] = mapped_column(Text, unique=True, nullable=False)
    full_name: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    avatar_url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    organization_id: Mapped[Optional[uuid.UUID]] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="SET NULL"),
        nullable=True,
    )
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()


# ===========================================================================
# Campaign domain
# ===========================================================================


class Influencer(Base):
    """influencers — creators tracked by one organization."""

    __tablename__ = "influencers"

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    email: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    # platform -> handle, e.g. {"instagram": "@alice"}
    social_handles: Mapped[dict[str, str]] = mapped_column(JSON, nullable=False, default=dict)
    categories: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    audience_demographics: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    # Relationships
    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="influencers"
    )
    campaign_links: Mapped[list["CampaignInfluencer"]] = relationship(
        "CampaignInfluencer",
        back_populates="influencer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Campaign(Base):
    """campaigns — a marketing campaign owned by one organization."""

    __tablename__ = "campaigns"
    __table_args__ = (
        CheckConstraint(_in_check("status", CAMPAIGN_STATUSES), name="ck_campaign_status"),
        CheckConstraint(
            "end_date IS NULL OR start_date IS NULL OR end_date >= start_date",
            name="ck_campaign_date_range",
        ),
        CheckConstraint("budget IS NULL OR budget >= 0", name="ck_campaign_budget"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    organization_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("organizations.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(Text, nullable=False)
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    start_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    end_date: Mapped[Optional[date]] = mapped_column(Date, nullable=True)
    budget: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    status: Mapped[str] = mapped_column(Text, nullable=False, default="draft")
    goals: Mapped[Optional[dict[str, Any]]] = mapped_column(JSON, nullable=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    # Relationships
    organization: Mapped["Organization"] = relationship(
        "Organization", back_populates="campaigns"
    )
    influencer_links: Mapped[list["CampaignInfluencer"]] = relationship(
        "CampaignInfluencer",
        back_populates="campaign",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class CampaignInfluencer(Base):
    """campaign_influencers — one influencer's participation in one campaign."""

    __tablename__ = "campaign_influencers"
    __table_args__ = (
        CheckConstraint(
            _in_check("status", CAMPAIGN_INFLUENCER_STATUSES),
            name="ck_campaign_influencer_status",
        ),
        CheckConstraint(
            "compensation IS NULL OR compensation >= 0",
            name="ck_campaign_influencer_compensation",
        ),
        UniqueConstraint(
            "campaign_id", "influencer_id", name="uq_campaign_influencer_pair"
        ),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    campaign_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("campaigns.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    influencer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("influencers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    status: Mapped[str] = mapped_column(Text, nullable=False, default="invited")
    compensation: Mapped[Optional[Decimal]] = mapped_column(Numeric(12, 2), nullable=True)
    compensation_terms: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    deliverables: Mapped[list[Any]] = mapped_column(JSON, nullable=False, default=list)
    tracking_links: Mapped[dict[str, str]] = mapped_column(JSON, nullable=False, default=dict)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    # Relationships
    campaign: Mapped["Campaign"] = relationship(
        "Campaign", back_populates="influencer_links"
    )
    influencer: Mapped["Influencer"] = relationship(
        "Influencer", back_populates="campaign_links"
    )
    content_items: Mapped[list["Content"]] = relationship(
        "Content",
        back_populates="campaign_influencer",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Content(Base):
    """content — a planned or published post delivered under a campaign link."""

    __tablename__ = "content"
    __table_args__ = (
        CheckConstraint(_in_check("status", CONTENT_STATUSES), name="ck_content_status"),
    )

    id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True), primary_key=True, default=uuid.uuid4
    )
    campaign_influencer_id: Mapped[uuid.UUID] = mapped_column(
        UUID(as_uuid=True),
        ForeignKey("campaign_influencers.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    platform: Mapped[str] = mapped_column(Text, nullable=False)
    content_type: Mapped[str] = mapped_column(Text, nullable=False)
    url: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    caption: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    scheduled_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime, nullable=True
    )
    published_at: Mapped[Optional[datetime]] = mapped_column(
        UTCDateTime, nullable=True
    )
    status: Mapped[str] = mapped_column(Text, nullable=False, default="planned")
    metrics: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    created_at: Mapped[datetime] = _created_at()
    updated_at: Mapped[datetime] = _updated_at()

    campaign_influencer: Mapped["CampaignInfluencer"] = relationship(
        "CampaignInfluencer", back_populates="content_items"
    )


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

__all__ = [
    "Base",
    "utcnow",
    "MEMBERSHIP_ROLES",
    "CAMPAIGN_STATUSES",
    "CAMPAIGN_INFLUENCER_STATUSES",
    "CONTENT_STATUSES",
    # tenancy
    "Organization",
    "Membership",
    "Profile",
    # campaigns
    "Influencer",
    "Campaign",
    "CampaignInfluencer",
    "Content",
]
