"""Initial schema: tenancy and campaign tables.

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers
revision = "001"
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
        sa.Column("updated_at", sa.DateTime(timezone=True), nullable=False, server_default=sa.func.now()),
    ]


def upgrade() -> None:
    # ─── Tenancy ────────────────────────────────────────────────────────────

    op.create_table(
        "organizations",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("logo_url", sa.Text, nullable=True),
        *_timestamps(),
    )

    op.create_table(
        "profiles",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("email", sa.Text, nullable=False),
        sa.Column("full_name", sa.Text, nullable=True),
        sa.Column("avatar_url", sa.Text, nullable=True),
        sa.Column("organization_id", sa.Uuid(), nullable=True),
        *_timestamps(),
        sa.UniqueConstraint("email", name="uq_profile_email"),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"],
            name="fk_profile_org", ondelete="SET NULL",
        ),
    )

    op.create_table(
        "memberships",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("user_id", sa.Uuid(), nullable=False),
        sa.Column("role", sa.Text, nullable=False, server_default="member"),
        *_timestamps(),
        sa.CheckConstraint("role IN ('owner', 'admin', 'member')", name="ck_membership_role"),
        sa.UniqueConstraint("organization_id", "user_id", name="uq_membership_org_user"),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"],
            name="fk_membership_org", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["user_id"], ["profiles.id"],
            name="fk_membership_profile", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_memberships_organization_id", "memberships", ["organization_id"])
    op.create_index("ix_memberships_user_id", "memberships", ["user_id"])

    # ─── Campaign domain ────────────────────────────────────────────────────

    op.create_table(
        "influencers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("email", sa.Text, nullable=True),
        sa.Column("phone", sa.Text, nullable=True),
        sa.Column("social_handles", sa.JSON, nullable=False),
        sa.Column("categories", sa.JSON, nullable=False),
        sa.Column("audience_demographics", sa.JSON, nullable=True),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"],
            name="fk_influencer_org", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_influencers_organization_id", "influencers", ["organization_id"])

    op.create_table(
        "campaigns",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("organization_id", sa.Uuid(), nullable=False),
        sa.Column("name", sa.Text, nullable=False),
        sa.Column("description", sa.Text, nullable=True),
        sa.Column("start_date", sa.Date, nullable=True),
        sa.Column("end_date", sa.Date, nullable=True),
        sa.Column("budget", sa.Numeric(12, 2), nullable=True),
        sa.Column("status", sa.Text, nullable=False, server_default="draft"),
        sa.Column("goals", sa.JSON, nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('draft', 'active', 'paused', 'completed')",
            name="ck_campaign_status",
        ),
        sa.CheckConstraint(
            "end_date IS NULL OR start_date IS NULL OR end_date >= start_date",
            name="ck_campaign_date_range",
        ),
        sa.CheckConstraint("budget IS NULL OR budget >= 0", name="ck_campaign_budget"),
        sa.ForeignKeyConstraint(
            ["organization_id"], ["organizations.id"],
            name="fk_campaign_org", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_campaigns_organization_id", "campaigns", ["organization_id"])

    op.create_table(
        "campaign_influencers",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("campaign_id", sa.Uuid(), nullable=False),
        sa.Column("influencer_id", sa.Uuid(), nullable=False),
        sa.Column("status", sa.Text, nullable=False, server_default="invited"),
        sa.Column("compensation", sa.Numeric(12, 2), nullable=True),
        sa.Column("compensation_terms", sa.Text, nullable=True),
        sa.Column("deliverables", sa.JSON, nullable=False),
        sa.Column("tracking_links", sa.JSON, nullable=False),
        sa.Column("notes", sa.Text, nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('invited', 'negotiating', 'confirmed', 'active', 'completed', 'declined')",
            name="ck_campaign_influencer_status",
        ),
        sa.CheckConstraint(
            "compensation IS NULL OR compensation >= 0",
            name="ck_campaign_influencer_compensation",
        ),
        sa.UniqueConstraint("campaign_id", "influencer_id", name="uq_campaign_influencer_pair"),
        sa.ForeignKeyConstraint(
            ["campaign_id"], ["campaigns.id"],
            name="fk_campaign_influencer_campaign", ondelete="CASCADE",
        ),
        sa.ForeignKeyConstraint(
            ["influencer_id"], ["influencers.id"],
            name="fk_campaign_influencer_influencer", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_campaign_influencers_campaign_id", "campaign_influencers", ["campaign_id"])
    op.create_index("ix_campaign_influencers_influencer_id", "campaign_influencers", ["influencer_id"])

    op.create_table(
        "content",
        sa.Column("id", sa.Uuid(), primary_key=True),
        sa.Column("campaign_influencer_id", sa.Uuid(), nullable=False),
        sa.Column("platform", sa.Text, nullable=False),
        sa.Column("content_type", sa.Text, nullable=False),
        sa.Column("url", sa.Text, nullable=True),
        sa.Column("caption", sa.Text, nullable=True),
        sa.Column("scheduled_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("published_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("status", sa.Text, nullable=False, server_default="planned"),
        sa.Column("metrics", sa.JSON, nullable=False),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('planned', 'scheduled', 'published', 'archived')",
            name="ck_content_status",
        ),
        sa.ForeignKeyConstraint(
            ["campaign_influencer_id"], ["campaign_influencers.id"],
            name="fk_content_campaign_influencer", ondelete="CASCADE",
        ),
    )
    op.create_index("ix_content_campaign_influencer_id", "content", ["campaign_influencer_id"])
    op.create_index("ix_content_scheduled_at", "content", ["scheduled_at"])


def downgrade() -> None:
    op.drop_index("ix_content_scheduled_at", table_name="content")
    op.drop_index("ix_content_campaign_influencer_id", table_name="content")
    op.drop_index("ix_campaign_influencers_influencer_id", table_name="campaign_influencers")
    op.drop_index("ix_campaign_influencers_campaign_id", table_name="campaign_influencers")
    op.drop_index("ix_campaigns_organization_id", table_name="campaigns")
    op.drop_index("ix_influencers_organization_id", table_name="influencers")
    op.drop_index("ix_memberships_user_id", table_name="memberships")
    op.drop_index("ix_memberships_organization_id", table_name="memberships")
    # Drop in reverse dependency order
    op.drop_table("content")
    op.drop_table("campaign_influencers")
    op.drop_table("campaigns")
    op.drop_table("influencers")
    op.drop_table("memberships")
    op.drop_table("profiles")
    op.drop_table("organizations")
