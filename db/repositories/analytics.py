"""Dashboard analytics — per-organization rollups for the overview screen."""
import logging
from decimal import Decimal
from numbers import Number

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser
from db.models import (
    CAMPAIGN_INFLUENCER_STATUSES,
    CAMPAIGN_STATUSES,
    CONTENT_STATUSES,
    Campaign,
    CampaignInfluencer,
    Content,
    Influencer,
)
from db.repositories.common import require_listing_scope

logger = logging.getLogger(__name__)


def _status_counts(rows, statuses: tuple[str, ...]) -> dict[str, int]:
    counts = {status: 0 for status in statuses}
    for status, count in rows:
        counts[status] = count
    return counts


async def dashboard_summary(session: AsyncSession, actor: ActingUser) -> dict:
    """Return counts and totals for the actor's current organization.

    Keys: influencers, campaigns (by status), campaign_influencers (by status),
    content (by status), active_budget, metrics (summed numeric content metrics).
    """
    organization_id = await require_listing_scope(session, actor)

    influencer_count = (
        await session.execute(
            select(func.count(Influencer.id)).where(Influencer.organization_id == organization_id)
        )
    ).scalar_one()

    campaign_rows = await session.execute(
        select(Campaign.status, func.count(Campaign.id))
        .where(Campaign.organization_id == organization_id)
        .group_by(Campaign.status)
    )

    link_rows = await session.execute(
        select(CampaignInfluencer.status, func.count(CampaignInfluencer.id))
        .join(Campaign, Campaign.id == CampaignInfluencer.campaign_id)
        .where(Campaign.organization_id == organization_id)
        .group_by(CampaignInfluencer.status)
    )

    content_rows = await session.execute(
        select(Content.status, func.count(Content.id))
        .join(CampaignInfluencer, CampaignInfluencer.id == Content.campaign_influencer_id)
        .join(Campaign, Campaign.id == CampaignInfluencer.campaign_id)
        .where(Campaign.organization_id == organization_id)
        .group_by(Content.status)
    )

    budget = (
        await session.execute(
            select(func.coalesce(func.sum(Campaign.budget), 0))
            .where(Campaign.organization_id == organization_id)
            .where(Campaign.status == "active")
        )
    ).scalar_one()

    # Metrics are free-form JSON; only numeric values are summed
    metrics_rows = await session.execute(
        select(Content.metrics)
        .join(CampaignInfluencer, CampaignInfluencer.id == Content.campaign_influencer_id)
        .join(Campaign, Campaign.id == CampaignInfluencer.campaign_id)
        .where(Campaign.organization_id == organization_id)
    )
    metrics: dict[str, float] = {}
    for (item_metrics,) in metrics_rows.all():
        for key, value in (item_metrics or {}).items():
            if isinstance(value, Number) and not isinstance(value, bool):
                metrics[key] = metrics.get(key, 0) + value

    return {
        "organization_id": organization_id,
        "influencers": influencer_count,
        "campaigns": _status_counts(campaign_rows.all(), CAMPAIGN_STATUSES),
        "campaign_influencers": _status_counts(link_rows.all(), CAMPAIGN_INFLUENCER_STATUSES),
        "content": _status_counts(content_rows.all(), CONTENT_STATUSES),
        "active_budget": Decimal(str(budget)),
        "metrics": metrics,
    }
