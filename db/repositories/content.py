"""Content repository — scheduling, publishing and the content calendar."""
import logging
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID

from dateutil.relativedelta import relativedelta
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.exceptions import ValidationError
from db.models import CONTENT_STATUSES, Campaign, CampaignInfluencer, Content
from db.repositories.campaign_influencers import organization_of
from db.repositories.common import (
    apply_changes,
    get_or_raise,
    require_listing_scope,
)
from schemas import ContentCreate, ContentUpdate, changes, validate

logger = logging.getLogger(__name__)


async def _require_link_access(
    session: AsyncSession, actor: ActingUser, link_id: UUID
) -> CampaignInfluencer:
    link = await get_or_raise(session, CampaignInfluencer, link_id)
    await Authorizer(session).require_access(actor.user_id, await organization_of(session, link))
    return link


async def create(session: AsyncSession, actor: ActingUser, data: dict) -> Content:
    """Plan a content item under a campaign-influencer link.

    data dict keys: campaign_influencer_id, platform, content_type, url,
    caption, scheduled_at, published_at, status, metrics
    """
    payload = validate(ContentCreate, data)
    await _require_link_access(session, actor, payload.campaign_influencer_id)
    item = Content(**payload.model_dump())
    session.add(item)
    await session.flush()
    logger.info("Created %s content %s for link %s", item.platform, item.id, item.campaign_influencer_id)
    return item


async def get(session: AsyncSession, actor: ActingUser, content_id: UUID) -> Content:
    item = await get_or_raise(session, Content, content_id)
    await _require_link_access(session, actor, item.campaign_influencer_id)
    return item


async def update(
    session: AsyncSession, actor: ActingUser, content_id: UUID, data: dict
) -> Content:
    payload = validate(ContentUpdate, data)
    item = await get(session, actor, content_id)
    apply_changes(item, changes(payload))
    await session.flush()
    return item


async def mark_published(
    session: AsyncSession,
    actor: ActingUser,
    content_id: UUID,
    url: Optional[str] = None,
    published_at: Optional[datetime] = None,
) -> Content:
    """Mark content as published, stamping the publish time."""
    data = {
        "status": "published",
        "published_at": published_at or datetime.now(timezone.utc),
    }
    if url is not None:
        data["url"] = url
    return await update(session, actor, content_id, data)


async def record_metrics(
    session: AsyncSession, actor: ActingUser, content_id: UUID, metrics: dict
) -> Content:
    """Merge new metric values (views, likes, ...) into the stored metrics."""
    item = await get(session, actor, content_id)
    return await update(session, actor, content_id, {"metrics": {**(item.metrics or {}), **metrics}})


async def delete(session: AsyncSession, actor: ActingUser, content_id: UUID) -> None:
    item = await get(session, actor, content_id)
    await session.delete(item)
    await session.flush()
    logger.info("Deleted content %s", content_id)


def _org_content_query(organization_id: UUID):
    return (
        select(Content)
        .join(CampaignInfluencer, CampaignInfluencer.id == Content.campaign_influencer_id)
        .join(Campaign, Campaign.id == CampaignInfluencer.campaign_id)
        .where(Campaign.organization_id == organization_id)
    )


async def list_content(
    session: AsyncSession,
    actor: ActingUser,
    campaign_influencer_id: Optional[UUID] = None,
    status: Optional[str] = None,
) -> list[Content]:
    """Return the current organization's content, optionally for one link or status."""
    if status is not None and status not in CONTENT_STATUSES:
        raise ValidationError(f"unknown content status {status!r}")
    organization_id = await require_listing_scope(session, actor)
    stmt = _org_content_query(organization_id).order_by(Content.created_at)
    if campaign_influencer_id is not None:
        stmt = stmt.where(Content.campaign_influencer_id == campaign_influencer_id)
    if status is not None:
        stmt = stmt.where(Content.status == status)
    result = await session.execute(stmt)
    return list(result.scalars().all())


async def get_calendar(
    session: AsyncSession,
    actor: ActingUser,
    start: Optional[datetime] = None,
    months: int = 1,
) -> list[Content]:
    """Return content scheduled in [start, start + months), earliest first.

    start defaults to now. Archived items are left off the calendar.
    """
    if months < 1:
        raise ValidationError("months must be at least 1")
    window_open = start or datetime.now(timezone.utc)
    if window_open.tzinfo is None:
        window_open = window_open.replace(tzinfo=timezone.utc)
    window_close = window_open + relativedelta(months=months)

    organization_id = await require_listing_scope(session, actor)
    result = await session.execute(
        _org_content_query(organization_id)
        .where(Content.scheduled_at >= window_open)
        .where(Content.scheduled_at < window_close)
        .where(Content.status != "archived")
        .order_by(Content.scheduled_at)
    )
    return list(result.scalars().all())
