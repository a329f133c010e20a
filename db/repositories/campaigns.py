"""Campaign repository — tenant-scoped CRUD and status changes."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.exceptions import ValidationError
from db.models import CAMPAIGN_STATUSES, Campaign
from db.repositories.common import (
    apply_changes,
    get_or_raise,
    require_listing_scope,
    resolve_write_organization,
)
from schemas import CampaignCreate, CampaignUpdate, changes, validate

logger = logging.getLogger(__name__)


async def create(session: AsyncSession, actor: ActingUser, data: dict) -> Campaign:
    """Create a campaign in the actor's organization (or data['organization_id']).

    data dict keys: organization_id, name, description, start_date, end_date,
    budget, status, goals
    """
    payload = validate(CampaignCreate, data)
    values = payload.model_dump()
    values["organization_id"] = await resolve_write_organization(
        session, actor, payload.organization_id
    )
    campaign = Campaign(**values)
    session.add(campaign)
    await session.flush()
    logger.info("Created campaign %s (%s) in organization %s", campaign.id, campaign.name, campaign.organization_id)
    return campaign


async def get(session: AsyncSession, actor: ActingUser, campaign_id: UUID) -> Campaign:
    campaign = await get_or_raise(session, Campaign, campaign_id)
    await Authorizer(session).require_access(actor.user_id, campaign.organization_id)
    return campaign


async def update(
    session: AsyncSession, actor: ActingUser, campaign_id: UUID, data: dict
) -> Campaign:
    """Apply a partial update; the resulting date range must stay ordered."""
    payload = validate(CampaignUpdate, data)
    campaign = await get(session, actor, campaign_id)
    values = changes(payload)

    start = values.get("start_date", campaign.start_date)
    end = values.get("end_date", campaign.end_date)
    if start and end and end < start:
        raise ValidationError("end_date must not be before start_date")

    apply_changes(campaign, values)
    await session.flush()
    return campaign


async def update_status(
    session: AsyncSession, actor: ActingUser, campaign_id: UUID, status: str
) -> Campaign:
    """Move a campaign to another status (draft, active, paused, completed)."""
    return await update(session, actor, campaign_id, {"status": status})


async def delete(session: AsyncSession, actor: ActingUser, campaign_id: UUID) -> None:
    """Delete a campaign; its influencer links and their content go with it."""
    campaign = await get(session, actor, campaign_id)
    await session.delete(campaign)
    await session.flush()
    logger.info("Deleted campaign %s", campaign_id)


async def list_campaigns(
    session: AsyncSession,
    actor: ActingUser,
    status: Optional[str] = None,
) -> list[Campaign]:
    """Return the current organization's campaigns, newest first."""
    if status is not None and status not in CAMPAIGN_STATUSES:
        raise ValidationError(f"unknown campaign status {status!r}")
    organization_id = await require_listing_scope(session, actor)
    stmt = (
        select(Campaign)
        .where(Campaign.organization_id == organization_id)
        .order_by(Campaign.created_at.desc())
    )
    if status is not None:
        stmt = stmt.where(Campaign.status == status)
    result = await session.execute(stmt)
    return list(result.scalars().all())
