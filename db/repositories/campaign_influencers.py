"""Campaign-influencer link repository.

A link carries no organization column of its own: its tenant is the
organization of its campaign, and the influencer must belong to the same one.
"""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.exceptions import ConflictError, NotFoundError, ValidationError
from db.models import Campaign, CampaignInfluencer, Influencer
from db.repositories.common import (
    apply_changes,
    flush_or_conflict,
    get_or_raise,
    require_listing_scope,
)
from schemas import CampaignInfluencerCreate, CampaignInfluencerUpdate, changes, validate

logger = logging.getLogger(__name__)


async def get_by_pair(
    session: AsyncSession, campaign_id: UUID, influencer_id: UUID
) -> Optional[CampaignInfluencer]:
    """Return the link for this (campaign, influencer) pair, or None."""
    result = await session.execute(
        select(CampaignInfluencer)
        .where(CampaignInfluencer.campaign_id == campaign_id)
        .where(CampaignInfluencer.influencer_id == influencer_id)
    )
    return result.scalar_one_or_none()


async def organization_of(session: AsyncSession, link: CampaignInfluencer) -> UUID:
    result = await session.execute(
        select(Campaign.organization_id).where(Campaign.id == link.campaign_id)
    )
    organization_id = result.scalar_one_or_none()
    if organization_id is None:
        raise NotFoundError(f"campaign {link.campaign_id} of link {link.id} does not exist")
    return organization_id


async def create(session: AsyncSession, actor: ActingUser, data: dict) -> CampaignInfluencer:
    """Attach an influencer to a campaign.

    data dict keys: campaign_id, influencer_id, status, compensation,
    compensation_terms, deliverables, tracking_links, notes

    Raises ConflictError if the pair is already linked.
    """
    payload = validate(CampaignInfluencerCreate, data)
    authorizer = Authorizer(session)

    campaign = await get_or_raise(session, Campaign, payload.campaign_id)
    await authorizer.require_access(actor.user_id, campaign.organization_id)
    influencer = await get_or_raise(session, Influencer, payload.influencer_id)
    await authorizer.require_access(actor.user_id, influencer.organization_id)
    if influencer.organization_id != campaign.organization_id:
        raise ValidationError("campaign and influencer belong to different organizations")

    if await get_by_pair(session, campaign.id, influencer.id) is not None:
        raise ConflictError(
            f"influencer {influencer.id} is already linked to campaign {campaign.id}"
        )

    link = CampaignInfluencer(**payload.model_dump())
    session.add(link)
    await flush_or_conflict(session, f"campaign influencer {campaign.id}/{influencer.id}")
    logger.info("Linked influencer %s to campaign %s (%s)", influencer.id, campaign.id, link.status)
    return link


async def get(session: AsyncSession, actor: ActingUser, link_id: UUID) -> CampaignInfluencer:
    link = await get_or_raise(session, CampaignInfluencer, link_id)
    await Authorizer(session).require_access(actor.user_id, await organization_of(session, link))
    return link


async def update(
    session: AsyncSession, actor: ActingUser, link_id: UUID, data: dict
) -> CampaignInfluencer:
    payload = validate(CampaignInfluencerUpdate, data)
    link = await get(session, actor, link_id)
    apply_changes(link, changes(payload))
    await session.flush()
    return link


async def update_status(
    session: AsyncSession, actor: ActingUser, link_id: UUID, status: str
) -> CampaignInfluencer:
    """Move a link through invited/negotiating/confirmed/active/completed/declined."""
    return await update(session, actor, link_id, {"status": status})


async def delete(session: AsyncSession, actor: ActingUser, link_id: UUID) -> None:
    """Remove an influencer from a campaign, with all of its content."""
    link = await get(session, actor, link_id)
    await session.delete(link)
    await session.flush()
    logger.info("Deleted campaign influencer %s", link_id)


async def list_links(
    session: AsyncSession,
    actor: ActingUser,
    campaign_id: Optional[UUID] = None,
    influencer_id: Optional[UUID] = None,
) -> list[CampaignInfluencer]:
    """Return links in the current organization, optionally for one campaign or influencer."""
    organization_id = await require_listing_scope(session, actor)
    stmt = (
        select(CampaignInfluencer)
        .join(Campaign, Campaign.id == CampaignInfluencer.campaign_id)
        .where(Campaign.organization_id == organization_id)
        .order_by(CampaignInfluencer.created_at)
    )
    if campaign_id is not None:
        stmt = stmt.where(CampaignInfluencer.campaign_id == campaign_id)
    if influencer_id is not None:
        stmt = stmt.where(CampaignInfluencer.influencer_id == influencer_id)
    result = await session.execute(stmt)
    return list(result.scalars().all())
