"""Influencer repository — tenant-scoped CRUD."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.models import Influencer
from db.repositories.common import (
    apply_changes,
    get_or_raise,
    require_listing_scope,
    resolve_write_organization,
)
from schemas import InfluencerCreate, InfluencerUpdate, changes, validate

logger = logging.getLogger(__name__)


async def create(session: AsyncSession, actor: ActingUser, data: dict) -> Influencer:
    """Add an influencer to the actor's organization (or data['organization_id']).

    data dict keys: organization_id, name, email, phone, social_handles,
    categories, audience_demographics, notes
    """
    payload = validate(InfluencerCreate, data)
    values = payload.model_dump()
    values["organization_id"] = await resolve_write_organization(
        session, actor, payload.organization_id
    )
    influencer = Influencer(**values)
    session.add(influencer)
    await session.flush()
    logger.info("Created influencer %s in organization %s", influencer.id, influencer.organization_id)
    return influencer


async def get(session: AsyncSession, actor: ActingUser, influencer_id: UUID) -> Influencer:
    influencer = await get_or_raise(session, Influencer, influencer_id)
    await Authorizer(session).require_access(actor.user_id, influencer.organization_id)
    return influencer


async def update(
    session: AsyncSession, actor: ActingUser, influencer_id: UUID, data: dict
) -> Influencer:
    payload = validate(InfluencerUpdate, data)
    influencer = await get(session, actor, influencer_id)
    apply_changes(influencer, changes(payload))
    await session.flush()
    return influencer


async def delete(session: AsyncSession, actor: ActingUser, influencer_id: UUID) -> None:
    """Delete an influencer; campaign links and their content go with it."""
    influencer = await get(session, actor, influencer_id)
    await session.delete(influencer)
    await session.flush()
    logger.info("Deleted influencer %s", influencer_id)


async def list_influencers(
    session: AsyncSession,
    actor: ActingUser,
    category: Optional[str] = None,
) -> list[Influencer]:
    """Return the current organization's influencers by name, optionally by category tag."""
    organization_id = await require_listing_scope(session, actor)
    result = await session.execute(
        select(Influencer)
        .where(Influencer.organization_id == organization_id)
        .order_by(Influencer.name)
    )
    influencers = list(result.scalars().all())
    if category:
        # JSON containment differs per dialect; tag lists are short
        tag = category.strip().casefold()
        influencers = [
            i for i in influencers
            if tag in {c.casefold() for c in i.categories or []}
        ]
    return influencers
