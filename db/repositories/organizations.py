"""Organization repository — tenant lifecycle."""
import logging
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.models import Membership, Organization, Profile
from db.repositories.common import apply_changes, get_or_raise
from schemas import OrganizationCreate, OrganizationUpdate, changes, validate

logger = logging.getLogger(__name__)


async def create(session: AsyncSession, user_id: UUID, data: dict) -> Organization:
    """Create an organization owned by user_id.

    The creator gets an 'owner' membership, and the organization becomes
    their current one if their profile has none yet.

    data dict keys: name, logo_url
    """
    payload = validate(OrganizationCreate, data)
    profile = await get_or_raise(session, Profile, user_id)

    org = Organization(**payload.model_dump())
    session.add(org)
    await session.flush()  # get org.id

    session.add(Membership(organization_id=org.id, user_id=user_id, role="owner"))
    if profile.organization_id is None:
        profile.organization_id = org.id
    await session.flush()
    logger.info("Created organization %s (%s) owned by %s", org.id, org.name, user_id)
    return org


async def get(session: AsyncSession, actor: ActingUser, organization_id: UUID) -> Organization:
    """Return the organization if the actor is a member of it."""
    org = await get_or_raise(session, Organization, organization_id)
    await Authorizer(session).require_access(actor.user_id, org.id)
    return org


async def update(
    session: AsyncSession, actor: ActingUser, organization_id: UUID, data: dict
) -> Organization:
    """Rename or re-brand an organization. Owners and admins only."""
    payload = validate(OrganizationUpdate, data)
    org = await get_or_raise(session, Organization, organization_id)
    await Authorizer(session).require_role(actor.user_id, org.id)
    apply_changes(org, changes(payload))
    await session.flush()
    return org


async def delete(session: AsyncSession, actor: ActingUser, organization_id: UUID) -> None:
    """Delete an organization and, through the foreign keys, everything it owns."""
    org = await get_or_raise(session, Organization, organization_id)
    await Authorizer(session).require_role(actor.user_id, org.id, roles=("owner",))
    await session.delete(org)
    await session.flush()
    logger.info("Deleted organization %s by %s", organization_id, actor.user_id)


async def list_for_user(session: AsyncSession, user_id: UUID) -> list[Organization]:
    """Return every organization the user belongs to, by name."""
    result = await session.execute(
        select(Organization)
        .join(Membership, Membership.organization_id == Organization.id)
        .where(Membership.user_id == user_id)
        .order_by(Organization.name)
    )
    return list(result.scalars().all())
