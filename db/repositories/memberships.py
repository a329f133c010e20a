"""Membership repository — invites, role changes and removals."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy import case, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.exceptions import AuthorizationError, ConflictError, NotFoundError
from db.models import Membership, Profile, utcnow
from db.repositories.common import flush_or_conflict
from schemas import MembershipCreate, validate

logger = logging.getLogger(__name__)

_ROLE_ORDER = case({"owner": 0, "admin": 1}, value=Membership.role, else_=2)


async def get_role(
    session: AsyncSession, user_id: UUID, organization_id: UUID
) -> Optional[str]:
    """Return the user's role in the organization, or None."""
    return await Authorizer(session).role_of(user_id, organization_id)


async def _get_membership(
    session: AsyncSession, organization_id: UUID, user_id: UUID
) -> Membership:
    result = await session.execute(
        select(Membership)
        .where(Membership.organization_id == organization_id)
        .where(Membership.user_id == user_id)
    )
    membership = result.scalar_one_or_none()
    if membership is None:
        raise NotFoundError(f"user {user_id} is not a member of organization {organization_id}")
    return membership


async def _owner_count(session: AsyncSession, organization_id: UUID) -> int:
    result = await session.execute(
        select(func.count(Membership.id))
        .where(Membership.organization_id == organization_id)
        .where(Membership.role == "owner")
    )
    return result.scalar_one()


async def add_member(
    session: AsyncSession,
    actor: ActingUser,
    organization_id: UUID,
    user_id: UUID,
    role: str = "member",
) -> Membership:
    """Invite an existing user into the organization.

    Only owners and admins may invite. Granting 'owner' requires being an owner.
    """
    payload = validate(MembershipCreate, {"role": role})
    actor_role = await Authorizer(session).require_role(actor.user_id, organization_id)
    if payload.role == "owner" and actor_role != "owner":
        raise AuthorizationError("only owners may grant the owner role")
    if await session.get(Profile, user_id) is None:
        raise NotFoundError(f"no profile for user {user_id}")
    if await get_role(session, user_id, organization_id) is not None:
        raise ConflictError(f"user {user_id} is already a member of organization {organization_id}")

    membership = Membership(
        organization_id=organization_id, user_id=user_id, role=payload.role
    )
    session.add(membership)
    await flush_or_conflict(session, f"membership {organization_id}/{user_id}")
    logger.info(
        "Added user %s to organization %s as %s (by %s)",
        user_id, organization_id, payload.role, actor.user_id,
    )
    return membership


async def update_role(
    session: AsyncSession,
    actor: ActingUser,
    organization_id: UUID,
    user_id: UUID,
    role: str,
) -> Membership:
    """Change a member's role. Demoting the last owner is refused."""
    payload = validate(MembershipCreate, {"role": role})
    actor_role = await Authorizer(session).require_role(actor.user_id, organization_id)
    membership = await _get_membership(session, organization_id, user_id)
    if "owner" in (payload.role, membership.role) and actor_role != "owner":
        raise AuthorizationError("only owners may grant or revoke the owner role")
    if membership.role == "owner" and payload.role != "owner":
        if await _owner_count(session, organization_id) <= 1:
            raise ConflictError(f"organization {organization_id} must keep at least one owner")

    membership.role = payload.role
    membership.updated_at = utcnow()
    await session.flush()
    return membership


async def remove_member(
    session: AsyncSession, actor: ActingUser, organization_id: UUID, user_id: UUID
) -> None:
    """Remove a member. Users may always remove themselves; the last owner may not leave."""
    removing_self = user_id == actor.user_id
    if not removing_self:
        actor_role = await Authorizer(session).require_role(actor.user_id, organization_id)
    membership = await _get_membership(session, organization_id, user_id)
    if not removing_self and membership.role == "owner" and actor_role != "owner":
        raise AuthorizationError("only owners may remove another owner")
    if membership.role == "owner" and await _owner_count(session, organization_id) <= 1:
        raise ConflictError(f"organization {organization_id} must keep at least one owner")

    await session.delete(membership)
    if removing_self:
        profile = await session.get(Profile, user_id)
        if profile is not None and profile.organization_id == organization_id:
            profile.organization_id = None
    await session.flush()
    logger.info("Removed user %s from organization %s", user_id, organization_id)


async def list_members(
    session: AsyncSession, actor: ActingUser, organization_id: UUID
) -> list[Membership]:
    """Return the organization's memberships, owners first."""
    await Authorizer(session).require_access(actor.user_id, organization_id)
    result = await session.execute(
        select(Membership)
        .where(Membership.organization_id == organization_id)
        .order_by(_ROLE_ORDER, Membership.created_at)
    )
    return list(result.scalars().all())
