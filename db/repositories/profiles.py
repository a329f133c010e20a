"""Profile repository — one row per authenticated identity."""
import logging
from typing import Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.exceptions import NotFoundError
from db.models import Profile, utcnow
from db.repositories.common import flush_or_conflict, get_or_raise
from schemas import ProfileCreate, validate

logger = logging.getLogger(__name__)


async def get_profile(session: AsyncSession, user_id: UUID) -> Optional[Profile]:
    """Return the Profile for this identity, or None."""
    return await session.get(Profile, user_id)


async def ensure_profile(
    session: AsyncSession,
    user_id: UUID,
    email: str,
    full_name: Optional[str] = None,
    avatar_url: Optional[str] = None,
) -> Profile:
    """Create the profile on first signup; return the existing one afterwards.

    Idempotent — safe to call on every login.
    """
    existing = await get_profile(session, user_id)
    if existing is not None:
        return existing

    payload = validate(
        ProfileCreate,
        {"email": email, "full_name": full_name, "avatar_url": avatar_url},
    )
    profile = Profile(
        id=user_id,
        email=payload.email.lower(),
        full_name=payload.full_name,
        avatar_url=payload.avatar_url,
    )
    session.add(profile)
    await flush_or_conflict(session, f"profile {payload.email}")
    logger.info("Created profile for user %s", user_id)
    return profile


async def set_current_organization(
    session: AsyncSession, user_id: UUID, organization_id: UUID
) -> Profile:
    """Switch the user's default organization context. Requires membership."""
    profile = await get_or_raise(session, Profile, user_id)
    await Authorizer(session).require_access(user_id, organization_id)
    profile.organization_id = organization_id
    profile.updated_at = utcnow()
    await session.flush()
    return profile


async def acting_user(session: AsyncSession, user_id: UUID) -> ActingUser:
    """Build the acting-user context from the profile's current organization.

    A current organization the user has since been removed from is dropped.
    """
    profile = await get_profile(session, user_id)
    if profile is None:
        raise NotFoundError(f"no profile for user {user_id}")
    organization_id = profile.organization_id
    if organization_id is not None and not await Authorizer(session).can_access(
        user_id, organization_id
    ):
        organization_id = None
    return ActingUser(user_id=profile.id, organization_id=organization_id)
