"""Tenant authorization — the membership predicate behind every facade call.

A row in a tenant-scoped table is reachable by a user iff a Membership
exists for (row.organization_id, user_id), whatever its role.
"""
import logging
from dataclasses import dataclass
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db.exceptions import AuthorizationError
from db.models import Membership

logger = logging.getLogger(__name__)

ADMIN_ROLES = ("owner", "admin")


@dataclass(frozen=True)
class ActingUser:
    """Identity of the caller plus their current organization context."""

    user_id: UUID
    organization_id: Optional[UUID] = None


class Authorizer:
    """Evaluates the membership predicate against the current session."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def role_of(self, user_id: UUID, organization_id: UUID) -> Optional[str]:
        """Return the user's role in the organization, or None."""
        result = await self.session.execute(
            select(Membership.role)
            .where(Membership.organization_id == organization_id)
            .where(Membership.user_id == user_id)
        )
        return result.scalar_one_or_none()

    async def can_access(self, user_id: UUID, organization_id: Optional[UUID]) -> bool:
        if user_id is None or organization_id is None:
            return False
        return await self.role_of(user_id, organization_id) is not None

    async def require_access(self, user_id: UUID, organization_id: Optional[UUID]) -> None:
        """Raise AuthorizationError unless the user belongs to the organization."""
        if not await self.can_access(user_id, organization_id):
            logger.warning(
                "Access denied: user %s is not a member of organization %s",
                user_id,
                organization_id,
            )
            raise AuthorizationError(
                f"user {user_id} has no membership in organization {organization_id}"
            )

    async def require_role(
        self,
        user_id: UUID,
        organization_id: UUID,
        roles: Iterable[str] = ADMIN_ROLES,
    ) -> str:
        """Raise AuthorizationError unless the user holds one of the given roles."""
        roles = tuple(roles)
        role = None
        if user_id is not None and organization_id is not None:
            role = await self.role_of(user_id, organization_id)
        if role is None or role not in roles:
            logger.warning(
                "Access denied: user %s has role %s in organization %s, needs one of %s",
                user_id,
                role,
                organization_id,
                roles,
            )
            raise AuthorizationError(
                f"user {user_id} needs one of {roles} in organization {organization_id}"
            )
        return role
