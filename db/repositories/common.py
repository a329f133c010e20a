"""Helpers shared by the entity repositories."""
import logging
from typing import Any, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from db.authz import ActingUser, Authorizer
from db.exceptions import AuthorizationError, ConflictError, NotFoundError
from db.models import Base, utcnow

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)


async def get_or_raise(session: AsyncSession, model: Type[ModelT], row_id: UUID) -> ModelT:
    """Return the row with this primary key or raise NotFoundError.

    Always reads through to the database: rows removed by an ON DELETE
    CASCADE stay in the identity map after their parent is deleted.
    """
    row = await session.get(model, row_id, populate_existing=True)
    if row is None:
        raise NotFoundError(f"{model.__tablename__} {row_id} does not exist")
    return row


async def flush_or_conflict(session: AsyncSession, what: str) -> None:
    """Flush pending writes, turning constraint violations into ConflictError."""
    try:
        await session.flush()
    except IntegrityError as exc:
        logger.warning("Integrity violation while writing %s: %s", what, exc.orig)
        raise ConflictError(f"{what} conflicts with an existing row") from exc


def apply_changes(row: Base, data: dict[str, Any]) -> None:
    for key, value in data.items():
        setattr(row, key, value)
    row.updated_at = utcnow()


def current_organization(actor: ActingUser) -> UUID:
    if actor.organization_id is None:
        raise AuthorizationError(f"user {actor.user_id} has no current organization")
    return actor.organization_id


async def resolve_write_organization(
    session: AsyncSession, actor: ActingUser, organization_id: Optional[UUID]
) -> UUID:
    """Pick the organization a new row is written to and check membership.

    Defaults to the actor's current organization.
    """
    if organization_id is None:
        organization_id = current_organization(actor)
    await Authorizer(session).require_access(actor.user_id, organization_id)
    return organization_id


async def require_listing_scope(session: AsyncSession, actor: ActingUser) -> UUID:
    """Return the actor's current organization after checking membership."""
    organization_id = current_organization(actor)
    await Authorizer(session).require_access(actor.user_id, organization_id)
    return organization_id
