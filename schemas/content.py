"""Scheduled and published content schemas."""
from datetime import datetime, timezone
from typing import Annotated, Any, Dict, Literal, Optional
from uuid import UUID

from pydantic import AfterValidator, Field

from schemas.base import Payload, UpdatePayload


ContentStatus = Literal["planned", "scheduled", "published", "archived"]


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # Naive datetimes are taken to be UTC already
    if value is None:
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


UtcDatetime = Annotated[datetime, AfterValidator(_as_utc)]


class ContentCreate(Payload):
    campaign_influencer_id: UUID
    platform: str = Field(min_length=1)
    content_type: str = Field(min_length=1)  # post, story, reel, video...
    url: Optional[str] = None
    caption: Optional[str] = None
    scheduled_at: Optional[UtcDatetime] = None
    published_at: Optional[UtcDatetime] = None
    status: ContentStatus = "planned"
    metrics: Dict[str, Any] = Field(default_factory=dict)


class ContentUpdate(UpdatePayload):
    non_nullable = ("platform", "content_type", "status", "metrics")

    platform: Optional[str] = Field(default=None, min_length=1)
    content_type: Optional[str] = Field(default=None, min_length=1)
    url: Optional[str] = None
    caption: Optional[str] = None
    scheduled_at: Optional[UtcDatetime] = None
    published_at: Optional[UtcDatetime] = None
    status: Optional[ContentStatus] = None
    metrics: Optional[Dict[str, Any]] = None
