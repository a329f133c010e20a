"""Influencer payloads."""
from typing import Annotated, Any, Dict, List, Optional
from uuid import UUID

from pydantic import AfterValidator, Field

from schemas.base import CheckedEmail, Payload, UpdatePayload


def _dedupe_categories(value: List[str]) -> List[str]:
    # Tags are a set; spelling and order are kept as given
    seen: List[str] = []
    for tag in value:
        if tag and tag not in seen:
            seen.append(tag)
    return seen


Categories = Annotated[List[str], AfterValidator(_dedupe_categories)]


class InfluencerCreate(Payload):
    organization_id: Optional[UUID] = None
    name: str = Field(min_length=1, max_length=200)
    email: Optional[CheckedEmail] = None
    phone: Optional[str] = None
    social_handles: Dict[str, str] = Field(default_factory=dict)
    categories: Categories = Field(default_factory=list)
    audience_demographics: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None


class InfluencerUpdate(UpdatePayload):
    non_nullable = ("name", "social_handles", "categories")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    email: Optional[CheckedEmail] = None
    phone: Optional[str] = None
    social_handles: Optional[Dict[str, str]] = None
    categories: Optional[Categories] = None
    audience_demographics: Optional[Dict[str, Any]] = None
    notes: Optional[str] = None
