"""Campaign and campaign-influencer link schemas."""
from datetime import date
from decimal import Decimal
from typing import Any, Dict, List, Literal, Optional
from uuid import UUID

from pydantic import Field, model_validator

from schemas.base import Payload, UpdatePayload


CampaignStatus = Literal["draft", "active", "paused", "completed"]

CampaignInfluencerStatus = Literal[
    "invited", "negotiating", "confirmed", "active", "completed", "declined"
]


class CampaignCreate(Payload):
    organization_id: Optional[UUID] = None
    name: str = Field(min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    status: CampaignStatus = "draft"
    goals: Optional[Dict[str, Any]] = None

    @model_validator(mode="after")
    def _check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class CampaignUpdate(UpdatePayload):
    non_nullable = ("name", "status")

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    budget: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    status: Optional[CampaignStatus] = None
    goals: Optional[Dict[str, Any]] = None


class CampaignInfluencerCreate(Payload):
    campaign_id: UUID
    influencer_id: UUID
    status: CampaignInfluencerStatus = "invited"
    compensation: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    compensation_terms: Optional[str] = None
    deliverables: List[Any] = Field(default_factory=list)
    tracking_links: Dict[str, str] = Field(default_factory=dict)
    notes: Optional[str] = None


class CampaignInfluencerUpdate(UpdatePayload):
    non_nullable = ("status", "deliverables", "tracking_links")

    status: Optional[CampaignInfluencerStatus] = None
    compensation: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)
    compensation_terms: Optional[str] = None
    deliverables: Optional[List[Any]] = None
    tracking_links: Optional[Dict[str, str]] = None
    notes: Optional[str] = None
