from .base import CheckedEmail, Payload, UpdatePayload, changes, validate
from .organization import (
    MembershipRole,
    OrganizationCreate,
    OrganizationUpdate,
    MembershipCreate,
    ProfileCreate,
)
from .influencer import InfluencerCreate, InfluencerUpdate
from .campaign import (
    CampaignStatus,
    CampaignInfluencerStatus,
    CampaignCreate,
    CampaignUpdate,
    CampaignInfluencerCreate,
    CampaignInfluencerUpdate,
)
from .content import ContentStatus, ContentCreate, ContentUpdate

__all__ = [
    "CheckedEmail", "Payload", "UpdatePayload", "changes", "validate",
    "MembershipRole", "OrganizationCreate", "OrganizationUpdate",
    "MembershipCreate", "ProfileCreate",
    "InfluencerCreate", "InfluencerUpdate",
    "CampaignStatus", "CampaignInfluencerStatus",
    "CampaignCreate", "CampaignUpdate",
    "CampaignInfluencerCreate", "CampaignInfluencerUpdate",
    "ContentStatus", "ContentCreate", "ContentUpdate",
]
