"""Organization, membership and profile payloads."""
from typing import Literal, Optional

from pydantic import EmailStr, Field

from schemas.base import Payload, UpdatePayload

MembershipRole = Literal["owner", "admin", "member"]


class OrganizationCreate(Payload):
    name: str = Field(min_length=1, max_length=200)
    logo_url: Optional[str] = None


class OrganizationUpdate(UpdatePayload):
    non_nullable = ("name",)

    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    logo_url: Optional[str] = None


class MembershipCreate(Payload):
    role: MembershipRole = "member"


class ProfileCreate(Payload):
    email: EmailStr
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
