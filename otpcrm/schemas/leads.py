"""Lead request schemas."""

from __future__ import annotations

from pydantic import Field

from otpcrm.models.enums import LeadStatus
from otpcrm.schemas.common import CamelModel


class LeadCreate(CamelModel):
    property_address: str = Field(min_length=1, max_length=500)
    status: LeadStatus = LeadStatus.NEW
    city: str | None = Field(default=None, max_length=120)
    state: str | None = Field(default=None, max_length=64)
    zip_code: str | None = Field(default=None, max_length=20)
    owner_name: str | None = Field(default=None, max_length=255)
    owner_phone: str | None = Field(default=None, max_length=50)
    owner_email: str | None = Field(default=None, max_length=320)
    source: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=10000)
    assigned_to_user_id: int | None = None


class LeadUpdate(CamelModel):
    """Partial update. ``lead_id``, ``id`` and ``created_at`` are not updatable."""

    property_address: str | None = Field(default=None, min_length=1, max_length=500)
    status: LeadStatus | None = None
    city: str | None = Field(default=None, max_length=120)
    state: str | None = Field(default=None, max_length=64)
    zip_code: str | None = Field(default=None, max_length=20)
    owner_name: str | None = Field(default=None, max_length=255)
    owner_phone: str | None = Field(default=None, max_length=50)
    owner_email: str | None = Field(default=None, max_length=320)
    source: str | None = Field(default=None, max_length=100)
    notes: str | None = Field(default=None, max_length=10000)
    assigned_to_user_id: int | None = None
