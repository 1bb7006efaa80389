"""Schemas for the provider calendar cache."""
from __future__ import annotations

import uuid
from datetime import date, datetime

from pydantic import BaseModel, ConfigDict


class ProviderCalendarRead(BaseModel):
    """Dates a client can no longer book for a provider."""

    provider_id: uuid.UUID
    unavailable_dates: list[date]
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)
