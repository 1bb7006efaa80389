"""Caller identity carried by bearer tokens."""

from __future__ import annotations

import enum
import uuid
from dataclasses import dataclass


class PrincipalRole(str, enum.Enum):
    CLIENT = "client"
    PROVIDER = "provider"
    ADMIN = "admin"


@dataclass(frozen=True, slots=True)
class Principal:
    """Authenticated caller as described by the token claims."""

    subject: str
    role: PrincipalRole
    email: str | None = None
    provider_id: uuid.UUID | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == PrincipalRole.ADMIN

    def acts_for_provider(self, provider_id: uuid.UUID) -> bool:
        return self.role == PrincipalRole.PROVIDER and self.provider_id == provider_id
