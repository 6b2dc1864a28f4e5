"""Core data models for open-cert-status."""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RevocationStatus(str, Enum):
    """OCSP-style certificate status."""

    GOOD = "good"
    REVOKED = "revoked"
    UNKNOWN = "unknown"


class RevocationRecord(BaseModel):
    """A ledger entry marking one certificate serial number as revoked."""

    id: UUID = Field(default_factory=uuid4, description="Record identifier")
    serial_number: int = Field(description="Serial number of the revoked certificate")
    issuer: str = Field(description="Issuer identifier copied at revoke time")
    email: Optional[str] = Field(
        default=None, description="E-mail address extracted from the subject"
    )
    revoker: UUID = Field(description="Admin who revoked the certificate")
    revoked_at: datetime = Field(
        default_factory=_utcnow, description="When the certificate was revoked"
    )


class AdminIdentity(BaseModel):
    """An administrator allowed to revoke and reinstate certificates."""

    id: UUID = Field(description="Admin identifier")
    name: str = Field(default="", description="Human-readable admin name")
    enabled: bool = Field(default=True, description="Whether the admin is active")


class ChainState(str, Enum):
    """States of the chain walk."""

    VALIDATING = "validating"
    TRUSTED = "trusted"
    UNTRUSTED = "untrusted"


class ChainValidationResult(BaseModel):
    """Result of walking a certificate chain up to its root."""

    trusted: bool = Field(description="Whether the chain is trusted")
    state: ChainState = Field(description="Terminal state of the walk")
    error: Optional[str] = Field(default=None, description="Reason if untrusted")
    depth: int = Field(default=0, description="Number of certificates evaluated")
    path: list[str] = Field(
        default_factory=list, description="Subject identifiers walked, leaf first"
    )
    validated_at: datetime = Field(
        default_factory=_utcnow, description="Validation timestamp"
    )

    def __bool__(self) -> bool:
        """Allow using ChainValidationResult in boolean context."""
        return self.trusted
