"""API Key Schemas: Pydantic models for the credential-management endpoints.

Invariants:
    - Key names are stripped, 1-100 chars; blank names rejected (HTTP 400)
    - No response model carries key_hash; plaintext only in ApiKeyCreated
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from journal_coach.core.repository_protocols import CredentialRecord


class _NamedKey(BaseModel):
    name: str = Field(min_length=1, max_length=100)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class ApiKeyCreate(_NamedKey):
    """Issue request."""


class ApiKeyRename(_NamedKey):
    """Rename request."""


class ApiKeyResponse(BaseModel):
    """Public view of an issued key."""
    id: UUID
    name: str
    key_prefix: str
    created_at: datetime
    last_used_at: datetime | None = None
    is_active: bool

    @classmethod
    def from_record(cls, record: CredentialRecord) -> "ApiKeyResponse":
        return cls(
            id=record.id,
            name=record.name,
            key_prefix=record.key_prefix,
            created_at=record.created_at,
            last_used_at=record.last_used_at,
            is_active=record.is_active,
        )


class ApiKeyCreated(ApiKeyResponse):
    """Issue response: the only place the plaintext key ever appears."""
    key: str


class ApiKeyList(BaseModel):
    api_keys: list[ApiKeyResponse]
