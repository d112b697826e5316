"""Boundary Protocols: contracts between core/services and persistence.

Invariants:
    - Services never import ORM models; all IO goes through these Protocol types
    - Every domain collaborator method takes the account id first and is scoped by it
    - Records cross the boundary as plain dicts / CredentialRecord, never ORM rows

Design Decisions:
    - Protocol over ABC: structural subtyping, test fakes need no inheritance
    - Async methods: implementations do IO
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Protocol

from journal_coach.core.domain_types import AccountId, CredentialId


@dataclass(frozen=True)
class CredentialRecord:
    """Persisted view of one issued API key. Never holds the plaintext."""
    id: CredentialId
    account_id: AccountId
    key_hash: str
    key_prefix: str
    name: str
    created_at: datetime
    last_used_at: datetime | None
    is_active: bool


class CredentialRepository(Protocol):
    """Contract for API key persistence."""
    async def add(
        self, account_id: AccountId, key_hash: str, key_prefix: str, name: str,
    ) -> CredentialRecord: ...
    async def get(self, credential_id: CredentialId) -> CredentialRecord | None: ...
    async def find_active_by_prefix(self, key_prefix: str) -> list[CredentialRecord]: ...
    async def list_for_account(self, account_id: AccountId) -> list[CredentialRecord]: ...
    async def update(self, credential_id: CredentialId, **fields: object) -> None: ...
    async def delete(self, credential_id: CredentialId) -> None: ...


class GoalService(Protocol):
    """Goal collaborator used by tool handlers."""
    async def create_goal(self, account_id: AccountId, data: dict) -> dict: ...
    async def list_goals(
        self, account_id: AccountId, status: str | None,
        category: str | None, limit: int,
    ) -> list[dict]: ...


class JournalService(Protocol):
    """Journal collaborator used by tool handlers and the coach streamer."""
    async def create_entry(self, account_id: AccountId, data: dict) -> dict: ...
    async def list_recent(self, account_id: AccountId, limit: int) -> list[dict]: ...


class CategoryService(Protocol):
    """Category collaborator: default + custom categories."""
    async def list_categories(self, account_id: AccountId) -> list[dict]: ...
