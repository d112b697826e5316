"""Credential Store: issues API keys and maps bearer secrets to account identity.

Invariants:
    - Plaintext keys are returned exactly once by issue() and never stored or logged
    - authenticate() rejects anything not shaped like an issued key (tag + 48 lowercase hex)
      before any lookup or hash comparison
    - authenticate() checks every active record sharing the lookup prefix (collisions tolerated)
    - authenticate() never raises: repository failures fold into None
    - revoke/rename/delete are ownership-gated; not-found and not-owned both return False

Design Decisions:
    - bcrypt (salted, constant-time checkpw) run via asyncio.to_thread so hashing
      does not stall the event loop
    - Lookup prefix = first 12 plaintext chars (tag + 7 random hex): narrows the
      candidate set without making the prefix a usable secret
"""

import asyncio
import logging
import re
import secrets
from datetime import datetime, timezone

import bcrypt

from journal_coach.core.domain_types import AccountId, CredentialId
from journal_coach.core.errors import JournalCoachError
from journal_coach.core.repository_protocols import (
    CredentialRecord, CredentialRepository,
)

logger = logging.getLogger(__name__)

KEY_TAG = "jrnl_"
KEY_PREFIX_LENGTH = 12
_RANDOM_BYTES = 24
_KEY_PATTERN = re.compile(rf"{KEY_TAG}[0-9a-f]{{{2 * _RANDOM_BYTES}}}")


def generate_secret() -> str:
    """High-entropy secret with the recognizable tag."""
    return f"{KEY_TAG}{secrets.token_hex(_RANDOM_BYTES)}"


def lookup_prefix(secret: str) -> str:
    return secret[:KEY_PREFIX_LENGTH]


class CredentialStore:
    """API key lifecycle over a CredentialRepository."""

    def __init__(self, repository: CredentialRepository, hash_rounds: int = 10):
        self._repo = repository
        self._hash_rounds = hash_rounds

    async def issue(
        self, account_id: AccountId, label: str,
    ) -> tuple[str, CredentialRecord]:
        """Create a key. Returns (plaintext, record); plaintext is not retrievable later."""
        secret = generate_secret()
        key_hash = await asyncio.to_thread(self._hash, secret)
        record = await self._repo.add(
            account_id=account_id,
            key_hash=key_hash,
            key_prefix=lookup_prefix(secret),
            name=label,
        )
        logger.info(
            "API key issued",
            extra={
                "account_id": account_id,
                "credential_id": record.id,
                "key_prefix": record.key_prefix,
            },
        )
        return secret, record

    async def authenticate(self, candidate: str | None) -> AccountId | None:
        """Return the owning account for a valid, active key; None otherwise."""
        if not candidate or _KEY_PATTERN.fullmatch(candidate) is None:
            return None
        try:
            records = await self._repo.find_active_by_prefix(lookup_prefix(candidate))
            for record in records:
                if await asyncio.to_thread(self._matches, candidate, record.key_hash):
                    await self._repo.update(
                        record.id, last_used_at=datetime.now(timezone.utc),
                    )
                    return record.account_id
        except JournalCoachError as e:
            logger.error(
                "Credential lookup failed: %s", e.message,
                extra={"error_code": e.code},
            )
        return None

    async def list_for_account(self, account_id: AccountId) -> list[CredentialRecord]:
        return await self._repo.list_for_account(account_id)

    async def revoke(self, account_id: AccountId, credential_id: CredentialId) -> bool:
        if not await self._owned(account_id, credential_id):
            return False
        await self._repo.update(credential_id, is_active=False)
        logger.info(
            "API key revoked",
            extra={"account_id": account_id, "credential_id": credential_id},
        )
        return True

    async def rename(
        self, account_id: AccountId, credential_id: CredentialId, new_label: str,
    ) -> bool:
        if not await self._owned(account_id, credential_id):
            return False
        await self._repo.update(credential_id, name=new_label)
        logger.info(
            "API key renamed",
            extra={"account_id": account_id, "credential_id": credential_id},
        )
        return True

    async def delete(self, account_id: AccountId, credential_id: CredentialId) -> bool:
        if not await self._owned(account_id, credential_id):
            return False
        await self._repo.delete(credential_id)
        logger.info(
            "API key deleted",
            extra={"account_id": account_id, "credential_id": credential_id},
        )
        return True

    async def _owned(self, account_id: AccountId, credential_id: CredentialId) -> bool:
        record = await self._repo.get(credential_id)
        return record is not None and record.account_id == account_id

    def _hash(self, secret: str) -> str:
        salt = bcrypt.gensalt(rounds=self._hash_rounds)
        return bcrypt.hashpw(secret.encode(), salt).decode()

    @staticmethod
    def _matches(candidate: str, key_hash: str) -> bool:
        try:
            return bcrypt.checkpw(candidate.encode(), key_hash.encode())
        except ValueError:
            return False
