"""SQL Credential Repository: CredentialRepository implementation over async SQLAlchemy.

Invariants:
    - Each mutating call commits its own unit of work (single statement, no partial writes)
    - Returns CredentialRecord values, never live ORM rows
    - SQLAlchemy failures surface as DatabaseError (rolled back first)
"""

import logging
from contextlib import asynccontextmanager

from sqlalchemy import delete, select, update
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from journal_coach.core.domain_types import AccountId, CredentialId
from journal_coach.core.errors import DatabaseError
from journal_coach.core.repository_protocols import CredentialRecord
from journal_coach.models.api_key import ApiKey

logger = logging.getLogger(__name__)


def _to_record(row: ApiKey) -> CredentialRecord:
    return CredentialRecord(
        id=CredentialId(row.id),
        account_id=AccountId(row.account_id),
        key_hash=row.key_hash,
        key_prefix=row.key_prefix,
        name=row.name,
        created_at=row.created_at,
        last_used_at=row.last_used_at,
        is_active=row.is_active,
    )


class SqlCredentialRepository:
    """api_keys table access."""

    def __init__(self, db: AsyncSession):
        self.db = db

    @asynccontextmanager
    async def _guard(self, operation: str):
        try:
            yield
        except SQLAlchemyError as e:
            await self.db.rollback()
            logger.error(f"api_keys {operation} failed: {e}")
            raise DatabaseError("api_keys access failed", operation)

    async def add(
        self, account_id: AccountId, key_hash: str, key_prefix: str, name: str,
    ) -> CredentialRecord:
        row = ApiKey(
            account_id=account_id,
            key_hash=key_hash,
            key_prefix=key_prefix,
            name=name,
            is_active=True,
        )
        async with self._guard("insert"):
            self.db.add(row)
            await self.db.commit()
        return _to_record(row)

    async def get(self, credential_id: CredentialId) -> CredentialRecord | None:
        async with self._guard("get"):
            row = await self.db.get(ApiKey, credential_id)
        return _to_record(row) if row else None

    async def find_active_by_prefix(self, key_prefix: str) -> list[CredentialRecord]:
        async with self._guard("lookup"):
            result = await self.db.execute(
                select(ApiKey)
                .where(ApiKey.key_prefix == key_prefix)
                .where(ApiKey.is_active.is_(True))
            )
            rows = result.scalars().all()
        return [_to_record(row) for row in rows]

    async def list_for_account(self, account_id: AccountId) -> list[CredentialRecord]:
        async with self._guard("list"):
            result = await self.db.execute(
                select(ApiKey)
                .where(ApiKey.account_id == account_id)
                .order_by(ApiKey.created_at.desc())
            )
            rows = result.scalars().all()
        return [_to_record(row) for row in rows]

    async def update(self, credential_id: CredentialId, **fields: object) -> None:
        async with self._guard("update"):
            await self.db.execute(
                update(ApiKey).where(ApiKey.id == credential_id).values(**fields)
            )
            await self.db.commit()

    async def delete(self, credential_id: CredentialId) -> None:
        async with self._guard("delete"):
            await self.db.execute(delete(ApiKey).where(ApiKey.id == credential_id))
            await self.db.commit()
