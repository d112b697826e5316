"""API Key Routes: issue, list, rename, revoke, delete credentials for the session account.

Invariants:
    - Every route requires an account session (get_current_account)
    - The plaintext key appears only in the POST response
    - Not-found and not-owned are indistinguishable: both 404 with one message
"""

import logging
from uuid import UUID

from fastapi import APIRouter, Depends, status

from journal_coach.api.dependencies import get_credential_store, get_current_account
from journal_coach.core.domain_types import AccountId, CredentialId
from journal_coach.core.errors import ResourceNotFoundError
from journal_coach.schemas.api_key import (
    ApiKeyCreate, ApiKeyCreated, ApiKeyList, ApiKeyRename, ApiKeyResponse,
)
from journal_coach.services.credential_store import CredentialStore

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/api-keys", tags=["api-keys"])


def _not_found(key_id: UUID) -> ResourceNotFoundError:
    return ResourceNotFoundError("API key", str(key_id))


@router.post("", response_model=ApiKeyCreated, status_code=status.HTTP_201_CREATED)
async def create_api_key(
    body: ApiKeyCreate,
    account_id: AccountId = Depends(get_current_account),
    store: CredentialStore = Depends(get_credential_store),
):
    """Issue a key. Store the returned `key` now: it is never shown again."""
    secret, record = await store.issue(account_id, body.name)
    return ApiKeyCreated(key=secret, **ApiKeyResponse.from_record(record).model_dump())


@router.get("", response_model=ApiKeyList)
async def list_api_keys(
    account_id: AccountId = Depends(get_current_account),
    store: CredentialStore = Depends(get_credential_store),
):
    records = await store.list_for_account(account_id)
    return ApiKeyList(api_keys=[ApiKeyResponse.from_record(r) for r in records])


@router.patch("/{key_id}/rename")
async def rename_api_key(
    key_id: UUID,
    body: ApiKeyRename,
    account_id: AccountId = Depends(get_current_account),
    store: CredentialStore = Depends(get_credential_store),
):
    if not await store.rename(account_id, CredentialId(key_id), body.name):
        raise _not_found(key_id)
    return {"success": True, "id": str(key_id), "name": body.name}


@router.patch("/{key_id}/revoke")
async def revoke_api_key(
    key_id: UUID,
    account_id: AccountId = Depends(get_current_account),
    store: CredentialStore = Depends(get_credential_store),
):
    if not await store.revoke(account_id, CredentialId(key_id)):
        raise _not_found(key_id)
    return {"success": True, "id": str(key_id), "is_active": False}


@router.delete("/{key_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_api_key(
    key_id: UUID,
    account_id: AccountId = Depends(get_current_account),
    store: CredentialStore = Depends(get_credential_store),
):
    if not await store.delete(account_id, CredentialId(key_id)):
        raise _not_found(key_id)
