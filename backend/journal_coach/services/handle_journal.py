"""Journal Handlers: create_journal_entry, list_journal_entries.

Invariants:
    - Listed content is a preview: first 200 chars, "..." appended only when cut
    - account_id always comes from the authenticated identity
"""

from journal_coach.core.domain_types import AccountId
from journal_coach.core.repository_protocols import JournalService

PREVIEW_LENGTH = 200
TRUNCATION_MARKER = "..."
DEFAULT_LIST_LIMIT = 10


def preview(content: str) -> str:
    """Cut content to PREVIEW_LENGTH chars with an explicit marker."""
    if len(content) <= PREVIEW_LENGTH:
        return content
    return content[:PREVIEW_LENGTH] + TRUNCATION_MARKER


class JournalHandlers:
    """Journal tool implementations."""

    def __init__(self, journal: JournalService):
        self.journal = journal

    async def create_journal_entry(self, account_id: AccountId, args: dict) -> dict:
        entry = await self.journal.create_entry(account_id, {
            "title": args["title"],
            "content": args["content"],
            "mood": args.get("mood"),
            "tags": args.get("tags", []),
        })
        return {
            "success": True,
            "message": f'Journal entry "{entry["title"]}" created successfully',
            "entry": {
                "id": entry["id"],
                "title": entry["title"],
                "created_at": entry["created_at"],
            },
        }

    async def list_journal_entries(self, account_id: AccountId, args: dict) -> dict:
        entries = await self.journal.list_recent(
            account_id, limit=args.get("limit", DEFAULT_LIST_LIMIT),
        )
        return {
            "success": True,
            "entries": [
                {
                    "id": e["id"],
                    "title": e["title"],
                    "content": preview(e["content"]),
                    "mood": e.get("mood"),
                    "tags": e.get("tags", []),
                    "created_at": e["created_at"],
                }
                for e in entries
            ],
            "total": len(entries),
        }
