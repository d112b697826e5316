"""Domain Types: rich types that replace bare primitives across the codebase.

Invariants:
    - AccountId always comes from an authenticated identity, never from tool arguments
    - Every closed set (RPC methods, tool names, error codes, goal enums) is an Enum
    - Unknown names resolve to None via parse(), never to a fallthrough exception
"""

from enum import Enum, IntEnum
from typing import NewType
from uuid import UUID


# ─── Identity Types ──────────────────────────────────────────────

AccountId = NewType("AccountId", str)
CredentialId = NewType("CredentialId", UUID)


# ─── Gateway Enums ───────────────────────────────────────────────

class RpcErrorCode(IntEnum):
    """Closed set of transport/protocol error codes on the RPC path."""
    CREDENTIAL_REQUIRED = -32000
    INVALID_CREDENTIAL = -32001
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


class RpcMethod(str, Enum):
    """Methods the gateway routes. Anything else is METHOD_NOT_FOUND."""
    INITIALIZE = "initialize"
    TOOLS_LIST = "tools/list"
    TOOLS_CALL = "tools/call"

    @classmethod
    def parse(cls, value: object) -> "RpcMethod | None":
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


class ToolName(str, Enum):
    """Catalog of tools exposed to voice agents, in catalog order."""
    CREATE_GOAL = "create_goal"
    CREATE_JOURNAL_ENTRY = "create_journal_entry"
    LIST_GOALS = "list_goals"
    LIST_JOURNAL_ENTRIES = "list_journal_entries"
    GET_CATEGORIES = "get_categories"

    @classmethod
    def parse(cls, value: object) -> "ToolName | None":
        if not isinstance(value, str):
            return None
        try:
            return cls(value)
        except ValueError:
            return None


# ─── Goal Enums ──────────────────────────────────────────────────

class GoalCategory(str, Enum):
    """Built-in goal categories (custom categories live in the DB)."""
    CAREER = "career"
    HEALTH = "health"
    PERSONAL = "personal"
    FINANCIAL = "financial"
    RELATIONSHIPS = "relationships"
    LEARNING = "learning"
    OTHER = "other"


class GoalStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    ABANDONED = "abandoned"


class HabitFrequency(str, Enum):
    DAILY = "daily"
    WEEKLY = "weekly"
    MONTHLY = "monthly"
