"""Tool Dispatch: explicit routing from tool name to handler, with validation.

Invariants:
    - Every tool->handler mapping is visible: no getattr magic, no auto-discovery
    - invoke() never raises for tool-level failures; they become error payloads
    - Unknown tools -> UNKNOWN_TOOL; schema/cross-field failures -> VALIDATION_ERROR
      naming the field; collaborator faults -> TOOL_EXECUTION_ERROR
    - Every tool call logged with tool_name + account_id

Design Decisions:
    - Explicit dict keyed by ToolName: adding a tool requires editing this table
    - Registry/handler mismatch fails at construction, not at first call
    - ToolOutcome carries is_error so transports can flag it (MCP isError)
"""

import logging
from dataclasses import dataclass
from typing import Any

from journal_coach.core.domain_types import AccountId, ToolName
from journal_coach.core.errors import (
    JournalCoachError, ToolValidationError, UnknownToolError,
)
from journal_coach.core.repository_protocols import (
    CategoryService, GoalService, JournalService,
)
from journal_coach.core.tool_arguments import validate_arguments
from journal_coach.services.handle_goals import GoalHandlers
from journal_coach.services.handle_journal import JournalHandlers
from journal_coach.services.tools_registry import ToolRegistry

logger = logging.getLogger(__name__)

TOOL_EXECUTION_ERROR = "TOOL_EXECUTION_ERROR"


@dataclass(frozen=True)
class ToolOutcome:
    """Result of one invocation: a JSON-serializable payload plus error flag."""
    is_error: bool
    payload: dict[str, Any]


class ToolDispatcher:
    """Routes ToolName -> handler. Explicit registration, no auto-discovery."""

    def __init__(
        self,
        registry: ToolRegistry,
        goals: GoalService,
        journal: JournalService,
        categories: CategoryService,
    ):
        self._registry = registry
        goal_handlers = GoalHandlers(goals, categories)
        journal_handlers = JournalHandlers(journal)

        self._handlers = {
            ToolName.CREATE_GOAL: goal_handlers.create_goal,
            ToolName.CREATE_JOURNAL_ENTRY: journal_handlers.create_journal_entry,
            ToolName.LIST_GOALS: goal_handlers.list_goals,
            ToolName.LIST_JOURNAL_ENTRIES: journal_handlers.list_journal_entries,
            ToolName.GET_CATEGORIES: goal_handlers.get_categories,
        }
        if set(self._handlers) != registry.names():
            raise ValueError("Tool registry and dispatch table disagree")

    async def invoke(
        self, name: str, raw_arguments: Any, account_id: AccountId,
    ) -> ToolOutcome:
        """Validate arguments, run the handler, fold failures into payloads."""
        extra = {"tool_name": name, "account_id": account_id}
        try:
            descriptor = self._registry.describe(name)
            if descriptor is None:
                raise UnknownToolError(str(name))
            arguments = validate_arguments(descriptor.input_schema, raw_arguments)
            result = await self._handlers[descriptor.name](account_id, arguments)
        except (ToolValidationError, UnknownToolError) as e:
            logger.warning(
                "Tool call rejected: %s", e.message,
                extra={**extra, "error_code": e.code},
            )
            return ToolOutcome(is_error=True, payload=e.to_tool_payload())
        except Exception as e:
            logger.error(
                "Tool execution failed: %s", e,
                extra={**extra, "error_code": TOOL_EXECUTION_ERROR},
                exc_info=True,
            )
            message = e.message if isinstance(e, JournalCoachError) else str(e)
            return ToolOutcome(is_error=True, payload={
                "success": False,
                "error_code": TOOL_EXECUTION_ERROR,
                "message": f"Tool '{name}' failed: {message}",
            })
        logger.info("Tool call completed", extra=extra)
        return ToolOutcome(is_error=False, payload=result)
