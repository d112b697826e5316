"""Tools Registry: the immutable catalog of tools exposed to voice agents.

Invariants:
    - list() order is fixed: create_goal, create_journal_entry, list_goals,
      list_journal_entries, get_categories
    - No mutation path after construction (tuple storage, frozen descriptors)
    - to_wire() returns fresh copies: callers cannot alter the catalog through it

Design Decisions:
    - Explicit imports from each define_*_tools.py: no auto-discovery
    - Built once at app construction and injected; no module-level singleton
      read by handlers
"""

import copy
from dataclasses import dataclass
from typing import Any

from journal_coach.core.domain_types import ToolName
from journal_coach.services.define_goal_tools import TOOLS_GOALS
from journal_coach.services.define_journal_tools import TOOLS_JOURNAL


@dataclass(frozen=True)
class ToolDescriptor:
    """One invocable tool: name, human description, argument schema."""
    name: ToolName
    description: str
    input_schema: dict[str, Any]

    def to_wire(self) -> dict[str, Any]:
        """MCP wire shape (camelCase inputSchema)."""
        return {
            "name": self.name.value,
            "description": self.description,
            "inputSchema": copy.deepcopy(self.input_schema),
        }


class ToolRegistry:
    """Read-only catalog of ToolDescriptors."""

    def __init__(self, descriptors: list[ToolDescriptor]):
        names = [d.name for d in descriptors]
        if len(set(names)) != len(names):
            raise ValueError(f"Duplicate tool names in catalog: {names}")
        self._descriptors = tuple(descriptors)
        self._by_name = {d.name: d for d in self._descriptors}

    def describe(self, name: str) -> ToolDescriptor | None:
        tool = ToolName.parse(name)
        if tool is None:
            return None
        return self._by_name.get(tool)

    def names(self) -> frozenset[ToolName]:
        return frozenset(self._by_name)

    def to_wire(self) -> list[dict[str, Any]]:
        return [d.to_wire() for d in self._descriptors]

    # keep last: shadows builtin `list` for annotations below it
    def list(self) -> tuple[ToolDescriptor, ...]:
        return self._descriptors


_CATALOG_ORDER = (
    ToolName.CREATE_GOAL,
    ToolName.CREATE_JOURNAL_ENTRY,
    ToolName.LIST_GOALS,
    ToolName.LIST_JOURNAL_ENTRIES,
    ToolName.GET_CATEGORIES,
)


def build_tool_registry() -> ToolRegistry:
    """Assemble the catalog from the per-domain tool definitions."""
    definitions = {t["name"]: t for t in (*TOOLS_GOALS, *TOOLS_JOURNAL)}
    return ToolRegistry([
        ToolDescriptor(
            name=name,
            description=definitions[name.value]["description"],
            input_schema=copy.deepcopy(definitions[name.value]["input_schema"]),
        )
        for name in _CATALOG_ORDER
    ])
