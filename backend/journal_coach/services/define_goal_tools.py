"""Goal Tool Schemas: MCP tool descriptors for goal and category tools.

Invariants:
    - create_goal requires title, category, target_date; habit_frequency is
      only meaningful when is_habit is true (enforced in handle_goals)
    - Enum values mirror GoalCategory / GoalStatus / HabitFrequency exactly
    - get_categories takes no arguments

Design Decisions:
    - Enums built from domain_types: one source of truth for closed sets
    - limit bounded 1..50 in schema so validation rejects before any DB read
"""

from journal_coach.core.domain_types import GoalCategory, GoalStatus, HabitFrequency

_CATEGORIES = [c.value for c in GoalCategory]

TOOLS_GOALS = [
    {
        "name": "create_goal",
        "description": (
            "Create a new goal for the user. Use this when the user expresses "
            "something they want to achieve, a habit they want to build, or a "
            "target they are working toward."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Short, actionable goal title (3-200 characters)",
                    "minLength": 3,
                    "maxLength": 200,
                },
                "description": {
                    "type": "string",
                    "description": "Detailed description of the goal (optional, max 2000 characters)",
                    "maxLength": 2000,
                },
                "category": {
                    "type": "string",
                    "enum": _CATEGORIES,
                    "description": "Category of the goal",
                },
                "target_date": {
                    "type": "string",
                    "format": "date",
                    "description": "Target completion date in ISO format (YYYY-MM-DD)",
                },
                "is_habit": {
                    "type": "boolean",
                    "description": "Whether this is a recurring habit (default: false)",
                },
                "habit_frequency": {
                    "type": "string",
                    "enum": [f.value for f in HabitFrequency],
                    "description": "Frequency for habit goals (required if is_habit is true)",
                },
            },
            "required": ["title", "category", "target_date"],
        },
    },
    {
        "name": "list_goals",
        "description": (
            "Get the user's goals. Use this to understand what the user is "
            "currently working on and provide relevant context for coaching."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "status": {
                    "type": "string",
                    "enum": [s.value for s in GoalStatus],
                    "description": "Filter by goal status (optional)",
                },
                "category": {
                    "type": "string",
                    "enum": _CATEGORIES,
                    "description": "Filter by category (optional)",
                },
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 50,
                    "description": "Maximum number of goals to return (default: 10)",
                },
            },
            "required": [],
        },
    },
    {
        "name": "get_categories",
        "description": "Get the list of available goal categories.",
        "input_schema": {
            "type": "object",
            "properties": {},
            "required": [],
        },
    },
]
