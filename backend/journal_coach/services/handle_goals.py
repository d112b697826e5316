"""Goal Handlers: create_goal, list_goals, get_categories.

Invariants:
    - account_id always comes from the authenticated identity, never from args
    - Results are summaries (selected fields), never raw persisted rows
    - create_goal rejects is_habit=true without habit_frequency (field-level error)

Design Decisions:
    - Handlers receive already-validated args: schema checks live in tool_arguments,
      only cross-field rules live here
"""

from journal_coach.core.domain_types import AccountId
from journal_coach.core.errors import ToolValidationError
from journal_coach.core.repository_protocols import CategoryService, GoalService

DEFAULT_LIST_LIMIT = 10


class GoalHandlers:
    """Goal and category tool implementations."""

    def __init__(self, goals: GoalService, categories: CategoryService):
        self.goals = goals
        self.categories = categories

    async def create_goal(self, account_id: AccountId, args: dict) -> dict:
        """Create a goal; echo the fields a voice agent reads back."""
        is_habit = args.get("is_habit", False)
        if is_habit and not args.get("habit_frequency"):
            raise ToolValidationError(
                "habit_frequency is required when is_habit is true",
                field="habit_frequency",
            )
        goal = await self.goals.create_goal(account_id, {
            "title": args["title"],
            "description": args.get("description"),
            "category": args["category"],
            "target_date": args["target_date"],
            "is_habit": is_habit,
            "habit_frequency": args.get("habit_frequency") if is_habit else None,
        })
        return {
            "success": True,
            "message": f'Goal "{goal["title"]}" created successfully',
            "goal": {
                "id": goal["id"],
                "title": goal["title"],
                "category": goal["category"],
                "target_date": goal["target_date"],
                "status": goal["status"],
            },
        }

    async def list_goals(self, account_id: AccountId, args: dict) -> dict:
        goals = await self.goals.list_goals(
            account_id,
            status=args.get("status"),
            category=args.get("category"),
            limit=args.get("limit", DEFAULT_LIST_LIMIT),
        )
        return {
            "success": True,
            "goals": [
                {
                    "id": g["id"],
                    "title": g["title"],
                    "description": g.get("description"),
                    "category": g["category"],
                    "status": g["status"],
                    "target_date": g["target_date"],
                    "progress_percentage": g.get("progress_percentage", 0),
                    "is_habit": g.get("is_habit", False),
                }
                for g in goals
            ],
            "total": len(goals),
        }

    async def get_categories(self, account_id: AccountId, args: dict) -> dict:
        categories = await self.categories.list_categories(account_id)
        return {
            "success": True,
            "default_categories": [
                c["name"].lower() for c in categories if c.get("is_default")
            ],
            "custom_categories": [
                {
                    "id": c["id"],
                    "name": c["name"],
                    "color": c.get("color"),
                    "icon": c.get("icon"),
                }
                for c in categories if not c.get("is_default")
            ],
        }
