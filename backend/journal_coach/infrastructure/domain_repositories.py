"""SQL Domain Collaborators: goal, journal and category services over async SQLAlchemy.

Invariants:
    - Every query filters on account_id; no method reads another account's rows
    - Records returned as plain dicts with JSON-friendly values (ISO dates, str ids)
"""

from datetime import date

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from journal_coach.core.domain_types import AccountId, GoalCategory
from journal_coach.models.category import Category
from journal_coach.models.goal import Goal
from journal_coach.models.journal_entry import JournalEntry


def _goal_dict(goal: Goal) -> dict:
    return {
        "id": str(goal.id),
        "title": goal.title,
        "description": goal.description,
        "category": goal.category,
        "status": goal.status,
        "target_date": goal.target_date.isoformat(),
        "progress_percentage": goal.progress_percentage,
        "is_habit": goal.is_habit,
        "habit_frequency": goal.habit_frequency,
    }


def _entry_dict(entry: JournalEntry) -> dict:
    return {
        "id": str(entry.id),
        "title": entry.title,
        "content": entry.content,
        "mood": entry.mood,
        "tags": list(entry.tags or []),
        "created_at": entry.created_at.isoformat(),
    }


class SqlGoalService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_goal(self, account_id: AccountId, data: dict) -> dict:
        goal = Goal(
            account_id=account_id,
            title=data["title"],
            description=data.get("description"),
            category=data["category"],
            target_date=date.fromisoformat(data["target_date"]),
            is_habit=data.get("is_habit", False),
            habit_frequency=data.get("habit_frequency"),
            status="not_started",
            progress_percentage=0,
        )
        self.db.add(goal)
        await self.db.commit()
        return _goal_dict(goal)

    async def list_goals(
        self, account_id: AccountId, status: str | None,
        category: str | None, limit: int,
    ) -> list[dict]:
        query = select(Goal).where(Goal.account_id == account_id)
        if status:
            query = query.where(Goal.status == status)
        if category:
            query = query.where(Goal.category == category)
        query = query.order_by(Goal.created_at.desc()).limit(limit)
        result = await self.db.execute(query)
        return [_goal_dict(g) for g in result.scalars().all()]


class SqlJournalService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def create_entry(self, account_id: AccountId, data: dict) -> dict:
        entry = JournalEntry(
            account_id=account_id,
            title=data["title"],
            content=data["content"],
            mood=data.get("mood"),
            tags=data.get("tags", []),
        )
        self.db.add(entry)
        await self.db.commit()
        return _entry_dict(entry)

    async def list_recent(self, account_id: AccountId, limit: int) -> list[dict]:
        result = await self.db.execute(
            select(JournalEntry)
            .where(JournalEntry.account_id == account_id)
            .order_by(JournalEntry.created_at.desc())
            .limit(limit)
        )
        return [_entry_dict(e) for e in result.scalars().all()]


class SqlCategoryService:
    def __init__(self, db: AsyncSession):
        self.db = db

    async def list_categories(self, account_id: AccountId) -> list[dict]:
        """Built-in categories first, then the account's custom ones."""
        categories = [
            {"id": c.value, "name": c.value.capitalize(), "is_default": True,
             "color": None, "icon": None}
            for c in GoalCategory
        ]
        result = await self.db.execute(
            select(Category)
            .where(Category.account_id == account_id)
            .order_by(Category.name)
        )
        categories.extend(
            {"id": str(c.id), "name": c.name, "is_default": False,
             "color": c.color, "icon": c.icon}
            for c in result.scalars().all()
        )
        return categories
