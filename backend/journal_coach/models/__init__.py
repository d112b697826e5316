"""ORM Models: SQLAlchemy declarative models for the gateway and its collaborators.

Invariants:
    - All models inherit from Base (db/base.py)
    - Every row is scoped by account_id

Design Decisions:
    - One file per entity
    - All models imported here so Base.metadata is complete before create_all / alembic
"""

from journal_coach.models.api_key import ApiKey  # noqa: F401
from journal_coach.models.category import Category  # noqa: F401
from journal_coach.models.goal import Goal  # noqa: F401
from journal_coach.models.journal_entry import JournalEntry  # noqa: F401
