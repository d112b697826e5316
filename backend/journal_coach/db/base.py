"""SQLAlchemy Declarative Base: single source of truth for table metadata."""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all Journal Coach ORM models."""
    pass
