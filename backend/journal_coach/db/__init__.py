"""Database metadata: SQLAlchemy declarative Base shared by all ORM models."""
