"""Root conftest: shared test configuration."""

import os

# Ensure tests don't accidentally use real API keys
os.environ.setdefault("ANTHROPIC_API_KEY", "sk-ant-test-fake-key")
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///test.db",
)
os.environ.setdefault("SESSION_SECRET", "test-session-secret")
# bcrypt minimum cost keeps route tests fast
os.environ.setdefault("API_KEY_HASH_ROUNDS", "4")
os.environ.setdefault("LOG_FORMAT", "text")
