"""Account session tokens for route tests (same secret/algorithm the app verifies)."""

from jose import jwt

from journal_coach.config import get_settings


def session_token(account_id: str) -> str:
    settings = get_settings()
    return jwt.encode(
        {"sub": account_id}, settings.session_secret,
        algorithm=settings.session_algorithm,
    )


def auth_headers(account_id: str) -> dict:
    return {"Authorization": f"Bearer {session_token(account_id)}"}
