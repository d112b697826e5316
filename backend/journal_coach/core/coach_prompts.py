"""Coach Prompts: pure builders for chat and insights LLM requests.

Invariants:
    - Pure functions: no IO, no logging, deterministic for the same input
    - Journal context lists newest entries first, one block per entry
    - Chat history keeps only user/assistant turns with non-empty content
"""

COACH_SYSTEM_PROMPT = (
    "You are a supportive, insightful personal coach. You help the user reflect "
    "on their journal, clarify goals, and take the next small step. Be warm and "
    "concrete, ask at most one question at a time, and ground your advice in "
    "what the user has actually written."
)

INSIGHTS_SYSTEM_PROMPT = (
    "You analyze a person's journal entries and write a short insight report: "
    "recurring themes, mood patterns, progress worth celebrating, and two or "
    "three gentle, specific suggestions. Use Markdown headings."
)

NO_ENTRIES_MESSAGE = "No journal entries available to generate insights."

_ROLES = frozenset({"user", "assistant"})


def format_journal_context(entries: list[dict]) -> str:
    """Render journal entries as a plain-text context block."""
    if not entries:
        return "The user has not written any journal entries yet."
    blocks = []
    for entry in entries:
        header = f"## {entry.get('title') or 'Untitled'} ({entry.get('created_at', '')})"
        mood = entry.get("mood")
        tags = entry.get("tags") or []
        meta = []
        if mood:
            meta.append(f"Mood: {mood}")
        if tags:
            meta.append(f"Tags: {', '.join(tags)}")
        lines = [header, *meta, entry.get("content", "")]
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def build_chat_system(entries: list[dict]) -> str:
    return (
        f"{COACH_SYSTEM_PROMPT}\n\n"
        f"# Recent journal entries\n\n{format_journal_context(entries)}"
    )


def build_chat_messages(message: str, history: list[dict] | None) -> list[dict]:
    """Previous turns + the new user message, in Anthropic message format."""
    messages = [
        {"role": turn["role"], "content": turn["content"]}
        for turn in history or []
        if turn.get("role") in _ROLES and turn.get("content")
    ]
    # conversation must open with a user turn
    while messages and messages[0]["role"] != "user":
        messages.pop(0)
    messages.append({"role": "user", "content": message})
    return messages


def build_insights_messages(entries: list[dict]) -> list[dict]:
    return [{
        "role": "user",
        "content": (
            "Here are my recent journal entries. Write my insight report.\n\n"
            f"{format_journal_context(entries)}"
        ),
    }]
