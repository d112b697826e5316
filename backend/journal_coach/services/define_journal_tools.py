"""Journal Tool Schemas: MCP tool descriptors for journal entry tools."""

TOOLS_JOURNAL = [
    {
        "name": "create_journal_entry",
        "description": (
            "Create a journal entry for the user. Use this when the user shares "
            "reflections, experiences, emotional insights, or wants to log a "
            "conversation summary."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "title": {
                    "type": "string",
                    "description": "Title of the journal entry",
                    "maxLength": 200,
                },
                "content": {
                    "type": "string",
                    "description": "Content of the journal entry",
                },
                "mood": {
                    "type": "string",
                    "description": "Current mood (optional)",
                    "maxLength": 50,
                },
                "tags": {
                    "type": "array",
                    "items": {"type": "string"},
                    "description": "Tags for categorizing the entry (optional)",
                },
            },
            "required": ["title", "content"],
        },
    },
    {
        "name": "list_journal_entries",
        "description": (
            "Get the user's recent journal entries. Use this to understand the "
            "user's recent thoughts, moods, and reflections."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "limit": {
                    "type": "integer",
                    "minimum": 1,
                    "maximum": 50,
                    "description": "Maximum number of entries to return (default: 10)",
                },
            },
            "required": [],
        },
    },
]
