"""Stream Helpers: SSE framing shared by the streaming routes.

Invariants:
    - Every SSE event is one `data: <json>\\n\\n` frame
    - A failed stream always ends with an error event followed by a done event
"""

import json

# SSE headers prevent proxy/browser buffering of streamed events.
SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "X-Accel-Buffering": "no",
    "Connection": "keep-alive",
}


def sse_line(event: dict) -> str:
    """Format event as SSE data line."""
    return f"data: {json.dumps(event, ensure_ascii=False)}\n\n"


def done_event(content: str = "", error: bool = False) -> dict:
    event = {"type": "done", "content": content}
    if error:
        event["error"] = True
    return event
