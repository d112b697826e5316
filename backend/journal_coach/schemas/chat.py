"""Chat Schemas: request models for the streaming coach endpoints."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator


class ChatTurn(BaseModel):
    role: Literal["user", "assistant"]
    content: str = Field(max_length=10_000)


class ChatMessageRequest(BaseModel):
    """One user message plus prior turns of the conversation."""
    message: str = Field(min_length=1, max_length=5_000)
    history: list[ChatTurn] = Field(default_factory=list, max_length=50)

    @field_validator("message")
    @classmethod
    def strip_message(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("message cannot be empty or whitespace")
        return v
