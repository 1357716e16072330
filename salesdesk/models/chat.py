"""
Support chat schemas.

Dependencies: pydantic
System role: Chat API contracts
"""

from typing import Literal

from pydantic import BaseModel, Field

from salesdesk.core.retrieval.retrieval_engine import ChunkMatch


class ChatTurn(BaseModel):
    """One prior message in the conversation."""

    role: Literal["user", "assistant"] = Field(description="Message role")
    content: str = Field(description="Message content")


class ChatRequest(BaseModel):
    """Request schema for support chat."""

    message: str = Field(min_length=1, description="User question or message")
    conversation_history: list[ChatTurn] = Field(default_factory=list, description="Earlier turns, oldest first")


class ChatResponse(BaseModel):
    """Response schema for support chat."""

    answer: str
    sources: list[ChunkMatch] = Field(default_factory=list, description="Chunks used as context")
    used_retrieval: bool = Field(default=False, description="Whether document context was searched")
    error: str | None = None
