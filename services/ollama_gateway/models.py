"""Ollama Gateway — request/response models."""

from typing import List, Optional

from pydantic import BaseModel, ConfigDict


class ChatMessage(BaseModel):
    model_config = ConfigDict(frozen=True)

    role: str
    content: str


class ChatRequest(BaseModel):
    messages: List[ChatMessage]
    model: Optional[str] = None
    # Accepted for front-end compatibility; the endpoint decides the mode.
    stream: Optional[bool] = None


class UpstreamChatRequest(BaseModel):
    """Body of the POST sent to Ollama's /api/chat."""

    model: str
    messages: List[ChatMessage]
    stream: bool


class ChatResponse(BaseModel):
    content: str


class HealthResponse(BaseModel):
    status: str
    service: str
