"""Shared httpx transport to the local Ollama server."""

import logging
from typing import List

import httpx
from fastapi import Request

from config import OLLAMA_CHAT_URL
from exceptions import UpstreamBodyUnreadable, UpstreamUnreachable
from models import ChatMessage, UpstreamChatRequest

logger = logging.getLogger(__name__)


def create_client() -> httpx.AsyncClient:
    # No deadline: a long generation keeps the request open for as long as Ollama needs.
    return httpx.AsyncClient(timeout=None)


def get_ollama_client(request: Request) -> httpx.AsyncClient:
    """FastAPI dependency returning the process-wide client opened in the lifespan."""
    return request.app.state.ollama_client


def build_upstream_request(model: str, messages: List[ChatMessage], stream: bool) -> UpstreamChatRequest:
    return UpstreamChatRequest(model=model, messages=messages, stream=stream)


async def send_chat(client: httpx.AsyncClient, payload: UpstreamChatRequest) -> httpx.Response:
    """POST the chat request and return as soon as the status line arrives.

    The body is left unread; callers either drain it with read_body() or
    iterate it chunk by chunk.
    """
    request = client.build_request("POST", OLLAMA_CHAT_URL, json=payload.model_dump())
    try:
        return await client.send(request, stream=True)
    except httpx.HTTPError as e:
        logger.warning("Failed to send request to Ollama: %s", e)
        raise UpstreamUnreachable(str(e)) from e


async def read_body(response: httpx.Response) -> str:
    try:
        await response.aread()
    except httpx.HTTPError as e:
        logger.warning("Failed to read Ollama response body: %s", e)
        raise UpstreamBodyUnreadable(str(e)) from e
    finally:
        await response.aclose()
    return response.text
