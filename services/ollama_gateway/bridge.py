"""Buffered and streaming bridges between the front-end and Ollama's /api/chat."""

import json
import logging
from typing import AsyncIterator

import httpx

from exceptions import BridgeError, UpstreamBodyUnreadable, UpstreamStatusError
from extraction import extract_content
from models import ChatRequest, ChatResponse
from normalizer import normalize_model
from ollama_client import build_upstream_request, read_body, send_chat
from relay import StreamRelay, single_event

logger = logging.getLogger(__name__)


async def buffered_chat(client: httpx.AsyncClient, req: ChatRequest) -> ChatResponse:
    """Wait for Ollama's full answer and pull the reply text out of it.

    Failures come back as the content text rather than as an HTTP error,
    and anything that cannot be interpreted is returned as the raw body so
    the front-end can show it.
    """
    model = normalize_model(req.model)
    logger.info("using model: %s", model)

    payload = build_upstream_request(model, req.messages, stream=False)
    try:
        response = await send_chat(client, payload)
        body_text = await read_body(response)
    except BridgeError as e:
        return ChatResponse(content=str(e))

    try:
        document = json.loads(body_text)
    except ValueError as e:
        logger.warning("Invalid JSON from Ollama: %s\nbody: %s", e, body_text)
        return ChatResponse(content=body_text)

    content = extract_content(document)
    if content is None:
        return ChatResponse(content=body_text)
    return ChatResponse(content=content)


async def stream_chat(client: httpx.AsyncClient, req: ChatRequest) -> AsyncIterator[str]:
    """Open a streaming chat with Ollama and return the SSE event iterator.

    If the request cannot be sent, or Ollama refuses it, the iterator
    yields a single event carrying the error text and then ends.
    """
    model = normalize_model(req.model)
    logger.info("using model (stream): %s", model)

    payload = build_upstream_request(model, req.messages, stream=True)
    try:
        response = await send_chat(client, payload)
    except BridgeError as e:
        return single_event(str(e))

    if not response.is_success:
        try:
            body_text = await read_body(response)
        except UpstreamBodyUnreadable:
            body_text = "unknown error from ollama"
        error = UpstreamStatusError(response.status_code, body_text)
        logger.warning("Ollama rejected streaming chat with status %s: %s", error.status_code, error)
        return single_event(str(error))

    return StreamRelay(response)
