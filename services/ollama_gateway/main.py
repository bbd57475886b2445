"""
Ollama Gateway
Handles: chat requests from the front-end, forwarded to a local Ollama server
Port: 8080

- POST /api/chat         waits for Ollama's full answer and returns {"content": ...}
- POST /api/chat/stream  relays Ollama's output chunk by chunk as server-sent events

Upstream failures never turn into HTTP errors. They are delivered as message
text through the same channel as a normal answer.
"""

import logging
from contextlib import asynccontextmanager

import httpx
from fastapi import Depends, FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import StreamingResponse
from starlette.background import BackgroundTask

from bridge import buffered_chat, stream_chat
from config import CORS_ALLOW_ORIGINS, GATEWAY_HOST, GATEWAY_PORT, LOG_LEVEL, OLLAMA_CHAT_URL
from models import ChatRequest, ChatResponse, HealthResponse
from ollama_client import create_client, get_ollama_client
from relay import SSE_HEADERS

logging.basicConfig(level=LOG_LEVEL, format="%(asctime)s %(levelname)s [%(name)s] %(message)s")
logger = logging.getLogger("ollama-gateway")

SERVICE_NAME = "ollama-gateway"


# ── App ───────────────────────────────────────────────────────────────────────

@asynccontextmanager
async def lifespan(app: FastAPI):
    app.state.ollama_client = create_client()
    logger.info("[%s] Started, forwarding chats to %s", SERVICE_NAME, OLLAMA_CHAT_URL)
    try:
        yield
    finally:
        await app.state.ollama_client.aclose()


app = FastAPI(
    title="Ollama Gateway",
    description="Forwards front-end chat requests to a local Ollama server.",
    version="1.0.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ── Endpoints ─────────────────────────────────────────────────────────────────

@app.get("/")
async def root():
    return {"app": "Ollama Gateway", "version": app.version, "status": "operational", "docs": "/docs"}


@app.get("/health", response_model=HealthResponse)
async def health():
    return {"status": "ok", "service": SERVICE_NAME}


@app.post("/api/chat", response_model=ChatResponse)
async def chat(req: ChatRequest, client: httpx.AsyncClient = Depends(get_ollama_client)):
    return await buffered_chat(client, req)


@app.post("/api/chat/stream")
async def chat_stream(req: ChatRequest, client: httpx.AsyncClient = Depends(get_ollama_client)):
    events = await stream_chat(client, req)
    # Runs after the body is sent or the client disconnects, started or not
    return StreamingResponse(
        events,
        media_type="text/event-stream",
        headers=SSE_HEADERS,
        background=BackgroundTask(events.aclose),
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run("main:app", host=GATEWAY_HOST, port=GATEWAY_PORT, reload=True)
