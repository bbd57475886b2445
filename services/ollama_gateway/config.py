"""Ollama Gateway — environment configuration."""

import os

from dotenv import load_dotenv

load_dotenv(os.path.join(os.path.dirname(__file__), "..", "..", ".env"))

OLLAMA_BASE_URL = os.getenv("OLLAMA_BASE_URL", "http://127.0.0.1:11434").rstrip("/")
OLLAMA_CHAT_URL = f"{OLLAMA_BASE_URL}/api/chat"

DEFAULT_MODEL = os.getenv("DEFAULT_MODEL", "llama3:8b")

# Aliases the front-end is known to send, mapped to Ollama "name:tag" identifiers
MODEL_ALIASES = {
    "llama3.1": "llama3:8b",
}

# Room for the upstream reader to run ahead of a slow client
STREAM_QUEUE_SIZE = int(os.getenv("STREAM_QUEUE_SIZE", "16"))

CORS_ALLOW_ORIGINS = [o.strip() for o in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",") if o.strip()]

GATEWAY_HOST = os.getenv("GATEWAY_HOST", "127.0.0.1")
GATEWAY_PORT = int(os.getenv("GATEWAY_PORT", "8080"))

LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO").upper()
