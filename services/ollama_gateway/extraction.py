"""Schema-tolerant search for the answer text in an Ollama chat response.

Ollama normally answers with ``{"message": {"content": ...}}`` but proxies
and older builds wrap or reshape it, so the document is walked depth first
and the first string found under a ``content`` key wins.
"""

from typing import Any, Optional


def extract_content(value: Any) -> Optional[str]:
    if isinstance(value, dict):
        content = value.get("content")
        if isinstance(content, str):
            return content

        message = value.get("message")
        if isinstance(message, dict) and isinstance(message.get("content"), str):
            return message["content"]

        for child in value.values():
            found = extract_content(child)
            if found is not None:
                return found
        return None

    if isinstance(value, list):
        for child in value:
            found = extract_content(child)
            if found is not None:
                return found
        return None

    # Bare strings, numbers, booleans and null are never answers on their own
    return None
