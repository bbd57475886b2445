"""Upstream failures, rendered as the text the caller receives in-band."""

STREAM_ERROR_TAG = "__ERR__:"


class BridgeError(Exception):
    """An upstream failure that is reported through the normal response body."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message


class UpstreamUnreachable(BridgeError):
    def __init__(self, detail: str):
        super().__init__(f"Error contacting Ollama API: {detail}")


class UpstreamBodyUnreadable(BridgeError):
    def __init__(self, detail: str):
        super().__init__(f"Failed to read response body: {detail}")


class UpstreamStatusError(BridgeError):
    """Non-2xx status on the streaming endpoint; the message is Ollama's own body."""

    def __init__(self, status_code: int, body: str):
        super().__init__(body)
        self.status_code = status_code


class UpstreamStreamBroken(BridgeError):
    def __init__(self, detail: str):
        super().__init__(f"{STREAM_ERROR_TAG}{detail}")
