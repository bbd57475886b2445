"""
Unit tests for model normalization, content extraction and the stream relay.
Run with: pytest test_bridge.py -v
"""

import asyncio

import httpx
import pytest

from extraction import extract_content
from normalizer import normalize_model
from relay import StreamRelay, decode_chunk, format_sse_event


# ── Model normalization ──────────────────────────────────────

class TestNormalizeModel:
    def test_missing_model_uses_default(self):
        assert normalize_model(None) == "llama3:8b"

    def test_known_alias(self):
        assert normalize_model("llama3.1") == "llama3:8b"

    def test_dots_become_tag_separator(self):
        assert normalize_model("foo.bar") == "foo:bar"
        assert normalize_model("qwen2.5.coder") == "qwen2:5:coder"

    def test_tagged_name_left_alone(self):
        assert normalize_model("foo:bar") == "foo:bar"
        assert normalize_model("llama3.2:1b") == "llama3.2:1b"

    def test_plain_name_left_alone(self):
        assert normalize_model("plainname") == "plainname"

    @pytest.mark.parametrize("name", [None, "llama3.1", "foo.bar", "foo:bar", "plainname", "a.b.c"])
    def test_idempotent(self, name):
        once = normalize_model(name)
        assert normalize_model(once) == once


# ── Content extraction ───────────────────────────────────────

class TestExtractContent:
    def test_message_content(self):
        assert extract_content({"message": {"content": "hi"}}) == "hi"

    def test_top_level_content(self):
        assert extract_content({"content": "hi"}) == "hi"

    def test_content_beats_message(self):
        assert extract_content({"message": {"content": "inner"}, "content": "outer"}) == "outer"

    def test_nested_under_other_key(self):
        assert extract_content({"foo": {"content": "nested"}}) == "nested"

    def test_bare_strings_are_not_answers(self):
        assert extract_content({"a": 1, "b": "text"}) is None
        assert extract_content("text") is None

    def test_array_first_match(self):
        assert extract_content(["x", {"content": "found"}, {"content": "later"}]) == "found"

    def test_non_string_content_is_skipped(self):
        assert extract_content({"content": 5, "choices": [{"message": {"content": "deep"}}]}) == "deep"

    def test_empty_content_still_counts(self):
        assert extract_content({"message": {"content": ""}, "other": {"content": "x"}}) == ""

    def test_scalars(self):
        for value in (None, True, 3, 2.5, [], {}):
            assert extract_content(value) is None


# ── SSE framing ──────────────────────────────────────────────

class TestFraming:
    def test_single_line(self):
        assert format_sse_event("a") == "data: a\n\n"

    def test_multi_line_payload(self):
        assert format_sse_event('{"done":true}\n') == 'data: {"done":true}\ndata: \n\n'

    def test_decode_chunk(self):
        assert decode_chunk("héllo".encode()) == "héllo"
        assert decode_chunk(b"\xff") == ""


# ── Stream relay ─────────────────────────────────────────────

async def _open(body, maxsize=16):
    transport = httpx.MockTransport(lambda request: httpx.Response(200, content=body))
    http = httpx.AsyncClient(transport=transport)
    response = await http.send(http.build_request("POST", "http://ollama.test/api/chat"), stream=True)
    return StreamRelay(response, maxsize=maxsize), response


class TestStreamRelay:
    def test_relays_every_chunk_then_closes_upstream(self):
        async def body():
            for chunk in (b"a", b"b", b"c"):
                yield chunk

        async def scenario():
            relay, response = await _open(body())
            events = [event async for event in relay.events()]
            return events, response

        events, response = asyncio.run(scenario())
        assert events == ["data: a\n\n", "data: b\n\n", "data: c\n\n"]
        assert response.is_closed

    def test_consumer_disconnect_stops_reading(self):
        """Closing the event iterator cancels the reader and releases the upstream response."""
        produced = []

        async def body():
            for i in range(1000):
                produced.append(i)
                yield str(i).encode()

        async def scenario():
            relay, response = await _open(body(), maxsize=1)
            events = relay.events()
            first = await events.__anext__()
            await events.aclose()
            with pytest.raises(asyncio.CancelledError):
                await relay.task
            return first, response

        first, response = asyncio.run(scenario())
        assert first == "data: 0\n\n"
        assert response.is_closed
        assert len(produced) < 1000

    def test_unexpected_error_reaches_consumer(self):
        async def body():
            yield b"a"
            raise RuntimeError("bug in transport")

        async def scenario():
            relay, _ = await _open(body())
            return [event async for event in relay.events()]

        with pytest.raises(RuntimeError, match="bug in transport"):
            asyncio.run(scenario())

    def test_close_before_first_event_releases_upstream(self):
        async def body():
            yield b"a"

        async def scenario():
            relay, response = await _open(body())
            await relay.aclose()
            await relay.aclose()
            return relay, response

        relay, response = asyncio.run(scenario())
        assert response.is_closed
        assert relay.task is None

    def test_iterates_as_async_iterator(self):
        async def body():
            yield b"x"
            yield b"y"

        async def scenario():
            relay, _ = await _open(body())
            events = [event async for event in relay]
            await relay.aclose()
            return events

        assert asyncio.run(scenario()) == ["data: x\n\n", "data: y\n\n"]
