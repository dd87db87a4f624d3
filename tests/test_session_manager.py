"""Unit tests for ConversationSessionManager.

Covers instruction building, one new session per call, the configuration
guard, transport error wrapping and best-effort cancel on timeout.
"""

from __future__ import annotations

import json

import httpx
import pytest

from src.recap.errors import (
    ConfigurationError,
    MalformedResponseError,
    UpstreamError,
    UpstreamTimeoutError,
)
from src.recap.pipeline.poller import CompletionPoller
from src.recap.pipeline.session import (
    ConversationSessionManager,
    build_instruction,
    language_directive,
)
from src.recap.schemas import Language
from tests.fakes import FakeAssistantsClient, assistant_message, recap_json


def _manager(client: FakeAssistantsClient, assistant_id: str = "asst_test", timeout: float = 1.0):
    poller = CompletionPoller(client, poll_interval=0.001, timeout=timeout)
    return ConversationSessionManager(client, assistant_id, poller)


class TestInstruction:
    """Tests for the language directive and instruction text."""

    def test_english_directive(self):
        assert language_directive(Language.EN) == (
            "Please write the notes and voiceover script in English."
        )

    def test_swedish_directive(self):
        assert language_directive("sv") == (
            "Please write the notes and voiceover script in Swedish."
        )

    def test_unknown_language_falls_back_to_english(self):
        assert language_directive("de") == language_directive(Language.EN)

    def test_instruction_embeds_transcript_verbatim(self):
        transcript = "Alice: let's ship Friday.\nBob: agreed  "
        instruction = build_instruction(transcript, Language.SV)
        assert instruction == (
            "Please write the notes and voiceover script in Swedish."
            "\n\nTranscript:\n\n"
            "Alice: let's ship Friday.\nBob: agreed  "
        )


class TestConversationSessionManager:
    """Tests for the session lifecycle."""

    @pytest.mark.asyncio
    async def test_run_returns_parsed_result(self):
        client = FakeAssistantsClient(
            messages=[assistant_message(recap_json(notes="# Friday", voiceover="Ship it."))]
        )

        result = await _manager(client).run("Alice: let's ship Friday.", Language.EN)

        assert result.notes_markdown == "# Friday"
        assert result.voiceover_script == "Ship it."
        assert client.runs == [("thread_1", "asst_test")]

    @pytest.mark.asyncio
    async def test_each_call_creates_a_new_session(self):
        client = FakeAssistantsClient()
        manager = _manager(client)

        await manager.run("first", Language.EN)
        await manager.run("second", Language.EN)

        assert len(client.threads) == 2
        assert [thread for thread, _ in client.runs] == ["thread_1", "thread_2"]

    @pytest.mark.asyncio
    async def test_missing_assistant_id_fails_before_remote_call(self):
        client = FakeAssistantsClient()

        with pytest.raises(ConfigurationError, match="OPENAI_ASSISTANT_ID"):
            await _manager(client, assistant_id="").run("hello", Language.EN)

        assert client.threads == []

    @pytest.mark.asyncio
    async def test_failed_run_propagates_upstream_error(self):
        client = FakeAssistantsClient(statuses=["failed"])

        with pytest.raises(UpstreamError, match="Run did not complete: failed"):
            await _manager(client).run("hello", Language.EN)

        assert client.cancelled == []

    @pytest.mark.asyncio
    async def test_timeout_requests_cancel(self):
        client = FakeAssistantsClient(statuses=["in_progress"])

        with pytest.raises(UpstreamTimeoutError):
            await _manager(client, timeout=0.02).run("hello", Language.EN)

        assert client.cancelled == [("thread_1", "run_1")]

    @pytest.mark.asyncio
    async def test_cancel_failure_keeps_timeout_error(self):
        client = FakeAssistantsClient(statuses=["queued"])
        client.cancel_error = httpx.ConnectError("gone")

        with pytest.raises(UpstreamTimeoutError):
            await _manager(client, timeout=0.02).run("hello", Language.EN)

    @pytest.mark.asyncio
    async def test_transport_error_becomes_upstream_error(self):
        client = FakeAssistantsClient()
        client.create_thread_error = httpx.ConnectError("connection refused")

        with pytest.raises(UpstreamError, match="session creation"):
            await _manager(client).run("hello", Language.EN)

    @pytest.mark.asyncio
    async def test_http_status_error_during_polling(self):
        client = FakeAssistantsClient()
        request = httpx.Request("GET", "https://api.example.com/v1/threads/t/runs/r")
        client.get_run_error = httpx.HTTPStatusError(
            "server error", request=request, response=httpx.Response(503, request=request)
        )

        with pytest.raises(UpstreamError, match="HTTP 503 during polling"):
            await _manager(client).run("hello", Language.EN)

    @pytest.mark.asyncio
    async def test_undecodable_reply_becomes_upstream_error(self):
        client = FakeAssistantsClient()
        client.create_thread_error = json.JSONDecodeError("Expecting value", "<html>", 0)

        with pytest.raises(UpstreamError, match="Unexpected response .* during session creation"):
            await _manager(client).run("hello", Language.EN)

    @pytest.mark.asyncio
    async def test_run_payload_without_id_becomes_upstream_error(self):
        client = FakeAssistantsClient()
        client.create_run_error = KeyError("id")

        with pytest.raises(UpstreamError, match="during run submission") as exc_info:
            await _manager(client).run("hello", Language.EN)

        assert exc_info.value.status is None
        assert client.get_run_calls == 0

    @pytest.mark.asyncio
    async def test_malformed_reply_propagates(self):
        client = FakeAssistantsClient(messages=[assistant_message("not json")])

        with pytest.raises(MalformedResponseError) as exc_info:
            await _manager(client).run("hello", Language.EN)

        assert exc_info.value.raw == "not json"
