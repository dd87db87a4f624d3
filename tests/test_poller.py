"""Unit tests for the CompletionPoller state machine.

Covers terminal/non-terminal classification, completion, failed/cancelled/
expired runs, the polling timeout, HTTP errors (not retried) and task
cancellation.
"""

from __future__ import annotations

import asyncio

import httpx
import pytest

from src.recap.errors import UpstreamError, UpstreamTimeoutError
from src.recap.pipeline.poller import CompletionPoller
from src.recap.schemas import Run
from tests.fakes import FakeAssistantsClient


def _queued_run() -> Run:
    return Run(id="run_1", thread_id="thread_1", status="queued")


class TestRunStatus:
    """Tests for Run terminal classification."""

    @pytest.mark.parametrize("status", ["queued", "in_progress"])
    def test_non_terminal(self, status):
        assert not Run(id="r", thread_id="t", status=status).is_terminal

    @pytest.mark.parametrize("status", ["completed", "failed", "cancelled", "expired"])
    def test_terminal(self, status):
        assert Run(id="r", thread_id="t", status=status).is_terminal

    def test_unknown_status_is_terminal(self):
        run = Run(id="r", thread_id="t", status="requires_action")
        assert run.is_terminal
        assert not run.is_completed


class TestCompletionPoller:
    """Tests for waiting on a run."""

    @pytest.mark.asyncio
    async def test_returns_completed_run(self):
        client = FakeAssistantsClient(statuses=["queued", "in_progress", "in_progress", "completed"])
        poller = CompletionPoller(client, poll_interval=0.001, timeout=1.0)

        run = await poller.wait(_queued_run())

        assert run.is_completed
        assert client.get_run_calls == 4

    @pytest.mark.asyncio
    async def test_already_terminal_run_is_not_polled(self):
        client = FakeAssistantsClient()
        poller = CompletionPoller(client, poll_interval=0.001, timeout=1.0)

        run = await poller.wait(Run(id="run_1", thread_id="thread_1", status="completed"))

        assert run.is_completed
        assert client.get_run_calls == 0

    @pytest.mark.asyncio
    @pytest.mark.parametrize("status", ["failed", "cancelled", "expired"])
    async def test_terminal_failure_raises_upstream_error(self, status):
        client = FakeAssistantsClient(statuses=["in_progress", status])
        poller = CompletionPoller(client, poll_interval=0.001, timeout=1.0)

        with pytest.raises(UpstreamError) as exc_info:
            await poller.wait(_queued_run())

        assert not isinstance(exc_info.value, UpstreamTimeoutError)
        assert exc_info.value.status == status
        assert exc_info.value.message == f"Run did not complete: {status}"

    @pytest.mark.asyncio
    async def test_timeout_while_pending(self):
        client = FakeAssistantsClient(statuses=["in_progress"])
        poller = CompletionPoller(client, poll_interval=0.005, timeout=0.03)

        with pytest.raises(UpstreamTimeoutError) as exc_info:
            await poller.wait(_queued_run())

        assert exc_info.value.status == "in_progress"
        assert exc_info.value.timeout == 0.03
        assert client.get_run_calls >= 2

    @pytest.mark.asyncio
    async def test_http_error_is_not_retried(self):
        client = FakeAssistantsClient()
        client.get_run_error = httpx.ConnectError("connection refused")
        poller = CompletionPoller(client, poll_interval=0.001, timeout=1.0)

        with pytest.raises(httpx.ConnectError):
            await poller.wait(_queued_run())

    @pytest.mark.asyncio
    async def test_cancelling_the_task_stops_polling(self):
        client = FakeAssistantsClient(statuses=["in_progress"])
        poller = CompletionPoller(client, poll_interval=0.01, timeout=10.0)

        task = asyncio.create_task(poller.wait(_queued_run()))
        await asyncio.sleep(0.03)
        task.cancel()

        with pytest.raises(asyncio.CancelledError):
            await task

        calls_at_cancel = client.get_run_calls
        await asyncio.sleep(0.03)
        assert client.get_run_calls == calls_at_cancel

    @pytest.mark.asyncio
    async def test_concurrent_waits_are_independent(self):
        slow = FakeAssistantsClient(statuses=["in_progress"] * 5 + ["completed"])
        fast = FakeAssistantsClient(statuses=["completed"])
        slow_poller = CompletionPoller(slow, poll_interval=0.005, timeout=1.0)
        fast_poller = CompletionPoller(fast, poll_interval=0.005, timeout=1.0)

        slow_run, fast_run = await asyncio.gather(
            slow_poller.wait(_queued_run()),
            fast_poller.wait(_queued_run()),
        )

        assert slow_run.is_completed and fast_run.is_completed
        assert fast.get_run_calls == 1
        assert slow.get_run_calls == 6
