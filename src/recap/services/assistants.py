"""Async HTTP client wrapper for the conversation (Assistants) REST API.

Covers the calls one recap needs: create a thread seeded with a single user
message, start a run against a configured assistant, read the run status,
list the thread's messages and cancel a run. Every method makes exactly one
HTTP call; there is no retry layer here, a failed call fails the recap.
"""

from __future__ import annotations

import httpx
import structlog

from src.recap.schemas import Run

logger = structlog.get_logger(__name__)


class AssistantsClient:
    """Async client for the Assistants threads/runs/messages endpoints.

    Uses a fresh httpx.AsyncClient per call with bearer auth and the
    ``OpenAI-Beta: assistants=v2`` header.

    Args:
        api_key: Service credential.
        base_url: API root, e.g. ``https://api.openai.com/v1``.
        timeout: Per-call timeout in seconds.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        timeout: float = 30.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
            "OpenAI-Beta": "assistants=v2",
        }

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(headers=self._headers, timeout=self._timeout)

    async def create_thread(self, content: str) -> str:
        """Create a thread holding one user message.

        Args:
            content: Full user message text.

        Returns:
            The new thread id.
        """
        async with self._client() as client:
            response = await client.post(
                f"{self._base_url}/threads",
                json={"messages": [{"role": "user", "content": content}]},
            )
            response.raise_for_status()
            thread_id = response.json()["id"]
        logger.info("assistants.thread_created", thread_id=thread_id, content_length=len(content))
        return thread_id

    async def create_run(self, thread_id: str, assistant_id: str) -> Run:
        """Start a run on a thread, asking for a JSON object reply."""
        async with self._client() as client:
            response = await client.post(
                f"{self._base_url}/threads/{thread_id}/runs",
                json={
                    "assistant_id": assistant_id,
                    "response_format": {"type": "json_object"},
                },
            )
            response.raise_for_status()
            run = _to_run(response.json(), thread_id)
        logger.info("assistants.run_created", thread_id=thread_id, run_id=run.id, status=run.status)
        return run

    async def get_run(self, thread_id: str, run_id: str) -> Run:
        async with self._client() as client:
            response = await client.get(f"{self._base_url}/threads/{thread_id}/runs/{run_id}")
            response.raise_for_status()
            run = _to_run(response.json(), thread_id)
        logger.debug("assistants.run_status", thread_id=thread_id, run_id=run_id, status=run.status)
        return run

    async def list_messages(self, thread_id: str) -> list[dict]:
        """List thread messages, newest first.

        Returns:
            Raw message dicts as returned by the API. Shape is validated by
            the response parser, not here.
        """
        async with self._client() as client:
            response = await client.get(
                f"{self._base_url}/threads/{thread_id}/messages",
                params={"order": "desc"},
            )
            response.raise_for_status()
            data = response.json().get("data", [])
        logger.info("assistants.messages_listed", thread_id=thread_id, message_count=len(data))
        return data

    async def cancel_run(self, thread_id: str, run_id: str) -> None:
        async with self._client() as client:
            response = await client.post(
                f"{self._base_url}/threads/{thread_id}/runs/{run_id}/cancel",
            )
            response.raise_for_status()
        logger.info("assistants.run_cancel_requested", thread_id=thread_id, run_id=run_id)


def _to_run(data: dict, thread_id: str) -> Run:
    return Run(
        id=data["id"],
        thread_id=data.get("thread_id") or thread_id,
        status=data.get("status", "unknown"),
    )
