"""Conversation session manager -- one remote session per recap request.

Creates a fresh thread seeded with a single instruction (language directive
plus the transcript verbatim), submits a run against the configured
assistant, waits for it through the CompletionPoller and hands the thread's
messages to the response parser. Sessions are never reused or pooled.
"""

from __future__ import annotations

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import httpx
import structlog

from src.recap.errors import ConfigurationError, UpstreamError, UpstreamTimeoutError
from src.recap.pipeline.parser import parse_assistant_reply
from src.recap.pipeline.poller import CompletionPoller
from src.recap.schemas import Language, ParsedResult, Run

logger = structlog.get_logger(__name__)


# ── Instruction ──────────────────────────────────────────────────────────────

LANGUAGE_DIRECTIVES: dict[Language, str] = {
    Language.EN: "Please write the notes and voiceover script in English.",
    Language.SV: "Please write the notes and voiceover script in Swedish.",
}


def language_directive(language: Language | str) -> str:
    """Directive for ``language``; anything unknown gets the English one."""
    try:
        return LANGUAGE_DIRECTIVES[Language(language)]
    except ValueError:
        return LANGUAGE_DIRECTIVES[Language.EN]


def build_instruction(transcript: str, language: Language | str) -> str:
    return f"{language_directive(language)}\n\nTranscript:\n\n{transcript}"


@asynccontextmanager
async def _upstream_call(step: str) -> AsyncIterator[None]:
    """Turn transport, HTTP status and undecodable replies into UpstreamError."""
    try:
        yield
    except httpx.HTTPStatusError as exc:
        logger.error("recap.upstream_http_error", step=step, status_code=exc.response.status_code)
        raise UpstreamError(
            f"Conversation service returned HTTP {exc.response.status_code} during {step}"
        ) from exc
    except httpx.HTTPError as exc:
        logger.error("recap.upstream_unreachable", step=step, error=str(exc))
        raise UpstreamError(f"Conversation service request failed during {step}: {exc}") from exc
    except (ValueError, KeyError, TypeError, AttributeError) as exc:
        # 2xx reply whose body is not the JSON object we asked for
        logger.error("recap.upstream_bad_response", step=step, error=repr(exc))
        raise UpstreamError(
            f"Unexpected response from conversation service during {step}"
        ) from exc


# ── Session Manager ──────────────────────────────────────────────────────────


class ConversationSessionManager:
    """Runs one transcript through a brand-new conversation session.

    Args:
        client: AssistantsClient (or a double with the same coroutines).
        assistant_id: Session-template identifier the run is submitted to.
        poller: CompletionPoller bound to the same client.
    """

    def __init__(self, client, assistant_id: str, poller: CompletionPoller) -> None:
        self._client = client
        self._assistant_id = assistant_id
        self._poller = poller

    async def run(self, transcript: str, language: Language | str) -> ParsedResult:
        """Create a session, submit the transcript and return the parsed reply.

        Args:
            transcript: Validated, trimmed transcript.
            language: Output language; unknown values fall back to English.

        Raises:
            ConfigurationError: No assistant configured (nothing is sent).
            UpstreamError: Transport failure or non-completed terminal run.
            UpstreamTimeoutError: Run still pending when polling gave up.
            MalformedResponseError: Reply not structured as expected.
        """
        if not self._assistant_id:
            raise ConfigurationError("OPENAI_ASSISTANT_ID is not set")

        content = build_instruction(transcript, language)

        async with _upstream_call("session creation"):
            thread_id = await self._client.create_thread(content)
        logger.info("recap.session_created", thread_id=thread_id)

        async with _upstream_call("run submission"):
            run = await self._client.create_run(thread_id, self._assistant_id)

        try:
            async with _upstream_call("polling"):
                await self._poller.wait(run)
        except UpstreamTimeoutError:
            await self._cancel_best_effort(run)
            raise

        async with _upstream_call("message retrieval"):
            messages = await self._client.list_messages(thread_id)

        return parse_assistant_reply(messages)

    async def _cancel_best_effort(self, run: Run) -> None:
        """Ask the service to stop a run we stopped waiting for.

        A failure here is logged; the caller still gets the timeout.
        """
        try:
            await self._client.cancel_run(run.thread_id, run.id)
        except httpx.HTTPError as exc:
            logger.warning(
                "recap.run_cancel_failed",
                thread_id=run.thread_id,
                run_id=run.id,
                error=str(exc),
            )
