"""Completion poller -- drives a remote run to a terminal state.

``queued`` and ``in_progress`` are the only non-terminal statuses. The run
is re-fetched at a fixed interval until it leaves them or the overall bound
elapses. The loop is a tenacity AsyncRetrying over the status read: only the
*result* (a non-terminal run) triggers another attempt, so a failed HTTP
call is raised immediately instead of being retried.
"""

from __future__ import annotations

import time

import structlog
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    RetryError,
    retry_if_result,
    stop_after_delay,
    wait_fixed,
)

from src.recap.core.monitoring import recap_run_wait_seconds
from src.recap.errors import UpstreamError, UpstreamTimeoutError
from src.recap.schemas import Run

logger = structlog.get_logger(__name__)


def _is_pending(run: Run) -> bool:
    return not run.is_terminal


def _log_poll(retry_state: RetryCallState) -> None:
    outcome = retry_state.outcome
    if outcome is None or outcome.failed:
        return
    run: Run = outcome.result()
    logger.debug(
        "recap.run_polled",
        run_id=run.id,
        status=run.status,
        attempt=retry_state.attempt_number,
        elapsed_s=round(retry_state.seconds_since_start or 0.0, 2),
    )


class CompletionPoller:
    """Waits for a run to finish and checks how it finished.

    Suspends only the calling task; cancelling that task cancels the wait.

    Args:
        client: Object exposing ``async get_run(thread_id, run_id) -> Run``.
        poll_interval: Seconds between status reads (``RUN_POLL_INTERVAL_SECONDS``).
        timeout: Overall bound in seconds (``RUN_POLL_TIMEOUT_SECONDS``).
    """

    def __init__(
        self,
        client,
        poll_interval: float,
        timeout: float,
    ) -> None:
        self._client = client
        self.poll_interval = poll_interval
        self.timeout = timeout

    async def wait(self, run: Run) -> Run:
        """Block until ``run`` is terminal and return it if it completed.

        Raises:
            UpstreamError: The run ended ``failed``, ``cancelled``, ``expired``
                or in any other non-completed terminal status.
            UpstreamTimeoutError: Still non-terminal after ``timeout``.
        """
        start = time.monotonic()
        try:
            final = await self._wait_terminal(run)
        finally:
            recap_run_wait_seconds.observe(time.monotonic() - start)

        if not final.is_completed:
            logger.warning(
                "recap.run_terminal",
                thread_id=final.thread_id,
                run_id=final.id,
                status=final.status,
            )
            raise UpstreamError(f"Run did not complete: {final.status}", status=final.status)

        logger.info("recap.run_completed", thread_id=final.thread_id, run_id=final.id)
        return final

    async def _wait_terminal(self, run: Run) -> Run:
        if run.is_terminal:
            return run

        retrying = AsyncRetrying(
            retry=retry_if_result(_is_pending),
            wait=wait_fixed(self.poll_interval),
            stop=stop_after_delay(self.timeout),
            after=_log_poll,
        )
        try:
            return await retrying(self._client.get_run, run.thread_id, run.id)
        except RetryError as exc:
            last: Run = exc.last_attempt.result()
            logger.warning(
                "recap.run_timeout",
                thread_id=run.thread_id,
                run_id=run.id,
                status=last.status,
                timeout_s=self.timeout,
            )
            raise UpstreamTimeoutError(status=last.status, timeout=self.timeout) from None
