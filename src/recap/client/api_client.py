"""Async HTTP client for the recap server."""

from __future__ import annotations

import base64

import httpx
import structlog

from src.recap.errors import RecapApiError
from src.recap.schemas import Language, Mode, RecapResponse

logger = structlog.get_logger(__name__)


class RecapApiClient:
    """Calls ``POST {base_url}/recap``.

    Args:
        base_url: Server root, e.g. ``http://localhost:8000``.
        timeout: Whole-request timeout. Generation waits on a remote run and
            optionally on speech synthesis, so this is generous.
    """

    def __init__(self, base_url: str, timeout: float = 300.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout

    async def generate(
        self,
        transcript: str,
        mode: Mode = Mode.NOTES,
        language: Language = Language.EN,
    ) -> RecapResponse:
        """Request a recap.

        Raises:
            RecapApiError: Server answered with a non-2xx status.
        """
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            response = await client.post(
                f"{self._base_url}/recap",
                json={
                    "transcript": transcript,
                    "mode": Mode(mode).value,
                    "language": Language(language).value,
                },
            )
        if response.is_error:
            logger.warning("client.recap_failed", status_code=response.status_code)
            raise RecapApiError(response.status_code, response.text)

        return RecapResponse.model_validate(response.json())


def decode_audio(response: RecapResponse) -> bytes | None:
    """Raw audio bytes of a response, or None when it carries no audio."""
    if not response.audioBase64 or not response.mimeType:
        return None
    return base64.b64decode(response.audioBase64)
