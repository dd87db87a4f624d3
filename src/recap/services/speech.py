"""Text-to-speech client for the voiceover recap.

Posts the script to the ``/audio/speech`` endpoint with a fixed model and
voice and returns the MP3 bytes unchanged.
"""

from __future__ import annotations

import httpx
import structlog

logger = structlog.get_logger(__name__)


class SpeechClient:
    """Async text-to-speech client.

    Args:
        api_key: Service credential.
        base_url: API root.
        model: Synthesis model (default: gpt-4o-mini-tts).
        voice: Voice name (default: alloy).
        timeout: Per-call timeout in seconds. Synthesis of a long script is
            slower than a status read, so callers usually pass a larger value.
    """

    RESPONSE_FORMAT = "mp3"

    def __init__(
        self,
        api_key: str,
        base_url: str = "https://api.openai.com/v1",
        model: str = "gpt-4o-mini-tts",
        voice: str = "alloy",
        timeout: float = 60.0,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Authorization": f"Bearer {api_key}",
            "Content-Type": "application/json",
        }
        self.model = model
        self.voice = voice
        self._timeout = timeout

    async def synthesize(self, text: str) -> bytes:
        """Synthesize speech for ``text``.

        Returns:
            Raw MP3 bytes.

        Raises:
            httpx.HTTPError: On transport failure or a non-2xx response.
        """
        async with httpx.AsyncClient(headers=self._headers, timeout=self._timeout) as client:
            response = await client.post(
                f"{self._base_url}/audio/speech",
                json={
                    "model": self.model,
                    "voice": self.voice,
                    "input": text,
                    "response_format": self.RESPONSE_FORMAT,
                },
            )
            response.raise_for_status()
            audio = response.content
        logger.info(
            "speech.synthesized",
            model=self.model,
            voice=self.voice,
            text_length=len(text),
            audio_bytes=len(audio),
        )
        return audio
