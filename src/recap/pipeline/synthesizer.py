"""Audio synthesizer -- voiceover script to MP3 artifact."""

from __future__ import annotations

import httpx
import structlog

from src.recap.errors import SynthesisError
from src.recap.schemas import AUDIO_MIME_TYPE, AudioArtifact

logger = structlog.get_logger(__name__)


class AudioSynthesizer:
    """Converts a voiceover script into an AudioArtifact.

    Only invoked for ``notes+audio`` requests. An empty script is sent as-is;
    whether that is acceptable is the speech service's call.

    Args:
        speech_client: SpeechClient (fixed model and voice).
    """

    def __init__(self, speech_client) -> None:
        self._speech = speech_client

    async def synthesize(self, script: str) -> AudioArtifact:
        try:
            audio = await self._speech.synthesize(script)
        except httpx.HTTPError as exc:
            logger.error("recap.synthesis_failed", script_length=len(script), error=str(exc))
            raise SynthesisError(f"Speech synthesis failed: {exc}") from exc

        return AudioArtifact(data=audio, mime_type=AUDIO_MIME_TYPE)
