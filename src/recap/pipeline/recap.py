"""RecapPipeline -- wires the stages of one recap generation together.

Composition is all-or-nothing: if synthesis fails after the notes were
parsed, the whole request fails and the notes are discarded.
"""

from __future__ import annotations

import asyncio

import structlog

from src.recap.config import Settings
from src.recap.core.monitoring import track_recap
from src.recap.errors import ValidationError
from src.recap.pipeline.composer import compose_response
from src.recap.pipeline.poller import CompletionPoller
from src.recap.pipeline.session import ConversationSessionManager
from src.recap.pipeline.synthesizer import AudioSynthesizer
from src.recap.schemas import RecapRequest, RecapResponse
from src.recap.services.assistants import AssistantsClient
from src.recap.services.speech import SpeechClient

logger = structlog.get_logger(__name__)


class RecapPipeline:
    """Sequential recap generation for a single request.

    Holds no per-request state, so one instance serves concurrent requests;
    each call creates its own remote session and run.

    Args:
        session_manager: ConversationSessionManager.
        synthesizer: AudioSynthesizer.
    """

    def __init__(
        self,
        session_manager: ConversationSessionManager,
        synthesizer: AudioSynthesizer,
    ) -> None:
        self._sessions = session_manager
        self._synthesizer = synthesizer

    async def generate(self, request: RecapRequest) -> RecapResponse:
        """Produce notes and, when requested, audio for one transcript.

        Raises:
            ValidationError: Transcript empty after trimming.
            RecapError: Any later stage failure (see errors module).
        """
        transcript = request.transcript.strip()
        if not transcript:
            raise ValidationError("Transcript is empty")

        log = logger.bind(mode=request.mode.value, language=request.language.value)
        log.info("recap.started", transcript_length=len(transcript))

        async with track_recap(request.mode.value):
            try:
                parsed = await self._sessions.run(transcript, request.language)
                audio = None
                if request.wants_audio:
                    audio = await self._synthesizer.synthesize(parsed.voiceover_script)
            except asyncio.CancelledError:
                log.info("recap.cancelled")
                raise

            response = compose_response(parsed.notes_markdown, request.mode, audio)

        log.info(
            "recap.completed",
            notes_length=len(response.notes_markdown),
            audio_bytes=len(audio.data) if audio else 0,
        )
        return response


def build_pipeline(settings: Settings) -> RecapPipeline:
    """Build a pipeline backed by the real remote clients.

    Raises:
        ConfigurationError: Credential or assistant id missing.
    """
    settings.require_remote_credentials()

    assistants = AssistantsClient(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        timeout=settings.OPENAI_TIMEOUT,
    )
    speech = SpeechClient(
        api_key=settings.OPENAI_API_KEY,
        base_url=settings.OPENAI_BASE_URL,
        model=settings.TTS_MODEL,
        voice=settings.TTS_VOICE,
        timeout=max(settings.OPENAI_TIMEOUT, 60.0),
    )
    poller = CompletionPoller(
        assistants,
        poll_interval=settings.RUN_POLL_INTERVAL_SECONDS,
        timeout=settings.RUN_POLL_TIMEOUT_SECONDS,
    )
    return RecapPipeline(
        session_manager=ConversationSessionManager(
            assistants, settings.OPENAI_ASSISTANT_ID, poller
        ),
        synthesizer=AudioSynthesizer(speech),
    )
