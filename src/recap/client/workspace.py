"""RecapWorkspace -- the client's current result plus its history."""

from __future__ import annotations

import structlog

from src.recap.client.api_client import RecapApiClient, decode_audio
from src.recap.client.bundler import build_bundle, save_bundle
from src.recap.client.history import HistoryEntry, HistoryStore, restore_snippet
from src.recap.errors import ValidationError
from src.recap.schemas import Language, Mode, RecapResponse

logger = structlog.get_logger(__name__)

EMPTY_TRANSCRIPT_MESSAGE = "Please paste a transcript or upload a text file first."


class RecapWorkspace:
    """Holds the notes and audio of the latest generation.

    Previous results are cleared before each request, so a failed request
    leaves nothing behind to bundle.

    Args:
        api: RecapApiClient for the server.
        history: HistoryStore recording every successful generation.
    """

    def __init__(self, api: RecapApiClient, history: HistoryStore) -> None:
        self._api = api
        self.history = history
        self.notes: str = ""
        self.audio: bytes | None = None

    async def generate(
        self,
        transcript: str,
        mode: Mode = Mode.NOTES,
        language: Language = Language.EN,
    ) -> RecapResponse:
        self.notes = ""
        self.audio = None

        if not transcript.strip():
            raise ValidationError(EMPTY_TRANSCRIPT_MESSAGE)

        response = await self._api.generate(transcript, mode, language)
        self.notes = response.notes_markdown
        self.history.record_generation(
            HistoryEntry.from_notes(response.notes_markdown, mode, language)
        )
        self.audio = decode_audio(response)

        logger.info(
            "client.recap_received",
            mode=Mode(mode).value,
            notes_length=len(self.notes),
            has_audio=self.audio is not None,
        )
        return response

    def restore(self, entry: HistoryEntry) -> str:
        """Show a history entry's snippet as the current notes."""
        self.notes = restore_snippet(entry)
        return self.notes

    def bundle(self) -> bytes:
        return build_bundle(self.notes, self.audio)

    def save_bundle(self, directory: str) -> str:
        return save_bundle(directory, self.notes, self.audio)
