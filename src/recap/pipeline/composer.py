"""Response composer -- builds the wire RecapResponse."""

from __future__ import annotations

import base64

from src.recap.schemas import AudioArtifact, Mode, RecapResponse


def encode_audio(audio: bytes) -> str:
    return base64.b64encode(audio).decode("ascii")


def compose_response(
    notes_markdown: str,
    mode: Mode,
    audio: AudioArtifact | None = None,
) -> RecapResponse:
    """Assemble the final payload.

    Notes-only responses carry explicit nulls for the audio fields; audio
    responses carry the base64 bytes and their MIME type.
    """
    if mode == Mode.NOTES:
        return RecapResponse(notes_markdown=notes_markdown, audioBase64=None, mimeType=None)

    if audio is None:
        raise ValueError("audio mode requires a synthesized artifact")
    return RecapResponse(
        notes_markdown=notes_markdown,
        audioBase64=encode_audio(audio.data),
        mimeType=audio.mime_type,
    )
