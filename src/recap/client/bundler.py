"""ZIP bundle of the current notes and audio.

A pure function of its two inputs: a fresh archive is built on every call
and nothing is cached. File names are fixed.
"""

from __future__ import annotations

import io
import os
import zipfile

from src.recap.errors import NoContentError

NOTES_FILENAME = "meeting_notes.md"
AUDIO_FILENAME = "meeting_recap.mp3"
BUNDLE_FILENAME = "meeting_recap_bundle.zip"


def build_bundle(notes_markdown: str, audio: bytes | None = None) -> bytes:
    """Return ZIP bytes holding the notes and, if present, the audio.

    Audio bytes are stored as received, without re-encoding.

    Raises:
        NoContentError: No notes to bundle.
    """
    if not notes_markdown:
        raise NoContentError("There are no notes to download yet.")

    buffer = io.BytesIO()
    with zipfile.ZipFile(buffer, "w", compression=zipfile.ZIP_DEFLATED) as archive:
        archive.writestr(NOTES_FILENAME, notes_markdown.encode("utf-8"))
        if audio:
            archive.writestr(AUDIO_FILENAME, audio, compress_type=zipfile.ZIP_STORED)
    return buffer.getvalue()


def save_bundle(directory: str, notes_markdown: str, audio: bytes | None = None) -> str:
    """Write the bundle as ``meeting_recap_bundle.zip`` into ``directory``.

    Returns:
        Path of the written archive.
    """
    data = build_bundle(notes_markdown, audio)
    os.makedirs(directory, exist_ok=True)
    path = os.path.join(directory, BUNDLE_FILENAME)
    with open(path, "wb") as handle:
        handle.write(data)
    return path
