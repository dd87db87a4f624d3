"""Transcript file loading.

Only plain text and markdown are read; anything else is rejected before a
request is sent.
"""

from __future__ import annotations

import mimetypes
import os

from src.recap.errors import FileTypeError

ALLOWED_EXTENSIONS = frozenset({"txt", "md"})
ALLOWED_MIME_TYPES = frozenset({"text/plain", "text/markdown"})
FILE_TYPE_MESSAGE = "Only plain text files (.txt, .md) are supported in this version."


def is_supported_transcript(path: str) -> bool:
    ext = os.path.splitext(path)[1].lstrip(".").lower()
    if ext in ALLOWED_EXTENSIONS:
        return True
    mime_type, _ = mimetypes.guess_type(path)
    return mime_type in ALLOWED_MIME_TYPES


def load_transcript_file(path: str) -> str:
    """Read a transcript file as UTF-8 text.

    Raises:
        FileTypeError: Not a .txt/.md (or text/plain, text/markdown) file.
    """
    if not is_supported_transcript(path):
        raise FileTypeError(FILE_TYPE_MESSAGE)
    with open(path, "r", encoding="utf-8") as handle:
        return handle.read()
