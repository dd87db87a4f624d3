"""Pydantic v2 schemas for the recap pipeline.

Defines the wire contract of ``POST /recap`` (request and response), the
remote run model the poller drives, and the intermediate values passed
between pipeline stages (parsed result, audio artifact).
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator


# ── Enums ────────────────────────────────────────────────────────────────────


class Mode(str, Enum):
    """What the caller wants back."""

    NOTES = "notes"
    NOTES_AUDIO = "notes+audio"


class Language(str, Enum):
    """Output language for notes and voiceover script."""

    EN = "en"
    SV = "sv"


class RunStatus(str, Enum):
    """Known statuses of a remote run."""

    QUEUED = "queued"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"
    FAILED = "failed"
    CANCELLED = "cancelled"
    EXPIRED = "expired"


NON_TERMINAL_STATUSES = frozenset({RunStatus.QUEUED.value, RunStatus.IN_PROGRESS.value})

AUDIO_MIME_TYPE = "audio/mpeg"


# ── Request ──────────────────────────────────────────────────────────────────


class RecapRequest(BaseModel):
    """Inbound recap request.

    ``null`` values fall back to defaults. An unknown language is accepted
    and treated as English; an unknown mode is rejected.
    """

    transcript: str = ""
    mode: Mode = Mode.NOTES
    language: Language = Language.EN

    @field_validator("transcript", mode="before")
    @classmethod
    def _null_transcript(cls, value: object) -> object:
        return "" if value is None else value

    @field_validator("mode", mode="before")
    @classmethod
    def _null_mode(cls, value: object) -> object:
        return Mode.NOTES if value is None or value == "" else value

    @field_validator("language", mode="before")
    @classmethod
    def _fallback_language(cls, value: object) -> Language:
        try:
            return Language(value)
        except ValueError:
            return Language.EN

    @property
    def wants_audio(self) -> bool:
        return self.mode == Mode.NOTES_AUDIO


# ── Remote Run ───────────────────────────────────────────────────────────────


class Run(BaseModel):
    """Asynchronous processing of a session on the remote service.

    ``status`` is kept as a plain string: any value outside the non-terminal
    set is terminal, including statuses this enum does not list.
    """

    id: str
    thread_id: str
    status: str

    @property
    def is_terminal(self) -> bool:
        return self.status not in NON_TERMINAL_STATUSES

    @property
    def is_completed(self) -> bool:
        return self.status == RunStatus.COMPLETED.value


# ── Pipeline Values ──────────────────────────────────────────────────────────


class ParsedResult(BaseModel):
    """Structured content decoded from the assistant's reply."""

    notes_markdown: str
    voiceover_script: str = ""


class AudioArtifact(BaseModel):
    """Synthesized voiceover audio."""

    data: bytes
    mime_type: str = AUDIO_MIME_TYPE


# ── Response ─────────────────────────────────────────────────────────────────


class RecapResponse(BaseModel):
    """Wire response of ``POST /recap``.

    ``audioBase64`` and ``mimeType`` are both set or both null.
    """

    notes_markdown: str
    audioBase64: str | None = Field(default=None)
    mimeType: str | None = Field(default=None)

    @model_validator(mode="after")
    def _audio_fields_paired(self) -> "RecapResponse":
        if (self.audioBase64 is None) != (self.mimeType is None):
            raise ValueError("audioBase64 and mimeType must be set together")
        return self

    @property
    def has_audio(self) -> bool:
        return self.audioBase64 is not None
