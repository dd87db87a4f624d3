"""Local history of recap generations.

The whole list lives under one storage key as a JSON array, newest first,
capped at 20 entries. It is read once when the store is created and written
back in full after every change (load -> mutate -> save). Entries are only
ever dropped by truncation.
"""

from __future__ import annotations

import json
from datetime import datetime, timezone

import structlog
from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from src.recap.client.storage import LocalStorage
from src.recap.schemas import Language, Mode

logger = structlog.get_logger(__name__)

HISTORY_KEY = "meetingRecapHistory"
MAX_HISTORY_ENTRIES = 20
SNIPPET_LENGTH = 120
TRUNCATION_MARKER = " ..."


class HistoryEntry(BaseModel):
    """One past generation. Serialized with camelCase keys."""

    model_config = ConfigDict(populate_by_name=True)

    id: str
    created_at: datetime = Field(alias="createdAt")
    mode: Mode
    language: Language
    notes_snippet: str = Field(alias="notesSnippet", max_length=SNIPPET_LENGTH)

    @classmethod
    def from_notes(
        cls,
        notes_markdown: str,
        mode: Mode,
        language: Language,
        now: datetime | None = None,
    ) -> "HistoryEntry":
        """Build an entry for a generation that just succeeded.

        The id is the creation time in epoch milliseconds, so two entries
        created in the same millisecond share an id. Ids are display keys
        only; the store never looks entries up or de-duplicates by id.
        """
        created = now or datetime.now(timezone.utc)
        return cls(
            id=str(int(created.timestamp() * 1000)),
            created_at=created,
            mode=mode,
            language=language,
            notes_snippet=(notes_markdown or "")[:SNIPPET_LENGTH],
        )


def restore_snippet(entry: HistoryEntry) -> str:
    """Text shown when an entry is re-opened.

    Only the stored snippet exists; a snippet of exactly the cut length was
    most likely truncated, so it gets a marker.
    """
    if len(entry.notes_snippet) == SNIPPET_LENGTH:
        return entry.notes_snippet + TRUNCATION_MARKER
    return entry.notes_snippet


class HistoryStore:
    """Bounded, ordered history persisted under ``HISTORY_KEY``.

    Assumes a single writer per storage file.

    Args:
        storage: LocalStorage the list is read from and written to.
    """

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage
        self._entries: list[HistoryEntry] = self._load()

    @property
    def entries(self) -> list[HistoryEntry]:
        return list(self._entries)

    def _load(self) -> list[HistoryEntry]:
        raw = self._storage.get_item(HISTORY_KEY)
        if not raw:
            return []
        try:
            data = json.loads(raw)
        except ValueError:
            logger.warning("client.history_corrupt", key=HISTORY_KEY)
            return []
        if not isinstance(data, list):
            return []

        entries: list[HistoryEntry] = []
        for item in data:
            try:
                entries.append(HistoryEntry.model_validate(item))
            except PydanticValidationError:
                logger.warning("client.history_entry_skipped", key=HISTORY_KEY)
        return entries[:MAX_HISTORY_ENTRIES]

    def _save(self) -> None:
        payload = [e.model_dump(mode="json", by_alias=True) for e in self._entries]
        self._storage.set_item(HISTORY_KEY, json.dumps(payload))

    def record_generation(self, entry: HistoryEntry) -> list[HistoryEntry]:
        """Prepend ``entry``, keep the newest 20 and persist the whole list."""
        self._entries = [entry, *self._entries][:MAX_HISTORY_ENTRIES]
        self._save()
        logger.debug("client.history_recorded", entry_id=entry.id, size=len(self._entries))
        return self.entries
