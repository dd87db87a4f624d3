"""File-backed key/value store for client state.

Holds a flat ``{key: string}`` map in one JSON file, the way a browser
profile's local storage holds per-origin strings. Every write rewrites the
whole file through a temp file and ``os.replace``, so readers see either the
old map or the new one, never a partial write. There is no coordination
between processes sharing a file: the last write wins.
"""

from __future__ import annotations

import json
import os
import tempfile

import structlog

logger = structlog.get_logger(__name__)


class LocalStorage:
    """String key/value storage persisted to ``path``.

    Args:
        path: JSON file location; ``~`` is expanded and parent directories
            are created on first write.
    """

    def __init__(self, path: str) -> None:
        self.path = os.path.expanduser(path)

    def _read_all(self) -> dict[str, str]:
        try:
            with open(self.path, "r", encoding="utf-8") as handle:
                data = json.load(handle)
        except FileNotFoundError:
            return {}
        except (OSError, ValueError) as exc:
            logger.warning("client.storage_unreadable", path=self.path, error=str(exc))
            return {}
        if not isinstance(data, dict):
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def get_item(self, key: str) -> str | None:
        return self._read_all().get(key)

    def set_item(self, key: str, value: str) -> None:
        data = self._read_all()
        data[key] = value

        directory = os.path.dirname(self.path) or "."
        os.makedirs(directory, exist_ok=True)
        fd, tmp_path = tempfile.mkstemp(prefix=".storage-", suffix=".json", dir=directory)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                json.dump(data, handle, ensure_ascii=False)
            os.replace(tmp_path, self.path)
        except BaseException:
            if os.path.exists(tmp_path):
                os.remove(tmp_path)
            raise
