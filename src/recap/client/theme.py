"""Persisted light/dark display preference."""

from __future__ import annotations

from src.recap.client.storage import LocalStorage

THEME_KEY = "meetingRecapTheme"
THEMES = ("light", "dark")
DEFAULT_THEME = "light"


class ThemePreference:
    """Theme read once at construction and written through on every change."""

    def __init__(self, storage: LocalStorage) -> None:
        self._storage = storage
        stored = storage.get_item(THEME_KEY)
        self._theme = stored if stored in THEMES else DEFAULT_THEME

    @property
    def theme(self) -> str:
        return self._theme

    def set(self, theme: str) -> str:
        if theme not in THEMES:
            raise ValueError(f"Unknown theme: {theme!r}")
        self._theme = theme
        self._storage.set_item(THEME_KEY, theme)
        return theme

    def toggle(self) -> str:
        return self.set("dark" if self._theme == "light" else "light")
