from __future__ import annotations

from typing import Optional, Protocol

from .model import AppSettings


class SettingsRepository(Protocol):
    def get(self, user_id: str) -> Optional[AppSettings]:
        raise NotImplementedError

    def save(self, user_id: str, settings: AppSettings) -> None:
        """Create or replace the user's settings document."""

        raise NotImplementedError
