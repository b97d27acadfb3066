from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional

from ..common.auth import require_user
from ..common.datetime_utils import parse_hhmm
from ..common.store_guard import store_call
from ..common.validators import require_non_negative
from ..core.exceptions import ValidationError
from .model import AppSettings, Workdays
from .repository import SettingsRepository

logger = logging.getLogger(__name__)

_MAX_WEEKLY_HOURS = 168


class SettingsService:
    """Use case: load and save the per-user settings document."""

    def __init__(self, settings: SettingsRepository):
        self._settings = settings

    def get_settings(self, user_id: str) -> AppSettings:
        """Stored settings, or the defaults when the user never saved any."""
        user_id = require_user(user_id)
        with store_call("load settings"):
            stored = self._settings.get(user_id)
        return stored or AppSettings()

    def save_settings(self, user_id: str, payload: dict, *, current: Optional[AppSettings] = None) -> AppSettings:
        user_id = require_user(user_id)
        base = current or self.get_settings(user_id)
        new_settings = self._merge(base, payload or {})

        with store_call("save settings"):
            self._settings.save(user_id, new_settings)
        logger.info("Saved settings for user %s", user_id)
        return new_settings

    def save_adjustment(self, user_id: str, adjustment_ms: int, *, current: AppSettings) -> AppSettings:
        user_id = require_user(user_id)
        new_settings = current.with_adjustment(adjustment_ms)
        with store_call("save time bank adjustment"):
            self._settings.save(user_id, new_settings)
        return new_settings

    @staticmethod
    def _merge(base: AppSettings, payload: dict) -> AppSettings:
        changes: dict = {}

        if "weekly_hours" in payload:
            weekly = require_non_negative(payload["weekly_hours"], "Weekly hours")
            if weekly > _MAX_WEEKLY_HOURS:
                raise ValidationError(f"Weekly hours cannot exceed {_MAX_WEEKLY_HOURS}")
            changes["weekly_hours"] = weekly

        if "workdays" in payload:
            if not isinstance(payload["workdays"], dict):
                raise ValidationError("Workdays must be a mapping of weekday flags")
            changes["workdays"] = Workdays.from_dict(payload["workdays"])

        if "break_duration_minutes" in payload:
            changes["break_duration_minutes"] = int(
                require_non_negative(payload["break_duration_minutes"], "Break duration")
            )

        if "work_start_time" in payload:
            start = parse_hhmm(str(payload["work_start_time"]))
            changes["work_start_time"] = start.strftime("%H:%M")

        for flag in ("is_24h_format", "enable_reminders"):
            if flag in payload:
                changes[flag] = bool(payload[flag])

        return replace(base, **changes)
