from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional, Sequence

from ..common.auth import require_user
from ..common.formatting import format_signed_duration, parse_signed_hhmm
from ..common.store_guard import store_call
from ..entries.model import TimeEntry
from ..entries.repository import TimeEntryRepository
from ..settings.model import AppSettings
from ..settings.service import SettingsService
from .calculator.base import TimeBankCalculator
from .calculator.standard_calculator import StandardTimeBankCalculator

logger = logging.getLogger(__name__)

EMPTY_BANK = "+00h00m"


class TimeBankService:
    def __init__(
        self,
        entries: TimeEntryRepository,
        settings: SettingsService,
        *,
        calculator: Optional[TimeBankCalculator] = None,
    ):
        self._entries = entries
        self._settings = settings
        self._calculator = calculator or StandardTimeBankCalculator()

    def balance_ms(self, entries: Sequence[TimeEntry], settings: AppSettings, now: datetime) -> int:
        return self._calculator.balance_ms(entries, settings, now.date())

    def formatted_balance(self, entries: Sequence[TimeEntry], settings: AppSettings, now: datetime) -> str:
        if not entries and not settings.time_bank_adjustment_ms:
            return EMPTY_BANK
        return format_signed_duration(self.balance_ms(entries, settings, now))

    def summary_for_user(self, user_id: str, *, now: datetime) -> dict:
        user_id = require_user(user_id)
        settings = self._settings.get_settings(user_id)
        with store_call("load time entries"):
            entries = list(self._entries.list_for_user(user_id))

        breakdown = self._calculator.breakdown(entries, settings, now.date())
        return {
            "balance": self.formatted_balance(entries, settings, now),
            "balance_ms": breakdown.balance_ms,
            "worked_ms": breakdown.worked_ms,
            "target_ms": breakdown.target_ms,
            "adjustment_ms": breakdown.adjustment_ms,
        }

    def adjust(self, user_id: str, *, sign: str, value: str) -> AppSettings:
        """Add a signed HH:MM delta to the stored manual adjustment."""
        user_id = require_user(user_id)
        delta_ms = parse_signed_hhmm(sign, value)

        current = self._settings.get_settings(user_id)
        new_total = int(current.time_bank_adjustment_ms or 0) + delta_ms
        saved = self._settings.save_adjustment(user_id, new_total, current=current)

        logger.info(
            "Time bank adjustment for user %s: %+d ms (total %d ms)",
            user_id,
            delta_ms,
            new_total,
        )
        return saved
