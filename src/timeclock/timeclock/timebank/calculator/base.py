from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import date
from typing import Sequence

from ...entries.model import TimeEntry
from ...settings.model import AppSettings


@dataclass(frozen=True)
class BankBreakdown:
    worked_ms: int
    target_ms: int
    adjustment_ms: int

    @property
    def balance_ms(self) -> int:
        return self.worked_ms - self.target_ms + self.adjustment_ms


class TimeBankCalculator(ABC):
    """Calculator interface (Strategy Pattern for the time bank)."""

    @abstractmethod
    def breakdown(self, entries: Sequence[TimeEntry], settings: AppSettings, today: date) -> BankBreakdown:
        raise NotImplementedError

    def balance_ms(self, entries: Sequence[TimeEntry], settings: AppSettings, today: date) -> int:
        return self.breakdown(entries, settings, today).balance_ms
