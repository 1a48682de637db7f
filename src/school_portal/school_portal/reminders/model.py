from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Optional

from ..core.enums import RunOutcome
from ..notifications.model import DispatchResult
from ..users.model import UserProfile


@dataclass(frozen=True)
class RunResult:
    outcome: RunOutcome
    today: Optional[datetime] = None
    staff_count: int = 0
    recorded_count: int = 0
    pending: tuple[UserProfile, ...] = ()
    dispatch: Optional[DispatchResult] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.outcome != RunOutcome.FAILED

    def as_dict(self) -> dict:
        return {
            "outcome": self.outcome.value,
            "today": self.today.strftime("%Y-%m-%d") if self.today else None,
            "staff_count": self.staff_count,
            "recorded_count": self.recorded_count,
            "pending": [p.uid for p in self.pending],
            "success_count": self.dispatch.success_count if self.dispatch else 0,
            "failure_count": self.dispatch.failure_count if self.dispatch else 0,
            "failed_tokens": self.dispatch.failed_tokens if self.dispatch else [],
            "error": self.error,
        }
