from __future__ import annotations

from dataclasses import dataclass
from typing import Optional


@dataclass(frozen=True)
class PushMessage:
    """Notification payload, delivered to the device as `{notification: {title, body}}`."""

    title: str
    body: str
    link: Optional[str] = None


@dataclass(frozen=True)
class RecipientResult:
    token: str
    success: bool
    error: Optional[str] = None


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of one multicast dispatch; `responses` follow the order of the input tokens."""

    success_count: int
    failure_count: int
    responses: tuple[RecipientResult, ...] = ()

    @property
    def failed_tokens(self) -> list[str]:
        return [r.token for r in self.responses if not r.success]

    @classmethod
    def from_responses(cls, responses) -> "DispatchResult":
        responses = tuple(responses)
        ok = sum(1 for r in responses if r.success)
        return cls(success_count=ok, failure_count=len(responses) - ok, responses=responses)
