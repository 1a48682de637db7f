from __future__ import annotations

from typing import Protocol, Sequence

from .model import DispatchResult, PushMessage


class PushGateway(Protocol):
    def send_multicast(self, tokens: Sequence[str], message: PushMessage) -> DispatchResult:
        """Send one message to many devices.

        Per-recipient failures are reported in the result; raise `PushGatewayError`
        only when the dispatch as a whole fails.
        """

        raise NotImplementedError
