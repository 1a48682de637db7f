from __future__ import annotations

import logging
from typing import Optional, Sequence

from firebase_admin import exceptions as firebase_exceptions
from firebase_admin import messaging

from ..core.constants import FCM_MULTICAST_LIMIT
from ..core.exceptions import PushGatewayError
from .gateway import PushGateway
from .model import DispatchResult, PushMessage, RecipientResult

logger = logging.getLogger(__name__)


class FCMPushGateway(PushGateway):
    """Firebase Cloud Messaging sender.

    One `messaging.Message` per token, sent with `send_each` in batches of at most
    500. A batch that fails as a whole marks its tokens as failed and the remaining
    batches are still sent; `PushGatewayError` means nothing went out at all.
    """

    def __init__(self, app=None, *, chunk_size: int = FCM_MULTICAST_LIMIT):
        self._app = app
        self._chunk_size = max(1, min(int(chunk_size), FCM_MULTICAST_LIMIT))

    @staticmethod
    def _build(token: str, message: PushMessage) -> messaging.Message:
        webpush: Optional[messaging.WebpushConfig] = None
        if message.link:
            webpush = messaging.WebpushConfig(fcm_options=messaging.WebpushFCMOptions(link=message.link))
        return messaging.Message(
            token=token,
            notification=messaging.Notification(title=message.title, body=message.body),
            webpush=webpush,
        )

    def _send_chunk(self, chunk: list[str], message: PushMessage) -> list[RecipientResult]:
        batch = messaging.send_each([self._build(t, message) for t in chunk], app=self._app)
        results = []
        for token, resp in zip(chunk, batch.responses):
            error = None if resp.success else str(resp.exception or "unknown error")
            results.append(RecipientResult(token=token, success=bool(resp.success), error=error))
        return results

    def send_multicast(self, tokens: Sequence[str], message: PushMessage) -> DispatchResult:
        tokens = list(tokens)
        results: list[RecipientResult] = []
        delivered_batches = 0
        last_error: Optional[Exception] = None

        for start in range(0, len(tokens), self._chunk_size):
            chunk = tokens[start:start + self._chunk_size]
            try:
                chunk_results = self._send_chunk(chunk, message)
            except (firebase_exceptions.FirebaseError, ValueError) as e:
                logger.error("FCM batch %d-%d failed: %s", start, start + len(chunk) - 1, e)
                last_error = e
                results.extend(RecipientResult(token=t, success=False, error=str(e)) for t in chunk)
                continue

            delivered_batches += 1
            results.extend(chunk_results)
            ok = sum(1 for r in chunk_results if r.success)
            logger.debug("FCM batch %d-%d: %d ok, %d failed", start, start + len(chunk) - 1, ok, len(chunk) - ok)

        if last_error is not None and delivered_batches == 0:
            raise PushGatewayError(f"FCM dispatch failed: {last_error}") from last_error

        return DispatchResult.from_responses(results)
