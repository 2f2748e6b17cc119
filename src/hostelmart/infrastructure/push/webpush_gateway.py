"""PushGateway that delivers payloads through the Web Push protocol.

Requests are VAPID-signed and the payload is encrypted for the browser
(RFC 8291) by pywebpush. Endpoints the push service answers with 404 or
410 are reported as gone so the notifier can prune them; any other
failure propagates to the notifier, which logs it.
"""

from __future__ import annotations

import json
from http import HTTPStatus

from pywebpush import WebPushException, webpush

from hostelmart.application.notifications import PushGateway, SubscriptionGoneError
from hostelmart.domain.model.store import PushSubscription

GONE_STATUSES = (HTTPStatus.NOT_FOUND, HTTPStatus.GONE)


class WebPushGateway(PushGateway):

    def __init__(
        self,
        vapid_private_key: str,
        vapid_subject: str,
        timeout: float = 5.0,
        ttl_seconds: int = 3600,
    ) -> None:
        self._vapid_private_key = vapid_private_key
        self._vapid_subject = vapid_subject
        self._timeout = timeout
        self._ttl_seconds = ttl_seconds

    def send(self, subscription: PushSubscription, payload: dict) -> None:
        try:
            webpush(
                subscription_info={
                    "endpoint": subscription.endpoint,
                    "keys": dict(subscription.keys),
                },
                data=json.dumps(payload),
                vapid_private_key=self._vapid_private_key,
                # pywebpush adds "aud" and "exp" to the claims it is given
                vapid_claims={"sub": self._vapid_subject},
                ttl=self._ttl_seconds,
                timeout=self._timeout,
            )
        except WebPushException as exc:
            status = exc.response.status_code if exc.response is not None else None
            if status in GONE_STATUSES:
                raise SubscriptionGoneError(subscription.endpoint) from exc
            raise
