"""Application service: push subscription registry."""

from __future__ import annotations

import logging

from hostelmart.domain.exceptions import ValidationError
from hostelmart.domain.model.store import PushSubscription
from hostelmart.domain.repository.store_repository import StoreRepository

logger = logging.getLogger(__name__)


class ManageSubscriptionsHandler:

    def __init__(self, store_repo: StoreRepository) -> None:
        self._store_repo = store_repo

    def subscribe(self, endpoint: object, keys: object = None) -> PushSubscription:
        if not isinstance(endpoint, str):
            raise ValidationError("Subscription endpoint is required")
        if keys is None:
            keys = {}
        if not isinstance(keys, dict):
            raise ValidationError("Subscription keys must be an object")

        subscription = PushSubscription(
            endpoint=endpoint.strip(),
            keys={str(k): str(v) for k, v in keys.items()},
        )
        state = self._store_repo.get()
        state.add_subscription(subscription)
        self._store_repo.save(state)
        logger.info("Push subscription added: %s", subscription.endpoint)
        return subscription

    def unsubscribe(self, endpoint: object) -> bool:
        if not isinstance(endpoint, str):
            raise ValidationError("Subscription endpoint is required")
        state = self._store_repo.get()
        removed = state.remove_subscription(endpoint.strip())
        if removed:
            self._store_repo.save(state)
        return removed
