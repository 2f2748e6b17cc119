"""Composition root: wires concrete implementations to domain interfaces.

This is the only place in the codebase that knows about *all* layers.
Every other module depends only on abstractions.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

from hostelmart.application.notifications import OrderNotifier
from hostelmart.infrastructure.persistence.json_store_repository import (
    JsonStoreRepository,
)
from hostelmart.infrastructure.push.webpush_gateway import WebPushGateway

# Resolve data directory relative to the project root.
# When installed in editable mode the project root is the repo root.
_DATA_DIR = Path(__file__).resolve().parents[3] / "data"

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Settings:
    data_file: Path
    admin_password: str
    host: str
    port: int
    vapid_public_key: str
    vapid_private_key: str
    vapid_subject: str
    log_level: str

    @staticmethod
    def from_env(environ: Mapping[str, str] | None = None) -> Settings:
        env = os.environ if environ is None else environ
        return Settings(
            data_file=Path(env.get("HOSTELMART_DATA_FILE", str(_DATA_DIR / "store.json"))),
            admin_password=env.get("HOSTELMART_ADMIN_PASSWORD", "admin"),
            host=env.get("HOSTELMART_HOST", "0.0.0.0"),
            port=int(env.get("PORT", "5000")),
            vapid_public_key=env.get("HOSTELMART_VAPID_PUBLIC_KEY", ""),
            vapid_private_key=env.get("HOSTELMART_VAPID_PRIVATE_KEY", ""),
            vapid_subject=env.get("HOSTELMART_VAPID_SUBJECT", "mailto:admin@localhost"),
            log_level=env.get("HOSTELMART_LOG_LEVEL", "INFO").upper(),
        )


def store_repository(settings: Settings) -> JsonStoreRepository:
    return JsonStoreRepository(settings.data_file)


def order_notifier(repo: JsonStoreRepository, settings: Settings) -> OrderNotifier | None:
    if not settings.vapid_private_key:
        logger.warning("HOSTELMART_VAPID_PRIVATE_KEY is not set, push notifications are disabled")
        return None
    gateway = WebPushGateway(settings.vapid_private_key, settings.vapid_subject)
    return OrderNotifier(repo, gateway)
