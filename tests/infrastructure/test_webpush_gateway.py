"""Tests for the Web Push gateway with pywebpush's sender patched out."""

import json

import pytest
from pywebpush import WebPushException

from hostelmart.application.notifications import SubscriptionGoneError
from hostelmart.domain.model.store import PushSubscription
from hostelmart.infrastructure.push import webpush_gateway

SUB = PushSubscription("https://push.example/abc", {"p256dh": "pk", "auth": "k"})


class _Response:

    def __init__(self, status_code):
        self.status_code = status_code
        self.text = ""


def _gateway():
    return webpush_gateway.WebPushGateway(
        vapid_private_key="private-key",
        vapid_subject="mailto:shop@example.com",
        timeout=2.0,
    )


def test_sends_signed_encrypted_payload(monkeypatch):
    captured = {}

    def fake_webpush(**kwargs):
        captured.update(kwargs)

    monkeypatch.setattr(webpush_gateway, "webpush", fake_webpush)
    _gateway().send(SUB, {"orderId": 7})

    assert captured["subscription_info"] == {
        "endpoint": SUB.endpoint,
        "keys": {"p256dh": "pk", "auth": "k"},
    }
    assert json.loads(captured["data"]) == {"orderId": 7}
    assert captured["vapid_private_key"] == "private-key"
    assert captured["vapid_claims"] == {"sub": "mailto:shop@example.com"}
    assert captured["ttl"] == 3600
    assert captured["timeout"] == 2.0


def test_claims_are_fresh_for_every_send(monkeypatch):
    seen = []

    def fake_webpush(**kwargs):
        kwargs["vapid_claims"]["aud"] = "https://push.example"
        seen.append(kwargs["vapid_claims"])

    monkeypatch.setattr(webpush_gateway, "webpush", fake_webpush)
    gateway = _gateway()
    gateway.send(SUB, {})
    gateway.send(SUB, {})

    assert seen[0] is not seen[1]


@pytest.mark.parametrize("code", [404, 410])
def test_gone_statuses(monkeypatch, code):
    def fake_webpush(**kwargs):
        raise WebPushException("Push failed", response=_Response(code))

    monkeypatch.setattr(webpush_gateway, "webpush", fake_webpush)
    with pytest.raises(SubscriptionGoneError):
        _gateway().send(SUB, {})


@pytest.mark.parametrize("response", [_Response(403), None])
def test_other_failures_propagate(monkeypatch, response):
    def fake_webpush(**kwargs):
        raise WebPushException("Push failed", response=response)

    monkeypatch.setattr(webpush_gateway, "webpush", fake_webpush)
    with pytest.raises(WebPushException):
        _gateway().send(SUB, {})
