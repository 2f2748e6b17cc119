"""Request body parsing for the HTTP API.

Each endpoint gets an explicit parser; anything that does not fit the
expected shape is rejected with a ValidationError before any handler runs.
"""

from __future__ import annotations

from dataclasses import dataclass

from hostelmart.application.dto import OrderItemSpec
from hostelmart.domain.exceptions import ValidationError

MAX_ID_DIGITS = 20


@dataclass(frozen=True)
class OrderRequest:
    name: str
    room: str
    hostel: str
    mode: str
    items: list[OrderItemSpec]


def json_object(body: object) -> dict:
    if not isinstance(body, dict):
        raise ValidationError("Request body must be a JSON object")
    return body


def mapping_field(body: dict, field: str) -> dict:
    value = body.get(field)
    if not isinstance(value, dict):
        raise ValidationError(f"'{field}' must be an object")
    return value


def optional_text(body: dict, field: str) -> str:
    value = body.get(field)
    if value is None:
        return ""
    if isinstance(value, (str, int, float)) and not isinstance(value, bool):
        return str(value).strip()
    raise ValidationError(f"'{field}' must be text")


def order_id_field(body: dict, field: str = "orderId") -> int:
    value = body.get(field)
    if isinstance(value, bool) or value is None:
        raise ValidationError(f"'{field}' is required")
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        digits = value.strip()
        if digits.isdigit() and len(digits) <= MAX_ID_DIGITS:
            return int(digits)
    raise ValidationError(f"'{field}' must be an order id, got {value!r}")


def parse_order(body: object) -> OrderRequest:
    data = json_object(body)
    raw_items = data.get("items")
    if not isinstance(raw_items, list):
        raise ValidationError("'items' must be a list")

    items: list[OrderItemSpec] = []
    for raw in raw_items:
        if not isinstance(raw, dict) or not isinstance(raw.get("name"), str):
            raise ValidationError("Each item needs a product 'name'")
        items.append(
            OrderItemSpec(name=raw["name"], quantity=raw.get("qty"), price=raw.get("price"))
        )

    mode = data.get("mode")
    if not isinstance(mode, str):
        raise ValidationError("'mode' must be 'pickup' or 'delivery'")

    return OrderRequest(
        name=optional_text(data, "name"),
        room=optional_text(data, "room"),
        hostel=optional_text(data, "hostel"),
        mode=mode,
        items=items,
    )


def subscription_fields(body: object) -> tuple[object, object]:
    """Accept either ``{subscription: {...}}`` or the bare subscription."""
    data = json_object(body)
    sub = data.get("subscription", data)
    if not isinstance(sub, dict):
        raise ValidationError("'subscription' must be an object")
    return sub.get("endpoint"), sub.get("keys")
