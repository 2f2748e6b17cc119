"""Flask application exposing the store over HTTP/JSON.

Routes only parse requests, call one application handler and render the
result. Domain errors are translated into status codes in one place.
"""

from __future__ import annotations

import logging

from flask import Flask, jsonify, request

from hostelmart.application.adjust_order import AdjustOrderHandler
from hostelmart.application.admin_guard import AdminGuard
from hostelmart.application.cancel_order import CancelOrderHandler
from hostelmart.application.clock import Clock, local_now
from hostelmart.application.manage_customer_spend import (
    DeleteCustomerSpendHandler,
    SetCustomerSpendHandler,
)
from hostelmart.application.manage_store import (
    PRICE_BUY,
    PRICE_SELL,
    SetDistributorStockHandler,
    SetPricesHandler,
    SetStockHandler,
    SetStoreStatusHandler,
)
from hostelmart.application.manage_subscriptions import ManageSubscriptionsHandler
from hostelmart.application.notifications import OrderNotifier
from hostelmart.application.place_order import PlaceOrderHandler
from hostelmart.application.reset_stats import (
    RESET_CUSTOMER_MONEY,
    RESET_PROFIT,
    ResetMonthStatsHandler,
)
from hostelmart.application.show_reports import (
    ShowCustomerReportHandler,
    ShowDistributorSummaryHandler,
    ShowTodayReportHandler,
)
from hostelmart.application.show_store import ShowStoreHandler
from hostelmart.application.update_order_status import UpdateOrderStatusHandler
from hostelmart.domain.exceptions import (
    AlreadyCancelledError,
    AuthenticationError,
    CancelWindowExpiredError,
    ConflictError,
    DomainException,
    EntityNotFoundError,
    OrderIdMismatchError,
    ValidationError,
)
from hostelmart.domain.model.ledger import SCOPE_MONTH
from hostelmart.domain.repository.store_repository import StoreRepository
from hostelmart.infrastructure.web import schemas, serializers

logger = logging.getLogger(__name__)

# Most specific first: the first matching class wins.
ERROR_STATUSES: list[tuple[type[DomainException], int, str]] = [
    (AlreadyCancelledError, 409, "already_cancelled"),
    (CancelWindowExpiredError, 409, "cancel_window_expired"),
    (OrderIdMismatchError, 409, "order_id_mismatch"),
    (ConflictError, 409, "conflict"),
    (EntityNotFoundError, 404, "not_found"),
    (AuthenticationError, 401, "unauthorized"),
    (ValidationError, 400, "invalid_input"),
]


def error_status(exc: DomainException) -> tuple[int, str]:
    for exc_type, http_status, status in ERROR_STATUSES:
        if isinstance(exc, exc_type):
            return http_status, status
    return 400, "error"


def _body() -> dict:
    return schemas.json_object(request.get_json(silent=True))


def create_app(
    store_repo: StoreRepository,
    admin_password: str,
    vapid_public_key: str = "",
    notifier: OrderNotifier | None = None,
    clock: Clock = local_now,
) -> Flask:
    app = Flask(__name__)
    app.json.sort_keys = False  # type: ignore[attr-defined]

    guard = AdminGuard(admin_password)
    show = ShowStoreHandler(store_repo)

    def admin_body() -> dict:
        body = _body()
        guard.check(body.get("password"))
        return body

    @app.errorhandler(DomainException)
    def handle_domain_error(exc: DomainException):
        http_status, status = error_status(exc)
        logger.info("%s %s rejected: %s", request.method, request.path, exc)
        return jsonify({"status": status, "message": str(exc)}), http_status

    # --- Catalog ----------------------------------------------------------------

    @app.get("/stock")
    def get_stock():
        return jsonify(show.stock())

    @app.post("/stock")
    def post_stock():
        SetStockHandler(store_repo).handle(_body())
        return jsonify({"status": "ok"})

    @app.get("/buy-price")
    def get_buy_price():
        return jsonify(serializers.price_map(show.buy_prices()))

    @app.post("/buy-price")
    def post_buy_price():
        body = admin_body()
        SetPricesHandler(store_repo, PRICE_BUY).handle(schemas.mapping_field(body, "prices"))
        return jsonify({"status": "ok"})

    @app.get("/sell-price")
    def get_sell_price():
        return jsonify(serializers.price_map(show.sell_prices()))

    @app.post("/sell-price")
    def post_sell_price():
        body = admin_body()
        SetPricesHandler(store_repo, PRICE_SELL).handle(schemas.mapping_field(body, "prices"))
        return jsonify({"status": "ok"})

    @app.get("/distributor-stock")
    def get_distributor_stock():
        return jsonify(show.distributor_stock())

    @app.post("/distributor-stock")
    def post_distributor_stock():
        buckets = SetDistributorStockHandler(store_repo).handle(request.get_json(silent=True))
        return jsonify({"status": "ok", "distributorStock": buckets})

    @app.get("/store-status")
    def get_store_status():
        return jsonify({"open": show.is_open()})

    @app.post("/store-status")
    def post_store_status():
        is_open = SetStoreStatusHandler(store_repo).handle(_body().get("open"))
        return jsonify({"status": "ok", "open": is_open})

    # --- Orders -----------------------------------------------------------------

    @app.post("/order")
    def post_order():
        req = schemas.parse_order(request.get_json(silent=True))
        result = PlaceOrderHandler(store_repo, notifier, clock).handle(
            customer_name=req.name,
            room=req.room,
            hostel=req.hostel,
            mode=req.mode,
            item_specs=req.items,
        )
        return jsonify(
            {
                "status": "ok",
                "orderId": result.order_id,
                "cancelWindowMs": result.cancel_window_ms,
            }
        )

    @app.post("/cancel-order")
    def post_cancel_order():
        body = _body()
        order = CancelOrderHandler(store_repo, clock).handle(
            order_id=schemas.order_id_field(body),
            confirm_order_id=schemas.order_id_field(body, "confirmOrderId"),
        )
        return jsonify({"status": "ok", "order": serializers.order_json(order)})

    @app.get("/orders")
    def get_orders():
        return jsonify([serializers.order_json(o) for o in show.orders()])

    @app.post("/admin/order-status")
    def post_order_status():
        body = admin_body()
        order = UpdateOrderStatusHandler(store_repo, clock).handle(
            order_id=schemas.order_id_field(body),
            action=body.get("action"),  # type: ignore[arg-type]
        )
        return jsonify({"status": "ok", "order": serializers.order_json(order)})

    @app.post("/admin/adjust-order")
    def post_adjust_order():
        body = admin_body()
        order = AdjustOrderHandler(store_repo, clock).handle(
            order_id=schemas.order_id_field(body),
            targets=schemas.mapping_field(body, "items"),
        )
        return jsonify({"status": "ok", "order": serializers.order_json(order)})

    # --- Reports ----------------------------------------------------------------

    @app.get("/today-report")
    def get_today_report():
        report = ShowTodayReportHandler(store_repo, clock).handle()
        return jsonify(serializers.today_report_json(report))

    @app.get("/top-customers")
    def get_top_customers():
        month, rows = ShowCustomerReportHandler(store_repo, clock).top(request.args.get("month"))
        return jsonify(
            {"month": str(month), "customers": [serializers.customer_row_json(r) for r in rows]}
        )

    @app.get("/customers-report")
    def get_customers_report():
        month, rows = ShowCustomerReportHandler(store_repo, clock).for_month(
            request.args.get("month")
        )
        return jsonify(
            {"month": str(month), "customers": [serializers.customer_row_json(r) for r in rows]}
        )

    @app.get("/customers-lifetime")
    def get_customers_lifetime():
        rows = ShowCustomerReportHandler(store_repo, clock).lifetime()
        return jsonify({"customers": [serializers.customer_row_json(r) for r in rows]})

    @app.get("/distributor-month-summary")
    def get_distributor_month_summary():
        month, summaries = ShowDistributorSummaryHandler(store_repo, clock).handle(
            request.args.get("month")
        )
        return jsonify(
            {
                "month": str(month),
                "distributors": {
                    bucket: serializers.distributor_summary_json(s)
                    for bucket, s in summaries.items()
                },
            }
        )

    # --- Manual customer ledger and resets ----------------------------------------

    @app.post("/admin/customer-spend")
    def post_customer_spend():
        body = admin_body()
        entry = SetCustomerSpendHandler(store_repo, clock).handle(
            name=body.get("name"),  # type: ignore[arg-type]
            room=schemas.optional_text(body, "room"),
            total_spent=body.get("totalSpent"),
            orders_count=body.get("ordersCount", 0),
            scope=body.get("scope", SCOPE_MONTH),
            month=body.get("month"),
        )
        return jsonify({"status": "ok", "key": entry.key})

    @app.post("/admin/customer-spend/delete")
    def post_customer_spend_delete():
        body = admin_body()
        removed = DeleteCustomerSpendHandler(store_repo, clock).handle(
            name=body.get("name"),  # type: ignore[arg-type]
            room=schemas.optional_text(body, "room"),
            scope=body.get("scope", SCOPE_MONTH),
            month=body.get("month"),
        )
        return jsonify({"status": "ok", "deleted": removed})

    @app.post("/admin/reset-customer-money")
    def post_reset_customer_money():
        body = admin_body()
        flagged = ResetMonthStatsHandler(store_repo, RESET_CUSTOMER_MONEY, clock).handle(
            body.get("month")
        )
        return jsonify({"status": "ok", "flagged": flagged})

    @app.post("/admin/reset-profit")
    def post_reset_profit():
        body = admin_body()
        flagged = ResetMonthStatsHandler(store_repo, RESET_PROFIT, clock).handle(
            body.get("month")
        )
        return jsonify({"status": "ok", "flagged": flagged})

    # --- Push subscriptions -------------------------------------------------------

    subscriptions = ManageSubscriptionsHandler(store_repo)

    @app.get("/push/public-key")
    def get_push_public_key():
        return jsonify({"publicKey": vapid_public_key})

    @app.post("/push/subscribe")
    def post_push_subscribe():
        endpoint, keys = schemas.subscription_fields(request.get_json(silent=True))
        subscriptions.subscribe(endpoint, keys)
        return jsonify({"status": "ok"})

    @app.post("/push/unsubscribe")
    def post_push_unsubscribe():
        endpoint, _ = schemas.subscription_fields(request.get_json(silent=True))
        removed = subscriptions.unsubscribe(endpoint)
        return jsonify({"status": "ok", "removed": removed})

    return app
