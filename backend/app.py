import logging
import time
from typing import Optional

from prometheus_client import CONTENT_TYPE_LATEST, Counter, Histogram, generate_latest
from pydantic import ValidationError
from quart import Quart, g, jsonify, request
from sqlalchemy.ext.asyncio import AsyncEngine
from werkzeug.exceptions import HTTPException

from .auth.controller import create_blueprint as auth_blueprint
from .auth.security import TokenService
from .auth.service import AuthService
from .categories.controller import create_blueprint as categories_blueprint
from .categories.service import CategoryService
from .common.config import Settings, settings
from .common.database import build_engine, build_session_factory, init_db
from .common.errors import ShopError
from .common.unit_of_work import unit_of_work_factory
from .inventory.controller import create_blueprint as inventory_blueprint
from .inventory.service import ProductService
from .orderdetails.controller import create_blueprint as orderdetails_blueprint
from .orderdetails.service import OrderDetailService
from .orders.controller import create_blueprint as orders_blueprint
from .orders.service import OrderService
from .users.controller import create_blueprint as users_blueprint
from .users.service import UserService

log = logging.getLogger(__name__)

REQUEST_COUNT = Counter("http_requests_total", "Total HTTP requests", ["method", "endpoint", "status"])
REQUEST_LATENCY = Histogram(
    "http_request_duration_seconds",
    "HTTP request latency",
    ["endpoint"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.075, 0.1, 0.25, 0.5, 0.75, 1.0, 2.5, 5.0, 7.5, 10.0, float("inf"))
)


def _record_request(status_code: int, started: float) -> None:
    # label by route template
    endpoint = request.url_rule.rule if request.url_rule is not None else "<unmatched>"
    REQUEST_LATENCY.labels(endpoint=endpoint).observe(time.perf_counter() - started)
    REQUEST_COUNT.labels(method=request.method, endpoint=endpoint, status=str(status_code)).inc()


def create_app(app_settings: Optional[Settings] = None, engine: Optional[AsyncEngine] = None) -> Quart:
    app_settings = app_settings or settings
    owns_engine = engine is None
    if engine is None:
        engine = build_engine(app_settings)
    uow_factory = unit_of_work_factory(build_session_factory(engine))
    tx_timeout = app_settings.TX_TIMEOUT_SECONDS
    page_limit = app_settings.DEFAULT_PAGE_LIMIT

    tokens = TokenService(app_settings.JWT_SECRET, app_settings.JWT_ALGORITHM, app_settings.JWT_EXPIRES_MINUTES)
    auth_service = AuthService(uow_factory, tokens, tx_timeout)
    user_service = UserService(uow_factory, tx_timeout)
    category_service = CategoryService(uow_factory, tx_timeout)
    product_service = ProductService(uow_factory, tx_timeout)
    order_service = OrderService(uow_factory, app_settings.DEFAULT_SHIPPING, tx_timeout)
    detail_service = OrderDetailService(uow_factory, tx_timeout)

    app = Quart(__name__)

    app.register_blueprint(auth_blueprint(auth_service))
    app.register_blueprint(users_blueprint(user_service, tokens, page_limit))
    app.register_blueprint(categories_blueprint(category_service, tokens, page_limit))
    app.register_blueprint(inventory_blueprint(product_service, tokens, page_limit))
    app.register_blueprint(orders_blueprint(order_service, page_limit))
    app.register_blueprint(orderdetails_blueprint(detail_service))

    @app.errorhandler(ShopError)
    async def handle_shop_error(err: ShopError):
        if err.status_code >= 500:
            log.error("Request failed | %s %s status=%s detail=%s", request.method, request.path, err.status_code, getattr(err, "detail", None))
        return jsonify(err.to_dict()), err.status_code

    @app.errorhandler(ValidationError)
    async def handle_validation_error(err: ValidationError):
        return jsonify({
            "error": "invalid_request",
            "message": "Request validation failed",
            "details": err.errors(include_url=False, include_context=False),
        }), 400

    @app.errorhandler(Exception)
    async def handle_unexpected_error(err: Exception):
        if isinstance(err, HTTPException):
            return jsonify({"error": err.name.lower().replace(" ", "_"), "message": err.description}), err.code
        log.exception("Unhandled error | %s %s", request.method, request.path)
        return jsonify({"error": "operation_failed", "message": "Internal server error"}), 500

    @app.before_request
    async def before_request():
        g.request_started = time.perf_counter()
        log.info("Executed method %s for route %s", request.method, request.full_path.rstrip("?"))

    @app.after_request
    async def after_request(response):
        started = g.get("request_started")
        if started is not None:
            _record_request(response.status_code, started)
        return response

    @app.get("/metrics")
    async def metrics():
        data = generate_latest()
        return app.response_class(data, mimetype=CONTENT_TYPE_LATEST)

    @app.get("/health")
    async def health():
        return jsonify({"status": "ok"})

    @app.before_serving
    async def startup():
        logging.basicConfig(
            level=getattr(logging, app_settings.LOG_LEVEL.upper(), logging.INFO),
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        )
        log.info("Initializing database...")
        await init_db(engine)
        log.info("Database ready.")

    @app.after_serving
    async def shutdown():
        if owns_engine:
            await engine.dispose()
        log.info("Shutdown complete.")

    return app
