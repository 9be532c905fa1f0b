"""
order-service — demo HTTP service for observability testing.

Accepts order-creation requests, keeps orders in memory and exposes
health, Prometheus metrics and fault-injection endpoints.  Every request
runs through the instrumentation pipeline in ``app/pipeline.py``.

Run:
    order-service
    # or python -m app.app
"""

from __future__ import annotations

from flask import Flask

from app.pipeline import RequestPipeline
from app.routes import EXTENSION_KEY, ServiceContext, bp
from chaos.chaos_simulator import ChaosSimulator
from config.settings import Settings, load_seed_orders
from storage.order_store import OrderStore
from telemetry.metrics_registry import MetricsRegistry
from telemetry.tracing import install_shutdown_hooks, setup_tracing
from utils.logger import get_logger


def create_app(
    settings: Settings | None = None,
    store: OrderStore | None = None,
    registry: MetricsRegistry | None = None,
    chaos: ChaosSimulator | None = None,
) -> Flask:
    settings = settings or Settings()
    logger   = get_logger("order_service", settings.log_level, settings.service_name)

    if store is None:
        store = OrderStore()
        store.seed(load_seed_orders(settings.seed_path))

    app = Flask(__name__)
    app.extensions[EXTENSION_KEY] = ServiceContext(
        store=store,
        registry=registry or MetricsRegistry(settings.service_name),
        chaos=chaos or ChaosSimulator(),
    )
    RequestPipeline(app.extensions[EXTENSION_KEY].registry, logger).init_app(app)
    app.register_blueprint(bp)
    return app


# ── Entry-point ───────────────────────────────────────────────────────────────

def main() -> None:
    settings = Settings.from_env()
    app      = create_app(settings)
    provider = setup_tracing(app, settings)
    install_shutdown_hooks(provider)

    get_logger("order_service").info("order-service listening", extra={"port": settings.port})
    app.run(host="0.0.0.0", port=settings.port, debug=False, threaded=True)


if __name__ == "__main__":
    main()
