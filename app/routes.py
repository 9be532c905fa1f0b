"""
HTTP routes.  Handlers only talk to the store / chaos simulator and raise
typed failures; response formatting for errors lives in the pipeline.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field

from flask import Blueprint, Response, current_app, g, jsonify, request

from app.errors import NotFoundError, ValidationError
from chaos.chaos_simulator import ChaosSimulator
from storage.order_store import OrderStore, utc_now_iso
from telemetry.metrics_registry import MetricsRegistry

bp = Blueprint("orders", __name__)

EXTENSION_KEY = "order_service"


@dataclass
class ServiceContext:
    store: OrderStore
    registry: MetricsRegistry
    chaos: ChaosSimulator
    started_at: float = field(default_factory=time.monotonic)


def _ctx() -> ServiceContext:
    return current_app.extensions[EXTENSION_KEY]


# ── Operational ───────────────────────────────────────────────────────────────

@bp.get("/health")
def health():
    return jsonify({"status": "ok", "uptime": time.monotonic() - _ctx().started_at})


@bp.get("/metrics")
def metrics():
    """Prometheus scrape endpoint."""
    registry = _ctx().registry
    return Response(registry.render(), 200, {"Content-Type": registry.content_type})


# ── Orders ────────────────────────────────────────────────────────────────────

@bp.get("/orders")
def list_orders():
    return jsonify({"data": [order.to_dict() for order in _ctx().store.list()]})


@bp.get("/orders/<order_id>")
def get_order(order_id: str):
    order = _ctx().store.get(order_id)
    if order is None:
        raise NotFoundError("Order not found")
    return jsonify({"data": order.to_dict()})


@bp.post("/orders")
async def create_order():
    payload = request.get_json(silent=True)
    if not isinstance(payload, dict):
        payload = {}

    item, quantity = payload.get("item"), payload.get("quantity")
    if not item or not quantity:
        raise ValidationError("item and quantity are required")

    ctx = _ctx()
    await ctx.chaos.simulate_work()
    order = ctx.store.create({"item": item, "quantity": quantity})
    return jsonify({"data": order.to_dict()}), 201


# ── Fault injection ───────────────────────────────────────────────────────────

@bp.get("/chaos")
async def chaos():
    await _ctx().chaos.simulate_work(chaos=True)
    return jsonify({
        "chaos": True,
        "timestamp": utc_now_iso(),
    })


@bp.post("/alert-debug")
def alert_debug():
    g.log.warning(
        "received alert from Alertmanager",
        extra={"alert": request.get_json(silent=True)},
    )
    return jsonify({"received": True}), 202
