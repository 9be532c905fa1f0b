"""
Shared pytest fixtures for the order-service test suite.
"""

from __future__ import annotations

import pytest

from app.app import create_app
from chaos.chaos_simulator import ChaosSimulator
from config.settings import Settings
from storage.order_store import OrderStore
from telemetry.metrics_registry import MetricsRegistry


# ── Deterministic chaos ───────────────────────────────────────────────────────

class ScriptedRandom:
    """Stands in for ``random.Random``: replays queued draws, then a safe default."""

    def __init__(self, *values: float, default: float = 0.99) -> None:
        self.values  = list(values)
        self.default = default

    def random(self) -> float:
        return self.values.pop(0) if self.values else self.default

    def queue(self, *values: float) -> None:
        self.values.extend(values)


class RecordingSleep:
    """Async sleep replacement that records requested delays instead of waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def rng() -> ScriptedRandom:
    return ScriptedRandom()


@pytest.fixture()
def sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def chaos(rng, sleep) -> ChaosSimulator:
    return ChaosSimulator(rng=rng, sleep=sleep)


# ── Store / metrics ───────────────────────────────────────────────────────────

SEED_ORDERS = [
    {"id": "demo-1", "item": "widget-pro",  "quantity": 1},
    {"id": "demo-2", "item": "widget-lite", "quantity": 2},
    {"id": "demo-3", "item": "sensor-kit",  "quantity": 3},
]


@pytest.fixture()
def store() -> OrderStore:
    s = OrderStore()
    s.seed(SEED_ORDERS)
    return s


@pytest.fixture()
def registry() -> MetricsRegistry:
    return MetricsRegistry("test-service", default_metrics=False)


# ── App fixture ───────────────────────────────────────────────────────────────

@pytest.fixture()
def flask_app(store, registry, chaos):
    app = create_app(Settings(), store=store, registry=registry, chaos=chaos)
    app.config["TESTING"] = True
    return app


@pytest.fixture()
def app_client(flask_app):
    """Return a Flask test client wired to the fixture store, registry and chaos."""
    with flask_app.test_client() as client:
        yield client
