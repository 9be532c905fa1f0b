"""
Service configuration, read from the environment.

Only the listen port, log verbosity, resource labels for tracing and the
trace-exporter endpoint are tunable.  Failure probabilities and delays of
the chaos simulator are fixed constants in ``chaos/chaos_simulator.py``.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import yaml

ROOT = Path(__file__).resolve().parent.parent
DEFAULT_SEED_PATH = ROOT / "config" / "seed_orders.yaml"
DEFAULT_OTLP_ENDPOINT = "http://localhost:4318/v1/traces"


@dataclass(frozen=True)
class Settings:
    port: int = 8080
    log_level: str = "info"
    service_name: str = "order-service"
    environment: str = "development"
    service_version: str = "1.0.0"
    otlp_endpoint: str = DEFAULT_OTLP_ENDPOINT
    seed_path: Path = DEFAULT_SEED_PATH

    @classmethod
    def from_env(cls) -> "Settings":
        port = os.getenv("PORT", "8080")
        try:
            port_num = int(port)
        except ValueError:
            raise ValueError(f"PORT must be an integer, got {port!r}") from None

        return cls(
            port=port_num,
            log_level=os.getenv("LOG_LEVEL", "info"),
            service_name=os.getenv("OTEL_SERVICE_NAME", "order-service"),
            environment=os.getenv(
                "DEPLOYMENT_ENVIRONMENT", os.getenv("FLASK_ENV", "development")
            ),
            service_version=os.getenv("SERVICE_VERSION", "1.0.0"),
            otlp_endpoint=os.getenv("OTEL_EXPORTER_OTLP_ENDPOINT", DEFAULT_OTLP_ENDPOINT),
            seed_path=Path(os.getenv("SEED_ORDERS_PATH", str(DEFAULT_SEED_PATH))),
        )


def load_seed_orders(path: str | Path) -> list[dict]:
    """Return the ``orders:`` list from a seed YAML file, or ``[]`` if it is missing."""
    path = Path(path)
    if not path.exists():
        return []
    with path.open() as fh:
        data = yaml.safe_load(fh) or {}
    return list(data.get("orders", []))
